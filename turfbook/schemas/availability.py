from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class AvailabilityResponse(BaseModel):
    field_id: int
    at: datetime
    available: bool
    reason: Optional[str] = None
    id_rule: Optional[int] = None
    zone_name: Optional[str] = None
    window_start: Optional[time] = None
    window_end: Optional[time] = None
    price: Optional[Decimal] = None


class TimeSlotResponse(BaseModel):
    start_time: datetime
    end_time: datetime
    status: str
    price: Optional[Decimal] = None
    zone_name: Optional[str] = None


__all__ = ["AvailabilityResponse", "TimeSlotResponse"]
