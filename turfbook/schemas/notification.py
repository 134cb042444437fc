"""Payloads sent to the notification service."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class BookingSummary(BaseModel):
    id: int
    code: str
    user_email: str
    field_name: str
    field_address: str
    start_time: datetime
    duration: int
    total_amount: Optional[Decimal] = None
    status: Optional[str] = None
    refund_amount: Optional[Decimal] = None


__all__ = ["BookingSummary"]
