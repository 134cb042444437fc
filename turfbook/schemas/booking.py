"""Pydantic schemas for booking resources."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class BookingCreate(BaseModel):
    """Schema used when a consumer books a field."""

    id_field: int = Field(..., gt=0)
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None

    @field_validator("end_time")
    def validate_time_range(cls, end_time: datetime, info: ValidationInfo) -> datetime:
        start_time = info.data.get("start_time")
        if start_time and end_time.replace(tzinfo=None) <= start_time.replace(tzinfo=None):
            raise ValueError("end_time must be after start_time")
        return end_time


class BookingResponse(BaseModel):
    """Booking data returned to API clients."""

    model_config = ConfigDict(from_attributes=True)

    id_booking: int
    code: str
    id_user: int
    id_field: int
    start_time: datetime
    end_time: datetime
    status: str
    amount: Decimal
    total_amount: Decimal
    duration: int
    notes: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_by: Optional[int] = None
    updated_at: datetime


class BookingCancellationResponse(BaseModel):
    booking: BookingResponse
    refund_amount: Decimal


__all__ = ["BookingCancellationResponse", "BookingCreate", "BookingResponse"]
