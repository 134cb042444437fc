"""Pydantic schemas for the reservation engine."""

from turfbook.schemas.availability import AvailabilityResponse, TimeSlotResponse
from turfbook.schemas.booking import (
    BookingCancellationResponse,
    BookingCreate,
    BookingResponse,
)
from turfbook.schemas.field import FieldStatusResponse
from turfbook.schemas.notification import BookingSummary
from turfbook.schemas.schedule_rule import (
    DayOfWeek,
    RecurrenceConfig,
    RecurrenceType,
    ScheduleRuleCreate,
    ScheduleRuleResponse,
    ScheduleRuleUpdate,
    TimeBlock,
    ZoneConfig,
)

__all__ = [
    "AvailabilityResponse",
    "BookingCancellationResponse",
    "BookingCreate",
    "BookingResponse",
    "BookingSummary",
    "DayOfWeek",
    "FieldStatusResponse",
    "RecurrenceConfig",
    "RecurrenceType",
    "ScheduleRuleCreate",
    "ScheduleRuleResponse",
    "ScheduleRuleUpdate",
    "TimeBlock",
    "TimeSlotResponse",
    "ZoneConfig",
]
