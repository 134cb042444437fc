from . import (
    audit_log_repository,
    booking_repository,
    field_repository,
    reminder_repository,
    schedule_rule_repository,
)
from .booking_repository import BookingOverlapError

__all__ = [
    "BookingOverlapError",
    "audit_log_repository",
    "booking_repository",
    "field_repository",
    "reminder_repository",
    "schedule_rule_repository",
]
