"""SQLAlchemy models for the reservation engine."""
from turfbook.models.audit_log import AuditLog
from turfbook.models.booking import Booking, BookingStatus
from turfbook.models.field import Field
from turfbook.models.field_pricing import FieldPricing
from turfbook.models.reminder import ReminderJob
from turfbook.models.schedule_rule import ScheduleRule
from turfbook.models.user import User

__all__ = [
    "AuditLog",
    "Booking",
    "BookingStatus",
    "Field",
    "FieldPricing",
    "ReminderJob",
    "ScheduleRule",
    "User",
]
