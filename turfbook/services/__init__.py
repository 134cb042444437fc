"""Business services of the reservation engine."""

from turfbook.services.audit_service import AuditAction, AuditService
from turfbook.services.availability_service import (
    AvailabilityResult,
    AvailabilityService,
    Slot,
    SlotStatus,
    UnavailableReason,
)
from turfbook.services.booking_service import BookingService, CancellationResult
from turfbook.services.errors import ErrorCode, ErrorKind, ServiceResult
from turfbook.services.notification_client import NotificationClient
from turfbook.services.schedule_rule_service import ScheduleRuleService

__all__ = [
    "AuditAction",
    "AuditService",
    "AvailabilityResult",
    "AvailabilityService",
    "BookingService",
    "CancellationResult",
    "ErrorCode",
    "ErrorKind",
    "NotificationClient",
    "ScheduleRuleService",
    "ServiceResult",
    "Slot",
    "SlotStatus",
    "UnavailableReason",
]
