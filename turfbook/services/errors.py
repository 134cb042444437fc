"""Error taxonomy and typed results returned by the engine services.

Services never raise for expected conditions. They return a
:class:`ServiceResult` carrying either ``data`` or an :class:`ErrorCode`, so
that callers (HTTP routes, CLIs, workers) can render their own messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    FIELD_NOT_FOUND = "FieldNotFound"
    USER_NOT_FOUND = "UserNotFound"
    BOOKING_NOT_FOUND = "BookingNotFound"
    RULE_NOT_FOUND = "RuleNotFound"
    INVALID_TIME_BLOCKS = "InvalidTimeBlocks"
    INVALID_RECURRENCE_CONFIG = "InvalidRecurrenceConfig"
    INVALID_OPENING_HOURS = "InvalidOpeningHours"
    INVALID_TIME_WINDOW = "InvalidTimeWindow"
    FIELD_NOT_AVAILABLE = "FieldNotAvailable"
    ALREADY_CANCELLED = "AlreadyCancelled"
    NOT_PENDING = "NotPending"
    UNAUTHORIZED = "Unauthorized"
    SYSTEM_ERROR = "SystemError"

    @property
    def kind(self) -> ErrorKind:
        return _ERROR_KINDS[self]

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_KINDS = {
    ErrorCode.FIELD_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.RULE_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.INVALID_TIME_BLOCKS: ErrorKind.VALIDATION,
    ErrorCode.INVALID_RECURRENCE_CONFIG: ErrorKind.VALIDATION,
    ErrorCode.INVALID_OPENING_HOURS: ErrorKind.VALIDATION,
    ErrorCode.INVALID_TIME_WINDOW: ErrorKind.VALIDATION,
    ErrorCode.FIELD_NOT_AVAILABLE: ErrorKind.CONFLICT,
    ErrorCode.ALREADY_CANCELLED: ErrorKind.CONFLICT,
    ErrorCode.NOT_PENDING: ErrorKind.CONFLICT,
    ErrorCode.UNAUTHORIZED: ErrorKind.UNAUTHORIZED,
    ErrorCode.SYSTEM_ERROR: ErrorKind.SYSTEM,
}

_ERROR_MESSAGES = {
    ErrorCode.FIELD_NOT_FOUND: "Associated field not found",
    ErrorCode.USER_NOT_FOUND: "Associated user not found",
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.RULE_NOT_FOUND: "Schedule rule not found",
    ErrorCode.INVALID_TIME_BLOCKS: "Time blocks must lie within the opening hours",
    ErrorCode.INVALID_RECURRENCE_CONFIG: "Invalid recurrence configuration",
    ErrorCode.INVALID_OPENING_HOURS: "open_time must be earlier than close_time",
    ErrorCode.INVALID_TIME_WINDOW: "end_time must be after start_time",
    ErrorCode.FIELD_NOT_AVAILABLE: "Field is not available for the requested time",
    ErrorCode.ALREADY_CANCELLED: "Booking is already cancelled",
    ErrorCode.NOT_PENDING: "Booking is not in pending status",
    ErrorCode.UNAUTHORIZED: "Not allowed to act on this resource",
    ErrorCode.SYSTEM_ERROR: "System Error",
}


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """``(data, error)`` pair returned by every engine operation."""

    data: Optional[T] = None
    error: Optional[ErrorCode] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        if self.error is None:
            return None
        return self.detail or self.error.message

    @classmethod
    def success(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(data=data)

    @classmethod
    def failure(
        cls, error: ErrorCode, detail: Optional[str] = None
    ) -> "ServiceResult[T]":
        return cls(error=error, detail=detail)


__all__ = ["ErrorCode", "ErrorKind", "ServiceResult"]
