"""Availability of a field at an instant and over the slots of a day."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from turfbook.core.config import settings
from turfbook.models.booking import Booking
from turfbook.models.schedule_rule import ScheduleRule
from turfbook.repository import booking_repository, field_repository, schedule_rule_repository
from turfbook.schemas.schedule_rule import DayOfWeek
from turfbook.services.errors import ErrorCode, ServiceResult
from turfbook.services.recurrence import applies
from turfbook.services.time_blocks import ResolvedWindow, resolve_block

logger = logging.getLogger(__name__)


class UnavailableReason(str, Enum):
    NO_SCHEDULE_FOR_FIELD = "NoScheduleForField"
    NO_SCHEDULE_FOR_TIME = "NoScheduleForTime"
    NO_AVAILABLE_BLOCK = "NoAvailableBlock"
    SLOT_ALREADY_BOOKED = "SlotAlreadyBooked"


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: Optional[UnavailableReason] = None
    rule: Optional[ScheduleRule] = None
    window: Optional[ResolvedWindow] = None
    price: Optional[Decimal] = None


@dataclass(frozen=True)
class Slot:
    start_time: datetime
    end_time: datetime
    status: SlotStatus
    price: Optional[Decimal] = None
    zone_name: Optional[str] = None


def as_wall_clock(instant: datetime) -> datetime:
    """Drop tzinfo; the engine works on the field's local wall clock."""

    if instant.tzinfo is not None:
        return instant.replace(tzinfo=None)
    return instant


def _contains(bookings: Iterable[Booking], instant: datetime) -> bool:
    return any(b.start_time <= instant <= b.end_time for b in bookings)


class AvailabilityService:

    def __init__(self, db: Session):
        self.db = db

    def _applicable_rule(self, field_id: int, target_date: date) -> tuple[bool, Optional[ScheduleRule]]:
        rules = schedule_rule_repository.list_rules_for_weekday(
            self.db, field_id, DayOfWeek.of(target_date).value
        )
        for rule in rules:
            if applies(rule, target_date):
                return True, rule
        return bool(rules), None

    def check_availability(
        self,
        field_id: int,
        instant: datetime,
    ) -> ServiceResult[AvailabilityResult]:
        if field_repository.get_field(self.db, field_id) is None:
            return ServiceResult.failure(ErrorCode.FIELD_NOT_FOUND)

        instant = as_wall_clock(instant)
        has_rules, rule = self._applicable_rule(field_id, instant.date())
        if not has_rules:
            return ServiceResult.success(
                AvailabilityResult(False, UnavailableReason.NO_SCHEDULE_FOR_FIELD)
            )
        if rule is None:
            return ServiceResult.success(
                AvailabilityResult(False, UnavailableReason.NO_SCHEDULE_FOR_TIME)
            )

        window = resolve_block(rule, instant.time())
        if window is None:
            return ServiceResult.success(
                AvailabilityResult(False, UnavailableReason.NO_AVAILABLE_BLOCK, rule=rule)
            )

        booking = booking_repository.find_confirmed_booking_containing(
            self.db, field_id=field_id, instant=instant
        )
        if booking is not None:
            logger.debug(
                "Field %s at %s is taken by booking %s", field_id, instant, booking.id_booking
            )
            return ServiceResult.success(
                AvailabilityResult(
                    False,
                    UnavailableReason.SLOT_ALREADY_BOOKED,
                    rule=rule,
                    window=window,
                    price=window.price,
                )
            )

        return ServiceResult.success(
            AvailabilityResult(True, rule=rule, window=window, price=window.price)
        )

    def list_available_slots(
        self,
        field_id: int,
        target_date: date,
        slot_minutes: Optional[int] = None,
    ) -> ServiceResult[List[Slot]]:
        """Slots of ``slot_minutes`` across the opening hours of the day's rule.

        Each slot is judged at its start: outside every block it is
        ``unavailable``, inside a confirmed booking it is ``booked``.
        """

        if field_repository.get_field(self.db, field_id) is None:
            return ServiceResult.failure(ErrorCode.FIELD_NOT_FOUND)

        if slot_minutes is None:
            slot_minutes = settings.SLOT_MINUTES
        step = timedelta(minutes=slot_minutes)
        if step <= timedelta(0):
            return ServiceResult.failure(
                ErrorCode.INVALID_TIME_WINDOW, "slot_minutes must be positive"
            )

        _, rule = self._applicable_rule(field_id, target_date)
        if rule is None:
            return ServiceResult.success([])

        opens_at = datetime.combine(target_date, rule.open_time)
        closes_at = datetime.combine(target_date, rule.close_time)
        bookings = booking_repository.list_confirmed_bookings_between(
            self.db, field_id=field_id, start_time=opens_at, end_time=closes_at
        )

        slots: List[Slot] = []
        start = opens_at
        while start + step <= closes_at:
            window = resolve_block(rule, start.time())
            if window is None:
                slots.append(Slot(start, start + step, SlotStatus.UNAVAILABLE, zone_name=rule.zone_name))
            else:
                status = SlotStatus.BOOKED if _contains(bookings, start) else SlotStatus.AVAILABLE
                slots.append(Slot(start, start + step, status, window.price, window.zone_name))
            start += step

        return ServiceResult.success(slots)


__all__ = [
    "AvailabilityResult",
    "AvailabilityService",
    "Slot",
    "SlotStatus",
    "UnavailableReason",
    "as_wall_clock",
]
