from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, List, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from turfbook.core.config import settings
from turfbook.models.booking import Booking, BookingStatus
from turfbook.repository import booking_repository, field_repository
from turfbook.repository.booking_repository import BookingOverlapError
from turfbook.schemas.notification import BookingSummary
from turfbook.services.audit_service import AuditAction, AuditService
from turfbook.services.availability_service import as_wall_clock
from turfbook.services.errors import ErrorCode, ServiceResult
from turfbook.services.notification_client import NotificationClient
from turfbook.services.reminder_scheduler import ReminderScheduler, build_reminder_scheduler

logger = logging.getLogger(__name__)


class BookingNotifier(Protocol):
    def send_booking_confirmation(self, summary: BookingSummary) -> None: ...

    def send_booking_reminder(self, summary: BookingSummary) -> None: ...


@dataclass(frozen=True)
class CancellationResult:
    booking: Booking
    refund_amount: Decimal


class BookingService:
    """Create, cancel and confirm bookings.

    ``create_booking`` stores bookings directly as ``confirmed``. Bookings that
    reach ``pending`` some other way go through ``confirm_booking``, which
    re-checks overlaps and cancels the booking when it lost the slot.
    """

    def __init__(
        self,
        db: Session,
        *,
        notifier: Optional[BookingNotifier] = None,
        audit: Optional[AuditService] = None,
        reminders: Optional[ReminderScheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.notifier = notifier or NotificationClient()
        self.audit = audit or AuditService(db)
        self.reminders = reminders or build_reminder_scheduler(db, self.notifier)
        self.clock = clock

    def _build_summary(
        self,
        booking: Booking,
        *,
        refund_amount: Optional[Decimal] = None,
    ) -> Optional[BookingSummary]:
        user = field_repository.get_user(self.db, booking.id_user)
        field = field_repository.get_field(self.db, booking.id_field)
        if user is None or field is None:
            return None

        return BookingSummary(
            id=booking.id_booking,
            code=booking.code,
            user_email=user.email,
            field_name=field.field_name,
            field_address=field.address or "",
            start_time=booking.start_time,
            duration=booking.duration,
            total_amount=booking.total_amount,
            status=booking.status,
            refund_amount=refund_amount,
        )

    def _notify(self, booking: Booking, *, refund_amount: Optional[Decimal] = None) -> None:
        try:
            summary = self._build_summary(booking, refund_amount=refund_amount)
            if summary is not None:
                self.notifier.send_booking_confirmation(summary)
        except Exception:
            logger.warning(
                "Failed to send notification for booking %s", booking.id_booking, exc_info=True
            )

    def _schedule_reminder(self, booking: Booking) -> None:
        run_at = booking.start_time - timedelta(hours=settings.REMINDER_LEAD_HOURS)
        if run_at <= self.clock():
            return

        try:
            summary = self._build_summary(booking)
            if summary is not None:
                self.reminders.schedule_at(run_at, summary)
        except Exception:
            logger.warning(
                "Failed to schedule reminder for booking %s", booking.id_booking, exc_info=True
            )

    def create_booking(
        self,
        field_id: int,
        user_id: int,
        start_time: datetime,
        end_time: datetime,
        notes: Optional[str] = None,
    ) -> ServiceResult[Booking]:
        start_time = as_wall_clock(start_time)
        end_time = as_wall_clock(end_time)
        if start_time >= end_time:
            return ServiceResult.failure(ErrorCode.INVALID_TIME_WINDOW)

        if field_repository.get_user(self.db, user_id) is None:
            return ServiceResult.failure(ErrorCode.USER_NOT_FOUND)
        if field_repository.get_field(self.db, field_id) is None:
            return ServiceResult.failure(ErrorCode.FIELD_NOT_FOUND)

        duration = int((end_time - start_time).total_seconds() // 60)
        pricing = field_repository.get_price_for_duration(self.db, field_id, duration)
        amount = pricing.price if pricing is not None else Decimal("0.00")

        try:
            booking = booking_repository.insert_confirmed_booking(
                self.db,
                {
                    "id_field": field_id,
                    "id_user": user_id,
                    "start_time": start_time,
                    "end_time": end_time,
                    "amount": amount,
                    "total_amount": amount,
                    "duration": duration,
                    "notes": notes,
                    "created_by": user_id,
                },
            )
        except BookingOverlapError:
            logger.info("Rejected overlapping booking on field %s at %s", field_id, start_time)
            return ServiceResult.failure(ErrorCode.FIELD_NOT_AVAILABLE)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create booking on field %s for user %s", field_id, user_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self._notify(booking)
        self._schedule_reminder(booking)
        self.audit.record_event(
            AuditAction.BOOKING_CREATED,
            user_id,
            {
                "bookingId": booking.id_booking,
                "startTime": booking.start_time.isoformat(),
                "endTime": booking.end_time.isoformat(),
            },
            field_id=field_id,
        )
        return ServiceResult.success(booking)

    def cancel_booking(
        self,
        booking_id: int,
        requesting_user_id: int,
    ) -> ServiceResult[CancellationResult]:
        booking = booking_repository.get_booking(self.db, booking_id)
        if booking is None:
            return ServiceResult.failure(ErrorCode.BOOKING_NOT_FOUND)
        if booking.id_user != requesting_user_id:
            return ServiceResult.failure(ErrorCode.UNAUTHORIZED)
        if booking.status == BookingStatus.CANCELLED.value:
            return ServiceResult.failure(ErrorCode.ALREADY_CANCELLED)
        if booking.status == BookingStatus.COMPLETED.value:
            return ServiceResult.failure(
                ErrorCode.ALREADY_CANCELLED, "Completed bookings cannot be cancelled"
            )

        booking.status = BookingStatus.CANCELLED.value
        booking.updated_by = requesting_user_id

        try:
            booking = booking_repository.save_booking(self.db, booking)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to cancel booking %s", booking_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        refund_amount = booking.total_amount
        self._notify(booking, refund_amount=refund_amount)
        self.audit.record_event(
            AuditAction.BOOKING_CANCELLED,
            requesting_user_id,
            {"bookingId": booking_id, "refundAmount": str(refund_amount)},
            field_id=booking.id_field,
        )
        return ServiceResult.success(CancellationResult(booking, refund_amount))

    def _reject_pending(self, booking: Booking, actor_id: Optional[int]) -> ServiceResult[Booking]:
        booking.status = BookingStatus.CANCELLED.value
        booking.updated_by = actor_id
        try:
            booking_repository.save_booking(self.db, booking)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to cancel conflicting booking %s", booking.id_booking)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self.audit.record_event(
            AuditAction.BOOKING_UPDATED,
            actor_id,
            {"bookingId": booking.id_booking, "status": booking.status, "reason": "overlap"},
            field_id=booking.id_field,
        )
        return ServiceResult.failure(ErrorCode.FIELD_NOT_AVAILABLE)

    def confirm_booking(
        self,
        booking_id: int,
        actor_id: Optional[int] = None,
    ) -> ServiceResult[Booking]:
        booking = booking_repository.get_booking(self.db, booking_id)
        if booking is None:
            return ServiceResult.failure(ErrorCode.BOOKING_NOT_FOUND)
        if booking.status != BookingStatus.PENDING.value:
            return ServiceResult.failure(ErrorCode.NOT_PENDING)

        try:
            field_repository.lock_field(self.db, booking.id_field)
            self.db.refresh(booking, with_for_update=True)
            if booking.status != BookingStatus.PENDING.value:
                self.db.rollback()
                return ServiceResult.failure(ErrorCode.NOT_PENDING)
            conflict = booking_repository.has_confirmed_overlap(
                self.db,
                field_id=booking.id_field,
                start_time=booking.start_time,
                end_time=booking.end_time,
                exclude_booking_id=booking.id_booking,
            )
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to re-check availability for booking %s", booking_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        if conflict:
            return self._reject_pending(booking, actor_id)

        booking.status = BookingStatus.CONFIRMED.value
        booking.updated_by = actor_id

        try:
            booking = booking_repository.save_booking(self.db, booking)
        except IntegrityError as exc:
            self.db.rollback()
            if not booking_repository.is_overlap_violation(exc):
                logger.exception("Failed to confirm booking %s", booking_id)
                return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)
            self.db.refresh(booking)
            return self._reject_pending(booking, actor_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to confirm booking %s", booking_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self.audit.record_event(
            AuditAction.BOOKING_UPDATED,
            actor_id,
            {"bookingId": booking_id, "status": booking.status},
            field_id=booking.id_field,
        )
        return ServiceResult.success(booking)

    def get_booking_details(self, booking_id: int, user_id: int) -> ServiceResult[Booking]:
        booking = booking_repository.get_booking(self.db, booking_id)
        if booking is None or booking.id_user != user_id:
            return ServiceResult.failure(ErrorCode.BOOKING_NOT_FOUND)
        return ServiceResult.success(booking)

    def list_user_bookings(self, user_id: int) -> ServiceResult[List[Booking]]:
        return ServiceResult.success(booking_repository.list_user_bookings(self.db, user_id))


__all__ = ["BookingNotifier", "BookingService", "CancellationResult"]
