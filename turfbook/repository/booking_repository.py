from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from turfbook.models.booking import BOOKING_OVERLAP_CONSTRAINT, Booking, BookingStatus
from turfbook.repository import field_repository


class BookingOverlapError(Exception):
    """Raised when storing a confirmed booking would overlap another one."""


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return db.query(Booking).filter(Booking.id_booking == booking_id).first()


def list_user_bookings(db: Session, user_id: int) -> list[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.id_user == user_id)
        .order_by(Booking.created_at.desc(), Booking.id_booking.desc())
        .all()
    )


def has_confirmed_overlap(
    db: Session,
    *,
    field_id: int,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: Optional[int] = None,
) -> bool:
    """Half-open interval overlap against the confirmed bookings of a field."""

    query = (
        db.query(Booking.id_booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.status == BookingStatus.CONFIRMED.value)
        .filter(Booking.start_time < end_time)
        .filter(Booking.end_time > start_time)
    )

    if exclude_booking_id is not None:
        query = query.filter(Booking.id_booking != exclude_booking_id)

    return query.first() is not None


def find_confirmed_booking_containing(
    db: Session,
    *,
    field_id: int,
    instant: datetime,
) -> Optional[Booking]:
    """Confirmed booking whose window contains ``instant``, both ends inclusive."""

    return (
        db.query(Booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.status == BookingStatus.CONFIRMED.value)
        .filter(Booking.start_time <= instant)
        .filter(Booking.end_time >= instant)
        .order_by(Booking.start_time)
        .first()
    )


def list_confirmed_bookings_between(
    db: Session,
    *,
    field_id: int,
    start_time: datetime,
    end_time: datetime,
) -> list[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.id_field == field_id)
        .filter(Booking.status == BookingStatus.CONFIRMED.value)
        .filter(Booking.start_time <= end_time)
        .filter(Booking.end_time >= start_time)
        .order_by(Booking.start_time)
        .all()
    )


def is_overlap_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", "") or ""
    return constraint_name == BOOKING_OVERLAP_CONSTRAINT or (
        BOOKING_OVERLAP_CONSTRAINT in str(orig)
    )


def insert_confirmed_booking(db: Session, booking_data: Dict[str, Any]) -> Booking:
    """Store a confirmed booking unless it overlaps another confirmed one.

    The field row is locked for the rest of the transaction, so concurrent
    inserts for the same field are checked one after the other. On
    PostgreSQL the exclusion constraint rejects anything that slips through.
    """

    field_id = booking_data["id_field"]
    field_repository.lock_field(db, field_id)

    if has_confirmed_overlap(
        db,
        field_id=field_id,
        start_time=booking_data["start_time"],
        end_time=booking_data["end_time"],
    ):
        db.rollback()
        raise BookingOverlapError(f"Field {field_id} already booked in this range")

    booking = Booking(**booking_data)
    booking.status = BookingStatus.CONFIRMED.value
    db.add(booking)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_overlap_violation(exc):
            raise BookingOverlapError(str(exc.orig)) from exc
        raise

    db.refresh(booking)
    return booking


def save_booking(db: Session, booking: Booking) -> Booking:
    db.flush()
    db.commit()
    db.refresh(booking)
    return booking


__all__ = [
    "BookingOverlapError",
    "find_confirmed_booking_containing",
    "get_booking",
    "has_confirmed_overlap",
    "insert_confirmed_booking",
    "is_overlap_violation",
    "list_confirmed_bookings_between",
    "list_user_bookings",
    "save_booking",
]
