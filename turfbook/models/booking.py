from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    DDL,
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column

from turfbook.core.database import Base, IdentifierType


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


BOOKING_OVERLAP_CONSTRAINT = "bookings_no_overlap_per_field"


class Booking(Base):
    """Reservation of a field for an absolute time window."""

    __tablename__ = "booking"
    __table_args__ = {"schema": "reservation"}

    id_booking: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(
        String(255), nullable=False, default=lambda: str(uuid.uuid4())
    )
    id_user: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("auth.users.id_user"), nullable=False, index=True
    )
    id_field: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("booking.field.id_field"), nullable=False, index=True
    )
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.PENDING.value
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_by: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id_booking={self.id_booking}, status={self.status}, "
            f"start_time={self.start_time}, end_time={self.end_time})>"
        )


# Confirmed bookings of one field may not overlap.
event.listen(
    Base.metadata,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        "ALTER TABLE %(fullname)s ADD CONSTRAINT "
        + BOOKING_OVERLAP_CONSTRAINT
        + " EXCLUDE USING gist (id_field WITH =, "
        "tsrange(start_time, end_time, '[)') WITH &&) "
        "WHERE (status = 'confirmed')"
    ).execute_if(dialect="postgresql"),
)


__all__ = ["Booking", "BookingStatus", "BOOKING_OVERLAP_CONSTRAINT"]
