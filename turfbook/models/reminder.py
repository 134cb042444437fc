from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from turfbook.core.database import Base, IdentifierType

REMINDER_STATUS_PENDING = "pending"
REMINDER_STATUS_SENT = "sent"
REMINDER_STATUS_FAILED = "failed"


class ReminderJob(Base):
    """Durable reminder waiting to be dispatched by the reminder worker."""

    __tablename__ = "reminder_job"
    __table_args__ = {"schema": "reservation"}

    id_job: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    id_booking: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)
    run_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=REMINDER_STATUS_PENDING
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<ReminderJob(id_job={self.id_job}, run_at={self.run_at}, status={self.status})>"


__all__ = [
    "ReminderJob",
    "REMINDER_STATUS_FAILED",
    "REMINDER_STATUS_PENDING",
    "REMINDER_STATUS_SENT",
]
