from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Time,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from turfbook.core.database import Base, IdentifierType

if TYPE_CHECKING:  # pragma: no cover
    from turfbook.models.field import Field

JSONType = JSON().with_variant(JSONB(), "postgresql")

RULE_STATUS_ACTIVE = "active"
RULE_STATUS_INACTIVE = "inactive"


class ScheduleRule(Base):
    """Recurring opening window of a field on one day of the week.

    ``recurrence_config``, ``zone_config`` and ``time_blocks`` are embedded
    JSON value objects; see :mod:`turfbook.schemas.schedule_rule` for their
    shapes.
    """

    __tablename__ = "schedule_rule"
    __table_args__ = {"schema": "reservation"}

    id_rule: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    id_field: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("booking.field.id_field", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    open_time: Mapped[time] = mapped_column(Time, nullable=False)
    close_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    special_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    zone_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    zone_config: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    recurrence_type: Mapped[str] = mapped_column(String(20), nullable=False, default="weekly")
    recurrence_config: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType, nullable=True
    )
    time_blocks: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=RULE_STATUS_ACTIVE)
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_by: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )

    field: Mapped["Field"] = relationship("Field", back_populates="schedule_rules")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return (
            "<ScheduleRule(id_rule={id}, day_of_week={day}, open={open}, close={close})>"
        ).format(
            id=self.id_rule,
            day=self.day_of_week,
            open=self.open_time,
            close=self.close_time,
        )


__all__ = ["ScheduleRule", "RULE_STATUS_ACTIVE", "RULE_STATUS_INACTIVE"]
