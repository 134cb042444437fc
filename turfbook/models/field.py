from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from turfbook.core.database import Base, IdentifierType

if TYPE_CHECKING:  # pragma: no cover
    from turfbook.models.schedule_rule import ScheduleRule


FIELD_STATUS_ACTIVE = "active"
FIELD_STATUS_INACTIVE = "inactive"


class Field(Base):
    """Bookable sports field, owned by a brand."""

    __tablename__ = "field"
    __table_args__ = {"schema": "booking"}

    id_field: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    id_brand: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    field_name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    sport_type: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=FIELD_STATUS_ACTIVE
    )

    schedule_rules: Mapped[list["ScheduleRule"]] = relationship(
        "ScheduleRule",
        back_populates="field",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Field(id_field={self.id_field}, name={self.field_name})>"


__all__ = ["Field", "FIELD_STATUS_ACTIVE", "FIELD_STATUS_INACTIVE"]
