from __future__ import annotations

from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from turfbook.core.database import Base, IdentifierType


class FieldPricing(Base):
    """Price charged for booking a field for a given number of minutes."""

    __tablename__ = "field_pricing"
    __table_args__ = {"schema": "booking"}

    id_pricing: Mapped[int] = mapped_column(IdentifierType, primary_key=True, index=True)
    id_field: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("booking.field.id_field", ondelete="CASCADE"), nullable=False
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration_in_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="active")
