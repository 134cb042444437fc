from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from turfbook.models.field import Field
from turfbook.models.field_pricing import FieldPricing
from turfbook.models.user import User


def get_field(db: Session, field_id: int) -> Optional[Field]:
    return db.query(Field).filter(Field.id_field == field_id).first()


def lock_field(db: Session, field_id: int) -> Optional[Field]:
    """Fetch the field row with ``FOR UPDATE`` so writers of one field queue up."""

    return (
        db.query(Field)
        .filter(Field.id_field == field_id)
        .with_for_update()
        .first()
    )


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id_user == user_id).first()


def get_price_for_duration(
    db: Session,
    field_id: int,
    duration_in_minutes: int,
) -> Optional[FieldPricing]:
    return (
        db.query(FieldPricing)
        .filter(FieldPricing.id_field == field_id)
        .filter(FieldPricing.duration_in_minutes == duration_in_minutes)
        .filter(FieldPricing.status == "active")
        .order_by(FieldPricing.id_pricing)
        .first()
    )


def save_field(db: Session, field: Field) -> Field:
    db.flush()
    db.commit()
    db.refresh(field)
    return field


__all__ = ["get_field", "get_price_for_duration", "get_user", "lock_field", "save_field"]
