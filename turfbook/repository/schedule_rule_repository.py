from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from turfbook.models.schedule_rule import (
    RULE_STATUS_ACTIVE,
    RULE_STATUS_INACTIVE,
    ScheduleRule,
)
from turfbook.schemas.schedule_rule import DayOfWeek

_DAY_ORDER = case(
    {day.value: day.ordinal for day in DayOfWeek},
    value=ScheduleRule.day_of_week,
    else_=len(DayOfWeek),
)


def get_rule(
    db: Session,
    field_id: int,
    rule_id: int,
    *,
    include_inactive: bool = False,
) -> Optional[ScheduleRule]:
    query = (
        db.query(ScheduleRule)
        .filter(ScheduleRule.id_field == field_id)
        .filter(ScheduleRule.id_rule == rule_id)
    )
    if not include_inactive:
        query = query.filter(ScheduleRule.status == RULE_STATUS_ACTIVE)
    return query.first()


def list_rules(db: Session, field_id: int) -> list[ScheduleRule]:
    return (
        db.query(ScheduleRule)
        .filter(ScheduleRule.id_field == field_id)
        .filter(ScheduleRule.status == RULE_STATUS_ACTIVE)
        .order_by(_DAY_ORDER, ScheduleRule.open_time, ScheduleRule.id_rule)
        .all()
    )


def list_rules_for_weekday(
    db: Session,
    field_id: int,
    day_of_week: str,
) -> list[ScheduleRule]:
    """Active, bookable rules of a field on one weekday, in store order."""

    return (
        db.query(ScheduleRule)
        .filter(ScheduleRule.id_field == field_id)
        .filter(ScheduleRule.day_of_week == day_of_week)
        .filter(ScheduleRule.status == RULE_STATUS_ACTIVE)
        .filter(ScheduleRule.is_available.is_(True))
        .order_by(ScheduleRule.id_rule)
        .all()
    )


def create_rule(db: Session, rule_data: Dict[str, Any]) -> ScheduleRule:
    rule = ScheduleRule(**rule_data)
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


def save_rule(db: Session, rule: ScheduleRule) -> ScheduleRule:
    db.flush()
    db.commit()
    db.refresh(rule)
    return rule


def deactivate_rules_for_field(
    db: Session,
    field_id: int,
    *,
    updated_by: Optional[int] = None,
) -> int:
    """Mark every rule of a field inactive. The caller commits."""

    return (
        db.query(ScheduleRule)
        .filter(ScheduleRule.id_field == field_id)
        .filter(ScheduleRule.status != RULE_STATUS_INACTIVE)
        .update(
            {
                ScheduleRule.status: RULE_STATUS_INACTIVE,
                ScheduleRule.updated_by: updated_by,
            },
            synchronize_session="fetch",
        )
    )


__all__ = [
    "create_rule",
    "deactivate_rules_for_field",
    "get_rule",
    "list_rules",
    "list_rules_for_weekday",
    "save_rule",
]
