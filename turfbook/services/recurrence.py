"""Decide on which calendar dates a schedule rule is in effect.

``applies`` only looks at the date; the time of day is handled by
:mod:`turfbook.services.time_blocks`. Every recurrence type is additionally
gated on the rule's own ``day_of_week``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol

from pydantic import ValidationError

from turfbook.schemas.schedule_rule import DayOfWeek, RecurrenceConfig, RecurrenceType


class RecurringRule(Protocol):
    day_of_week: str
    recurrence_type: str
    recurrence_config: Optional[Mapping[str, Any]]
    created_at: datetime


def _load_config(raw: Optional[Mapping[str, Any]]) -> RecurrenceConfig:
    return RecurrenceConfig.model_validate(dict(raw or {}))


def _anchor_date(rule: RecurringRule) -> date:
    created_at = rule.created_at
    if isinstance(created_at, datetime):
        return created_at.date()
    return created_at


def applies(rule: RecurringRule, target_date: date) -> bool:
    if isinstance(target_date, datetime):
        target_date = target_date.date()

    if rule.day_of_week != DayOfWeek.of(target_date).value:
        return False

    recurrence_type = RecurrenceType(rule.recurrence_type)
    if recurrence_type is RecurrenceType.WEEKLY:
        return True

    config = _load_config(rule.recurrence_config)

    if recurrence_type is RecurrenceType.DAILY:
        if not config.interval or config.interval < 1:
            return False
        elapsed_days = (target_date - _anchor_date(rule)).days
        return elapsed_days % config.interval == 0

    if recurrence_type is RecurrenceType.BIWEEKLY:
        elapsed_weeks = abs((target_date - _anchor_date(rule)).days) // 7
        return elapsed_weeks % 2 == 0

    if recurrence_type is RecurrenceType.MONTHLY:
        return target_date.day in (config.monthly_days or ())

    # custom
    if config.end_date is not None and target_date > config.end_date:
        return False
    if target_date in (config.exceptions or ()):
        return False
    if config.days_of_week:
        return DayOfWeek.of(target_date) in config.days_of_week
    return True


def validate_recurrence(
    recurrence_type: str,
    raw_config: Optional[Mapping[str, Any]],
) -> Optional[str]:
    """Return why the configuration is unusable for the type, or ``None``."""

    try:
        recurrence = RecurrenceType(recurrence_type)
    except ValueError:
        return f"Unknown recurrence type '{recurrence_type}'"

    if recurrence is RecurrenceType.WEEKLY:
        return None

    try:
        config = _load_config(raw_config)
    except ValidationError as exc:
        return f"Malformed recurrence config: {exc.errors()[0].get('msg', 'invalid')}"

    if config.interval is not None and config.interval < 1:
        return "interval must be at least 1"
    if config.monthly_days is not None and any(
        day < 1 or day > 31 for day in config.monthly_days
    ):
        return "monthly_days must be between 1 and 31"

    if recurrence is RecurrenceType.DAILY and config.interval is None:
        return "daily recurrence requires an interval"
    if recurrence is RecurrenceType.MONTHLY and not config.monthly_days:
        return "monthly recurrence requires monthly_days"

    return None


__all__ = ["RecurringRule", "applies", "validate_recurrence"]
