from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import ValidationError

from turfbook.models.schedule_rule import ScheduleRule
from turfbook.schemas.schedule_rule import TimeBlock, ZoneConfig


@dataclass(frozen=True)
class ResolvedWindow:
    """Effective window of a rule at a given time of day."""

    start_time: time
    end_time: time
    price: Optional[Decimal]
    zone_name: Optional[str] = None
    capacity: Optional[int] = None


def load_time_blocks(raw_blocks: Optional[Iterable[Mapping[str, Any]]]) -> list[TimeBlock]:
    return [TimeBlock.model_validate(dict(block)) for block in (raw_blocks or ())]


def _zone_capacity(rule: ScheduleRule) -> Optional[int]:
    if not rule.zone_config:
        return None
    return ZoneConfig.model_validate(rule.zone_config).capacity


def effective_windows(rule: ScheduleRule) -> list[ResolvedWindow]:
    """Every window of the rule in list order: its blocks, or its opening hours."""

    blocks = load_time_blocks(rule.time_blocks)
    if not blocks:
        return [
            ResolvedWindow(
                start_time=rule.open_time,
                end_time=rule.close_time,
                price=rule.special_price,
                zone_name=rule.zone_name,
                capacity=_zone_capacity(rule),
            )
        ]

    return [
        ResolvedWindow(
            start_time=block.start_time,
            end_time=block.end_time,
            price=block.price if block.price is not None else rule.special_price,
            zone_name=rule.zone_name,
            capacity=block.capacity if block.capacity is not None else _zone_capacity(rule),
        )
        for block in blocks
    ]


def resolve_block(rule: ScheduleRule, time_of_day: time) -> Optional[ResolvedWindow]:
    """First window containing ``time_of_day``; both ends are inclusive."""

    for window in effective_windows(rule):
        if window.start_time <= time_of_day <= window.end_time:
            return window
    return None


def validate_time_blocks(
    open_time: time,
    close_time: time,
    raw_blocks: Sequence[Mapping[str, Any]],
) -> Optional[str]:
    try:
        blocks = load_time_blocks(raw_blocks)
    except ValidationError as exc:
        return f"Malformed time block: {exc.errors()[0].get('msg', 'invalid')}"

    for position, block in enumerate(blocks):
        if block.start_time >= block.end_time:
            return f"Time block {position} must start before it ends"
        if block.start_time < open_time or block.end_time > close_time:
            return (
                f"Time block {position} ({block.start_time} - {block.end_time}) must lie "
                f"within the opening hours ({open_time} - {close_time})"
            )
    return None


__all__ = [
    "ResolvedWindow",
    "effective_windows",
    "load_time_blocks",
    "resolve_block",
    "validate_time_blocks",
]
