from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, value: date) -> "DayOfWeek":
        return _WEEK[value.weekday()]

    @property
    def ordinal(self) -> int:
        return _WEEK.index(self)


_WEEK = list(DayOfWeek)


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class ZoneConfig(BaseModel):
    capacity: Optional[int] = PydanticField(None, ge=0)
    description: Optional[str] = None
    amenities: Optional[list[str]] = None


class TimeBlock(BaseModel):
    start_time: time
    end_time: time
    capacity: Optional[int] = PydanticField(None, ge=0)
    price: Optional[Decimal] = PydanticField(None, ge=0)


class RecurrenceConfig(BaseModel):
    interval: Optional[int] = None
    days_of_week: Optional[list[DayOfWeek]] = None
    monthly_days: Optional[list[int]] = None
    end_date: Optional[date] = None
    exceptions: Optional[list[date]] = None


class ScheduleRuleBase(BaseModel):
    day_of_week: DayOfWeek
    open_time: time
    close_time: time
    is_available: bool = True
    special_price: Optional[Decimal] = PydanticField(None, ge=0)
    zone_name: Optional[str] = PydanticField(None, max_length=50)
    zone_config: Optional[ZoneConfig] = None
    recurrence_type: RecurrenceType = RecurrenceType.WEEKLY
    recurrence_config: Optional[RecurrenceConfig] = None
    time_blocks: list[TimeBlock] = PydanticField(default_factory=list)


class ScheduleRuleCreate(ScheduleRuleBase):
    pass


class ScheduleRuleUpdate(BaseModel):
    day_of_week: Optional[DayOfWeek] = None
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    is_available: Optional[bool] = None
    special_price: Optional[Decimal] = PydanticField(None, ge=0)
    zone_name: Optional[str] = PydanticField(None, max_length=50)
    zone_config: Optional[ZoneConfig] = None
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_config: Optional[RecurrenceConfig] = None
    time_blocks: Optional[list[TimeBlock]] = None


class ScheduleRuleResponse(ScheduleRuleBase):
    model_config = ConfigDict(from_attributes=True)

    id_rule: int
    id_field: int
    status: str
    created_by: int
    created_at: datetime
    updated_by: Optional[int] = None
    updated_at: datetime


__all__ = [
    "DayOfWeek",
    "RecurrenceConfig",
    "RecurrenceType",
    "ScheduleRuleBase",
    "ScheduleRuleCreate",
    "ScheduleRuleResponse",
    "ScheduleRuleUpdate",
    "TimeBlock",
    "ZoneConfig",
]
