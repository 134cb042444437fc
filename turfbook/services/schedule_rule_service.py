from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turfbook.models.field import FIELD_STATUS_INACTIVE, Field
from turfbook.models.schedule_rule import RULE_STATUS_INACTIVE, ScheduleRule
from turfbook.repository import field_repository, schedule_rule_repository
from turfbook.schemas.schedule_rule import ScheduleRuleCreate, ScheduleRuleUpdate
from turfbook.services.audit_service import AuditAction, AuditService
from turfbook.services.errors import ErrorCode, ServiceResult
from turfbook.services.recurrence import validate_recurrence
from turfbook.services.time_blocks import validate_time_blocks

logger = logging.getLogger(__name__)

# Embedded value objects are stored as JSON; everything else keeps its
# Python type for the column.
_JSON_ATTRIBUTES = ("zone_config", "recurrence_config", "time_blocks")
_REQUIRED_ATTRIBUTES = (
    "day_of_week",
    "open_time",
    "close_time",
    "is_available",
    "recurrence_type",
)


def _rule_values(data: Dict[str, Any], source: Any) -> Dict[str, Any]:
    values = dict(data)
    for attribute in _JSON_ATTRIBUTES:
        if attribute not in values:
            continue
        value = getattr(source, attribute)
        if value is None:
            values[attribute] = [] if attribute == "time_blocks" else None
        elif isinstance(value, list):
            values[attribute] = [item.model_dump(mode="json", exclude_none=True) for item in value]
        else:
            values[attribute] = value.model_dump(mode="json", exclude_none=True)
    return values


class ScheduleRuleService:

    def __init__(self, db: Session, *, audit: Optional[AuditService] = None):
        self.db = db
        self.audit = audit or AuditService(db)

    def _validate_structure(self, values: Dict[str, Any]) -> ServiceResult[None]:
        open_time = values["open_time"]
        close_time = values["close_time"]
        if open_time >= close_time:
            return ServiceResult.failure(ErrorCode.INVALID_OPENING_HOURS)

        block_error = validate_time_blocks(
            open_time, close_time, values.get("time_blocks") or []
        )
        if block_error:
            return ServiceResult.failure(ErrorCode.INVALID_TIME_BLOCKS, block_error)

        recurrence_error = validate_recurrence(
            values["recurrence_type"], values.get("recurrence_config")
        )
        if recurrence_error:
            return ServiceResult.failure(ErrorCode.INVALID_RECURRENCE_CONFIG, recurrence_error)

        return ServiceResult.success()

    def list_rules(self, field_id: int) -> ServiceResult[List[ScheduleRule]]:
        if field_repository.get_field(self.db, field_id) is None:
            return ServiceResult.failure(ErrorCode.FIELD_NOT_FOUND)
        return ServiceResult.success(schedule_rule_repository.list_rules(self.db, field_id))

    def add_rule(
        self,
        field_id: int,
        payload: ScheduleRuleCreate,
        actor_id: int,
    ) -> ServiceResult[ScheduleRule]:
        if field_repository.get_field(self.db, field_id) is None:
            return ServiceResult.failure(ErrorCode.FIELD_NOT_FOUND)

        values = _rule_values(payload.model_dump(), payload)
        values["day_of_week"] = payload.day_of_week.value
        values["recurrence_type"] = payload.recurrence_type.value

        validation = self._validate_structure(values)
        if not validation.ok:
            return ServiceResult.failure(validation.error, validation.detail)

        values.update(id_field=field_id, created_by=actor_id)

        try:
            rule = schedule_rule_repository.create_rule(self.db, values)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create schedule rule for field %s", field_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self.audit.record_event(
            AuditAction.SCHEDULE_CREATED,
            actor_id,
            {"ruleId": rule.id_rule, "dayOfWeek": rule.day_of_week},
            field_id=field_id,
        )
        return ServiceResult.success(rule)

    def update_rule(
        self,
        field_id: int,
        rule_id: int,
        patch: ScheduleRuleUpdate,
        actor_id: int,
    ) -> ServiceResult[ScheduleRule]:
        rule = schedule_rule_repository.get_rule(self.db, field_id, rule_id)
        if rule is None:
            return ServiceResult.failure(ErrorCode.RULE_NOT_FOUND)

        update_data = _rule_values(patch.model_dump(exclude_unset=True), patch)
        for attribute in ("day_of_week", "recurrence_type"):
            if update_data.get(attribute) is not None:
                update_data[attribute] = update_data[attribute].value

        def _merged(attribute: str) -> Any:
            value = update_data.get(attribute)
            return getattr(rule, attribute) if value is None else value

        merged = {
            "open_time": _merged("open_time"),
            "close_time": _merged("close_time"),
            "time_blocks": update_data.get("time_blocks", rule.time_blocks),
            "recurrence_type": _merged("recurrence_type"),
            "recurrence_config": update_data.get(
                "recurrence_config", rule.recurrence_config
            ),
        }
        validation = self._validate_structure(merged)
        if not validation.ok:
            return ServiceResult.failure(validation.error, validation.detail)

        for attribute, value in update_data.items():
            if value is None and attribute in _REQUIRED_ATTRIBUTES:
                continue
            setattr(rule, attribute, value)
        rule.updated_by = actor_id

        try:
            rule = schedule_rule_repository.save_rule(self.db, rule)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update schedule rule %s", rule_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self.audit.record_event(
            AuditAction.SCHEDULE_UPDATED,
            actor_id,
            {"ruleId": rule_id, "changes": sorted(update_data)},
            field_id=field_id,
        )
        return ServiceResult.success(rule)

    def delete_rule(self, field_id: int, rule_id: int, actor_id: int) -> ServiceResult[None]:
        rule = schedule_rule_repository.get_rule(
            self.db, field_id, rule_id, include_inactive=True
        )
        if rule is None:
            return ServiceResult.failure(ErrorCode.RULE_NOT_FOUND)

        if rule.status == RULE_STATUS_INACTIVE:
            return ServiceResult.success()

        rule.status = RULE_STATUS_INACTIVE
        rule.updated_by = actor_id

        try:
            schedule_rule_repository.save_rule(self.db, rule)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete schedule rule %s", rule_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self.audit.record_event(
            AuditAction.SCHEDULE_DELETED,
            actor_id,
            {"ruleId": rule_id},
            field_id=field_id,
        )
        return ServiceResult.success()

    def deactivate_field(self, field_id: int, actor_id: int) -> ServiceResult[Field]:
        """Take a field out of service together with all of its rules."""

        field = field_repository.get_field(self.db, field_id)
        if field is None:
            return ServiceResult.failure(ErrorCode.FIELD_NOT_FOUND)

        try:
            deactivated = schedule_rule_repository.deactivate_rules_for_field(
                self.db, field_id, updated_by=actor_id
            )
            field.status = FIELD_STATUS_INACTIVE
            field = field_repository.save_field(self.db, field)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to deactivate field %s", field_id)
            return ServiceResult.failure(ErrorCode.SYSTEM_ERROR)

        self.audit.record_event(
            AuditAction.FACILITY_UPDATED,
            actor_id,
            {"status": FIELD_STATUS_INACTIVE, "rulesDeactivated": deactivated},
            field_id=field_id,
        )
        return ServiceResult.success(field)


__all__ = ["ScheduleRuleService"]
