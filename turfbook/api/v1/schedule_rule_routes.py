"""API routes for managing the schedule rules of a field."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from turfbook.core.error_handlers import unwrap_result
from turfbook.core.security import get_current_actor
from turfbook.dependencies import get_db
from turfbook.schemas.field import FieldStatusResponse
from turfbook.schemas.schedule_rule import (
    ScheduleRuleCreate,
    ScheduleRuleResponse,
    ScheduleRuleUpdate,
)
from turfbook.services.permissions import Actor, Role, require_any_role, require_capability
from turfbook.services.schedule_rule_service import ScheduleRuleService

router = APIRouter(prefix="/fields/{field_id}", tags=["schedule-rules"])

SCHEDULE_EDITOR_ROLES = (
    Role.COMPANY,
    Role.FACILITY_MANAGER,
    Role.MAINTENANCE_STAFF,
    Role.ADMIN,
)


def _ensure_schedule_editor(actor: Actor) -> None:
    unwrap_result(require_any_role(actor, SCHEDULE_EDITOR_ROLES))
    unwrap_result(require_capability(actor, lambda caps: caps.can_update_schedules))


@router.get("/schedule-rules", response_model=List[ScheduleRuleResponse])
def list_schedule_rules(field_id: int, db: Session = Depends(get_db)) -> List[ScheduleRuleResponse]:
    """Retrieve the active rules of a field ordered by weekday and opening time."""

    service = ScheduleRuleService(db)
    return unwrap_result(service.list_rules(field_id))


@router.post(
    "/schedule-rules",
    response_model=ScheduleRuleResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_schedule_rule(
    field_id: int,
    payload: ScheduleRuleCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ScheduleRuleResponse:
    _ensure_schedule_editor(actor)
    service = ScheduleRuleService(db)
    return unwrap_result(service.add_rule(field_id, payload, actor.user_id))


@router.put("/schedule-rules/{rule_id}", response_model=ScheduleRuleResponse)
def update_schedule_rule(
    field_id: int,
    rule_id: int,
    payload: ScheduleRuleUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ScheduleRuleResponse:
    _ensure_schedule_editor(actor)
    service = ScheduleRuleService(db)
    return unwrap_result(service.update_rule(field_id, rule_id, payload, actor.user_id))


@router.delete("/schedule-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule_rule(
    field_id: int,
    rule_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> None:
    """Deactivate a rule; deleting it again is a no-op."""

    _ensure_schedule_editor(actor)
    service = ScheduleRuleService(db)
    unwrap_result(service.delete_rule(field_id, rule_id, actor.user_id))


@router.post("/deactivate", response_model=FieldStatusResponse)
def deactivate_field(
    field_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> FieldStatusResponse:
    """Take a field out of service together with its schedule rules."""

    unwrap_result(require_any_role(actor, (Role.COMPANY, Role.FACILITY_MANAGER, Role.ADMIN)))
    unwrap_result(require_capability(actor, lambda caps: caps.can_modify_facilities))
    service = ScheduleRuleService(db)
    return unwrap_result(service.deactivate_field(field_id, actor.user_id))
