from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turfbook.models.audit_log import AuditLog
from turfbook.repository import audit_log_repository

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_UPDATED = "booking_updated"
    BOOKING_CANCELLED = "booking_cancelled"
    SCHEDULE_CREATED = "schedule_created"
    SCHEDULE_UPDATED = "schedule_updated"
    SCHEDULE_DELETED = "schedule_deleted"
    FACILITY_UPDATED = "facility_updated"


class AuditService:
    """Records audit events. A failure here never fails the audited operation."""

    def __init__(self, db: Session):
        self.db = db

    def record_event(
        self,
        action: AuditAction,
        actor_id: Optional[int],
        details: Dict[str, Any],
        *,
        field_id: Optional[int] = None,
    ) -> None:
        logger.info(
            "AUDIT action=%s user=%s field=%s details=%s",
            action.value,
            actor_id,
            field_id,
            details,
        )

        if actor_id is None:
            return

        try:
            audit_log_repository.create_audit_log(
                self.db,
                AuditLog(
                    action=action.value,
                    id_user=actor_id,
                    id_field=field_id,
                    details=details,
                ),
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Failed to persist audit event %s", action.value, exc_info=True)


__all__ = ["AuditAction", "AuditService"]
