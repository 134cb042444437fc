from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy.orm import Session

from turfbook.models.reminder import REMINDER_STATUS_PENDING, ReminderJob


def create_job(db: Session, job_data: Dict[str, Any]) -> ReminderJob:
    job = ReminderJob(**job_data)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def list_due_jobs(db: Session, *, now: datetime, limit: int) -> list[ReminderJob]:
    """Pending jobs whose time has come, locked so parallel workers skip them."""

    return (
        db.query(ReminderJob)
        .filter(ReminderJob.status == REMINDER_STATUS_PENDING)
        .filter(ReminderJob.run_at <= now)
        .order_by(ReminderJob.run_at, ReminderJob.id_job)
        .limit(limit)
        .with_for_update(skip_locked=True)
        .all()
    )


def save_job(db: Session, job: ReminderJob) -> ReminderJob:
    db.flush()
    db.commit()
    db.refresh(job)
    return job


__all__ = ["create_job", "list_due_jobs", "save_job"]
