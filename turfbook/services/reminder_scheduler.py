"""Scheduling of booking reminders.

``DatabaseReminderScheduler`` stores a :class:`ReminderJob` row that the
``reminder_loop`` worker dispatches once it is due, so reminders survive
restarts. ``InProcessReminderScheduler`` keeps a timer in the current process
instead; pending timers are lost when the process exits.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime
from typing import Callable, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session, sessionmaker

from turfbook.core.config import settings
from turfbook.models.reminder import REMINDER_STATUS_FAILED, REMINDER_STATUS_SENT
from turfbook.repository import reminder_repository
from turfbook.schemas.notification import BookingSummary

logger = logging.getLogger(__name__)


class ReminderNotifier(Protocol):
    def send_booking_reminder(self, summary: BookingSummary) -> None: ...


class ReminderScheduler(Protocol):
    def schedule_at(self, run_at: datetime, summary: BookingSummary) -> None: ...


class DatabaseReminderScheduler:
    def __init__(self, db: Session):
        self.db = db

    def schedule_at(self, run_at: datetime, summary: BookingSummary) -> None:
        reminder_repository.create_job(
            self.db,
            {
                "id_booking": summary.id,
                "run_at": run_at,
                "payload": summary.model_dump(mode="json"),
            },
        )
        logger.debug("Reminder for booking %s stored for %s", summary.id, run_at)


class InProcessReminderScheduler:
    def __init__(
        self,
        notifier: ReminderNotifier,
        *,
        clock: Callable[[], datetime] = datetime.now,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self._notifier = notifier
        self._clock = clock
        self._timer_factory = timer_factory

    def schedule_at(self, run_at: datetime, summary: BookingSummary) -> None:
        delay = max((run_at - self._clock()).total_seconds(), 0.0)
        timer = self._timer_factory(
            delay,
            self._notifier.send_booking_reminder,
            args=(summary,),
        )
        timer.daemon = True
        timer.start()
        logger.debug("Reminder for booking %s fires in %.0f seconds", summary.id, delay)


class DisabledReminderScheduler:
    def schedule_at(self, run_at: datetime, summary: BookingSummary) -> None:
        logger.info("Reminders disabled; dropping reminder for booking %s", summary.id)


def build_reminder_scheduler(
    db: Session,
    notifier: ReminderNotifier,
    *,
    backend: Optional[str] = None,
) -> ReminderScheduler:
    selected = (backend or settings.REMINDER_BACKEND).strip().lower()
    if selected == "database":
        return DatabaseReminderScheduler(db)
    if selected == "in_process":
        return InProcessReminderScheduler(notifier)
    if selected == "disabled":
        return DisabledReminderScheduler()
    raise ValueError(f"Unknown reminder backend '{selected}'")


def dispatch_due_reminders(
    db: Session,
    notifier: ReminderNotifier,
    *,
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> int:
    """Send every due reminder job and return how many were sent."""

    jobs = reminder_repository.list_due_jobs(
        db,
        now=now or datetime.now(),
        limit=limit or settings.REMINDER_BATCH_SIZE,
    )

    sent = 0
    for job in jobs:
        job.attempts += 1
        try:
            summary = BookingSummary.model_validate(job.payload)
        except ValidationError as exc:
            job.status = REMINDER_STATUS_FAILED
            job.last_error = str(exc)
            logger.warning("Reminder job %s has an invalid payload", job.id_job)
        else:
            try:
                notifier.send_booking_reminder(summary)
            except Exception as exc:
                job.status = REMINDER_STATUS_FAILED
                job.last_error = str(exc) or exc.__class__.__name__
                logger.warning("Reminder job %s could not be sent", job.id_job, exc_info=True)
            else:
                job.status = REMINDER_STATUS_SENT
                sent += 1
        reminder_repository.save_job(db, job)

    return sent


async def reminder_loop(
    stop_event: asyncio.Event,
    *,
    session_factory: sessionmaker,
    notifier: ReminderNotifier,
    poll_interval: Optional[float] = None,
) -> None:
    interval = poll_interval or settings.REMINDER_POLL_INTERVAL

    def _tick() -> int:
        db = session_factory()
        try:
            return dispatch_due_reminders(db, notifier)
        finally:
            db.close()

    while not stop_event.is_set():
        try:
            sent = await asyncio.to_thread(_tick)
            if sent:
                logger.info("Dispatched %s booking reminders", sent)
        except Exception:
            logger.exception("Reminder dispatch failed")
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


__all__ = [
    "DatabaseReminderScheduler",
    "DisabledReminderScheduler",
    "InProcessReminderScheduler",
    "ReminderScheduler",
    "build_reminder_scheduler",
    "dispatch_due_reminders",
    "reminder_loop",
]
