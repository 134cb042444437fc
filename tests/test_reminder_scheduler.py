import asyncio
from datetime import datetime

import pytest

from turfbook.models import ReminderJob
from turfbook.schemas.notification import BookingSummary
from turfbook.services.reminder_scheduler import (
    DatabaseReminderScheduler,
    DisabledReminderScheduler,
    InProcessReminderScheduler,
    build_reminder_scheduler,
    dispatch_due_reminders,
    reminder_loop,
)


def _summary(booking_id=1) -> BookingSummary:
    return BookingSummary(
        id=booking_id,
        code="abc",
        user_email="ana@example.com",
        field_name="Cancha Norte",
        field_address="Av. Siempre Viva 742",
        start_time=datetime(2025, 4, 14, 10, 0),
        duration=60,
        status="confirmed",
    )


def test_database_scheduler_stores_pending_job(db):
    DatabaseReminderScheduler(db).schedule_at(datetime(2025, 4, 13, 10, 0), _summary())

    job = db.query(ReminderJob).one()
    assert job.status == "pending"
    assert job.id_booking == 1
    assert job.run_at == datetime(2025, 4, 13, 10, 0)
    assert job.payload["user_email"] == "ana@example.com"


def test_dispatch_sends_only_due_jobs(db, notifier):
    scheduler = DatabaseReminderScheduler(db)
    scheduler.schedule_at(datetime(2025, 4, 13, 10, 0), _summary(1))
    scheduler.schedule_at(datetime(2025, 4, 20, 10, 0), _summary(2))

    sent = dispatch_due_reminders(db, notifier, now=datetime(2025, 4, 14, 0, 0))

    assert sent == 1
    assert [summary.id for summary in notifier.reminders] == [1]
    statuses = {job.id_booking: job.status for job in db.query(ReminderJob).all()}
    assert statuses == {1: "sent", 2: "pending"}


def test_dispatch_does_not_resend(db, notifier):
    DatabaseReminderScheduler(db).schedule_at(datetime(2025, 4, 13, 10, 0), _summary())
    now = datetime(2025, 4, 14, 0, 0)

    dispatch_due_reminders(db, notifier, now=now)
    sent_again = dispatch_due_reminders(db, notifier, now=now)

    assert sent_again == 0
    assert len(notifier.reminders) == 1


def test_dispatch_marks_invalid_payload_failed(db, notifier):
    db.add(ReminderJob(id_booking=3, run_at=datetime(2025, 4, 13, 10, 0), payload={"id": 3}))
    db.commit()

    sent = dispatch_due_reminders(db, notifier, now=datetime(2025, 4, 14, 0, 0))

    job = db.query(ReminderJob).one()
    assert sent == 0
    assert job.status == "failed"
    assert job.attempts == 1
    assert job.last_error


def test_in_process_scheduler_starts_timer_with_remaining_delay(notifier):
    started = []

    class FakeTimer:
        def __init__(self, interval, function, args=None):
            self.interval = interval
            self.function = function
            self.args = args
            self.daemon = False

        def start(self):
            started.append(self)

    scheduler = InProcessReminderScheduler(
        notifier,
        clock=lambda: datetime(2025, 4, 13, 9, 0),
        timer_factory=FakeTimer,
    )

    scheduler.schedule_at(datetime(2025, 4, 13, 10, 0), _summary())

    (timer,) = started
    assert timer.interval == 3600
    assert timer.daemon is True
    timer.function(*timer.args)
    assert notifier.reminders[0].id == 1


def test_build_reminder_scheduler_selects_backend(db, notifier):
    assert isinstance(build_reminder_scheduler(db, notifier, backend="database"), DatabaseReminderScheduler)
    assert isinstance(build_reminder_scheduler(db, notifier, backend="in_process"), InProcessReminderScheduler)
    assert isinstance(build_reminder_scheduler(db, notifier, backend="disabled"), DisabledReminderScheduler)
    with pytest.raises(ValueError):
        build_reminder_scheduler(db, notifier, backend="cron")


def test_reminder_loop_stops_when_event_is_set(db, notifier):
    calls = []

    def session_factory():
        calls.append(1)
        return db

    async def run():
        stop_event = asyncio.Event()
        task = asyncio.create_task(
            reminder_loop(
                stop_event,
                session_factory=session_factory,
                notifier=notifier,
                poll_interval=0.01,
            )
        )
        await asyncio.sleep(0.05)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(run())

    assert calls


class FailingNotifier:
    def __init__(self) -> None:
        self.calls = 0

    def send_booking_reminder(self, summary) -> None:
        self.calls += 1
        raise RuntimeError("smtp down")


def test_dispatch_marks_job_failed_when_notifier_raises(db):
    failing = FailingNotifier()
    DatabaseReminderScheduler(db).schedule_at(datetime(2025, 4, 13, 10, 0), _summary())

    sent = dispatch_due_reminders(db, failing, now=datetime(2025, 4, 14, 0, 0))

    db.expire_all()
    job = db.query(ReminderJob).one()
    assert sent == 0
    assert failing.calls == 1
    assert job.status == "failed"
    assert job.attempts == 1
    assert job.last_error == "smtp down"


def test_reminder_loop_survives_notifier_failure(db):
    failing = FailingNotifier()
    DatabaseReminderScheduler(db).schedule_at(datetime(2000, 1, 1, 10, 0), _summary())

    async def run():
        stop_event = asyncio.Event()
        task = asyncio.create_task(
            reminder_loop(
                stop_event,
                session_factory=lambda: db,
                notifier=failing,
                poll_interval=0.01,
            )
        )
        await asyncio.sleep(0.1)
        still_running = not task.done()
        stop_event.set()
        await asyncio.wait_for(task, timeout=1)
        return still_running

    assert asyncio.run(run()) is True
    assert failing.calls == 1
    assert db.query(ReminderJob).one().status == "failed"
