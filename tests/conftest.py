from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["NOTIFICATION_SERVICE_URL"] = ""
os.environ["REMINDER_BACKEND"] = "database"
os.environ["SECRET_KEY"] = "test-secret"

from datetime import datetime, time
from decimal import Decimal
from typing import Callable, Optional

import pytest

import turfbook.models  # noqa: F401
from turfbook.core.database import Base, SessionLocal, engine
from turfbook.models import Booking, BookingStatus, Field, FieldPricing, ScheduleRule, User
from turfbook.services.audit_service import AuditService
from turfbook.services.booking_service import BookingService

FIXED_NOW = datetime(2025, 4, 1, 8, 0)


class RecordingNotifier:
    def __init__(self) -> None:
        self.confirmations = []
        self.reminders = []

    def send_booking_confirmation(self, summary) -> None:
        self.confirmations.append(summary)

    def send_booking_reminder(self, summary) -> None:
        self.reminders.append(summary)


class RecordingScheduler:
    def __init__(self) -> None:
        self.scheduled = []

    def schedule_at(self, run_at, summary) -> None:
        self.scheduled.append((run_at, summary))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def consumer(db) -> User:
    user = User(username="ana", email="ana@example.com", role="consumer")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_consumer(db) -> User:
    user = User(username="luis", email="luis@example.com", role="consumer")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def field(db) -> Field:
    record = Field(
        id_brand=1,
        field_name="Cancha Norte",
        address="Av. Siempre Viva 742",
        sport_type="football",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    db.add(FieldPricing(id_field=record.id_field, price=Decimal("80.00"), duration_in_minutes=60))
    db.commit()
    return record


@pytest.fixture
def make_rule(db, field) -> Callable[..., ScheduleRule]:
    def _make_rule(**overrides) -> ScheduleRule:
        values = {
            "id_field": field.id_field,
            "day_of_week": "monday",
            "open_time": time(9, 0),
            "close_time": time(22, 0),
            "recurrence_type": "weekly",
            "time_blocks": [],
            "created_by": 1,
        }
        values.update(overrides)
        rule = ScheduleRule(**values)
        db.add(rule)
        db.commit()
        db.refresh(rule)
        return rule

    return _make_rule


@pytest.fixture
def make_booking(db, field, consumer) -> Callable[..., Booking]:
    def _make_booking(
        start_time: datetime,
        end_time: datetime,
        *,
        status: str = BookingStatus.CONFIRMED.value,
        user_id: Optional[int] = None,
        total_amount: Decimal = Decimal("80.00"),
    ) -> Booking:
        booking = Booking(
            id_field=field.id_field,
            id_user=user_id or consumer.id_user,
            start_time=start_time,
            end_time=end_time,
            status=status,
            amount=total_amount,
            total_amount=total_amount,
            duration=int((end_time - start_time).total_seconds() // 60),
            created_by=user_id or consumer.id_user,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def booking_service(db, notifier, scheduler) -> BookingService:
    return BookingService(
        db,
        notifier=notifier,
        audit=AuditService(db),
        reminders=scheduler,
        clock=lambda: FIXED_NOW,
    )
