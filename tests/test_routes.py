from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from turfbook.core.config import settings
from turfbook.dependencies import get_db
from turfbook.main import API_PREFIX, app


def _token(user_id: int, role: str, permissions=None) -> dict:
    claims = {"sub": str(user_id), "role": role}
    if permissions is not None:
        claims["permissions"] = permissions
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


RULE = {
    "day_of_week": "monday",
    "open_time": "09:00:00",
    "close_time": "22:00:00",
    "special_price": "50.00",
    "recurrence_type": "weekly",
}


def test_company_creates_and_lists_rules(client, field):
    created = client.post(
        f"{API_PREFIX}/fields/{field.id_field}/schedule-rules",
        json=RULE,
        headers=_token(1, "company"),
    )
    listed = client.get(f"{API_PREFIX}/fields/{field.id_field}/schedule-rules")

    assert created.status_code == 201, created.json()
    assert created.json()["day_of_week"] == "monday"
    assert listed.status_code == 200
    assert [rule["id_rule"] for rule in listed.json()] == [created.json()["id_rule"]]


def test_consumer_cannot_edit_rules(client, field):
    response = client.post(
        f"{API_PREFIX}/fields/{field.id_field}/schedule-rules",
        json=RULE,
        headers=_token(1, "consumer"),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "Unauthorized"


def test_staff_without_schedule_permission_is_refused(client, field):
    response = client.post(
        f"{API_PREFIX}/fields/{field.id_field}/schedule-rules",
        json=RULE,
        headers=_token(2, "facility_manager", permissions={"canManageBookings": True}),
    )

    assert response.status_code == 403


def test_missing_token_is_rejected(client, field):
    response = client.post(f"{API_PREFIX}/fields/{field.id_field}/schedule-rules", json=RULE)

    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}


def test_invalid_rule_is_reported_with_code(client, field):
    response = client.post(
        f"{API_PREFIX}/fields/{field.id_field}/schedule-rules",
        json={**RULE, "time_blocks": [{"start_time": "07:00:00", "end_time": "10:00:00"}]},
        headers=_token(1, "company"),
    )

    assert response.status_code == 400
    assert response.json()["code"] == "InvalidTimeBlocks"


def test_delete_rule_twice(client, field, make_rule):
    rule = make_rule()
    url = f"{API_PREFIX}/fields/{field.id_field}/schedule-rules/{rule.id_rule}"

    assert client.delete(url, headers=_token(1, "company")).status_code == 204
    assert client.delete(url, headers=_token(1, "company")).status_code == 204


def test_deactivate_field(client, field, make_rule):
    make_rule()

    response = client.post(
        f"{API_PREFIX}/fields/{field.id_field}/deactivate", headers=_token(1, "company")
    )

    assert response.status_code == 200
    assert response.json()["status"] == "inactive"
    assert client.get(f"{API_PREFIX}/fields/{field.id_field}/schedule-rules").json() == []


def test_availability_and_slots(client, field, make_rule, make_booking):
    make_rule()
    make_booking(datetime(2025, 4, 14, 10, 0), datetime(2025, 4, 14, 11, 0))

    free = client.get(
        f"{API_PREFIX}/fields/{field.id_field}/availability",
        params={"at": "2025-04-14T15:00:00"},
    )
    taken = client.get(
        f"{API_PREFIX}/fields/{field.id_field}/availability",
        params={"at": "2025-04-14T10:30:00"},
    )
    slots = client.get(
        f"{API_PREFIX}/fields/{field.id_field}/slots",
        params={"date": "2025-04-14", "slot_minutes": 60},
    )

    assert free.json()["available"] is True
    assert taken.json()["reason"] == "SlotAlreadyBooked"
    assert slots.status_code == 200
    assert slots.json()[1]["status"] == "booked"


def test_availability_for_unknown_field(client):
    response = client.get(f"{API_PREFIX}/fields/404/availability", params={"at": "2025-04-14T15:00:00"})

    assert response.status_code == 404
    assert response.json()["code"] == "FieldNotFound"


def test_booking_lifecycle(client, field, consumer):
    headers = _token(consumer.id_user, "consumer")
    payload = {
        "id_field": field.id_field,
        "start_time": "2025-04-14T10:00:00",
        "end_time": "2025-04-14T11:00:00",
    }

    created = client.post(f"{API_PREFIX}/bookings", json=payload, headers=headers)
    conflict = client.post(f"{API_PREFIX}/bookings", json=payload, headers=headers)
    mine = client.get(f"{API_PREFIX}/bookings/me", headers=headers)

    assert created.status_code == 201, created.json()
    assert created.json()["status"] == "confirmed"
    assert conflict.status_code == 409
    assert conflict.json()["code"] == "FieldNotAvailable"
    assert [booking["id_booking"] for booking in mine.json()] == [created.json()["id_booking"]]

    booking_id = created.json()["id_booking"]
    cancelled = client.put(f"{API_PREFIX}/bookings/{booking_id}/cancel", headers=headers)
    again = client.put(f"{API_PREFIX}/bookings/{booking_id}/cancel", headers=headers)

    assert cancelled.status_code == 200
    assert cancelled.json()["booking"]["status"] == "cancelled"
    assert cancelled.json()["refund_amount"] == "80.00"
    assert again.status_code == 409
    assert again.json()["code"] == "AlreadyCancelled"


def test_booking_requires_consumer_role(client, field):
    response = client.post(
        f"{API_PREFIX}/bookings",
        json={
            "id_field": field.id_field,
            "start_time": "2025-04-14T10:00:00",
            "end_time": "2025-04-14T11:00:00",
        },
        headers=_token(1, "company"),
    )

    assert response.status_code == 403


def test_booking_payload_validation(client, field, consumer):
    response = client.post(
        f"{API_PREFIX}/bookings",
        json={
            "id_field": field.id_field,
            "start_time": "2025-04-14T11:00:00",
            "end_time": "2025-04-14T10:00:00",
        },
        headers=_token(consumer.id_user, "consumer"),
    )

    assert response.status_code == 422
    assert "end_time must be after start_time" in response.json()["detail"]


def test_booking_payload_mixing_offsets_is_validated(client, field, consumer):
    response = client.post(
        f"{API_PREFIX}/bookings",
        json={
            "id_field": field.id_field,
            "start_time": "2025-04-14T11:00:00+00:00",
            "end_time": "2025-04-14T10:00:00",
        },
        headers=_token(consumer.id_user, "consumer"),
    )

    assert response.status_code == 422
    assert "end_time must be after start_time" in response.json()["detail"]


def test_confirm_requires_pending_booking(client, make_booking):
    booking = make_booking(datetime(2025, 4, 14, 10, 0), datetime(2025, 4, 14, 11, 0))

    response = client.put(
        f"{API_PREFIX}/bookings/{booking.id_booking}/confirm",
        headers=_token(3, "customer_service"),
    )

    assert response.status_code == 409
    assert response.json()["code"] == "NotPending"


def test_other_users_booking_is_not_visible(client, make_booking, other_consumer):
    booking = make_booking(datetime(2025, 4, 14, 10, 0), datetime(2025, 4, 14, 11, 0))

    response = client.get(
        f"{API_PREFIX}/bookings/{booking.id_booking}",
        headers=_token(other_consumer.id_user, "consumer"),
    )

    assert response.status_code == 404
