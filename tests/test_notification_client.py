import json
from datetime import datetime
from decimal import Decimal

import httpx

from turfbook.schemas.notification import BookingSummary
from turfbook.services.notification_client import NotificationClient


def _summary(status="confirmed", refund_amount=None) -> BookingSummary:
    return BookingSummary(
        id=1,
        code="abc",
        user_email="ana@example.com",
        field_name="Cancha Norte",
        field_address="Av. Siempre Viva 742",
        start_time=datetime(2025, 4, 14, 10, 0),
        duration=60,
        total_amount=Decimal("80.00"),
        status=status,
        refund_amount=refund_amount,
    )


def _client(handler) -> NotificationClient:
    return NotificationClient(
        base_url="http://notification.local/",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_confirmation_posts_template_and_booking():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    _client(handler).send_booking_confirmation(_summary())

    (request,) = requests
    assert str(request.url) == (
        "http://notification.local/api/turfbook/v1/notification/notifications/send-email"
    )
    body = json.loads(request.content)
    assert body["template"] == "booking_confirmation"
    assert body["booking"]["user_email"] == "ana@example.com"


def test_cancelled_booking_uses_cancellation_template():
    templates = []

    def handler(request: httpx.Request) -> httpx.Response:
        templates.append(json.loads(request.content)["template"])
        return httpx.Response(200)

    client = _client(handler)
    client.send_booking_confirmation(_summary(status="cancelled", refund_amount=Decimal("80.00")))
    client.send_booking_reminder(_summary())

    assert templates == ["booking_cancellation", "booking_reminder"]


def test_http_errors_are_swallowed(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    _client(handler).send_booking_confirmation(_summary())

    assert "HTTP 503" in caplog.text


def test_unconfigured_client_skips_delivery():
    client = NotificationClient(base_url="")

    assert client.is_configured is False
    client.send_booking_reminder(_summary())
