"""HTTP client for interacting with the notification microservice."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from turfbook.core.config import settings
from turfbook.schemas.notification import BookingSummary

logger = logging.getLogger(__name__)

CONFIRMATION_TEMPLATE = "booking_confirmation"
CANCELLATION_TEMPLATE = "booking_cancellation"
REMINDER_TEMPLATE = "booking_reminder"


class NotificationClient:
    """Small wrapper around the notification API endpoints.

    Delivery is fire-and-forget: transport errors are logged and never
    propagate to the booking operation that triggered them.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        configured_base = base_url if base_url is not None else settings.NOTIFICATION_SERVICE_URL
        self._base_url = configured_base.rstrip("/") if configured_base else ""
        self._timeout = timeout or settings.NOTIFICATION_SERVICE_TIMEOUT
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    def send_booking_confirmation(self, summary: BookingSummary) -> None:
        template = (
            CANCELLATION_TEMPLATE
            if (summary.status or "").lower() == "cancelled"
            else CONFIRMATION_TEMPLATE
        )
        self._send_email(template, summary)

    def send_booking_reminder(self, summary: BookingSummary) -> None:
        self._send_email(REMINDER_TEMPLATE, summary)

    def _send_email(self, template: str, summary: BookingSummary) -> None:
        if not self.is_configured:
            logger.info(
                "Notification service URL not configured; skipping %s for booking %s",
                template,
                summary.id,
            )
            return

        url = f"{self._base_url}/api/turfbook/v1/notification/notifications/send-email"
        payload: Dict[str, Any] = {
            "template": template,
            "booking": summary.model_dump(mode="json"),
        }

        try:
            if self._client is not None:
                response = self._client.post(url, json=payload, timeout=self._timeout)
            else:
                response = httpx.post(url, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Notification service returned HTTP %s while sending %s: %s",
                exc.response.status_code,
                template,
                exc.response.text,
            )
        except httpx.RequestError as exc:
            logger.warning("Failed to reach notification service: %s", exc)


__all__ = ["NotificationClient"]
