"""Webhook notification dispatcher (httpx).

POSTs each notification as JSON to a single configured webhook, which
fans out to e-mail/SMS in the deployment. The dispatcher never raises
for delivery problems: every transport error or non-2xx status becomes a
FAILED outcome, and the service records it in the audit trail.

Status mapping:
    200, 201, 204 -> DELIVERED (the receiver confirmed hand-off)
    202           -> SENT (accepted for asynchronous delivery)
    anything else -> FAILED
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from secure_estate.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from secure_estate.domain.models.emergency_notification import DeliveryOutcome
from secure_estate.domain.models.nominee import Nominee

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS: float = 10.0


class WebhookNotificationDispatcher(NotificationDispatcherProtocol):
    """Delivers notifications through an HTTP webhook.

    Attributes:
        _url: Webhook endpoint.
        _client: Shared async HTTP client with a bounded timeout.
        _owns_client: Whether aclose() should close the client.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            webhook_url: HTTPS endpoint receiving the notifications.
            timeout_seconds: Request timeout (connect, read, write, pool).
            client: Optional preconfigured client (tests pass one built on
                httpx.MockTransport).
        """
        if not webhook_url:
            raise ValueError("webhook_url cannot be empty")
        self._url = webhook_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds)
        )
        self._log = logger.bind(service="WebhookNotificationDispatcher")

    async def send(self, nominee: Nominee, payload: dict[str, Any]) -> DeliveryOutcome:
        body = {
            "channel": "nominee_emergency",
            "recipient": {
                "nominee_id": nominee.nominee_id,
                "name": nominee.name,
                "email": nominee.email,
                "phone": nominee.phone,
            },
            "payload": payload,
        }
        return await self._post(nominee.nominee_id, body)

    async def send_user_reminder(
        self, user_id: str, payload: dict[str, Any]
    ) -> DeliveryOutcome:
        body = {
            "channel": "user_reminder",
            "recipient": {"user_id": user_id},
            "payload": payload,
        }
        return await self._post(user_id, body)

    async def aclose(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, recipient: str, body: dict[str, Any]) -> DeliveryOutcome:
        try:
            response = await self._client.post(self._url, json=body)
        except httpx.TimeoutException:
            self._log.warning("webhook_timeout", recipient=recipient)
            return DeliveryOutcome.failed("webhook timed out")
        except httpx.HTTPError as e:
            self._log.warning(
                "webhook_transport_error",
                recipient=recipient,
                error=str(e),
                error_type=type(e).__name__,
            )
            return DeliveryOutcome.failed(f"{type(e).__name__}: {e}")

        if response.status_code == 202:
            return DeliveryOutcome.sent(f"HTTP {response.status_code}")
        if response.is_success:
            return DeliveryOutcome.delivered(f"HTTP {response.status_code}")

        self._log.warning(
            "webhook_rejected",
            recipient=recipient,
            status_code=response.status_code,
        )
        return DeliveryOutcome.failed(f"HTTP {response.status_code}")
