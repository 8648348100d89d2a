"""Notification dispatcher stub.

In-memory stub implementation for notification delivery during
development. Provides configurable success/failure behavior for testing.

Developer notes:
1. Configurable outcome per recipient, plus a default
2. Every attempt is tracked for verification
3. Can raise or stall to exercise the service's failure and timeout paths
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from secure_estate.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from secure_estate.domain.errors.wellbeing import DeliveryFailureError
from secure_estate.domain.models.emergency_notification import DeliveryOutcome
from secure_estate.domain.models.nominee import Nominee

logger = structlog.get_logger()

NOMINEE_CHANNEL: str = "nominee"
REMINDER_CHANNEL: str = "reminder"


@dataclass
class DispatchAttempt:
    """Record of a dispatch attempt.

    Attributes:
        channel: "nominee" or "reminder".
        recipient: Nominee id or user id.
        payload: The message body.
        outcome: What the stub reported (None when it raised).
        attempted_at: When the attempt happened.
    """

    channel: str
    recipient: str
    payload: dict[str, Any]
    outcome: DeliveryOutcome | None
    attempted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationDispatcherStub(NotificationDispatcherProtocol):
    """In-memory stub implementation of the notification dispatcher.

    Attributes:
        _default_outcome: Outcome for recipients without an override.
        _recipient_outcomes: recipient -> outcome override.
        _raising: Recipients for which send raises DeliveryFailureError.
        _delay_seconds: Artificial latency added to every send.
        _attempts: Tracked attempts.
        _lock: Async lock for thread-safety.
    """

    def __init__(
        self,
        default_outcome: DeliveryOutcome | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self._default_outcome = default_outcome or DeliveryOutcome.delivered()
        self._recipient_outcomes: dict[str, DeliveryOutcome] = {}
        self._raising: set[str] = set()
        self._delay_seconds = delay_seconds
        self._attempts: list[DispatchAttempt] = []
        self._lock = asyncio.Lock()

    async def send(self, nominee: Nominee, payload: dict[str, Any]) -> DeliveryOutcome:
        return await self._dispatch(NOMINEE_CHANNEL, nominee.nominee_id, payload)

    async def send_user_reminder(
        self, user_id: str, payload: dict[str, Any]
    ) -> DeliveryOutcome:
        return await self._dispatch(REMINDER_CHANNEL, user_id, payload)

    async def _dispatch(
        self, channel: str, recipient: str, payload: dict[str, Any]
    ) -> DeliveryOutcome:
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)

        if recipient in self._raising:
            async with self._lock:
                self._attempts.append(
                    DispatchAttempt(channel, recipient, payload, outcome=None)
                )
            raise DeliveryFailureError(recipient, "configured to raise (stub)")

        outcome = self._recipient_outcomes.get(recipient, self._default_outcome)
        async with self._lock:
            self._attempts.append(DispatchAttempt(channel, recipient, payload, outcome))

        logger.debug(
            "stub_dispatch",
            channel=channel,
            recipient=recipient,
            status=outcome.status.value,
        )
        return outcome

    # Configuration methods for testing

    def set_default_outcome(self, outcome: DeliveryOutcome) -> None:
        self._default_outcome = outcome

    def set_recipient_outcome(self, recipient: str, outcome: DeliveryOutcome) -> None:
        """Override the outcome for one nominee id or user id."""
        self._recipient_outcomes[recipient] = outcome

    def raise_for(self, recipient: str) -> None:
        """Make sends to ``recipient`` raise DeliveryFailureError."""
        self._raising.add(recipient)

    def set_delay(self, seconds: float) -> None:
        self._delay_seconds = seconds

    # Inspection methods for testing

    @property
    def attempts(self) -> list[DispatchAttempt]:
        return list(self._attempts)

    def nominee_attempts(self) -> list[DispatchAttempt]:
        return [a for a in self._attempts if a.channel == NOMINEE_CHANNEL]

    def reminder_attempts(self) -> list[DispatchAttempt]:
        return [a for a in self._attempts if a.channel == REMINDER_CHANNEL]

    def clear(self) -> None:
        """Clear tracked attempts and configuration."""
        self._attempts.clear()
        self._recipient_outcomes.clear()
        self._raising.clear()
        self._delay_seconds = 0.0
        self._default_outcome = DeliveryOutcome.delivered()
