"""Notification dispatcher port.

Delivers well-being reminders to users and emergency notifications to
nominees. The escalation core never retries: retry and backoff, if any,
belong to the dispatcher implementation. Implementations should report
failures through the returned DeliveryOutcome; services also treat a
raised exception or a timeout as a failed delivery.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from secure_estate.domain.models.emergency_notification import DeliveryOutcome
    from secure_estate.domain.models.nominee import Nominee


@runtime_checkable
class NotificationDispatcherProtocol(Protocol):
    """Abstract interface for notification delivery."""

    async def send(self, nominee: Nominee, payload: dict[str, Any]) -> DeliveryOutcome:
        """Send an emergency notification to a nominee.

        Args:
            nominee: Recipient.
            payload: JSON-serializable message body.

        Returns:
            The delivery outcome.
        """
        ...

    async def send_user_reminder(
        self, user_id: str, payload: dict[str, Any]
    ) -> DeliveryOutcome:
        """Send a missed check-in reminder to the monitored user.

        Args:
            user_id: The user who missed a check-in window.
            payload: JSON-serializable message body.

        Returns:
            The delivery outcome.
        """
        ...
