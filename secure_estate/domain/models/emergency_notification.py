"""Emergency notification audit model.

One append-only entry per nominee per escalation event. Entries sharing an
escalation_id belong to the same breach; no nominee appears twice under
the same escalation_id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class DeliveryStatus(Enum):
    """Delivery state of a notification.

    SENT: handed to the channel, no delivery confirmation
    DELIVERED: the channel confirmed delivery
    FAILED: the channel rejected or could not be reached
    """

    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(frozen=True, eq=True)
class DeliveryOutcome:
    """What a dispatcher reports for one send.

    Attributes:
        status: SENT, DELIVERED or FAILED.
        detail: Optional channel-specific explanation.
    """

    status: DeliveryStatus
    detail: str | None = None

    @classmethod
    def delivered(cls, detail: str | None = None) -> DeliveryOutcome:
        return cls(status=DeliveryStatus.DELIVERED, detail=detail)

    @classmethod
    def sent(cls, detail: str | None = None) -> DeliveryOutcome:
        return cls(status=DeliveryStatus.SENT, detail=detail)

    @classmethod
    def failed(cls, detail: str | None = None) -> DeliveryOutcome:
        return cls(status=DeliveryStatus.FAILED, detail=detail)

    @property
    def is_failure(self) -> bool:
        return self.status == DeliveryStatus.FAILED


@dataclass(frozen=True, eq=True)
class EmergencyNotification:
    """Audit entry for one nominee notified in one escalation.

    Attributes:
        notification_id: Unique id of the audit entry.
        escalation_id: Groups the entries of a single escalation event.
        user_id: The user whose breach triggered the escalation.
        nominee_id: The nominee that was notified.
        sent_at: When the dispatch was attempted.
        delivery_status: Outcome reported by the dispatcher.
        detail: Optional failure or channel detail.
    """

    notification_id: UUID
    escalation_id: UUID
    user_id: str
    nominee_id: str
    sent_at: datetime
    delivery_status: DeliveryStatus
    detail: str | None = None

    def __post_init__(self) -> None:
        if self.sent_at.tzinfo is None:
            raise ValueError("sent_at must be timezone-aware (UTC)")

    @property
    def failed(self) -> bool:
        return self.delivery_status == DeliveryStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Serialize with explicit UUID and datetime handling."""
        return {
            "notification_id": str(self.notification_id),
            "escalation_id": str(self.escalation_id),
            "user_id": self.user_id,
            "nominee_id": self.nominee_id,
            "sent_at": self.sent_at.isoformat(),
            "delivery_status": self.delivery_status.value,
            "detail": self.detail,
        }
