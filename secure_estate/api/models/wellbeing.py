"""Well-being API request/response models.

Developer notes:
1. Pydantic rejects malformed bodies (422) before the service runs
2. Range checks for settings live in the domain; out-of-range values
   that pass the schema are reported as 400
3. Status is always derived, never accepted from a client
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from secure_estate.api.models.common import DateTimeWithZ
from secure_estate.application.services.wellbeing_service import (
    EvaluationResult,
    WellbeingStatusSnapshot,
)
from secure_estate.domain.models.emergency_notification import EmergencyNotification


class WellbeingStatusEnum(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    CRITICAL = "critical"


class DeliveryStatusEnum(str, Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


class UpdateSettingsRequest(BaseModel):
    """Partial settings update. Omitted fields keep their value.

    Attributes:
        check_in_interval_hours: New interval, whole hours.
        alert_ceiling: New number of tolerated missed check-ins.
    """

    model_config = ConfigDict(extra="forbid")

    check_in_interval_hours: int | None = Field(
        default=None,
        strict=True,
        gt=0,
        description="Hours between required check-ins",
    )
    alert_ceiling: int | None = Field(
        default=None,
        strict=True,
        gt=0,
        description="Missed check-ins tolerated before nominees are notified",
    )


class WellbeingStatusResponse(BaseModel):
    """A user's well-being state."""

    user_id: str
    status: WellbeingStatusEnum
    check_in_interval_hours: int
    alert_ceiling: int
    alert_counter: int
    remaining_alerts: int
    escalated: bool
    last_check_in: DateTimeWithZ
    next_due_at: DateTimeWithZ

    @classmethod
    def from_snapshot(cls, snapshot: WellbeingStatusSnapshot) -> WellbeingStatusResponse:
        record = snapshot.record
        return cls(
            user_id=record.user_id,
            status=WellbeingStatusEnum(snapshot.status.value),
            check_in_interval_hours=record.check_in_interval_hours,
            alert_ceiling=record.alert_ceiling,
            alert_counter=record.alert_counter,
            remaining_alerts=snapshot.remaining_alerts,
            escalated=record.escalated,
            last_check_in=record.last_check_in,
            next_due_at=snapshot.next_due_at,
        )


class EmergencyNotificationResponse(BaseModel):
    """One audited nominee notification."""

    notification_id: UUID
    escalation_id: UUID
    user_id: str
    nominee_id: str
    sent_at: DateTimeWithZ
    delivery_status: DeliveryStatusEnum
    detail: str | None = None

    @classmethod
    def from_domain(cls, entry: EmergencyNotification) -> EmergencyNotificationResponse:
        return cls(
            notification_id=entry.notification_id,
            escalation_id=entry.escalation_id,
            user_id=entry.user_id,
            nominee_id=entry.nominee_id,
            sent_at=entry.sent_at,
            delivery_status=DeliveryStatusEnum(entry.delivery_status.value),
            detail=entry.detail,
        )


class EvaluationResponse(BaseModel):
    """Outcome of an on-demand evaluation tick."""

    user_id: str
    actions: list[str]
    previous_counter: int
    next_counter: int
    due_at: DateTimeWithZ | None = None
    clock_skew: bool = False
    conflict: bool = False
    reminder_status: DeliveryStatusEnum | None = None
    notifications: list[EmergencyNotificationResponse] = Field(default_factory=list)
    wellbeing: WellbeingStatusResponse

    @classmethod
    def from_result(cls, result: EvaluationResult) -> EvaluationResponse:
        decision = result.decision
        return cls(
            user_id=result.user_id,
            actions=[a.value for a in decision.actions],
            previous_counter=decision.previous_counter,
            next_counter=decision.next_counter,
            due_at=decision.due_at,
            clock_skew=decision.clock_skew,
            conflict=result.conflict,
            reminder_status=(
                DeliveryStatusEnum(result.reminder_outcome.status.value)
                if result.reminder_outcome
                else None
            ),
            notifications=[
                EmergencyNotificationResponse.from_domain(n)
                for n in result.notifications
            ],
            wellbeing=WellbeingStatusResponse.from_snapshot(
                WellbeingStatusSnapshot.of(result.record)
            ),
        )
