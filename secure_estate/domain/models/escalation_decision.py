"""Escalation decision returned by the escalation engine.

A decision is an immutable description of what a tick should do. It does
not perform side effects; the application service persists the counter
change it carries and then executes the actions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from secure_estate.domain.models.wellbeing_record import WellbeingRecord


class EscalationAction(Enum):
    """Actions a tick can produce.

    RAISE_ALERT and ESCALATE_TO_NOMINEES fire together on the tick that
    pushes the counter to the ceiling. ESCALATE_TO_NOMINEES fires alone
    when a lowered ceiling lands on the counter of a breach that has not
    escalated yet.
    """

    NO_ACTION = "no_action"
    RAISE_ALERT = "raise_alert"
    ESCALATE_TO_NOMINEES = "escalate_to_nominees"


@dataclass(frozen=True, eq=True)
class EscalationDecision:
    """Outcome of evaluating one record at one instant.

    Attributes:
        user_id: Owner of the evaluated record.
        evaluated_at: The ``now`` the decision was computed for.
        actions: Ordered actions; ``(NO_ACTION,)`` when nothing happens.
        previous_counter: Counter before the decision.
        next_counter: Counter after the decision is applied.
        due_at: Close of the window that was checked, if computed.
        clock_skew: True when ``now`` preceded the last check-in.
    """

    user_id: str
    evaluated_at: datetime
    actions: tuple[EscalationAction, ...]
    previous_counter: int
    next_counter: int
    due_at: datetime | None = None
    clock_skew: bool = False

    def __post_init__(self) -> None:
        if not self.actions:
            raise ValueError("actions cannot be empty")
        if self.next_counter < self.previous_counter:
            raise ValueError("a decision never decrements the alert counter")

    @property
    def is_no_action(self) -> bool:
        return self.actions == (EscalationAction.NO_ACTION,)

    @property
    def raises_alert(self) -> bool:
        return EscalationAction.RAISE_ALERT in self.actions

    @property
    def escalates(self) -> bool:
        return EscalationAction.ESCALATE_TO_NOMINEES in self.actions

    def apply(self, record: WellbeingRecord) -> WellbeingRecord:
        """Return ``record`` with this decision's counter change applied.

        An escalating decision also marks the breach as escalated.
        """
        if record.user_id != self.user_id:
            raise ValueError(
                f"decision for {self.user_id} applied to record of {record.user_id}"
            )
        escalated = record.escalated or self.escalates
        if self.next_counter == record.alert_counter and escalated == record.escalated:
            return record
        return record.with_counter(
            self.next_counter, updated_at=self.evaluated_at, escalated=escalated
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "evaluated_at": self.evaluated_at.isoformat(),
            "actions": [a.value for a in self.actions],
            "previous_counter": self.previous_counter,
            "next_counter": self.next_counter,
            "due_at": self.due_at.isoformat() if self.due_at else None,
            "clock_skew": self.clock_skew,
        }
