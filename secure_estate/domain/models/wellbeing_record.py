"""Well-being record domain model.

One record per user. The record holds the check-in configuration and the
consecutive missed-check-in counter. Status is derived from the counter
and the ceiling and is never stored.

Lifecycle:
    created at enrollment (counter 0, last_check_in = now)
    mutated by confirmation (reset), evaluation (increment, escalation)
    and reconfiguration (interval, ceiling, clamped counter)
    deleted only with the owning account
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

DEFAULT_CHECK_IN_INTERVAL_HOURS: int = 24
DEFAULT_ALERT_CEILING: int = 3


class WellbeingStatus(Enum):
    """Derived well-being status.

    ACTIVE: no missed check-ins (alert_counter == 0)
    PENDING: some missed check-ins, below the ceiling
    CRITICAL: ceiling reached; nominees are escalated to once per breach
    """

    ACTIVE = "active"
    PENDING = "pending"
    CRITICAL = "critical"


def derive_status(alert_counter: int, alert_ceiling: int) -> WellbeingStatus:
    """Map a counter and ceiling onto a status."""
    if alert_counter <= 0:
        return WellbeingStatus.ACTIVE
    if alert_counter < alert_ceiling:
        return WellbeingStatus.PENDING
    return WellbeingStatus.CRITICAL


@dataclass(frozen=True, eq=True)
class WellbeingRecord:
    """Per-user well-being state.

    Attributes:
        user_id: Opaque owner id, immutable.
        check_in_interval_hours: Length of each due-by window (> 0).
        alert_ceiling: Missed check-ins tolerated before escalation (>= 1).
        alert_counter: Consecutive missed check-ins, in [0, alert_ceiling].
        escalated: Nominees were escalated to for the current breach. Set
            with the escalating save and cleared only by a confirmation,
            so a ceiling change can neither skip nor repeat an escalation.
        last_check_in: Last confirmation (or enrollment) time, tz-aware.
        version: Optimistic-concurrency version, bumped on each save.
        updated_at: Time of the last mutation.

    Raises:
        ValueError: If any field violates the record invariants.
    """

    user_id: str
    last_check_in: datetime
    check_in_interval_hours: int = DEFAULT_CHECK_IN_INTERVAL_HOURS
    alert_ceiling: int = DEFAULT_ALERT_CEILING
    alert_counter: int = 0
    escalated: bool = False
    version: int = 0
    updated_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate record invariants."""
        if not isinstance(self.user_id, str) or not self.user_id.strip():
            raise ValueError("user_id must be a non-empty string")
        if self.check_in_interval_hours <= 0:
            raise ValueError("check_in_interval_hours must be > 0")
        if self.alert_ceiling < 1:
            raise ValueError("alert_ceiling must be >= 1")
        if not 0 <= self.alert_counter <= self.alert_ceiling:
            raise ValueError(
                f"alert_counter must be within [0, {self.alert_ceiling}], "
                f"got {self.alert_counter}"
            )
        if self.escalated and self.alert_counter == 0:
            raise ValueError("an escalated record must have missed check-ins")
        if self.version < 0:
            raise ValueError("version cannot be negative")
        if self.last_check_in.tzinfo is None:
            raise ValueError("last_check_in must be timezone-aware (UTC)")

    @classmethod
    def enroll(
        cls,
        user_id: str,
        now: datetime,
        check_in_interval_hours: int = DEFAULT_CHECK_IN_INTERVAL_HOURS,
        alert_ceiling: int = DEFAULT_ALERT_CEILING,
    ) -> WellbeingRecord:
        """Create the initial record for a newly created account."""
        return cls(
            user_id=user_id,
            last_check_in=now,
            check_in_interval_hours=check_in_interval_hours,
            alert_ceiling=alert_ceiling,
            alert_counter=0,
            version=0,
            updated_at=now,
        )

    @property
    def status(self) -> WellbeingStatus:
        """Derived status; never persisted."""
        return derive_status(self.alert_counter, self.alert_ceiling)

    @property
    def interval(self) -> timedelta:
        """The check-in interval as a timedelta."""
        return timedelta(hours=self.check_in_interval_hours)

    @property
    def remaining_alerts(self) -> int:
        """Missed check-ins left before nominees are escalated to."""
        return max(0, self.alert_ceiling - self.alert_counter)

    def next_due_at(self) -> datetime:
        """When the next missed window closes.

        Each raised alert opens a fresh window of one interval, so the
        k-th alert is due at last_check_in + k * interval.
        """
        return self.last_check_in + self.interval * (self.alert_counter + 1)

    def with_counter(
        self, alert_counter: int, updated_at: datetime, escalated: bool | None = None
    ) -> WellbeingRecord:
        """Return a copy with a new counter (and escalation marker, if given)."""
        return replace(
            self,
            alert_counter=alert_counter,
            escalated=self.escalated if escalated is None else escalated,
            updated_at=updated_at,
        )

    def with_settings(
        self,
        check_in_interval_hours: int,
        alert_ceiling: int,
        alert_counter: int,
        updated_at: datetime,
    ) -> WellbeingRecord:
        """Return a copy with new settings (and a possibly clamped counter)."""
        return replace(
            self,
            check_in_interval_hours=check_in_interval_hours,
            alert_ceiling=alert_ceiling,
            alert_counter=alert_counter,
            updated_at=updated_at,
        )

    def confirmed_at(self, now: datetime) -> WellbeingRecord:
        """Return a copy reset by a confirmation at ``now``; ends the breach."""
        return replace(
            self, alert_counter=0, escalated=False, last_check_in=now, updated_at=now
        )

    def with_version(self, version: int) -> WellbeingRecord:
        """Return a copy with a new persistence version."""
        return replace(self, version=version)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary with explicit field handling."""
        return {
            "user_id": self.user_id,
            "check_in_interval_hours": self.check_in_interval_hours,
            "alert_ceiling": self.alert_ceiling,
            "alert_counter": self.alert_counter,
            "escalated": self.escalated,
            "last_check_in": self.last_check_in.isoformat(),
            "status": self.status.value,
            "version": self.version,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
