"""Escalation engine domain service.

Pure decision logic for the well-being lifecycle. Given a record and an
instant, the engine decides whether a check-in window has been missed,
whether an alert is raised, and whether nominees are escalated to. It
never performs I/O; the application layer persists and dispatches.

State machine (per record):

    ACTIVE   --(window missed, counter < ceiling-1)-->  PENDING
    PENDING  --(window missed, counter < ceiling-1)-->  PENDING
    PENDING  --(window missed, counter -> ceiling)-->   CRITICAL  [escalate]
    PENDING  --(ceiling lowered onto counter)-->        CRITICAL  [escalate]
    CRITICAL --(window missed)-->                       CRITICAL  [no-op]
    CRITICAL --(ceiling raised)-->                      PENDING
    any      --(confirm)-->                             ACTIVE

With a ceiling of 1 the first missed window goes straight from ACTIVE to
CRITICAL and escalates on that tick.

A breach escalates once. The record's ``escalated`` marker is set by the
escalating save and cleared only by a confirmation, so raising the
ceiling and missing further windows reaches CRITICAL again without a
second escalation.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from secure_estate.domain.errors.wellbeing import (
    ClockSkewError,
    InvalidConfigurationError,
)
from secure_estate.domain.models.escalation_decision import (
    EscalationAction,
    EscalationDecision,
)
from secure_estate.domain.models.wellbeing_record import WellbeingRecord

logger = structlog.get_logger()


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class EscalationEngine:
    """Decides escalation transitions for well-being records.

    The engine is stateless. ``evaluate`` is deterministic in its inputs, so
    calling it twice with the same record and instant yields equal
    decisions; the caller must persist the counter change before the next
    tick to avoid double increments.

    Example:
        >>> from datetime import datetime, timedelta, timezone
        >>> t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
        >>> record = WellbeingRecord.enroll("user-1", t0)
        >>> engine = EscalationEngine()
        >>> engine.evaluate(record, t0 + timedelta(hours=1)).is_no_action
        True
        >>> engine.evaluate(record, t0 + timedelta(hours=25)).raises_alert
        True
    """

    def evaluate(self, record: WellbeingRecord, now: datetime) -> EscalationDecision:
        """Decide what a tick at ``now`` does to ``record``.

        Args:
            record: The current persisted record.
            now: Evaluation instant (timezone-aware).

        Returns:
            The decision. ``next_counter`` is what the record's counter
            must be persisted as before any action is executed.
        """
        counter = record.alert_counter
        ceiling = record.alert_ceiling

        if now < record.last_check_in:
            skew = ClockSkewError(record.user_id, now, record.last_check_in)
            logger.warning(
                "clock_skew_detected",
                user_id=skew.user_id,
                now=skew.now.isoformat(),
                last_check_in=skew.last_check_in.isoformat(),
                detail=str(skew),
            )
            return self._no_action(record, now, due_at=None, clock_skew=True)

        due_at = record.next_due_at()

        if counter >= ceiling:
            pending = self.pending_escalation(record, now)
            return pending or self._no_action(record, now, due_at=due_at)

        if now < due_at:
            return self._no_action(record, now, due_at=due_at)

        next_counter = counter + 1
        actions: tuple[EscalationAction, ...] = (EscalationAction.RAISE_ALERT,)
        if next_counter >= ceiling and not record.escalated:
            actions += (EscalationAction.ESCALATE_TO_NOMINEES,)

        return EscalationDecision(
            user_id=record.user_id,
            evaluated_at=now,
            actions=actions,
            previous_counter=counter,
            next_counter=next_counter,
            due_at=due_at,
        )

    def pending_escalation(
        self, record: WellbeingRecord, now: datetime
    ) -> EscalationDecision | None:
        """The escalation owed by a CRITICAL record that never escalated.

        This happens when a lowered ceiling lands on the current counter.
        The decision leaves the counter unchanged and carries only
        ESCALATE_TO_NOMINEES; None when nothing is owed.
        """
        if record.escalated or record.alert_counter < record.alert_ceiling:
            return None
        return EscalationDecision(
            user_id=record.user_id,
            evaluated_at=now,
            actions=(EscalationAction.ESCALATE_TO_NOMINEES,),
            previous_counter=record.alert_counter,
            next_counter=record.alert_counter,
        )

    def confirm(self, record: WellbeingRecord, now: datetime) -> WellbeingRecord:
        """Apply an explicit well-being confirmation.

        Resets the counter, clears the escalation marker and restarts the
        check-in clock at ``now``. This is the only operation that ends a
        breach.
        """
        return record.confirmed_at(now)

    def reconfigure(
        self,
        record: WellbeingRecord,
        new_interval: int,
        new_ceiling: int,
        now: datetime | None = None,
    ) -> WellbeingRecord:
        """Change the check-in interval and alert ceiling.

        A ceiling lowered to or below the current counter clamps the
        counter to the new ceiling, which leaves the record CRITICAL; the
        escalation that transition owes is reported by
        ``pending_escalation``. The ``escalated`` marker and
        ``last_check_in`` are not touched.

        Args:
            record: The current record.
            new_interval: New interval in hours, must be > 0.
            new_ceiling: New alert ceiling, must be >= 1.
            now: Mutation time recorded as ``updated_at``.

        Raises:
            InvalidConfigurationError: If either value is out of range.
        """
        if not _is_positive_int(new_interval):
            raise InvalidConfigurationError(
                "check_in_interval_hours", new_interval, "must be a positive integer"
            )
        if not _is_positive_int(new_ceiling):
            raise InvalidConfigurationError(
                "alert_ceiling", new_ceiling, "must be an integer >= 1"
            )

        counter = record.alert_counter
        if counter > new_ceiling:
            logger.info(
                "alert_counter_clamped",
                user_id=record.user_id,
                previous_counter=counter,
                new_ceiling=new_ceiling,
            )
            counter = new_ceiling

        return record.with_settings(
            check_in_interval_hours=new_interval,
            alert_ceiling=new_ceiling,
            alert_counter=counter,
            updated_at=now if now is not None else record.updated_at,
        )

    @staticmethod
    def _no_action(
        record: WellbeingRecord,
        now: datetime,
        due_at: datetime | None,
        clock_skew: bool = False,
    ) -> EscalationDecision:
        return EscalationDecision(
            user_id=record.user_id,
            evaluated_at=now,
            actions=(EscalationAction.NO_ACTION,),
            previous_counter=record.alert_counter,
            next_counter=record.alert_counter,
            due_at=due_at,
            clock_skew=clock_skew,
        )
