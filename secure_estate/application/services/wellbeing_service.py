"""Well-being application service.

Orchestrates the escalation engine against its collaborators: the
persistence gateway, the nominee directory, the notification dispatcher,
the per-user record lock and the time authority.

Architecture Pattern:
    evaluate_user(user_id):
      ├─ record_lock.hold(user_id)          # one tick per user at a time
      │   ├─ repository.load_record()
      │   ├─ engine.evaluate(record, now)
      │   └─ repository.save_record()       # counter persisted FIRST
      ├─ dispatcher.send_user_reminder()    # on RAISE_ALERT
      └─ for nominee in primary-first order: # on ESCALATE_TO_NOMINEES
          ├─ dispatcher.send()
          └─ repository.append_notification_audit()

    confirm_wellbeing(user_id) / update_settings(...):
      ├─ record_lock.hold(user_id)
      │   ├─ repository.load_record()
      │   ├─ engine.confirm() / engine.reconfigure()
      │   └─ repository.save_record()       # with escalation marker, if owed
      └─ nominees notified                  # lowered ceiling reached counter

Delivery failures never roll back the saved record: a channel that always
fails must still leave an audited emergency attempt behind.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from structlog import get_logger

from secure_estate.application.ports.nominee_repository import (
    NomineeRepositoryProtocol,
)
from secure_estate.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from secure_estate.application.ports.record_lock import RecordLockProtocol
from secure_estate.application.ports.time_authority import TimeAuthorityProtocol
from secure_estate.application.ports.wellbeing_repository import (
    WellbeingRepositoryProtocol,
)
from secure_estate.domain.errors.wellbeing import (
    DeliveryFailureError,
    PersistenceConflictError,
    WellbeingRecordNotFoundError,
)
from secure_estate.domain.models.emergency_notification import (
    DeliveryOutcome,
    EmergencyNotification,
)
from secure_estate.domain.models.escalation_decision import EscalationDecision
from secure_estate.domain.models.nominee import Nominee
from secure_estate.domain.models.wellbeing_record import (
    DEFAULT_ALERT_CEILING,
    DEFAULT_CHECK_IN_INTERVAL_HOURS,
    WellbeingRecord,
    WellbeingStatus,
)
from secure_estate.domain.services.escalation_engine import EscalationEngine

logger = get_logger()

DEFAULT_DISPATCH_TIMEOUT_SECONDS: float = 10.0


@dataclass(frozen=True)
class WellbeingStatusSnapshot:
    """Read-only view of a user's well-being state.

    Attributes:
        record: The stored record.
        status: Derived status.
        next_due_at: When the next check-in window closes.
        remaining_alerts: Missed windows left before escalation.
    """

    record: WellbeingRecord
    status: WellbeingStatus
    next_due_at: datetime
    remaining_alerts: int

    @classmethod
    def of(cls, record: WellbeingRecord) -> WellbeingStatusSnapshot:
        return cls(
            record=record,
            status=record.status,
            next_due_at=record.next_due_at(),
            remaining_alerts=record.remaining_alerts,
        )


@dataclass(frozen=True)
class EvaluationResult:
    """Result of one evaluation tick for one user.

    Attributes:
        user_id: The evaluated user.
        decision: The engine's decision.
        record: The record after the tick (the saved copy when mutated).
        reminder_outcome: Outcome of the user reminder, if one was sent.
        notifications: Audit entries written for an escalation.
        conflict: True when the save lost a concurrency race and the tick
            was abandoned without side effects.
    """

    user_id: str
    decision: EscalationDecision
    record: WellbeingRecord
    reminder_outcome: DeliveryOutcome | None = None
    notifications: tuple[EmergencyNotification, ...] = field(default_factory=tuple)
    conflict: bool = False

    @property
    def alert_raised(self) -> bool:
        return not self.conflict and self.decision.raises_alert

    @property
    def escalated(self) -> bool:
        return not self.conflict and self.decision.escalates

    @property
    def failed_notifications(self) -> list[EmergencyNotification]:
        return [n for n in self.notifications if n.failed]


class WellbeingService:
    """Application service for the well-being check-in lifecycle.

    Provides the user-facing commands (enroll, confirm, update settings,
    status) and the per-user evaluation tick used by the scheduler.

    Attributes:
        _repository: Persistence gateway for records and audit entries.
        _nominees: Read-only nominee directory.
        _dispatcher: Notification channel.
        _lock: Per-user mutual exclusion.
        _time: Time authority.
        _engine: Pure escalation decision logic.
    """

    def __init__(
        self,
        repository: WellbeingRepositoryProtocol,
        nominee_repository: NomineeRepositoryProtocol,
        dispatcher: NotificationDispatcherProtocol,
        record_lock: RecordLockProtocol,
        time_authority: TimeAuthorityProtocol,
        engine: EscalationEngine | None = None,
        default_interval_hours: int = DEFAULT_CHECK_IN_INTERVAL_HOURS,
        default_alert_ceiling: int = DEFAULT_ALERT_CEILING,
        dispatch_timeout_seconds: float = DEFAULT_DISPATCH_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Persistence gateway.
            nominee_repository: Nominee lookup.
            dispatcher: Notification delivery.
            record_lock: Per-user lock.
            time_authority: Source of "now".
            engine: Escalation engine. Defaults to a new EscalationEngine().
            default_interval_hours: Interval for newly enrolled users.
            default_alert_ceiling: Ceiling for newly enrolled users.
            dispatch_timeout_seconds: Bound on each notification send.
        """
        self._repository = repository
        self._nominees = nominee_repository
        self._dispatcher = dispatcher
        self._lock = record_lock
        self._time = time_authority
        self._engine = engine or EscalationEngine()
        self._default_interval_hours = default_interval_hours
        self._default_alert_ceiling = default_alert_ceiling
        self._dispatch_timeout = dispatch_timeout_seconds
        self._log = logger.bind(service="WellbeingService")

    # ------------------------------------------------------------------
    # User-facing commands
    # ------------------------------------------------------------------

    async def enroll_user(self, user_id: str) -> WellbeingRecord:
        """Create the default record for a new account.

        Idempotent: an already enrolled user's record is returned unchanged.
        """
        log = self._log.bind(operation="enroll_user", user_id=user_id)
        async with self._lock.hold(user_id):
            existing = await self._repository.load_record(user_id)
            if existing is not None:
                log.debug("user_already_enrolled")
                return existing

            record = WellbeingRecord.enroll(
                user_id=user_id,
                now=self._time.now(),
                check_in_interval_hours=self._default_interval_hours,
                alert_ceiling=self._default_alert_ceiling,
            )
            stored = await self._repository.create_record(record)

        log.info(
            "user_enrolled",
            check_in_interval_hours=stored.check_in_interval_hours,
            alert_ceiling=stored.alert_ceiling,
        )
        return stored

    async def remove_user(self, user_id: str) -> bool:
        """Delete a user's record and audit trail (account deletion)."""
        async with self._lock.hold(user_id):
            deleted = await self._repository.delete_record(user_id)
        self._log.info("user_removed", user_id=user_id, deleted=deleted)
        return deleted

    async def confirm_wellbeing(self, user_id: str) -> WellbeingRecord:
        """Record an explicit check-in.

        Raises:
            WellbeingRecordNotFoundError: If the user is not enrolled.
            PersistenceConflictError: If another writer saved first.
        """
        log = self._log.bind(operation="confirm_wellbeing", user_id=user_id)
        async with self._lock.hold(user_id):
            record = await self._load_or_raise(user_id)
            previous_status = record.status
            confirmed = self._engine.confirm(record, self._time.now())
            stored = await self._repository.save_record(confirmed)

        log.info(
            "wellbeing_confirmed",
            previous_status=previous_status.value,
            previous_counter=record.alert_counter,
            last_check_in=stored.last_check_in.isoformat(),
        )
        return stored

    async def update_settings(
        self,
        user_id: str,
        check_in_interval_hours: int | None = None,
        alert_ceiling: int | None = None,
    ) -> WellbeingRecord:
        """Change a user's interval and/or ceiling.

        Omitted values keep their current setting. Lowering the ceiling
        onto the counter of a breach that has not escalated yet makes the
        record CRITICAL and notifies the nominees once, after the save.

        Raises:
            InvalidConfigurationError: If a value is out of range.
            WellbeingRecordNotFoundError: If the user is not enrolled.
            PersistenceConflictError: If another writer saved first.
        """
        log = self._log.bind(operation="update_settings", user_id=user_id)
        async with self._lock.hold(user_id):
            record = await self._load_or_raise(user_id)
            interval = (
                record.check_in_interval_hours
                if check_in_interval_hours is None
                else check_in_interval_hours
            )
            ceiling = record.alert_ceiling if alert_ceiling is None else alert_ceiling
            now = self._time.now()
            reconfigured = self._engine.reconfigure(record, interval, ceiling, now=now)
            decision = self._engine.pending_escalation(reconfigured, now)
            if decision is not None:
                reconfigured = decision.apply(reconfigured)
            stored = await self._repository.save_record(reconfigured)

        log.info(
            "wellbeing_settings_updated",
            check_in_interval_hours=stored.check_in_interval_hours,
            alert_ceiling=stored.alert_ceiling,
            alert_counter=stored.alert_counter,
            status=stored.status.value,
            escalation_owed=decision is not None,
        )
        if decision is not None:
            await self._escalate_to_nominees(stored, decision)
        return stored

    async def get_status(self, user_id: str) -> WellbeingStatusSnapshot:
        """Read a user's current state (no lock, read-only).

        Raises:
            WellbeingRecordNotFoundError: If the user is not enrolled.
        """
        record = await self._load_or_raise(user_id)
        return WellbeingStatusSnapshot.of(record)

    # ------------------------------------------------------------------
    # Scheduler tick
    # ------------------------------------------------------------------

    async def evaluate_user(self, user_id: str) -> EvaluationResult:
        """Run one evaluation tick for a user.

        The counter change is persisted before any notification is sent.
        A lost concurrency race abandons the tick; the next pass
        re-evaluates from the stored state.

        Raises:
            WellbeingRecordNotFoundError: If the user is not enrolled.
        """
        log = self._log.bind(operation="evaluate_user", user_id=user_id)

        async with self._lock.hold(user_id):
            record = await self._load_or_raise(user_id)
            decision = self._engine.evaluate(record, self._time.now())

            if decision.is_no_action:
                log.debug(
                    "wellbeing_no_action",
                    status=record.status.value,
                    due_at=decision.due_at.isoformat() if decision.due_at else None,
                    clock_skew=decision.clock_skew,
                )
                return EvaluationResult(user_id=user_id, decision=decision, record=record)

            try:
                saved = await self._repository.save_record(decision.apply(record))
            except PersistenceConflictError as e:
                log.warning(
                    "persistence_conflict_tick_abandoned",
                    expected_version=e.expected_version,
                    actual_version=e.actual_version,
                )
                return EvaluationResult(
                    user_id=user_id,
                    decision=decision,
                    record=record,
                    conflict=True,
                )

        reminder_outcome: DeliveryOutcome | None = None
        if decision.raises_alert:
            log.info(
                "wellbeing_alert_raised",
                alert_counter=saved.alert_counter,
                alert_ceiling=saved.alert_ceiling,
                status=saved.status.value,
                due_at=decision.due_at.isoformat() if decision.due_at else None,
            )
            reminder_outcome = await self._send_reminder(saved, decision)

        notifications: tuple[EmergencyNotification, ...] = ()
        if decision.escalates:
            notifications = await self._escalate_to_nominees(saved, decision)

        return EvaluationResult(
            user_id=user_id,
            decision=decision,
            record=saved,
            reminder_outcome=reminder_outcome,
            notifications=notifications,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load_or_raise(self, user_id: str) -> WellbeingRecord:
        record = await self._repository.load_record(user_id)
        if record is None:
            raise WellbeingRecordNotFoundError(user_id)
        return record

    async def _send_reminder(
        self, record: WellbeingRecord, decision: EscalationDecision
    ) -> DeliveryOutcome:
        payload = {
            "type": "wellbeing_check_in_missed",
            "user_id": record.user_id,
            "alert_counter": record.alert_counter,
            "alert_ceiling": record.alert_ceiling,
            "last_check_in": record.last_check_in.isoformat(),
            "evaluated_at": decision.evaluated_at.isoformat(),
        }
        outcome = await self._bounded_send(
            record.user_id,
            lambda: self._dispatcher.send_user_reminder(record.user_id, payload),
        )
        if outcome.is_failure:
            self._log.warning(
                "user_reminder_delivery_failed",
                user_id=record.user_id,
                detail=outcome.detail,
            )
        return outcome

    async def _escalate_to_nominees(
        self, record: WellbeingRecord, decision: EscalationDecision
    ) -> tuple[EmergencyNotification, ...]:
        escalation_id = uuid4()
        log = self._log.bind(
            operation="escalate_to_nominees",
            user_id=record.user_id,
            escalation_id=str(escalation_id),
        )

        nominees = (await self._nominees.get_nominees(record.user_id)).in_notification_order()
        if not nominees:
            log.error("nominee_escalation_without_nominees")
            return ()

        log.warning("nominee_escalation_triggered", nominee_count=len(nominees))

        entries: list[EmergencyNotification] = []
        for nominee in nominees:
            entry = await self._notify_nominee(nominee, record, decision, escalation_id)
            entries.append(entry)

        failed = sum(1 for e in entries if e.failed)
        log.info(
            "nominee_escalation_complete",
            notified=len(entries) - failed,
            failed=failed,
        )
        return tuple(entries)

    async def _notify_nominee(
        self,
        nominee: Nominee,
        record: WellbeingRecord,
        decision: EscalationDecision,
        escalation_id: UUID,
    ) -> EmergencyNotification:
        payload = {
            "type": "wellbeing_emergency",
            "escalation_id": str(escalation_id),
            "user_id": record.user_id,
            "nominee_id": nominee.nominee_id,
            "nominee_name": nominee.name,
            "is_primary": nominee.is_primary,
            "missed_check_ins": record.alert_counter,
            "last_check_in": record.last_check_in.isoformat(),
            "escalated_at": decision.evaluated_at.isoformat(),
        }
        sent_at = self._time.now()
        outcome = await self._bounded_send(
            nominee.nominee_id, lambda: self._dispatcher.send(nominee, payload)
        )

        entry = EmergencyNotification(
            notification_id=uuid4(),
            escalation_id=escalation_id,
            user_id=record.user_id,
            nominee_id=nominee.nominee_id,
            sent_at=sent_at,
            delivery_status=outcome.status,
            detail=outcome.detail,
        )

        if outcome.is_failure:
            self._log.error(
                "notification_delivery_failed",
                user_id=record.user_id,
                nominee_id=nominee.nominee_id,
                escalation_id=str(escalation_id),
                detail=outcome.detail,
            )

        try:
            await self._repository.append_notification_audit(entry)
        except Exception as e:
            # Keep notifying the remaining nominees; the entry is in the log.
            self._log.error(
                "notification_audit_append_failed",
                user_id=record.user_id,
                nominee_id=nominee.nominee_id,
                escalation_id=str(escalation_id),
                delivery_status=entry.delivery_status.value,
                error=str(e),
                error_type=type(e).__name__,
            )
        return entry

    async def _bounded_send(
        self,
        recipient: str,
        send: Callable[[], Awaitable[DeliveryOutcome]],
    ) -> DeliveryOutcome:
        """Run one dispatcher call, mapping timeouts and errors to FAILED."""
        try:
            return await asyncio.wait_for(send(), timeout=self._dispatch_timeout)
        except TimeoutError:
            return DeliveryOutcome.failed(
                f"timed out after {self._dispatch_timeout}s"
            )
        except DeliveryFailureError as e:
            return DeliveryOutcome.failed(e.reason)
        except Exception as e:
            self._log.error(
                "dispatcher_raised",
                recipient=recipient,
                error=str(e),
                error_type=type(e).__name__,
            )
            return DeliveryOutcome.failed(f"{type(e).__name__}: {e}")

