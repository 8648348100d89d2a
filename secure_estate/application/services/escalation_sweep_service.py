"""Escalation sweep service - one scheduler pass over every enrolled user.

Each user is evaluated through WellbeingService.evaluate_user, which holds
that user's lock for the read-evaluate-persist sequence. Users are
independent, so the sweep evaluates them in parallel up to a concurrency
bound. One user's failure is logged and counted; it never stops the pass.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from structlog import get_logger

from secure_estate.application.ports.time_authority import TimeAuthorityProtocol
from secure_estate.application.ports.wellbeing_repository import (
    WellbeingRepositoryProtocol,
)
from secure_estate.application.services.wellbeing_service import (
    EvaluationResult,
    WellbeingService,
)
from secure_estate.domain.errors.wellbeing import WellbeingRecordNotFoundError

logger = get_logger()

DEFAULT_SWEEP_CONCURRENCY: int = 10


class _Unevaluated(Enum):
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SweepReport:
    """Summary of one sweep.

    Attributes:
        started_at: When the sweep began.
        finished_at: When the last evaluation finished.
        evaluated: Users whose tick completed (including no-ops).
        alerts_raised: Ticks that raised an alert.
        escalations: Ticks that escalated to nominees.
        conflicts: Ticks abandoned on a persistence conflict.
        skipped: Users removed between listing and evaluation.
        failures: Users whose evaluation raised.
        failed_deliveries: Nominee notifications recorded as failed.
    """

    started_at: datetime
    finished_at: datetime
    evaluated: int = 0
    alerts_raised: int = 0
    escalations: int = 0
    conflicts: int = 0
    skipped: int = 0
    failures: int = 0
    failed_deliveries: int = 0


class EscalationSweepService:
    """Evaluates every enrolled user once per call.

    Attributes:
        _wellbeing: Per-user evaluation service.
        _repository: Source of the enrolled user ids.
        _time: Time authority for report timestamps.
        _concurrency: Maximum users evaluated at once.
    """

    def __init__(
        self,
        wellbeing_service: WellbeingService,
        repository: WellbeingRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        concurrency: int = DEFAULT_SWEEP_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        self._wellbeing = wellbeing_service
        self._repository = repository
        self._time = time_authority
        self._concurrency = concurrency
        self._log = logger.bind(service="EscalationSweepService")

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def run_sweep(self) -> SweepReport:
        """Evaluate every enrolled user once.

        Returns:
            SweepReport with per-outcome counts.
        """
        started_at = self._time.now()
        user_ids = await self._repository.list_user_ids()
        log = self._log.bind(operation="run_sweep", user_count=len(user_ids))
        log.info("sweep_started")

        semaphore = asyncio.Semaphore(self._concurrency)
        outcomes = await asyncio.gather(
            *(self._evaluate_one(user_id, semaphore) for user_id in user_ids)
        )

        evaluated = [o for o in outcomes if isinstance(o, EvaluationResult)]
        report = SweepReport(
            started_at=started_at,
            finished_at=self._time.now(),
            evaluated=len(evaluated),
            alerts_raised=sum(1 for r in evaluated if r.alert_raised),
            escalations=sum(1 for r in evaluated if r.escalated),
            conflicts=sum(1 for r in evaluated if r.conflict),
            skipped=sum(1 for o in outcomes if o is _Unevaluated.SKIPPED),
            failures=sum(1 for o in outcomes if o is _Unevaluated.FAILED),
            failed_deliveries=sum(len(r.failed_notifications) for r in evaluated),
        )

        log.info(
            "sweep_complete",
            evaluated=report.evaluated,
            alerts_raised=report.alerts_raised,
            escalations=report.escalations,
            conflicts=report.conflicts,
            skipped=report.skipped,
            failures=report.failures,
            failed_deliveries=report.failed_deliveries,
        )
        return report

    async def _evaluate_one(
        self, user_id: str, semaphore: asyncio.Semaphore
    ) -> EvaluationResult | _Unevaluated:
        async with semaphore:
            try:
                return await self._wellbeing.evaluate_user(user_id)
            except WellbeingRecordNotFoundError:
                self._log.info("sweep_user_removed", user_id=user_id)
                return _Unevaluated.SKIPPED
            except Exception as e:
                self._log.error(
                    "sweep_user_evaluation_failed",
                    user_id=user_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return _Unevaluated.FAILED
