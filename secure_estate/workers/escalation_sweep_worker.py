"""Escalation sweep worker - the periodic scheduler for well-being checks.

Runs EscalationSweepService.run_sweep every tick. The tick is at most one
hour (the smallest interval a user can set), so every missed window is
noticed within one tick of closing. Each sweep runs under its own
correlation ID.

Runs either inside the API process (WELLBEING_SWEEP_ENABLED=true) or
standalone:

    python -m secure_estate.workers.escalation_sweep_worker

Note:
    Several processes may run sweeps against the same database; the
    repository's optimistic concurrency makes a duplicated tick for a
    user a no-op.
"""

from __future__ import annotations

import asyncio
import signal

import structlog

from secure_estate.application.services.escalation_sweep_service import (
    EscalationSweepService,
    SweepReport,
)
from secure_estate.infrastructure.observability.correlation import correlation_scope


class EscalationSweepWorker:
    """Background loop running one sweep per tick.

    Attributes:
        running: Whether the loop is currently running.
        tick_seconds: Seconds between the starts of two sweeps.

    Example:
        >>> worker = EscalationSweepWorker(sweep_service, tick_seconds=300)
        >>> await worker.start()
        >>> # ... application runs ...
        >>> await worker.stop()
    """

    def __init__(
        self,
        sweep_service: EscalationSweepService,
        tick_seconds: float,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")
        self._sweep = sweep_service
        self._tick = tick_seconds
        self._running: bool = False
        self._task: asyncio.Task[None] | None = None
        self._last_report: SweepReport | None = None
        self._log = structlog.get_logger().bind(service="escalation_sweep_worker")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def tick_seconds(self) -> float:
        return self._tick

    @property
    def last_report(self) -> SweepReport | None:
        """Report of the most recent completed sweep."""
        return self._last_report

    async def start(self) -> None:
        """Start the sweep loop. Idempotent."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        self._log.info("escalation_sweep_worker_started", tick_seconds=self._tick)

    async def stop(self) -> None:
        """Stop the loop and wait for it to finish. Safe when not running."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._log.info("escalation_sweep_worker_stopped")

    async def _run_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while self._running:
            started = loop.time()
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._log.error(
                    "escalation_sweep_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
            elapsed = loop.time() - started
            if elapsed > self._tick:
                self._log.warning(
                    "escalation_sweep_overran_tick",
                    elapsed_seconds=round(elapsed, 3),
                    tick_seconds=self._tick,
                )
            await asyncio.sleep(max(0.0, self._tick - elapsed))

    async def run_once(self) -> SweepReport:
        """Run a single sweep under a fresh correlation ID."""
        with correlation_scope() as correlation_id, structlog.contextvars.bound_contextvars(
            sweep_id=correlation_id
        ):
            report = await self._sweep.run_sweep()
        self._last_report = report
        return report


async def _run_from_env() -> None:
    """Run the worker standalone until SIGINT/SIGTERM."""
    from dotenv import load_dotenv

    from secure_estate.bootstrap.logging import configure_logging
    from secure_estate.bootstrap.wellbeing import get_wellbeing_components

    load_dotenv()
    components = get_wellbeing_components()
    configure_logging(components.config, process="sweep_worker")

    worker = EscalationSweepWorker(
        components.sweep_service,
        tick_seconds=components.config.sweep_tick_seconds,
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    await worker.start()
    try:
        await stop_event.wait()
    finally:
        await worker.stop()
        await components.aclose()


if __name__ == "__main__":
    asyncio.run(_run_from_env())
