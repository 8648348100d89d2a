"""Unit tests for EscalationSweepWorker."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog

from secure_estate.application.services.escalation_sweep_service import SweepReport
from secure_estate.infrastructure.observability import get_correlation_id
from secure_estate.workers.escalation_sweep_worker import EscalationSweepWorker

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_report(evaluated: int = 0) -> SweepReport:
    return SweepReport(started_at=NOW, finished_at=NOW, evaluated=evaluated)


@pytest.fixture
def sweep_service() -> MagicMock:
    service = MagicMock()
    service.run_sweep = AsyncMock(return_value=make_report(evaluated=2))
    return service


def test_tick_must_be_positive(sweep_service: MagicMock) -> None:
    with pytest.raises(ValueError):
        EscalationSweepWorker(sweep_service, tick_seconds=0)


@pytest.mark.asyncio
async def test_run_once_uses_fresh_correlation_id(sweep_service: MagicMock) -> None:
    seen: list[tuple[str, object]] = []

    async def record_context() -> SweepReport:
        seen.append(
            (get_correlation_id(), structlog.contextvars.get_contextvars().get("sweep_id"))
        )
        return make_report(evaluated=1)

    sweep_service.run_sweep = AsyncMock(side_effect=record_context)
    worker = EscalationSweepWorker(sweep_service, tick_seconds=60)

    report = await worker.run_once()
    await worker.run_once()

    assert report.evaluated == 1
    assert worker.last_report == report
    assert seen[0][0] == seen[0][1]
    assert seen[0][0] != seen[1][0]
    assert "sweep_id" not in structlog.contextvars.get_contextvars()
    assert get_correlation_id() != seen[1][0]


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent(sweep_service: MagicMock) -> None:
    worker = EscalationSweepWorker(sweep_service, tick_seconds=60)

    await worker.start()
    await worker.start()
    assert worker.running

    await worker.stop()
    await worker.stop()
    assert not worker.running


@pytest.mark.asyncio
async def test_loop_survives_failed_sweep(sweep_service: MagicMock) -> None:
    sweep_service.run_sweep = AsyncMock(
        side_effect=[RuntimeError("database down"), make_report(evaluated=3)]
        + [make_report()] * 100
    )
    worker = EscalationSweepWorker(sweep_service, tick_seconds=0.01)

    await worker.start()
    for _ in range(100):
        if sweep_service.run_sweep.await_count >= 2:
            break
        await asyncio.sleep(0.01)
    await worker.stop()

    assert sweep_service.run_sweep.await_count >= 2
    assert worker.last_report is not None


@pytest.mark.asyncio
async def test_overrun_is_logged(sweep_service: MagicMock) -> None:
    async def slow_sweep() -> SweepReport:
        await asyncio.sleep(0.05)
        return make_report()

    sweep_service.run_sweep = AsyncMock(side_effect=slow_sweep)

    with patch("secure_estate.workers.escalation_sweep_worker.structlog") as mock_structlog:
        mock_log = MagicMock()
        mock_structlog.get_logger.return_value.bind.return_value = mock_log
        mock_structlog.contextvars = structlog.contextvars
        worker = EscalationSweepWorker(sweep_service, tick_seconds=0.01)

        await worker.start()
        for _ in range(50):
            if sweep_service.run_sweep.await_count >= 1 and mock_log.warning.called:
                break
            await asyncio.sleep(0.02)
        await worker.stop()

    events = [c.args[0] for c in mock_log.warning.call_args_list]
    assert "escalation_sweep_overran_tick" in events
