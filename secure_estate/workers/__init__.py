"""Background workers."""

from secure_estate.workers.escalation_sweep_worker import EscalationSweepWorker

__all__: list[str] = ["EscalationSweepWorker"]
