"""Application services for Secure Estate."""

from secure_estate.application.services.admin_monitoring_service import (
    AdminMonitoringService,
)
from secure_estate.application.services.escalation_sweep_service import (
    EscalationSweepService,
    SweepReport,
)
from secure_estate.application.services.wellbeing_service import (
    EvaluationResult,
    WellbeingService,
    WellbeingStatusSnapshot,
)

__all__: list[str] = [
    "AdminMonitoringService",
    "EscalationSweepService",
    "EvaluationResult",
    "SweepReport",
    "WellbeingService",
    "WellbeingStatusSnapshot",
]
