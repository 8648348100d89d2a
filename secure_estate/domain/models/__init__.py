"""Domain models for Secure Estate."""

from secure_estate.domain.models.emergency_notification import (
    DeliveryOutcome,
    DeliveryStatus,
    EmergencyNotification,
)
from secure_estate.domain.models.escalation_decision import (
    EscalationAction,
    EscalationDecision,
)
from secure_estate.domain.models.nominee import Nominee, NomineeSet
from secure_estate.domain.models.user_account import UserAccount, UserRole
from secure_estate.domain.models.wellbeing_record import (
    DEFAULT_ALERT_CEILING,
    DEFAULT_CHECK_IN_INTERVAL_HOURS,
    WellbeingRecord,
    WellbeingStatus,
    derive_status,
)

__all__: list[str] = [
    "DEFAULT_ALERT_CEILING",
    "DEFAULT_CHECK_IN_INTERVAL_HOURS",
    "DeliveryOutcome",
    "DeliveryStatus",
    "EmergencyNotification",
    "EscalationAction",
    "EscalationDecision",
    "Nominee",
    "NomineeSet",
    "UserAccount",
    "UserRole",
    "WellbeingRecord",
    "WellbeingStatus",
    "derive_status",
]
