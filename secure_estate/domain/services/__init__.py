"""Domain services for Secure Estate."""

from secure_estate.domain.services.escalation_engine import EscalationEngine

__all__: list[str] = ["EscalationEngine"]
