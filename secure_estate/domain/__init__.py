"""
Domain layer - Pure business logic for Secure Estate.

This layer contains:
- Domain models (well-being record, nominees, audit entries)
- Domain services (the escalation engine)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or api.
"""

from secure_estate.domain.exceptions import SecureEstateError
from secure_estate.domain.services.escalation_engine import EscalationEngine

__all__: list[str] = [
    "EscalationEngine",
    "SecureEstateError",
]
