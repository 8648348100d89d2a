"""Domain errors for Secure Estate.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from SecureEstateError.
"""

from secure_estate.domain.errors.authorization import AdminAccessDeniedError
from secure_estate.domain.errors.wellbeing import (
    ClockSkewError,
    DeliveryFailureError,
    InvalidConfigurationError,
    PersistenceConflictError,
    WellbeingRecordNotFoundError,
)

__all__: list[str] = [
    "AdminAccessDeniedError",
    "ClockSkewError",
    "DeliveryFailureError",
    "InvalidConfigurationError",
    "PersistenceConflictError",
    "WellbeingRecordNotFoundError",
]
