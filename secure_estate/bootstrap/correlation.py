"""Correlation helpers re-exported for the API layer."""

from secure_estate.infrastructure.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
]
