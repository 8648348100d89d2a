"""Well-being escalation configuration.

Defines account defaults for new well-being records, scheduler pacing and
the bounds placed on persistence and dispatch calls, with environment
variable overrides for production tuning.

Environment Variables (Record defaults):
- WELLBEING_DEFAULT_INTERVAL_HOURS: Check-in interval for new users (default: 24)
- WELLBEING_DEFAULT_ALERT_CEILING: Alerts tolerated before escalation (default: 3)

Environment Variables (Scheduler):
- WELLBEING_SWEEP_ENABLED: Run the periodic sweep in-process (default: false)
- WELLBEING_SWEEP_TICK_SECONDS: Seconds between sweeps (default: 300)
- WELLBEING_SWEEP_CONCURRENCY: Users evaluated in parallel (default: 10)

Environment Variables (Bounds):
- WELLBEING_DISPATCH_TIMEOUT_SECONDS: Per-notification timeout (default: 10.0)
- WELLBEING_PERSISTENCE_TIMEOUT_SECONDS: Lock/DB wait bound (default: 5.0)

Environment Variables (Wiring):
- NOTIFICATION_WEBHOOK_URL: Webhook for notifications (unset: stub dispatcher)
- DATABASE_URL: PostgreSQL URL (unset: in-memory repositories)
- ENVIRONMENT: production or development (default: development)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from secure_estate.domain.models.wellbeing_record import (
    DEFAULT_ALERT_CEILING,
    DEFAULT_CHECK_IN_INTERVAL_HOURS,
)

# The tick must not outlast the smallest possible interval (1 hour).
MAX_SWEEP_TICK_SECONDS: int = 3600


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_optional_str_env(key: str) -> str | None:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class WellbeingConfig:
    """Configuration for the well-being escalation core.

    Attributes:
        default_interval_hours: Interval given to newly enrolled users.
        default_alert_ceiling: Ceiling given to newly enrolled users.
        sweep_enabled: Whether the API process runs the sweep worker.
        sweep_tick_seconds: Seconds between sweeps. Must not exceed one
            hour, the smallest interval a user can configure.
        sweep_concurrency: Maximum users evaluated concurrently per sweep.
        dispatch_timeout_seconds: Bound on a single notification send.
        persistence_timeout_seconds: Bound on lock waits and DB statements.
        notification_webhook_url: Webhook target, None for the stub.
        database_url: PostgreSQL URL, None for in-memory storage.
        environment: "production" or "development".
    """

    default_interval_hours: int = DEFAULT_CHECK_IN_INTERVAL_HOURS
    default_alert_ceiling: int = DEFAULT_ALERT_CEILING
    sweep_enabled: bool = False
    sweep_tick_seconds: int = 300
    sweep_concurrency: int = 10
    dispatch_timeout_seconds: float = 10.0
    persistence_timeout_seconds: float = 5.0
    notification_webhook_url: str | None = None
    database_url: str | None = None
    environment: str = "development"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.default_interval_hours < 1:
            raise ValueError(
                f"default_interval_hours must be positive, got {self.default_interval_hours}"
            )
        if self.default_alert_ceiling < 1:
            raise ValueError(
                f"default_alert_ceiling must be at least 1, got {self.default_alert_ceiling}"
            )
        if not 1 <= self.sweep_tick_seconds <= MAX_SWEEP_TICK_SECONDS:
            raise ValueError(
                f"sweep_tick_seconds must be within [1, {MAX_SWEEP_TICK_SECONDS}], "
                f"got {self.sweep_tick_seconds}"
            )
        if self.sweep_concurrency < 1:
            raise ValueError(
                f"sweep_concurrency must be positive, got {self.sweep_concurrency}"
            )
        if self.dispatch_timeout_seconds <= 0:
            raise ValueError(
                f"dispatch_timeout_seconds must be positive, got {self.dispatch_timeout_seconds}"
            )
        if self.persistence_timeout_seconds <= 0:
            raise ValueError(
                "persistence_timeout_seconds must be positive, "
                f"got {self.persistence_timeout_seconds}"
            )
        if self.environment not in ("production", "development"):
            raise ValueError(
                f"environment must be 'production' or 'development', got {self.environment!r}"
            )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> WellbeingConfig:
        """Create config from environment variables with defaults.

        Returns:
            WellbeingConfig with values from environment or defaults.

        Raises:
            ValueError: If an overridden value is out of range.
        """
        return cls(
            default_interval_hours=_get_int_env(
                "WELLBEING_DEFAULT_INTERVAL_HOURS", DEFAULT_CHECK_IN_INTERVAL_HOURS
            ),
            default_alert_ceiling=_get_int_env(
                "WELLBEING_DEFAULT_ALERT_CEILING", DEFAULT_ALERT_CEILING
            ),
            sweep_enabled=_get_bool_env("WELLBEING_SWEEP_ENABLED", False),
            sweep_tick_seconds=_get_int_env("WELLBEING_SWEEP_TICK_SECONDS", 300),
            sweep_concurrency=_get_int_env("WELLBEING_SWEEP_CONCURRENCY", 10),
            dispatch_timeout_seconds=_get_float_env(
                "WELLBEING_DISPATCH_TIMEOUT_SECONDS", 10.0
            ),
            persistence_timeout_seconds=_get_float_env(
                "WELLBEING_PERSISTENCE_TIMEOUT_SECONDS", 5.0
            ),
            notification_webhook_url=_get_optional_str_env("NOTIFICATION_WEBHOOK_URL"),
            database_url=_get_optional_str_env("DATABASE_URL"),
            environment=os.environ.get("ENVIRONMENT", "development").strip().lower(),
        )


# Pre-defined configurations for common use cases

# Default config (code defaults, no environment lookup)
DEFAULT_WELLBEING_CONFIG = WellbeingConfig()

# Testing config with short bounds for unit tests
TEST_WELLBEING_CONFIG = WellbeingConfig(
    sweep_tick_seconds=1,
    sweep_concurrency=4,
    dispatch_timeout_seconds=0.5,
    persistence_timeout_seconds=0.5,
)
