"""Process-start logging for the API and the standalone sweep worker."""

from __future__ import annotations

from structlog import get_logger

from secure_estate.config.wellbeing_config import WellbeingConfig
from secure_estate.infrastructure.observability import configure_structlog

logger = get_logger()


def configure_logging(config: WellbeingConfig, *, process: str) -> None:
    """Configure structlog for ``config.environment`` and log the effective
    settings once.

    Connection strings and the webhook URL are not logged; only which
    backend is in use.
    """
    configure_structlog(environment=config.environment)
    logger.info(
        "wellbeing_config_loaded",
        process=process,
        environment=config.environment,
        default_interval_hours=config.default_interval_hours,
        default_alert_ceiling=config.default_alert_ceiling,
        sweep_enabled=config.sweep_enabled,
        sweep_tick_seconds=config.sweep_tick_seconds,
        sweep_concurrency=config.sweep_concurrency,
        storage="postgres" if config.database_url else "memory",
        dispatcher="webhook" if config.notification_webhook_url else "stub",
    )


__all__ = ["configure_logging"]
