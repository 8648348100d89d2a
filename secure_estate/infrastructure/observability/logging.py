"""structlog setup shared by the API process and the sweep worker.

Every event carries ISO timestamp, level and, when one is active, the
request or sweep correlation ID. Outside development the events are
rendered as JSON lines, e.g. a nominee escalation:

    {"event": "nominee_escalation_triggered", "level": "warning",
     "timestamp": "2026-01-01T00:00:00Z", "correlation_id": "...",
     "service": "WellbeingService", "user_id": "...", "nominees": 2}

LOG_LEVEL (default INFO) filters both structlog and the stdlib loggers
used by httpx, sqlalchemy and uvicorn.
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from secure_estate.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def _renderer(environment: str) -> Processor:
    if environment == "development":
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog once per process.

    Args:
        environment: WELLBEING_ENVIRONMENT value. "development" gets the
            colored console renderer, anything else JSON lines.
    """
    level = _get_log_level()
    logging.basicConfig(format="%(message)s", level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            cast(Processor, correlation_id_processor),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(environment),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
