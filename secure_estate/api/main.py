"""FastAPI application entry point for Secure Estate well-being checks."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from structlog import get_logger

from secure_estate import __version__
from secure_estate.api.middleware.logging_middleware import LoggingMiddleware
from secure_estate.api.routes.admin import router as admin_router
from secure_estate.api.routes.health import router as health_router
from secure_estate.api.routes.wellbeing import router as wellbeing_router
from secure_estate.bootstrap.logging import configure_logging
from secure_estate.bootstrap.wellbeing import get_wellbeing_components
from secure_estate.workers.escalation_sweep_worker import EscalationSweepWorker

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging, wire components and run the sweep if enabled."""
    components = get_wellbeing_components()
    configure_logging(components.config, process="api")

    worker: EscalationSweepWorker | None = None
    if components.config.sweep_enabled:
        worker = EscalationSweepWorker(
            components.sweep_service,
            tick_seconds=components.config.sweep_tick_seconds,
        )
        await worker.start()
    app.state.sweep_worker = worker

    logger.info(
        "secure_estate_started",
        version=__version__,
        environment=components.config.environment,
        sweep_enabled=worker is not None,
    )
    try:
        yield
    finally:
        if worker is not None:
            await worker.stop()
        await components.aclose()
        logger.info("secure_estate_stopped")


def create_app() -> FastAPI:
    application = FastAPI(
        title="Secure Estate Well-being API",
        description="Check-in, alert and nominee escalation for digital estates",
        version=__version__,
        lifespan=lifespan,
    )
    application.add_middleware(LoggingMiddleware)
    application.include_router(health_router)
    application.include_router(wellbeing_router)
    application.include_router(admin_router)
    return application


app = create_app()
