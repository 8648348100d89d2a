"""Health check endpoint."""

from fastapi import APIRouter, Request

from secure_estate import __version__
from secure_estate.api.models.health import HealthResponse

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Return health status and whether the sweep worker is running."""
    worker = getattr(request.app.state, "sweep_worker", None)
    return HealthResponse(
        status="healthy",
        version=__version__,
        sweep_running=bool(worker and worker.running),
    )
