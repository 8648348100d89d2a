"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        version: Package version.
        sweep_running: Whether the in-process sweep worker is running.
    """

    status: str
    version: str
    sweep_running: bool = False
