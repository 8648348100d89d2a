"""Well-being API dependencies.

Services come from the process-wide components built by
``secure_estate.bootstrap.wellbeing``. Tests replace them with
``set_wellbeing_components`` (stubs plus a FakeTimeAuthority).
"""

from fastapi import Header

from secure_estate.application.services.admin_monitoring_service import (
    AdminMonitoringService,
)
from secure_estate.application.services.wellbeing_service import WellbeingService
from secure_estate.bootstrap.wellbeing import get_wellbeing_components

ACTOR_HEADER = "X-Actor-ID"


def get_wellbeing_service() -> WellbeingService:
    """Get the well-being service instance."""
    return get_wellbeing_components().wellbeing_service


def get_admin_monitoring_service() -> AdminMonitoringService:
    """Get the admin monitoring service instance."""
    return get_wellbeing_components().admin_service


def get_actor_id(x_actor_id: str = Header(..., alias=ACTOR_HEADER, min_length=1)) -> str:
    """The authenticated actor, as forwarded by the gateway."""
    return x_actor_id
