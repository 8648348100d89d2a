"""Admin monitoring routes.

The acting user arrives in the X-Actor-ID header; access is decided by
the authorization policy (role-based), never by comparing identities.
"""

from fastapi import APIRouter, Depends, Request

from secure_estate.api.dependencies.wellbeing import (
    get_actor_id,
    get_admin_monitoring_service,
)
from secure_estate.api.models.admin import (
    FailedNotificationsResponse,
    WellbeingOverviewResponse,
)
from secure_estate.api.models.common import ProblemDetail
from secure_estate.api.models.wellbeing import (
    EmergencyNotificationResponse,
    WellbeingStatusResponse,
)
from secure_estate.api.problems import problem
from secure_estate.application.services.admin_monitoring_service import (
    AdminMonitoringService,
)
from secure_estate.domain.errors.authorization import AdminAccessDeniedError

router = APIRouter(prefix="/v1/admin", tags=["admin"])

_FORBIDDEN = {403: {"model": ProblemDetail, "description": "Actor is not an admin"}}


@router.get("/wellbeing", response_model=WellbeingOverviewResponse, responses=_FORBIDDEN)
async def wellbeing_overview(
    request: Request,
    actor_id: str = Depends(get_actor_id),
    service: AdminMonitoringService = Depends(get_admin_monitoring_service),
) -> WellbeingOverviewResponse:
    """Every enrolled user's current well-being state."""
    try:
        snapshots = await service.list_wellbeing_overview(actor_id)
    except AdminAccessDeniedError as e:
        raise problem(403, "forbidden", "Forbidden", str(e), request.url.path) from None
    users = [WellbeingStatusResponse.from_snapshot(s) for s in snapshots]
    return WellbeingOverviewResponse(users=users, total=len(users))


@router.get(
    "/notifications/failed",
    response_model=FailedNotificationsResponse,
    responses=_FORBIDDEN,
)
async def failed_notifications(
    request: Request,
    actor_id: str = Depends(get_actor_id),
    service: AdminMonitoringService = Depends(get_admin_monitoring_service),
) -> FailedNotificationsResponse:
    """Emergency notifications that could not be delivered."""
    try:
        entries = await service.list_failed_notifications(actor_id)
    except AdminAccessDeniedError as e:
        raise problem(403, "forbidden", "Forbidden", str(e), request.url.path) from None
    notifications = [EmergencyNotificationResponse.from_domain(e) for e in entries]
    return FailedNotificationsResponse(notifications=notifications, total=len(notifications))
