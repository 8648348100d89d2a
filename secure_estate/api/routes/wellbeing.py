"""Well-being API routes.

User-facing check-in lifecycle plus an on-demand evaluation tick:

    POST /v1/users/{user_id}/wellbeing           enroll (201)
    GET  /v1/users/{user_id}/wellbeing           status
    POST /v1/users/{user_id}/wellbeing/confirm   check in
    PUT  /v1/users/{user_id}/wellbeing/settings  change interval/ceiling
    POST /v1/users/{user_id}/wellbeing/evaluate  run one tick now

The user id arrives already authenticated by the gateway in front of
this service.

Error mapping (RFC 7807):
    WellbeingRecordNotFoundError -> 404
    InvalidConfigurationError    -> 400
    PersistenceConflictError     -> 409
    record lock timeout          -> 503
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from secure_estate.api.dependencies.wellbeing import get_wellbeing_service
from secure_estate.api.models.common import ProblemDetail
from secure_estate.api.models.wellbeing import (
    EvaluationResponse,
    UpdateSettingsRequest,
    WellbeingStatusResponse,
)
from secure_estate.api.problems import problem
from secure_estate.application.services.wellbeing_service import (
    WellbeingService,
    WellbeingStatusSnapshot,
)
from secure_estate.domain.errors.wellbeing import (
    InvalidConfigurationError,
    PersistenceConflictError,
    WellbeingRecordNotFoundError,
)

router = APIRouter(prefix="/v1/users", tags=["wellbeing"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    404: {"model": ProblemDetail, "description": "User is not enrolled"},
    409: {"model": ProblemDetail, "description": "Concurrent modification"},
    503: {"model": ProblemDetail, "description": "Record busy, retry later"},
}


def _to_http(exc: Exception, instance: str) -> HTTPException:
    if isinstance(exc, WellbeingRecordNotFoundError):
        return problem(404, "wellbeing-not-found", "Wellbeing Record Not Found", str(exc), instance)
    if isinstance(exc, InvalidConfigurationError):
        return problem(400, "invalid-configuration", "Invalid Configuration", str(exc), instance)
    if isinstance(exc, PersistenceConflictError):
        return problem(409, "concurrent-modification", "Concurrent Modification", str(exc), instance)
    return problem(
        503,
        "record-busy",
        "Record Busy",
        "The record is locked by another operation; retry shortly",
        instance,
    )


@router.post(
    "/{user_id}/wellbeing",
    response_model=WellbeingStatusResponse,
    status_code=status.HTTP_201_CREATED,
    responses={503: _ERROR_RESPONSES[503]},
)
async def enroll(
    user_id: str,
    request: Request,
    service: WellbeingService = Depends(get_wellbeing_service),
) -> WellbeingStatusResponse:
    """Create the default well-being record for a new account.

    Enrolling an already enrolled user returns the existing record.
    """
    try:
        record = await service.enroll_user(user_id)
    except (PersistenceConflictError, TimeoutError) as e:
        raise _to_http(e, request.url.path) from None
    return WellbeingStatusResponse.from_snapshot(WellbeingStatusSnapshot.of(record))


@router.get(
    "/{user_id}/wellbeing",
    response_model=WellbeingStatusResponse,
    responses={404: _ERROR_RESPONSES[404]},
)
async def get_status(
    user_id: str,
    request: Request,
    service: WellbeingService = Depends(get_wellbeing_service),
) -> WellbeingStatusResponse:
    """Current status, next due time and remaining alerts."""
    try:
        snapshot = await service.get_status(user_id)
    except WellbeingRecordNotFoundError as e:
        raise _to_http(e, request.url.path) from None
    return WellbeingStatusResponse.from_snapshot(snapshot)


@router.post(
    "/{user_id}/wellbeing/confirm",
    response_model=WellbeingStatusResponse,
    responses=_ERROR_RESPONSES,
)
async def confirm(
    user_id: str,
    request: Request,
    service: WellbeingService = Depends(get_wellbeing_service),
) -> WellbeingStatusResponse:
    """Check in: resets the alert counter and restarts the interval."""
    try:
        record = await service.confirm_wellbeing(user_id)
    except (WellbeingRecordNotFoundError, PersistenceConflictError, TimeoutError) as e:
        raise _to_http(e, request.url.path) from None
    return WellbeingStatusResponse.from_snapshot(WellbeingStatusSnapshot.of(record))


@router.put(
    "/{user_id}/wellbeing/settings",
    response_model=WellbeingStatusResponse,
    responses={
        400: {"model": ProblemDetail, "description": "Setting out of range"},
        **_ERROR_RESPONSES,
    },
)
async def update_settings(
    user_id: str,
    body: UpdateSettingsRequest,
    request: Request,
    service: WellbeingService = Depends(get_wellbeing_service),
) -> WellbeingStatusResponse:
    """Change the check-in interval and/or alert ceiling.

    Lowering the ceiling to or below the current counter clamps the
    counter to the new ceiling. A breach that reaches CRITICAL this way
    and has not escalated yet notifies the nominees once.
    """
    try:
        record = await service.update_settings(
            user_id,
            check_in_interval_hours=body.check_in_interval_hours,
            alert_ceiling=body.alert_ceiling,
        )
    except (
        InvalidConfigurationError,
        WellbeingRecordNotFoundError,
        PersistenceConflictError,
        TimeoutError,
    ) as e:
        raise _to_http(e, request.url.path) from None
    return WellbeingStatusResponse.from_snapshot(WellbeingStatusSnapshot.of(record))


@router.post(
    "/{user_id}/wellbeing/evaluate",
    response_model=EvaluationResponse,
    responses={404: _ERROR_RESPONSES[404], 503: _ERROR_RESPONSES[503]},
)
async def evaluate(
    user_id: str,
    request: Request,
    service: WellbeingService = Depends(get_wellbeing_service),
) -> EvaluationResponse:
    """Run one evaluation tick for the user immediately."""
    try:
        result = await service.evaluate_user(user_id)
    except (WellbeingRecordNotFoundError, TimeoutError) as e:
        raise _to_http(e, request.url.path) from None
    return EvaluationResponse.from_result(result)
