"""Admin monitoring API response models."""

from pydantic import BaseModel

from secure_estate.api.models.wellbeing import (
    EmergencyNotificationResponse,
    WellbeingStatusResponse,
)


class WellbeingOverviewResponse(BaseModel):
    """Every enrolled user's state, ordered by user id."""

    users: list[WellbeingStatusResponse]
    total: int


class FailedNotificationsResponse(BaseModel):
    """Emergency notifications whose delivery failed."""

    notifications: list[EmergencyNotificationResponse]
    total: int
