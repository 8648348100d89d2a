"""Admin monitoring service.

Operator-facing reads over the escalation core: the per-user well-being
overview and the failed emergency deliveries that need attention. Every
operation asks the authorization policy first; there is no identity
comparison here.
"""

from __future__ import annotations

from structlog import get_logger

from secure_estate.application.ports.authorization_policy import (
    AuthorizationPolicyProtocol,
)
from secure_estate.application.ports.wellbeing_repository import (
    WellbeingRepositoryProtocol,
)
from secure_estate.application.services.wellbeing_service import (
    WellbeingStatusSnapshot,
)
from secure_estate.domain.errors.authorization import AdminAccessDeniedError
from secure_estate.domain.models.emergency_notification import EmergencyNotification

logger = get_logger()


class AdminMonitoringService:
    """Read-only monitoring for administrators."""

    def __init__(
        self,
        repository: WellbeingRepositoryProtocol,
        authorization_policy: AuthorizationPolicyProtocol,
    ) -> None:
        self._repository = repository
        self._policy = authorization_policy
        self._log = logger.bind(service="AdminMonitoringService")

    async def list_wellbeing_overview(
        self, actor_id: str
    ) -> list[WellbeingStatusSnapshot]:
        """Every user's current well-being snapshot, ordered by user id.

        Raises:
            AdminAccessDeniedError: If the actor is not an admin.
        """
        await self._require_admin(actor_id, "list_wellbeing_overview")
        records = await self._repository.list_records()
        return [
            WellbeingStatusSnapshot.of(r)
            for r in sorted(records, key=lambda r: r.user_id)
        ]

    async def list_failed_notifications(
        self, actor_id: str
    ) -> list[EmergencyNotification]:
        """Every emergency notification whose delivery failed.

        Raises:
            AdminAccessDeniedError: If the actor is not an admin.
        """
        await self._require_admin(actor_id, "list_failed_notifications")
        entries = await self._repository.get_notification_audit()
        return [e for e in entries if e.failed]

    async def _require_admin(self, actor_id: str, operation: str) -> None:
        if not await self._policy.is_admin(actor_id):
            self._log.warning(
                "admin_access_denied", actor_id=actor_id, operation=operation
            )
            raise AdminAccessDeniedError(actor_id, operation)
