"""Unit tests for AdminMonitoringService (role-based access)."""

from uuid import uuid4

import pytest

from secure_estate.application.services.admin_monitoring_service import (
    AdminMonitoringService,
)
from secure_estate.domain.errors.authorization import AdminAccessDeniedError
from secure_estate.domain.models.emergency_notification import (
    DeliveryStatus,
    EmergencyNotification,
)
from secure_estate.domain.models.user_account import UserAccount, UserRole
from secure_estate.infrastructure.adapters.role_authorization_policy import (
    RoleAuthorizationPolicy,
)
from secure_estate.infrastructure.stubs import (
    UserAccountRepositoryStub,
    WellbeingRepositoryStub,
)
from tests.helpers.builders import T0, make_record


@pytest.fixture
def admin_service(
    wellbeing_repository: WellbeingRepositoryStub,
    user_repository: UserAccountRepositoryStub,
) -> AdminMonitoringService:
    user_repository.add_admin("admin-1")
    user_repository.add_user(UserAccount("member-1", "member@example.com"))
    user_repository.add_user(
        UserAccount("former-admin", "former@example.com", UserRole.ADMIN, is_active=False)
    )
    return AdminMonitoringService(
        wellbeing_repository, RoleAuthorizationPolicy(user_repository)
    )


def audit_entry(user_id: str, nominee_id: str, status: DeliveryStatus) -> EmergencyNotification:
    return EmergencyNotification(
        notification_id=uuid4(),
        escalation_id=uuid4(),
        user_id=user_id,
        nominee_id=nominee_id,
        sent_at=T0,
        delivery_status=status,
    )


@pytest.mark.asyncio
async def test_overview_lists_every_user_sorted(
    admin_service: AdminMonitoringService,
    wellbeing_repository: WellbeingRepositoryStub,
) -> None:
    await wellbeing_repository.create_record(make_record("user-b", counter=3))
    await wellbeing_repository.create_record(make_record("user-a"))

    overview = await admin_service.list_wellbeing_overview("admin-1")

    assert [s.record.user_id for s in overview] == ["user-a", "user-b"]
    assert [s.status.value for s in overview] == ["active", "critical"]


@pytest.mark.asyncio
async def test_failed_notifications_filters_audit(
    admin_service: AdminMonitoringService,
    wellbeing_repository: WellbeingRepositoryStub,
) -> None:
    await wellbeing_repository.append_notification_audit(
        audit_entry("user-a", "n-1", DeliveryStatus.DELIVERED)
    )
    await wellbeing_repository.append_notification_audit(
        audit_entry("user-a", "n-2", DeliveryStatus.FAILED)
    )

    failed = await admin_service.list_failed_notifications("admin-1")

    assert [e.nominee_id for e in failed] == ["n-2"]


@pytest.mark.asyncio
@pytest.mark.parametrize("actor_id", ["member-1", "former-admin", "unknown"])
async def test_non_admins_are_denied(
    admin_service: AdminMonitoringService, actor_id: str
) -> None:
    with pytest.raises(AdminAccessDeniedError) as exc_info:
        await admin_service.list_wellbeing_overview(actor_id)
    assert exc_info.value.actor_id == actor_id

    with pytest.raises(AdminAccessDeniedError):
        await admin_service.list_failed_notifications(actor_id)
