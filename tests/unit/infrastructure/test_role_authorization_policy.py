"""Unit tests for RoleAuthorizationPolicy and SystemTimeAuthority."""

from datetime import timezone

import pytest

from secure_estate.domain.models.user_account import UserAccount, UserRole
from secure_estate.infrastructure.adapters import (
    RoleAuthorizationPolicy,
    SystemTimeAuthority,
)
from secure_estate.infrastructure.stubs import UserAccountRepositoryStub


@pytest.fixture
def policy() -> RoleAuthorizationPolicy:
    users = UserAccountRepositoryStub()
    users.add_admin("admin-1")
    users.add_user(UserAccount("member-1", "m@example.com", UserRole.MEMBER))
    users.add_user(UserAccount("retired", "r@example.com", UserRole.ADMIN, is_active=False))
    return RoleAuthorizationPolicy(users)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("actor", "expected"),
    [("admin-1", True), ("member-1", False), ("retired", False), ("nobody", False)],
)
async def test_is_admin(policy: RoleAuthorizationPolicy, actor: str, expected: bool) -> None:
    assert await policy.is_admin(actor) is expected


def test_system_time_is_utc_aware() -> None:
    clock = SystemTimeAuthority()
    assert clock.now().tzinfo == timezone.utc
    first = clock.monotonic()
    assert clock.monotonic() >= first
