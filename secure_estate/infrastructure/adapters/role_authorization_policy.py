"""Role-based authorization policy.

Resolves the actor's account and grants admin operations to accounts
whose role is ADMIN. Unknown and deactivated accounts are never admins.
"""

from __future__ import annotations

from secure_estate.application.ports.authorization_policy import (
    AuthorizationPolicyProtocol,
)
from secure_estate.application.ports.user_account_repository import (
    UserAccountRepositoryProtocol,
)


class RoleAuthorizationPolicy(AuthorizationPolicyProtocol):
    """Admin check backed by the user's role attribute."""

    def __init__(self, user_repository: UserAccountRepositoryProtocol) -> None:
        self._users = user_repository

    async def is_admin(self, actor_id: str) -> bool:
        account = await self._users.get_user(actor_id)
        if account is None or not account.is_active:
            return False
        return account.is_admin
