"""User account repository stub implementation."""

from __future__ import annotations

from secure_estate.application.ports.user_account_repository import (
    UserAccountRepositoryProtocol,
)
from secure_estate.domain.models.user_account import UserAccount, UserRole


class UserAccountRepositoryStub(UserAccountRepositoryProtocol):
    """In-memory user accounts (testing only)."""

    def __init__(self, accounts: list[UserAccount] | None = None) -> None:
        self._accounts: dict[str, UserAccount] = {
            a.user_id: a for a in (accounts or [])
        }

    async def get_user(self, user_id: str) -> UserAccount | None:
        return self._accounts.get(user_id)

    def add_user(self, account: UserAccount) -> None:
        self._accounts[account.user_id] = account

    def add_admin(self, user_id: str, email: str | None = None) -> UserAccount:
        """Register an active admin account and return it."""
        account = UserAccount(
            user_id=user_id,
            email=email or f"{user_id}@example.com",
            role=UserRole.ADMIN,
        )
        self._accounts[user_id] = account
        return account

    def clear(self) -> None:
        self._accounts.clear()
