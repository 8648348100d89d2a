"""User account repository port (read-only for the escalation core)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from secure_estate.domain.models.user_account import UserAccount


@runtime_checkable
class UserAccountRepositoryProtocol(Protocol):
    """Abstract interface for user account lookup."""

    async def get_user(self, user_id: str) -> UserAccount | None:
        """Get a user account, or None if unknown."""
        ...
