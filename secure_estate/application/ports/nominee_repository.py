"""Nominee repository port.

Read-only view of a user's nominees for the escalation core. Nominee
create/update/delete belongs to the surrounding application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from secure_estate.domain.models.nominee import NomineeSet


@runtime_checkable
class NomineeRepositoryProtocol(Protocol):
    """Abstract interface for nominee lookup."""

    async def get_nominees(self, user_id: str) -> NomineeSet:
        """Get a user's nominees.

        Returns:
            The user's NomineeSet; empty if none are registered.
        """
        ...
