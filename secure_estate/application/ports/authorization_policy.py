"""Authorization policy port.

Admin-only operations ask a policy instead of comparing identities. The
policy resolves the actor's permissions from whatever the deployment uses
(roles on the user entity, an external directory, ...).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AuthorizationPolicyProtocol(Protocol):
    """Abstract interface for permission checks."""

    async def is_admin(self, actor_id: str) -> bool:
        """Whether ``actor_id`` may use admin/monitoring operations.

        Unknown actors are not admins.
        """
        ...
