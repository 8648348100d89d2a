"""Authorization domain errors."""

from __future__ import annotations

from secure_estate.domain.exceptions import SecureEstateError


class AdminAccessDeniedError(SecureEstateError):
    """Raised when a non-admin actor calls an admin-only operation.

    Attributes:
        actor_id: The user that attempted the operation.
        operation: Name of the rejected operation.
    """

    def __init__(self, actor_id: str, operation: str) -> None:
        self.actor_id = actor_id
        self.operation = operation
        super().__init__(f"Actor {actor_id} is not permitted to {operation}")
