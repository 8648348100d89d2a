"""Nominee repository stub implementation."""

from __future__ import annotations

from secure_estate.application.ports.nominee_repository import (
    NomineeRepositoryProtocol,
)
from secure_estate.domain.models.nominee import Nominee, NomineeSet


class NomineeRepositoryStub(NomineeRepositoryProtocol):
    """In-memory nominee lookup (testing only).

    Nominees are kept per user in registration order.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._nominees: dict[str, list[Nominee]] = {}
        self._lookups: list[str] = []

    async def get_nominees(self, user_id: str) -> NomineeSet:
        self._lookups.append(user_id)
        return NomineeSet(self._nominees.get(user_id, []))

    def add_nominee(self, nominee: Nominee) -> None:
        """Register a nominee for its user."""
        self._nominees.setdefault(nominee.user_id, []).append(nominee)

    def remove_nominees(self, user_id: str) -> None:
        self._nominees.pop(user_id, None)

    @property
    def lookups(self) -> list[str]:
        """User ids looked up, in call order."""
        return list(self._lookups)

    def clear(self) -> None:
        """Clear all stored nominees (for test cleanup)."""
        self._nominees.clear()
        self._lookups.clear()
