"""Wellbeing repository port - persistence gateway for the escalation core.

Stores one WellbeingRecord per user and the append-only emergency
notification audit trail.

Concurrency contract:
    save_record uses optimistic concurrency on ``record.version``. The
    caller passes the record as read (plus its changes); the repository
    stores it only if the stored version still equals ``record.version``
    and returns the stored copy with the version bumped. Otherwise it
    raises PersistenceConflictError and stores nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from secure_estate.domain.models.emergency_notification import (
        EmergencyNotification,
    )
    from secure_estate.domain.models.wellbeing_record import WellbeingRecord


@runtime_checkable
class WellbeingRepositoryProtocol(Protocol):
    """Abstract interface for well-being persistence.

    Implementations:
        WellbeingRepositoryStub (in-memory, dev/test)
        PostgresWellbeingRepository (SQLAlchemy async)
    """

    async def load_record(self, user_id: str) -> WellbeingRecord | None:
        """Load a user's record.

        Returns:
            The record, or None if the user is not enrolled.
        """
        ...

    async def create_record(self, record: WellbeingRecord) -> WellbeingRecord:
        """Insert a new record.

        Returns:
            The stored record.

        Raises:
            PersistenceConflictError: If a record already exists for the user.
        """
        ...

    async def save_record(self, record: WellbeingRecord) -> WellbeingRecord:
        """Store a modified record with optimistic concurrency.

        Returns:
            The stored record with ``version`` incremented.

        Raises:
            PersistenceConflictError: If the stored version differs.
            WellbeingRecordNotFoundError: If the record no longer exists.
        """
        ...

    async def delete_record(self, user_id: str) -> bool:
        """Delete a user's record and its audit entries.

        Returns:
            True if a record was deleted.
        """
        ...

    async def list_user_ids(self) -> list[str]:
        """List the ids of every enrolled user."""
        ...

    async def list_records(self) -> list[WellbeingRecord]:
        """List every stored record (admin/monitoring reads)."""
        ...

    async def append_notification_audit(
        self, entry: EmergencyNotification
    ) -> None:
        """Append one emergency notification audit entry.

        Entries are never updated or deleted except by account deletion.
        """
        ...

    async def get_notification_audit(
        self, user_id: str | None = None
    ) -> list[EmergencyNotification]:
        """Get audit entries, optionally for one user, oldest first."""
        ...
