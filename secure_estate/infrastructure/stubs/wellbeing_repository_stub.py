"""Wellbeing repository stub implementation.

In-memory implementation of WellbeingRepositoryProtocol for development
and tests. Honors the same optimistic-concurrency contract as the
PostgreSQL adapter so service tests exercise conflict handling.

WARNING: This is a development stub. State is lost on restart.
"""

from __future__ import annotations

import asyncio

import structlog

from secure_estate.application.ports.wellbeing_repository import (
    WellbeingRepositoryProtocol,
)
from secure_estate.domain.errors.wellbeing import (
    PersistenceConflictError,
    WellbeingRecordNotFoundError,
)
from secure_estate.domain.models.emergency_notification import EmergencyNotification
from secure_estate.domain.models.wellbeing_record import WellbeingRecord

logger = structlog.get_logger()

# DEV_MODE_WATERMARK
DEV_MODE_WATERMARK: str = "DEV_STUB:WellbeingRepositoryStub:v1"


class WellbeingRepositoryStub(WellbeingRepositoryProtocol):
    """In-memory store for well-being records and the notification audit.

    Test helpers:
        force_conflict_on_next_save: make the next save_record for a user
            lose its race, as if another writer had saved first.
        fail_audit_appends: make append_notification_audit raise.
        save_count: number of successful saves.

    Attributes:
        _records: user_id -> stored record.
        _audit: Append-only audit entries, in insertion order.
        _lock: Async lock for thread-safety.
    """

    def __init__(self) -> None:
        self._records: dict[str, WellbeingRecord] = {}
        self._audit: list[EmergencyNotification] = []
        self._forced_conflicts: set[str] = set()
        self._fail_audit = False
        self._save_count = 0
        self._lock = asyncio.Lock()
        logger.warning(
            "wellbeing_repository_stub_initialized",
            watermark=DEV_MODE_WATERMARK,
            message="DEV MODE: in-memory wellbeing storage",
        )

    async def load_record(self, user_id: str) -> WellbeingRecord | None:
        async with self._lock:
            return self._records.get(user_id)

    async def create_record(self, record: WellbeingRecord) -> WellbeingRecord:
        async with self._lock:
            if record.user_id in self._records:
                raise PersistenceConflictError(
                    user_id=record.user_id,
                    expected_version=0,
                    actual_version=self._records[record.user_id].version,
                )
            stored = record.with_version(0)
            self._records[record.user_id] = stored
            return stored

    async def save_record(self, record: WellbeingRecord) -> WellbeingRecord:
        async with self._lock:
            current = self._records.get(record.user_id)
            if current is None:
                raise WellbeingRecordNotFoundError(record.user_id)

            if record.user_id in self._forced_conflicts:
                self._forced_conflicts.discard(record.user_id)
                bumped = current.with_version(current.version + 1)
                self._records[record.user_id] = bumped
                raise PersistenceConflictError(
                    user_id=record.user_id,
                    expected_version=record.version,
                    actual_version=bumped.version,
                )

            if current.version != record.version:
                raise PersistenceConflictError(
                    user_id=record.user_id,
                    expected_version=record.version,
                    actual_version=current.version,
                )

            stored = record.with_version(current.version + 1)
            self._records[record.user_id] = stored
            self._save_count += 1
            return stored

    async def delete_record(self, user_id: str) -> bool:
        async with self._lock:
            self._audit = [e for e in self._audit if e.user_id != user_id]
            return self._records.pop(user_id, None) is not None

    async def list_user_ids(self) -> list[str]:
        async with self._lock:
            return sorted(self._records)

    async def list_records(self) -> list[WellbeingRecord]:
        async with self._lock:
            return [self._records[k] for k in sorted(self._records)]

    async def append_notification_audit(self, entry: EmergencyNotification) -> None:
        async with self._lock:
            if self._fail_audit:
                raise ConnectionError("audit storage unavailable (stub)")
            duplicate = any(
                e.escalation_id == entry.escalation_id
                and e.nominee_id == entry.nominee_id
                for e in self._audit
            )
            if not duplicate:
                self._audit.append(entry)

    async def get_notification_audit(
        self, user_id: str | None = None
    ) -> list[EmergencyNotification]:
        async with self._lock:
            if user_id is None:
                return list(self._audit)
            return [e for e in self._audit if e.user_id == user_id]

    # Test helpers

    def force_conflict_on_next_save(self, user_id: str) -> None:
        """Make the next save for ``user_id`` fail as a lost race."""
        self._forced_conflicts.add(user_id)

    def fail_audit_appends(self, fail: bool = True) -> None:
        """Make audit appends raise until reset."""
        self._fail_audit = fail

    def put_record(self, record: WellbeingRecord) -> None:
        """Store a record directly, bypassing version checks."""
        self._records[record.user_id] = record

    @property
    def save_count(self) -> int:
        return self._save_count

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self._records.clear()
        self._audit.clear()
        self._forced_conflicts.clear()
        self._fail_audit = False
        self._save_count = 0
