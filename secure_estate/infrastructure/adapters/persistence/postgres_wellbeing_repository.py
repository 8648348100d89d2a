"""PostgreSQL well-being repository.

Implements WellbeingRepositoryProtocol with SQLAlchemy async sessions and
raw SQL. Optimistic concurrency uses a conditional UPDATE on the version
column; a zero-row update means another writer got there first (or the
record was deleted) and nothing is stored.

Every statement runs in its own transaction with a bounded
``statement_timeout``; a storage outage surfaces as an exception to the
caller instead of a hang.

SQL Pattern (save):
    UPDATE wellbeing_records
       SET ..., version = version + 1
     WHERE user_id = :user_id AND version = :expected_version
    RETURNING version
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from secure_estate.application.ports.wellbeing_repository import (
    WellbeingRepositoryProtocol,
)
from secure_estate.domain.errors.wellbeing import (
    PersistenceConflictError,
    WellbeingRecordNotFoundError,
)
from secure_estate.domain.models.emergency_notification import (
    DeliveryStatus,
    EmergencyNotification,
)
from secure_estate.domain.models.wellbeing_record import WellbeingRecord

logger = get_logger()

DEFAULT_STATEMENT_TIMEOUT_SECONDS: float = 5.0

_RECORD_COLUMNS = """
    user_id, check_in_interval_hours, alert_ceiling, alert_counter,
    escalated, last_check_in, version, updated_at
"""

_AUDIT_COLUMNS = """
    notification_id, escalation_id, user_id, nominee_id,
    sent_at, delivery_status, detail
"""


def _row_to_record(row: Any) -> WellbeingRecord:
    return WellbeingRecord(
        user_id=row.user_id,
        check_in_interval_hours=row.check_in_interval_hours,
        alert_ceiling=row.alert_ceiling,
        alert_counter=row.alert_counter,
        escalated=row.escalated,
        last_check_in=row.last_check_in,
        version=row.version,
        updated_at=row.updated_at,
    )


def _row_to_notification(row: Any) -> EmergencyNotification:
    return EmergencyNotification(
        notification_id=row.notification_id
        if isinstance(row.notification_id, UUID)
        else UUID(str(row.notification_id)),
        escalation_id=row.escalation_id
        if isinstance(row.escalation_id, UUID)
        else UUID(str(row.escalation_id)),
        user_id=row.user_id,
        nominee_id=row.nominee_id,
        sent_at=row.sent_at,
        delivery_status=DeliveryStatus(row.delivery_status),
        detail=row.detail,
    )


class PostgresWellbeingRepository(WellbeingRepositoryProtocol):
    """SQLAlchemy-backed well-being persistence.

    Attributes:
        _session_factory: SQLAlchemy async session factory for DB access.
        _statement_timeout_ms: Per-statement timeout applied with SET LOCAL.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        statement_timeout_seconds: float = DEFAULT_STATEMENT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the repository.

        Args:
            session_factory: SQLAlchemy async session factory.
            statement_timeout_seconds: Upper bound for any single statement.
        """
        if statement_timeout_seconds <= 0:
            raise ValueError("statement_timeout_seconds must be positive")
        self._session_factory = session_factory
        self._statement_timeout_ms = int(statement_timeout_seconds * 1000)
        self._log = logger.bind(service="PostgresWellbeingRepository")

    async def _bound(self, session: AsyncSession) -> None:
        # SET LOCAL does not accept bind parameters; the value is an int.
        await session.execute(
            text(f"SET LOCAL statement_timeout = {self._statement_timeout_ms}")
        )

    async def load_record(self, user_id: str) -> WellbeingRecord | None:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(
                text(f"""
                    SELECT {_RECORD_COLUMNS}
                    FROM wellbeing_records
                    WHERE user_id = :user_id
                """),
                {"user_id": user_id},
            )
            row = result.fetchone()
        return _row_to_record(row) if row else None

    async def create_record(self, record: WellbeingRecord) -> WellbeingRecord:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(
                text("""
                    INSERT INTO wellbeing_records (
                        user_id, check_in_interval_hours, alert_ceiling,
                        alert_counter, escalated, last_check_in, version, updated_at
                    )
                    VALUES (
                        :user_id, :interval, :ceiling,
                        :counter, :escalated, :last_check_in, 0, :updated_at
                    )
                    ON CONFLICT (user_id) DO NOTHING
                    RETURNING version
                """),
                {
                    "user_id": record.user_id,
                    "interval": record.check_in_interval_hours,
                    "ceiling": record.alert_ceiling,
                    "counter": record.alert_counter,
                    "escalated": record.escalated,
                    "last_check_in": record.last_check_in,
                    "updated_at": record.updated_at or record.last_check_in,
                },
            )
            inserted = result.fetchone()

        if inserted is None:
            self._log.warning("wellbeing_record_already_exists", user_id=record.user_id)
            raise PersistenceConflictError(
                user_id=record.user_id, expected_version=0
            )

        self._log.info("wellbeing_record_created", user_id=record.user_id)
        return record.with_version(0)

    async def save_record(self, record: WellbeingRecord) -> WellbeingRecord:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(
                text("""
                    UPDATE wellbeing_records
                       SET check_in_interval_hours = :interval,
                           alert_ceiling = :ceiling,
                           alert_counter = :counter,
                           escalated = :escalated,
                           last_check_in = :last_check_in,
                           updated_at = :updated_at,
                           version = version + 1
                     WHERE user_id = :user_id
                       AND version = :expected_version
                    RETURNING version
                """),
                {
                    "user_id": record.user_id,
                    "interval": record.check_in_interval_hours,
                    "ceiling": record.alert_ceiling,
                    "counter": record.alert_counter,
                    "escalated": record.escalated,
                    "last_check_in": record.last_check_in,
                    "updated_at": record.updated_at,
                    "expected_version": record.version,
                },
            )
            updated = result.fetchone()

            if updated is None:
                current = await session.execute(
                    text("SELECT version FROM wellbeing_records WHERE user_id = :user_id"),
                    {"user_id": record.user_id},
                )
                actual = current.scalar()

        if updated is None:
            if actual is None:
                raise WellbeingRecordNotFoundError(record.user_id)
            self._log.warning(
                "wellbeing_record_version_conflict",
                user_id=record.user_id,
                expected_version=record.version,
                actual_version=actual,
            )
            raise PersistenceConflictError(
                user_id=record.user_id,
                expected_version=record.version,
                actual_version=actual,
            )

        return record.with_version(updated.version)

    async def delete_record(self, user_id: str) -> bool:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            await session.execute(
                text("DELETE FROM emergency_notifications WHERE user_id = :user_id"),
                {"user_id": user_id},
            )
            result = await session.execute(
                text("DELETE FROM wellbeing_records WHERE user_id = :user_id"),
                {"user_id": user_id},
            )
            deleted = result.rowcount > 0

        if deleted:
            self._log.info("wellbeing_record_deleted", user_id=user_id)
        return deleted

    async def list_user_ids(self) -> list[str]:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(
                text("SELECT user_id FROM wellbeing_records ORDER BY user_id")
            )
            return [row[0] for row in result.fetchall()]

    async def list_records(self) -> list[WellbeingRecord]:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(
                text(f"""
                    SELECT {_RECORD_COLUMNS}
                    FROM wellbeing_records
                    ORDER BY user_id
                """)
            )
            return [_row_to_record(row) for row in result.fetchall()]

    async def append_notification_audit(self, entry: EmergencyNotification) -> None:
        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(
                text(f"""
                    INSERT INTO emergency_notifications ({_AUDIT_COLUMNS})
                    VALUES (
                        :notification_id, :escalation_id, :user_id, :nominee_id,
                        :sent_at, :delivery_status, :detail
                    )
                    ON CONFLICT (escalation_id, nominee_id) DO NOTHING
                """),
                {
                    "notification_id": entry.notification_id,
                    "escalation_id": entry.escalation_id,
                    "user_id": entry.user_id,
                    "nominee_id": entry.nominee_id,
                    "sent_at": entry.sent_at,
                    "delivery_status": entry.delivery_status.value,
                    "detail": entry.detail,
                },
            )
            if result.rowcount == 0:
                self._log.warning(
                    "duplicate_notification_audit_ignored",
                    escalation_id=str(entry.escalation_id),
                    nominee_id=entry.nominee_id,
                )

    async def get_notification_audit(
        self, user_id: str | None = None
    ) -> list[EmergencyNotification]:
        query = f"SELECT {_AUDIT_COLUMNS} FROM emergency_notifications"
        params: dict[str, Any] = {}
        if user_id is not None:
            query += " WHERE user_id = :user_id"
            params["user_id"] = user_id
        query += " ORDER BY sent_at, notification_id"

        async with self._session_factory() as session, session.begin():
            await self._bound(session)
            result = await session.execute(text(query), params)
            return [_row_to_notification(row) for row in result.fetchall()]
