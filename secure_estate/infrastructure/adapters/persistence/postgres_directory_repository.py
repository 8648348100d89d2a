"""PostgreSQL read adapters for nominees and user accounts.

Both tables are owned by the surrounding application; the escalation
core only reads them.
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from secure_estate.application.ports.nominee_repository import (
    NomineeRepositoryProtocol,
)
from secure_estate.application.ports.user_account_repository import (
    UserAccountRepositoryProtocol,
)
from secure_estate.domain.models.nominee import Nominee, NomineeSet
from secure_estate.domain.models.user_account import UserAccount, UserRole


class PostgresNomineeRepository(NomineeRepositoryProtocol):
    """Reads a user's nominees in registration order."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_nominees(self, user_id: str) -> NomineeSet:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT nominee_id, user_id, name, email, relationship,
                           is_primary, phone
                    FROM nominees
                    WHERE user_id = :user_id
                    ORDER BY created_at, nominee_id
                """),
                {"user_id": user_id},
            )
            rows = result.fetchall()

        return NomineeSet(
            Nominee(
                nominee_id=row.nominee_id,
                user_id=row.user_id,
                name=row.name,
                email=row.email,
                relationship=row.relationship,
                is_primary=row.is_primary,
                phone=row.phone,
            )
            for row in rows
        )


class PostgresUserAccountRepository(UserAccountRepositoryProtocol):
    """Reads user accounts and their roles."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_user(self, user_id: str) -> UserAccount | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT user_id, email, role, is_active
                    FROM user_accounts
                    WHERE user_id = :user_id
                """),
                {"user_id": user_id},
            )
            row = result.fetchone()

        if row is None:
            return None
        return UserAccount(
            user_id=row.user_id,
            email=row.email,
            role=UserRole(row.role),
            is_active=row.is_active,
        )
