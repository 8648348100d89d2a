"""Table definitions for the well-being escalation core.

Plain DDL executed through SQLAlchemy ``text()``. ``create_schema`` is
idempotent and used by development bootstrap and the integration tests;
production databases are provisioned by the surrounding application.

Invariants enforced by the database:
    - one wellbeing record per user (primary key)
    - 0 <= alert_counter <= alert_ceiling
    - an escalated record has a non-zero counter
    - a nominee appears at most once per escalation_id
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

logger = get_logger()

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS user_accounts (
        user_id TEXT PRIMARY KEY,
        email TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'member'
            CHECK (role IN ('member', 'admin')),
        is_active BOOLEAN NOT NULL DEFAULT TRUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS nominees (
        nominee_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        relationship TEXT NOT NULL,
        is_primary BOOLEAN NOT NULL DEFAULT FALSE,
        phone TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS wellbeing_records (
        user_id TEXT PRIMARY KEY,
        check_in_interval_hours INTEGER NOT NULL CHECK (check_in_interval_hours > 0),
        alert_ceiling INTEGER NOT NULL CHECK (alert_ceiling >= 1),
        alert_counter INTEGER NOT NULL DEFAULT 0,
        escalated BOOLEAN NOT NULL DEFAULT FALSE,
        last_check_in TIMESTAMPTZ NOT NULL,
        version INTEGER NOT NULL DEFAULT 0,
        updated_at TIMESTAMPTZ,
        CHECK (alert_counter >= 0 AND alert_counter <= alert_ceiling),
        CHECK (NOT escalated OR alert_counter > 0)
    )
    """,
    # tables created before the escalation marker existed
    """
    ALTER TABLE wellbeing_records
        ADD COLUMN IF NOT EXISTS escalated BOOLEAN NOT NULL DEFAULT FALSE
    """,
    """
    CREATE TABLE IF NOT EXISTS emergency_notifications (
        notification_id UUID PRIMARY KEY,
        escalation_id UUID NOT NULL,
        user_id TEXT NOT NULL,
        nominee_id TEXT NOT NULL,
        sent_at TIMESTAMPTZ NOT NULL,
        delivery_status TEXT NOT NULL
            CHECK (delivery_status IN ('sent', 'delivered', 'failed')),
        detail TEXT,
        UNIQUE (escalation_id, nominee_id)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_emergency_notifications_user
        ON emergency_notifications (user_id, sent_at)
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_nominees_user
        ON nominees (user_id)
    """,
)


async def create_schema(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Create the tables and indexes if they do not exist."""
    async with session_factory() as session, session.begin():
        for statement in SCHEMA_STATEMENTS:
            await session.execute(text(statement))
    logger.info("wellbeing_schema_ensured", statements=len(SCHEMA_STATEMENTS))
