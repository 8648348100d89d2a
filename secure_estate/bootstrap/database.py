"""Process-wide asyncpg engine for the PostgreSQL repositories.

The well-being, nominee and account repositories share one engine and
one ``async_sessionmaker``; ``WellbeingComponents.aclose`` disposes it
on shutdown.
"""

from __future__ import annotations

import os

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

logger = get_logger()

ASYNC_DRIVER = "postgresql+asyncpg"

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _parse_postgres_url(url: str) -> URL:
    if not url:
        raise ValueError("DATABASE_URL is empty")
    try:
        parsed = make_url(url)
    except ArgumentError as exc:
        raise ValueError(f"DATABASE_URL is not a valid URL: {exc}") from exc
    if parsed.get_backend_name() not in ("postgresql", "postgres"):
        raise ValueError(
            f"DATABASE_URL must point at PostgreSQL, got {parsed.get_backend_name()!r}"
        )
    return parsed.set(drivername=ASYNC_DRIVER)


def to_async_url(url: str) -> str:
    """Rewrite any PostgreSQL URL (postgres://, postgresql+psycopg2://, ...)
    to use the asyncpg driver.

    Raises:
        ValueError: If ``url`` is empty, unparsable or not PostgreSQL.
    """
    return _parse_postgres_url(url).render_as_string(hide_password=False)


def mask_password(url: str) -> str:
    """``url`` with its password replaced by ``***``."""
    return make_url(url).render_as_string(hide_password=True)


def get_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory, creating the engine on first use.

    ``database_url`` falls back to DATABASE_URL. SQLALCHEMY_ECHO=true
    logs every statement.
    """
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    url = _parse_postgres_url(database_url or os.environ.get("DATABASE_URL", ""))
    echo = os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes")
    logger.info(
        "database_engine_created",
        component="database_bootstrap",
        url=url.render_as_string(hide_password=True),
        echo=echo,
    )
    _engine = create_async_engine(url, echo=echo, pool_pre_ping=True)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


async def close_database_engine() -> None:
    global _engine, _session_factory
    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
