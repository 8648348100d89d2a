"""
Integration test configuration with testcontainers.

Provides a session-scoped PostgreSQL 16 container and a per-test session
factory with the well-being schema created and all tables truncated
after the test.

Usage:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_example(session_factory: async_sessionmaker[AsyncSession]) -> None:
        repo = PostgresWellbeingRepository(session_factory)
        ...

Note: Docker must be running; the tests are skipped otherwise.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from secure_estate.bootstrap.database import to_async_url
from secure_estate.infrastructure.adapters.persistence import create_schema

TABLES = ("emergency_notifications", "wellbeing_records", "nominees", "user_accounts")


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container, reused by every test."""
    container = PostgresContainer("postgres:16-alpine")
    try:
        container.start()
    except Exception as e:  # Docker not reachable
        pytest.skip(f"PostgreSQL container unavailable: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container: PostgresContainer) -> str:
    """postgresql+asyncpg:// URL for the container.

    testcontainers returns a psycopg2 URL by default.
    """
    sync_url = postgres_container.get_connection_url()
    return to_async_url(sync_url)


@pytest.fixture
async def session_factory(
    postgres_async_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Per-test session factory over a schema that is emptied afterwards."""
    engine = create_async_engine(postgres_async_url, echo=False)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await create_schema(factory)

    yield factory

    async with factory() as session, session.begin():
        await session.execute(text(f"TRUNCATE {', '.join(TABLES)}"))
    await engine.dispose()
