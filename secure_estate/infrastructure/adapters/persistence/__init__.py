"""PostgreSQL persistence adapters (SQLAlchemy async + asyncpg)."""

from secure_estate.infrastructure.adapters.persistence.postgres_directory_repository import (
    PostgresNomineeRepository,
    PostgresUserAccountRepository,
)
from secure_estate.infrastructure.adapters.persistence.postgres_wellbeing_repository import (
    PostgresWellbeingRepository,
)
from secure_estate.infrastructure.adapters.persistence.schema import (
    SCHEMA_STATEMENTS,
    create_schema,
)

__all__: list[str] = [
    "PostgresNomineeRepository",
    "PostgresUserAccountRepository",
    "PostgresWellbeingRepository",
    "SCHEMA_STATEMENTS",
    "create_schema",
]
