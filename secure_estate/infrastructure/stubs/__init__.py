"""In-memory stubs for development and testing."""

from secure_estate.infrastructure.stubs.nominee_repository_stub import (
    NomineeRepositoryStub,
)
from secure_estate.infrastructure.stubs.notification_dispatcher_stub import (
    DispatchAttempt,
    NotificationDispatcherStub,
)
from secure_estate.infrastructure.stubs.user_account_repository_stub import (
    UserAccountRepositoryStub,
)
from secure_estate.infrastructure.stubs.wellbeing_repository_stub import (
    WellbeingRepositoryStub,
)

__all__: list[str] = [
    "DispatchAttempt",
    "NomineeRepositoryStub",
    "NotificationDispatcherStub",
    "UserAccountRepositoryStub",
    "WellbeingRepositoryStub",
]
