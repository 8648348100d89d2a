"""Shared fixtures: in-memory stubs, a frozen clock and a WellbeingService
wired on top of them. Nothing here reads the wall clock or the network;
Docker-backed fixtures live in tests/integration/conftest.py.
"""

import pytest

from secure_estate.application.services.wellbeing_service import WellbeingService
from secure_estate.infrastructure.adapters.asyncio_record_lock import AsyncioRecordLock
from secure_estate.infrastructure.stubs import (
    NomineeRepositoryStub,
    NotificationDispatcherStub,
    UserAccountRepositoryStub,
    WellbeingRepositoryStub,
)
from tests.helpers.builders import T0
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Time frozen at T0."""
    return FakeTimeAuthority(frozen_at=T0)


@pytest.fixture
def wellbeing_repository() -> WellbeingRepositoryStub:
    return WellbeingRepositoryStub()


@pytest.fixture
def nominee_repository() -> NomineeRepositoryStub:
    return NomineeRepositoryStub()


@pytest.fixture
def dispatcher() -> NotificationDispatcherStub:
    return NotificationDispatcherStub()


@pytest.fixture
def user_repository() -> UserAccountRepositoryStub:
    return UserAccountRepositoryStub()


@pytest.fixture
def record_lock() -> AsyncioRecordLock:
    return AsyncioRecordLock(timeout_seconds=1.0)


@pytest.fixture
def wellbeing_service(
    wellbeing_repository: WellbeingRepositoryStub,
    nominee_repository: NomineeRepositoryStub,
    dispatcher: NotificationDispatcherStub,
    record_lock: AsyncioRecordLock,
    fake_time_authority: FakeTimeAuthority,
) -> WellbeingService:
    """WellbeingService on stubs with 24h interval, ceiling 3."""
    return WellbeingService(
        repository=wellbeing_repository,
        nominee_repository=nominee_repository,
        dispatcher=dispatcher,
        record_lock=record_lock,
        time_authority=fake_time_authority,
        default_interval_hours=24,
        default_alert_ceiling=3,
        dispatch_timeout_seconds=0.5,
    )
