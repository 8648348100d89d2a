"""Unit tests for WellbeingRepositoryStub (optimistic concurrency contract)."""

from uuid import uuid4

import pytest

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
from secure_estate.infrastructure.stubs import WellbeingRepositoryStub
from tests.helpers.builders import T0, make_record


@pytest.fixture
def repo() -> WellbeingRepositoryStub:
    return WellbeingRepositoryStub()


def test_implements_protocol(repo: WellbeingRepositoryStub) -> None:
    assert isinstance(repo, WellbeingRepositoryProtocol)


@pytest.mark.asyncio
async def test_save_bumps_version(repo: WellbeingRepositoryStub) -> None:
    stored = await repo.create_record(make_record())
    saved = await repo.save_record(stored.with_counter(1, T0))

    assert saved.version == 1
    assert (await repo.load_record("user-1")) == saved


@pytest.mark.asyncio
async def test_stale_save_conflicts(repo: WellbeingRepositoryStub) -> None:
    stored = await repo.create_record(make_record())
    await repo.save_record(stored.with_counter(1, T0))

    with pytest.raises(PersistenceConflictError) as exc_info:
        await repo.save_record(stored.with_counter(1, T0))

    assert exc_info.value.expected_version == 0
    assert exc_info.value.actual_version == 1


@pytest.mark.asyncio
async def test_duplicate_create_conflicts(repo: WellbeingRepositoryStub) -> None:
    await repo.create_record(make_record())
    with pytest.raises(PersistenceConflictError):
        await repo.create_record(make_record())


@pytest.mark.asyncio
async def test_save_of_deleted_record(repo: WellbeingRepositoryStub) -> None:
    stored = await repo.create_record(make_record())
    await repo.delete_record("user-1")
    with pytest.raises(WellbeingRecordNotFoundError):
        await repo.save_record(stored)


@pytest.mark.asyncio
async def test_audit_rejects_duplicate_nominee_per_escalation(
    repo: WellbeingRepositoryStub,
) -> None:
    escalation_id = uuid4()
    for _ in range(2):
        await repo.append_notification_audit(
            EmergencyNotification(
                notification_id=uuid4(),
                escalation_id=escalation_id,
                user_id="user-1",
                nominee_id="n-1",
                sent_at=T0,
                delivery_status=DeliveryStatus.SENT,
            )
        )

    assert len(await repo.get_notification_audit("user-1")) == 1


@pytest.mark.asyncio
async def test_delete_cascades_to_audit(repo: WellbeingRepositoryStub) -> None:
    await repo.create_record(make_record())
    await repo.append_notification_audit(
        EmergencyNotification(uuid4(), uuid4(), "user-1", "n-1", T0, DeliveryStatus.FAILED)
    )

    assert await repo.delete_record("user-1") is True
    assert await repo.get_notification_audit() == []
    assert await repo.list_user_ids() == []
