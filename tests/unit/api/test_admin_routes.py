"""Unit tests for the admin monitoring routes."""

import pytest
from fastapi.testclient import TestClient

from secure_estate.bootstrap.wellbeing import WellbeingComponents
from secure_estate.domain.models.emergency_notification import DeliveryOutcome
from secure_estate.domain.models.user_account import UserAccount, UserRole
from tests.helpers.builders import make_nominee
from tests.helpers.fake_time_authority import FakeTimeAuthority

ADMIN = {"X-Actor-ID": "admin-1"}


@pytest.fixture(autouse=True)
def accounts(components: WellbeingComponents) -> None:
    users = components.user_repository
    users.add_admin("admin-1")  # type: ignore[attr-defined]
    users.add_user(UserAccount("member-1", "member@example.com", UserRole.MEMBER))  # type: ignore[attr-defined]


def test_overview_lists_enrolled_users(client: TestClient) -> None:
    client.post("/v1/users/user-b/wellbeing")
    client.post("/v1/users/user-a/wellbeing")

    response = client.get("/v1/admin/wellbeing", headers=ADMIN)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [u["user_id"] for u in data["users"]] == ["user-a", "user-b"]


def test_failed_notifications_after_escalation(
    client: TestClient,
    api_clock: FakeTimeAuthority,
    components: WellbeingComponents,
) -> None:
    nominees = components.nominee_repository
    nominees.add_nominee(make_nominee("n-ok", is_primary=True))  # type: ignore[attr-defined]
    nominees.add_nominee(make_nominee("n-bounce"))  # type: ignore[attr-defined]
    components.dispatcher.set_recipient_outcome(  # type: ignore[attr-defined]
        "n-bounce", DeliveryOutcome.failed("mailbox full")
    )
    client.post("/v1/users/user-1/wellbeing")
    client.put("/v1/users/user-1/wellbeing/settings", json={"alert_ceiling": 1})
    api_clock.advance(hours=25)
    client.post("/v1/users/user-1/wellbeing/evaluate")

    data = client.get("/v1/admin/notifications/failed", headers=ADMIN).json()

    assert data["total"] == 1
    entry = data["notifications"][0]
    assert entry["nominee_id"] == "n-bounce"
    assert entry["delivery_status"] == "failed"
    assert entry["detail"] == "mailbox full"
    assert entry["sent_at"] == "2026-01-02T01:00:00Z"


@pytest.mark.parametrize("actor", ["member-1", "stranger"])
@pytest.mark.parametrize("path", ["/v1/admin/wellbeing", "/v1/admin/notifications/failed"])
def test_non_admins_get_403(client: TestClient, actor: str, path: str) -> None:
    response = client.get(path, headers={"X-Actor-ID": actor})

    assert response.status_code == 403
    assert response.json()["detail"]["type"].endswith("/forbidden")


def test_missing_actor_header_is_422(client: TestClient) -> None:
    assert client.get("/v1/admin/wellbeing").status_code == 422
