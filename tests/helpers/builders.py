"""Test data builders."""

from __future__ import annotations

from datetime import datetime, timezone

from secure_estate.domain.models.nominee import Nominee
from secure_estate.domain.models.wellbeing_record import WellbeingRecord

T0 = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def make_record(
    user_id: str = "user-1",
    last_check_in: datetime = T0,
    interval: int = 24,
    ceiling: int = 3,
    counter: int = 0,
    version: int = 0,
    escalated: bool | None = None,
) -> WellbeingRecord:
    """A record; one at or above its ceiling counts as already escalated
    unless ``escalated`` says otherwise."""
    return WellbeingRecord(
        user_id=user_id,
        last_check_in=last_check_in,
        check_in_interval_hours=interval,
        alert_ceiling=ceiling,
        alert_counter=counter,
        escalated=counter >= ceiling if escalated is None else escalated,
        version=version,
        updated_at=last_check_in,
    )


def make_nominee(
    nominee_id: str,
    user_id: str = "user-1",
    is_primary: bool = False,
    relationship: str = "sibling",
) -> Nominee:
    return Nominee(
        nominee_id=nominee_id,
        user_id=user_id,
        name=f"Nominee {nominee_id}",
        email=f"{nominee_id}@example.com",
        relationship=relationship,
        is_primary=is_primary,
    )
