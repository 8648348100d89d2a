"""Property-based tests for the escalation counter.

Random tick/confirm schedules against random settings; the invariants
must hold for every sequence.
"""

from datetime import timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from secure_estate.domain.models.wellbeing_record import WellbeingRecord
from secure_estate.domain.services.escalation_engine import EscalationEngine
from tests.helpers.builders import T0

engine = EscalationEngine()

# (kind, minutes since previous step)
steps = st.lists(
    st.tuples(st.sampled_from(["tick", "confirm"]), st.integers(min_value=0, max_value=72 * 60)),
    max_size=40,
)
intervals = st.integers(min_value=1, max_value=72)
ceilings = st.integers(min_value=1, max_value=6)


@settings(max_examples=200, deadline=None)
@given(interval=intervals, ceiling=ceilings, schedule=steps)
def test_counter_stays_within_bounds_and_moves_by_at_most_one(
    interval: int, ceiling: int, schedule: list[tuple[str, int]]
) -> None:
    record = WellbeingRecord.enroll("user-p", T0, interval, ceiling)
    now = T0
    for kind, minutes in schedule:
        now += timedelta(minutes=minutes)
        if kind == "confirm":
            record = engine.confirm(record, now)
            assert record.alert_counter == 0
            continue
        decision = engine.evaluate(record, now)
        updated = decision.apply(record)
        assert 0 <= updated.alert_counter <= ceiling
        assert updated.alert_counter - record.alert_counter in (0, 1)
        assert updated.last_check_in == record.last_check_in
        record = updated


@settings(max_examples=200, deadline=None)
@given(interval=intervals, ceiling=ceilings, schedule=steps)
def test_escalation_fires_at_most_once_between_confirmations(
    interval: int, ceiling: int, schedule: list[tuple[str, int]]
) -> None:
    record = WellbeingRecord.enroll("user-p", T0, interval, ceiling)
    now = T0
    escalations_since_confirm = 0
    for kind, minutes in schedule:
        now += timedelta(minutes=minutes)
        if kind == "confirm":
            record = engine.confirm(record, now)
            escalations_since_confirm = 0
            continue
        decision = engine.evaluate(record, now)
        if decision.escalates:
            escalations_since_confirm += 1
            assert decision.next_counter == ceiling
        record = decision.apply(record)
        assert escalations_since_confirm <= 1


@settings(max_examples=100, deadline=None)
@given(
    interval=intervals,
    ceiling=ceilings,
    offset_hours=st.integers(min_value=0, max_value=24 * 30),
)
def test_repeating_a_tick_at_the_same_instant_is_idempotent(
    interval: int, ceiling: int, offset_hours: int
) -> None:
    record = WellbeingRecord.enroll("user-p", T0, interval, ceiling)
    now = T0 + timedelta(hours=offset_hours)

    once = engine.evaluate(record, now).apply(record)
    twice = engine.evaluate(once, now).apply(once)

    # The second tick sees the next window, which cannot have closed yet
    # unless the first tick was itself at least two windows late.
    if now < once.next_due_at():
        assert twice == once


@settings(max_examples=100, deadline=None)
@given(
    interval=intervals,
    ceiling=ceilings,
    counter=st.integers(min_value=0, max_value=6),
    new_ceiling=ceilings,
)
def test_reconfigure_never_leaves_counter_above_ceiling(
    interval: int, ceiling: int, counter: int, new_ceiling: int
) -> None:
    counter = min(counter, ceiling)
    record = WellbeingRecord(
        user_id="user-p",
        last_check_in=T0,
        check_in_interval_hours=interval,
        alert_ceiling=ceiling,
        alert_counter=counter,
    )
    updated = engine.reconfigure(record, interval, new_ceiling)
    assert updated.alert_counter == min(counter, new_ceiling)


# (kind, minutes since previous step, ceiling for "reconfigure")
mixed_steps = st.lists(
    st.tuples(
        st.sampled_from(["tick", "confirm", "reconfigure"]),
        st.integers(min_value=0, max_value=72 * 60),
        ceilings,
    ),
    max_size=40,
)


@settings(max_examples=200, deadline=None)
@given(interval=intervals, ceiling=ceilings, schedule=mixed_steps)
def test_ceiling_changes_never_skip_or_repeat_an_escalation(
    interval: int, ceiling: int, schedule: list[tuple[str, int, int]]
) -> None:
    record = WellbeingRecord.enroll("user-p", T0, interval, ceiling)
    now = T0
    escalations_since_confirm = 0
    for kind, minutes, new_ceiling in schedule:
        now += timedelta(minutes=minutes)
        if kind == "confirm":
            record = engine.confirm(record, now)
            escalations_since_confirm = 0
            continue
        if kind == "reconfigure":
            record = engine.reconfigure(record, interval, new_ceiling, now=now)
            continue
        decision = engine.evaluate(record, now)
        if decision.escalates:
            escalations_since_confirm += 1
            assert decision.next_counter == record.alert_ceiling
        record = decision.apply(record)
        assert escalations_since_confirm <= 1
        if record.alert_counter >= record.alert_ceiling:
            assert record.escalated
