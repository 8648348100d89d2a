"""Unit tests for the EscalationEngine.

Covers the check-in lifecycle scenarios end to end at the domain level:
repeated missed windows, confirmation, ceiling reduction and clock skew.
"""

from datetime import timedelta

import pytest
from unittest.mock import patch

from secure_estate.domain.errors.wellbeing import InvalidConfigurationError
from secure_estate.domain.models.escalation_decision import EscalationAction
from secure_estate.domain.models.wellbeing_record import WellbeingStatus
from secure_estate.domain.services.escalation_engine import EscalationEngine
from tests.helpers.builders import T0, make_record


@pytest.fixture
def engine() -> EscalationEngine:
    return EscalationEngine()


def hours(n: float) -> timedelta:
    return timedelta(hours=n)


class TestMissedWindows:
    """interval=24h, ceiling=3, lastCheckIn=T0."""

    def test_three_missed_windows_escalate_exactly_once(self, engine: EscalationEngine) -> None:
        record = make_record()

        first = engine.evaluate(record, T0 + hours(25))
        assert first.actions == (EscalationAction.RAISE_ALERT,)
        record = first.apply(record)
        assert record.alert_counter == 1
        assert record.status == WellbeingStatus.PENDING

        second = engine.evaluate(record, T0 + hours(49))
        assert second.actions == (EscalationAction.RAISE_ALERT,)
        record = second.apply(record)
        assert record.alert_counter == 2
        assert record.status == WellbeingStatus.PENDING

        third = engine.evaluate(record, T0 + hours(73))
        assert third.actions == (
            EscalationAction.RAISE_ALERT,
            EscalationAction.ESCALATE_TO_NOMINEES,
        )
        record = third.apply(record)
        assert record.alert_counter == 3
        assert record.escalated
        assert record.status == WellbeingStatus.CRITICAL

        later = engine.evaluate(record, T0 + hours(97))
        assert later.is_no_action
        assert later.apply(record) == record

    def test_second_tick_inside_same_window_is_no_action(self, engine: EscalationEngine) -> None:
        record = engine.evaluate(make_record(), T0 + hours(25)).apply(make_record())

        decision = engine.evaluate(record, T0 + hours(26))

        assert decision.is_no_action
        assert decision.due_at == T0 + hours(48)
        assert decision.next_counter == 1

    def test_before_first_due_time_is_no_action(self, engine: EscalationEngine) -> None:
        decision = engine.evaluate(make_record(), T0 + hours(23))
        assert decision.is_no_action
        assert decision.due_at == T0 + hours(24)

    def test_exactly_at_due_time_raises(self, engine: EscalationEngine) -> None:
        assert engine.evaluate(make_record(), T0 + hours(24)).raises_alert

    def test_long_absence_increments_by_one_per_tick(self, engine: EscalationEngine) -> None:
        decision = engine.evaluate(make_record(), T0 + hours(24 * 10))
        assert decision.previous_counter == 0
        assert decision.next_counter == 1
        assert not decision.escalates

    def test_ceiling_of_one_escalates_on_first_missed_window(
        self, engine: EscalationEngine
    ) -> None:
        decision = engine.evaluate(make_record(ceiling=1), T0 + hours(25))
        assert decision.raises_alert
        assert decision.escalates
        assert decision.apply(make_record(ceiling=1)).status == WellbeingStatus.CRITICAL

    def test_evaluate_is_deterministic(self, engine: EscalationEngine) -> None:
        record = make_record(counter=1)
        assert engine.evaluate(record, T0 + hours(50)) == engine.evaluate(
            record, T0 + hours(50)
        )

    def test_evaluate_does_not_mutate_input(self, engine: EscalationEngine) -> None:
        record = make_record()
        engine.evaluate(record, T0 + hours(25))
        assert record.alert_counter == 0


class TestConfirm:
    def test_confirm_resets_and_moves_due_time(self, engine: EscalationEngine) -> None:
        record = engine.evaluate(make_record(), T0 + hours(25)).apply(make_record())

        confirmed = engine.confirm(record, T0 + hours(30))

        assert confirmed.alert_counter == 0
        assert confirmed.last_check_in == T0 + hours(30)
        assert confirmed.next_due_at() == T0 + hours(54)
        assert engine.evaluate(confirmed, T0 + hours(49)).is_no_action

    def test_confirm_is_the_way_out_of_critical(self, engine: EscalationEngine) -> None:
        critical = make_record(counter=3)
        confirmed = engine.confirm(critical, T0 + hours(100))
        assert confirmed.status == WellbeingStatus.ACTIVE
        assert not confirmed.escalated


class TestReconfigure:
    def test_lowering_ceiling_below_counter_clamps_to_critical(
        self, engine: EscalationEngine
    ) -> None:
        record = make_record(ceiling=3, counter=2)

        with patch("secure_estate.domain.services.escalation_engine.logger") as mock_logger:
            updated = engine.reconfigure(record, new_interval=24, new_ceiling=1)

        assert updated.alert_counter == 1
        assert updated.alert_ceiling == 1
        assert updated.status == WellbeingStatus.CRITICAL
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args[0] == "alert_counter_clamped"

    def test_clamped_record_owes_exactly_one_escalation(self, engine: EscalationEngine) -> None:
        updated = engine.reconfigure(make_record(counter=2), new_interval=24, new_ceiling=1)
        assert not updated.escalated

        owed = engine.evaluate(updated, T0 + hours(60))
        assert owed.actions == (EscalationAction.ESCALATE_TO_NOMINEES,)
        assert owed.next_counter == owed.previous_counter == 1
        assert owed == engine.pending_escalation(updated, T0 + hours(60))

        escalated = owed.apply(updated)
        assert escalated.escalated
        assert engine.evaluate(escalated, T0 + hours(500)).is_no_action

    def test_nothing_owed_below_ceiling_or_once_escalated(
        self, engine: EscalationEngine
    ) -> None:
        assert engine.pending_escalation(make_record(counter=2), T0) is None
        assert engine.pending_escalation(make_record(counter=3), T0) is None
        assert engine.pending_escalation(make_record(counter=3, escalated=False), T0) is not None

    def test_raised_ceiling_reaches_critical_again_without_escalating(
        self, engine: EscalationEngine
    ) -> None:
        raised = engine.reconfigure(make_record(counter=3), new_interval=24, new_ceiling=4)
        assert raised.escalated

        decision = engine.evaluate(raised, T0 + hours(97))

        assert decision.actions == (EscalationAction.RAISE_ALERT,)
        updated = decision.apply(raised)
        assert updated.status == WellbeingStatus.CRITICAL
        assert engine.evaluate(updated, T0 + hours(200)).is_no_action

    def test_raising_ceiling_keeps_counter(self, engine: EscalationEngine) -> None:
        updated = engine.reconfigure(make_record(counter=3), new_interval=24, new_ceiling=5)
        assert updated.alert_counter == 3
        assert updated.status == WellbeingStatus.PENDING

    def test_interval_change_keeps_last_check_in(self, engine: EscalationEngine) -> None:
        updated = engine.reconfigure(make_record(), new_interval=12, new_ceiling=3)
        assert updated.last_check_in == T0
        assert updated.next_due_at() == T0 + hours(12)

    def test_updated_at_recorded(self, engine: EscalationEngine) -> None:
        updated = engine.reconfigure(make_record(), 12, 3, now=T0 + hours(2))
        assert updated.updated_at == T0 + hours(2)

    @pytest.mark.parametrize("interval", [0, -1, True, 1.5, "24"])
    def test_invalid_interval_rejected(self, engine: EscalationEngine, interval: object) -> None:
        with pytest.raises(InvalidConfigurationError) as exc_info:
            engine.reconfigure(make_record(), interval, 3)  # type: ignore[arg-type]
        assert exc_info.value.field == "check_in_interval_hours"

    @pytest.mark.parametrize("ceiling", [0, -3, False])
    def test_invalid_ceiling_rejected(self, engine: EscalationEngine, ceiling: object) -> None:
        with pytest.raises(InvalidConfigurationError) as exc_info:
            engine.reconfigure(make_record(), 24, ceiling)  # type: ignore[arg-type]
        assert exc_info.value.field == "alert_ceiling"


class TestClockSkew:
    def test_now_before_last_check_in_is_no_action(self, engine: EscalationEngine) -> None:
        record = make_record(counter=1)

        with patch("secure_estate.domain.services.escalation_engine.logger") as mock_logger:
            decision = engine.evaluate(record, T0 - hours(1))

        assert decision.is_no_action
        assert decision.clock_skew is True
        assert decision.due_at is None
        assert decision.apply(record) == record
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "clock_skew_detected"
        assert mock_logger.warning.call_args.kwargs["user_id"] == "user-1"
        assert "Clock skew for user user-1" in mock_logger.warning.call_args.kwargs["detail"]
