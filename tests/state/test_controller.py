"""Tests for the position lifecycle controller."""

import pytest
from unittest.mock import Mock

from optcycle.data.models import PositionView
from optcycle.errors import DataQualityError, TemporalDataError
from optcycle.execution.base import RecordingSink
from optcycle.state.controller import PositionLifecycleController
from optcycle.state.models import ControllerParams, EngagementSubState, LegSpec, LifecycleState


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def controller(stock, put_800, call_600, sink):
    return PositionLifecycleController(
        legs=[LegSpec(stock, 0), LegSpec(put_800, -1), LegSpec(call_600, -1)],
        sink=sink,
        run_id="GOOG"
    )


class TestPositionLifecycleController:

    def test_requires_legs(self):
        with pytest.raises(ValueError):
            PositionLifecycleController(legs=[])

    def test_rejects_duplicate_symbols(self, stock):
        with pytest.raises(ValueError):
            PositionLifecycleController(legs=[LegSpec(stock, 1), LegSpec(stock, -1)])

    def test_stale_quote_then_engagement(self, controller, sink, stock, put_800, call_600, snapshot_at):
        intents = controller.on_snapshot(
            snapshot_at(31, {stock: 0, put_800: 5, call_600: 3}), PositionView()
        )
        assert intents == []
        assert controller.lifecycle_state == LifecycleState.FLAT

        intents = controller.on_snapshot(
            snapshot_at(32, {stock: 100, put_800: 5, call_600: 3}), PositionView()
        )
        assert [(i.symbol, i.quantity) for i in intents] == [(put_800, -1), (call_600, -1)]
        assert sink.intents == intents
        assert controller.lifecycle_state == LifecycleState.ENGAGED

    def test_idempotent_while_engaged(self, controller, sink, stock, put_800, call_600, snapshot_at):
        prices = {stock: 100, put_800: 5, call_600: 3}
        controller.on_snapshot(snapshot_at(31, prices), PositionView())

        # Fills not yet confirmed
        assert controller.on_snapshot(snapshot_at(32, prices), PositionView()) == []
        # Fills confirmed
        held = PositionView({put_800: -1, call_600: -1})
        for minute in range(33, 40):
            assert controller.on_snapshot(snapshot_at(minute, prices), held) == []

        assert len(sink.intents) == 2
        assert controller.state.cycle_count == 1
        assert controller.state.substate == EngagementSubState.FILLED

    def test_reengages_after_all_legs_zero(self, controller, sink, stock, put_800, call_600, snapshot_at):
        prices = {stock: 100, put_800: 5, call_600: 3}
        controller.on_snapshot(snapshot_at(31, prices), PositionView())
        controller.on_snapshot(snapshot_at(32, prices), PositionView({put_800: -1, call_600: -1}))

        intents = controller.on_snapshot(snapshot_at(33, prices), PositionView())

        assert len(intents) == 2
        assert controller.state.cycle_count == 2
        assert len(sink.intents) == 4

    def test_out_of_order_snapshot_rejected(self, controller, stock, snapshot_at):
        controller.on_snapshot(snapshot_at(40, {stock: 0}), PositionView())

        with pytest.raises(TemporalDataError) as exc_info:
            controller.on_snapshot(snapshot_at(39, {stock: 0}), PositionView())

        assert isinstance(exc_info.value, DataQualityError)
        assert exc_info.value.recoverable is True
        assert exc_info.value.previous_timestamp == snapshot_at(40, {}).timestamp

    def test_equal_timestamps_allowed(self, controller, stock, snapshot_at):
        controller.on_snapshot(snapshot_at(40, {stock: 0}), PositionView())
        assert controller.on_snapshot(snapshot_at(40, {stock: 0}), PositionView()) == []

    def test_works_without_sink(self, stock, put_800, snapshot_at):
        controller = PositionLifecycleController(legs=[LegSpec(stock, 0), LegSpec(put_800, -2)])
        intents = controller.on_snapshot(snapshot_at(31, {stock: 1, put_800: 1}), PositionView())
        assert [i.quantity for i in intents] == [-2]

    def test_sink_receives_each_intent(self, stock, put_800, call_600, snapshot_at):
        sink = Mock()
        controller = PositionLifecycleController(
            legs=[LegSpec(put_800, -1), LegSpec(call_600, -1)], sink=sink
        )
        controller.on_snapshot(snapshot_at(31, {put_800: 5, call_600: 3}), PositionView())
        sink.submit_all.assert_called_once()
        assert len(sink.submit_all.call_args[0][0]) == 2

    def test_timeout_allows_resubmission(self, stock, put_800, snapshot_at):
        controller = PositionLifecycleController(
            legs=[LegSpec(put_800, -1)],
            params=ControllerParams(confirmation_timeout_snapshots=1)
        )
        prices = {put_800: 5}
        assert len(controller.on_snapshot(snapshot_at(31, prices), PositionView())) == 1
        assert controller.on_snapshot(snapshot_at(32, prices), PositionView()) == []
        # Second unconfirmed snapshot exceeds the timeout; order treated as rejected
        assert len(controller.on_snapshot(snapshot_at(33, prices), PositionView())) == 1

    def test_default_params_resubmit_rejected_orders(self, controller, sink, stock, put_800, call_600, snapshot_at):
        prices = {stock: 100, put_800: 5, call_600: 3}
        emitted_at = [
            minute for minute in range(31, 36)
            if controller.on_snapshot(snapshot_at(minute, prices), PositionView())
        ]

        assert emitted_at == [31, 34]
        assert len(sink.intents) == 4
        assert controller.state.cycle_count == 2

    def test_last_decision_exposed(self, controller, stock, snapshot_at):
        controller.on_snapshot(snapshot_at(31, {stock: 0}), PositionView())
        assert controller.last_decision is not None
        assert controller.last_decision.skip_reason.value == "stale_quote"
