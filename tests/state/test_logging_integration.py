"""Tests for logging of lifecycle transitions, selections and order intents."""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

from optcycle.data.models import OrderIntent, PositionView
from optcycle.execution.base import LoggingSink
from optcycle.logging.config import configure_logging, log_order_intent, log_state_transition
from optcycle.state.machine import evaluate_snapshot
from optcycle.state.models import ControllerParams, ControllerState, LegSpec


class TestLoggingIntegration:

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)
        self.log_messages = []
        self.mock_logger = Mock()

        def capture(level):
            def _capture(message, **kwargs):
                self.log_messages.append({'message': message, 'level': level, 'kwargs': kwargs})
            return _capture

        self.mock_logger.info = capture('info')
        self.mock_logger.debug = capture('debug')
        self.mock_logger.bind.return_value = self.mock_logger

    def test_log_state_transition_binds_fields(self):
        log_state_transition(self.mock_logger, "GOOG", "flat:none", "engaged:awaiting_fill",
                             "quotes_valid", context={"cycle": 1})

        bind_kwargs = self.mock_logger.bind.call_args_list[0].kwargs
        assert bind_kwargs == {
            "run_id": "GOOG",
            "from_state": "flat:none",
            "to_state": "engaged:awaiting_fill",
            "trigger": "quotes_valid",
        }
        assert self.mock_logger.bind.call_args_list[1].kwargs == {"context": {"cycle": 1}}
        assert self.log_messages[-1]['message'] == "State transition"

    def test_log_order_intent_side(self):
        log_order_intent(self.mock_logger, "GOOG", "GOOG 151224P00800000", -1)
        assert self.mock_logger.bind.call_args.kwargs["side"] == "sell"
        assert self.log_messages[-1]['message'] == "Order intent emitted"

    def test_engagement_logs_transition(self, stock, put_800, snapshot_at):
        with patch("optcycle.state.machine.state_logger", self.mock_logger):
            evaluate_snapshot(
                ControllerState(),
                snapshot_at(31, {stock: 100, put_800: 5}),
                PositionView(),
                [LegSpec(stock, 0), LegSpec(put_800, -1)],
                ControllerParams(),
                run_id="GOOG"
            )

        triggers = [c.kwargs.get("trigger") for c in self.mock_logger.bind.call_args_list]
        assert "quotes_valid" in triggers

    def test_stale_quote_logged_at_debug(self, stock, put_800, snapshot_at):
        with patch("optcycle.state.machine.state_logger", self.mock_logger):
            evaluate_snapshot(
                ControllerState(),
                snapshot_at(31, {stock: 0, put_800: 5}),
                PositionView(),
                [LegSpec(stock, 0), LegSpec(put_800, -1)],
                ControllerParams()
            )

        assert self.log_messages == [{
            'message': "Deferring engagement on stale quotes",
            'level': 'debug',
            'kwargs': {
                "run_id": "default",
                "stale_symbols": ["GOOG"],
                "timestamp": snapshot_at(31, {}).timestamp.isoformat(),
            },
        }]

    def test_logging_sink_writes_intent(self, put_800):
        sink = LoggingSink(run_id="GOOG")
        sink.logger = self.mock_logger
        sink.submit_all([OrderIntent(put_800, -1, datetime(2015, 12, 23, tzinfo=timezone.utc))])

        assert sink.submit_count == 1
        assert self.log_messages[-1]['message'] == "Order intent emitted"
