"""
Position lifecycle controller.

Owns the controller state for one run, evaluates each snapshot to
completion and forwards emitted intents to the execution sink. It never
reads its own intents back; only confirmed positions move it out of
ENGAGED.
"""

from typing import Optional, Sequence

import structlog

from ..data.models import MarketSnapshot, OrderIntent, PositionView, Symbol
from ..errors import TemporalDataError
from ..execution.base import OrderIntentSink
from ..utils.time import ensure_utc, is_non_decreasing
from .machine import evaluate_snapshot, tracked_symbols
from .models import ControllerParams, ControllerState, LegSpec, LifecycleState, SnapshotDecision

logger = structlog.get_logger(__name__)


class PositionLifecycleController:
    """Two-state (FLAT/ENGAGED) controller over a fixed set of legs."""

    def __init__(
        self,
        legs: Sequence[LegSpec],
        params: Optional[ControllerParams] = None,
        sink: Optional[OrderIntentSink] = None,
        run_id: str = "default"
    ):
        if not legs:
            raise ValueError("At least one leg is required")
        symbols = [leg.symbol for leg in legs]
        if len(set(symbols)) != len(symbols):
            raise ValueError("Legs must reference distinct symbols")

        self.logger = logger
        self.legs: tuple[LegSpec, ...] = tuple(legs)
        self.params = params or ControllerParams()
        self.sink = sink
        self.run_id = run_id
        self._state = ControllerState()
        self.last_decision: Optional[SnapshotDecision] = None

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def lifecycle_state(self) -> LifecycleState:
        return self._state.state

    @property
    def symbols(self) -> list[Symbol]:
        return tracked_symbols(self.legs)

    def on_snapshot(self, snapshot: MarketSnapshot, positions: PositionView) -> list[OrderIntent]:
        """
        Process one snapshot to completion.

        Args:
            snapshot: Current prices
            positions: Confirmed positions at the time of the snapshot

        Returns:
            Order intents emitted for this snapshot (possibly empty)

        Raises:
            TemporalDataError: If the snapshot is older than the last one processed
        """
        timestamp = ensure_utc(snapshot.timestamp)
        previous = self._state.last_snapshot_ts
        if not is_non_decreasing(previous, timestamp):
            raise TemporalDataError(
                "Snapshot timestamp precedes last processed snapshot",
                timestamp=timestamp,
                previous_timestamp=previous,
                context={"run_id": self.run_id}
            )

        decision = evaluate_snapshot(
            self._state, snapshot, positions, self.legs, self.params, run_id=self.run_id
        )
        self._state = decision.new_state
        self.last_decision = decision

        if decision.should_emit:
            self.logger.info(
                "Engagement orders emitted",
                run_id=self.run_id,
                cycle=self._state.cycle_count,
                intents=[intent.to_dict() for intent in decision.intents]
            )
            if self.sink is not None:
                self.sink.submit_all(list(decision.intents))

        return list(decision.intents)
