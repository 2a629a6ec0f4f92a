"""
Core lifecycle evaluation logic.

``evaluate_snapshot`` is a pure function: given the controller state, one
snapshot, the confirmed positions and the legs, it returns the next state
and the order intents to emit. Confirmed positions are the only input that
can move the controller out of ENGAGED.
"""

from typing import Optional, Sequence

from ..data.models import MarketSnapshot, OrderIntent, PositionView, Symbol
from ..logging.config import get_state_logger, log_state_transition
from ..utils.time import format_market_time
from .models import (
    ControllerParams,
    ControllerState,
    EngagementSubState,
    LegSpec,
    LifecycleState,
    SkipReason,
    SnapshotDecision,
)

state_logger = get_state_logger(__name__)


def tracked_symbols(legs: Sequence[LegSpec]) -> list[Symbol]:
    return [leg.symbol for leg in legs]


def reconcile_positions(
    current: ControllerState,
    positions: PositionView,
    symbols: Sequence[Symbol],
    params: ControllerParams
) -> tuple[ControllerState, Optional[str]]:
    """
    Align the controller state with confirmed positions.

    Returns:
        Tuple of (state, trigger) where trigger names the transition taken,
        or None if the state did not change.
    """
    flat = positions.is_flat(symbols)

    if not flat:
        if current.state == LifecycleState.FLAT:
            # Holdings that the controller did not emit, e.g. carried into the run
            return current.with_filled(), "positions_observed"
        if current.substate == EngagementSubState.AWAITING_FILL:
            return current.with_filled(), "fill_confirmed"
        return current, None

    if current.state == LifecycleState.FLAT:
        return current, None

    if current.substate == EngagementSubState.FILLED:
        # Expiry or assignment closed every tracked leg
        return current.with_flat(), "positions_closed"

    timeout = params.confirmation_timeout_snapshots
    waiting = current.with_waiting()
    if timeout is not None and waiting.awaiting_snapshots > timeout:
        return waiting.with_flat(), "confirmation_timeout"
    return waiting, None


def build_intents(
    legs: Sequence[LegSpec],
    snapshot: MarketSnapshot,
    tag: Optional[str] = None
) -> tuple[OrderIntent, ...]:
    """One intent per leg with a non-zero target quantity."""
    return tuple(
        OrderIntent(
            symbol=leg.symbol,
            quantity=leg.target_quantity,
            timestamp=snapshot.timestamp,
            tag=tag
        )
        for leg in legs
        if leg.target_quantity != 0
    )


def evaluate_snapshot(
    current: ControllerState,
    snapshot: MarketSnapshot,
    positions: PositionView,
    legs: Sequence[LegSpec],
    params: ControllerParams,
    run_id: str = "default"
) -> SnapshotDecision:
    """
    Evaluate one market snapshot against the lifecycle state machine.

    Args:
        current: Controller state before this snapshot
        snapshot: Current prices keyed by symbol
        positions: Confirmed positions from the execution side
        legs: Tracked legs with their target quantities
        params: Controller parameters
        run_id: Identifier used in transition logs

    Returns:
        SnapshotDecision with the next state and any order intents
    """
    symbols = tracked_symbols(legs)
    triggers = []

    state, trigger = reconcile_positions(current, positions, symbols, params)
    if trigger:
        triggers.append(trigger)
        log_state_transition(
            state_logger,
            run_id=run_id,
            from_state=f"{current.state.value}:{current.substate.value}",
            to_state=f"{state.state.value}:{state.substate.value}",
            trigger=trigger,
            context={
                "open_symbols": [s.value for s in positions.open_symbols(symbols)],
                "timestamp": format_market_time(snapshot.timestamp)
            }
        )

    state = state.with_snapshot_ts(snapshot.timestamp)

    if not state.is_flat:
        return SnapshotDecision(new_state=state, triggers=tuple(triggers))

    if not snapshot.has_valid_quotes(symbols):
        state_logger.debug(
            "Deferring engagement on stale quotes",
            run_id=run_id,
            stale_symbols=[s.value for s in snapshot.stale_symbols(symbols)],
            timestamp=format_market_time(snapshot.timestamp)
        )
        return SnapshotDecision(
            new_state=state,
            skip_reason=SkipReason.STALE_QUOTE,
            triggers=tuple(triggers)
        )

    intents = build_intents(legs, snapshot, params.order_tag)
    if not intents:
        return SnapshotDecision(new_state=state, triggers=tuple(triggers))

    engaged = state.with_engaged(snapshot.timestamp)
    triggers.append("quotes_valid")
    log_state_transition(
        state_logger,
        run_id=run_id,
        from_state=f"{state.state.value}:{state.substate.value}",
        to_state=f"{engaged.state.value}:{engaged.substate.value}",
        trigger="quotes_valid",
        context={
            "cycle": engaged.cycle_count,
            "prices": {s.value: str(snapshot.price(s)) for s in symbols},
            "timestamp": format_market_time(snapshot.timestamp)
        }
    )
    return SnapshotDecision(new_state=engaged, intents=intents, triggers=tuple(triggers))
