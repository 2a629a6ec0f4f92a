"""
State machine data models for the position lifecycle.

This module defines immutable data structures for the controller's runtime
state, the legs it manages and the decision produced for each snapshot.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from ..data.models import OrderIntent, Symbol


class LifecycleState(str, Enum):
    """Top-level lifecycle states."""
    FLAT = "flat"
    ENGAGED = "engaged"


class EngagementSubState(str, Enum):
    """Internal substates while engaged."""
    NONE = "none"
    AWAITING_FILL = "awaiting_fill"
    FILLED = "filled"


class SkipReason(str, Enum):
    """Why a snapshot produced no orders while flat. Not an error."""
    STALE_QUOTE = "stale_quote"


@dataclass(frozen=True)
class LegSpec:
    """A tracked symbol and its target signed quantity.

    A zero target keeps the symbol tracked and quote-required without ever
    ordering it (e.g. the underlying of a short option strategy).
    """
    symbol: Symbol
    target_quantity: int = 0


@dataclass(frozen=True)
class ControllerParams:
    """Lifecycle controller parameters."""
    # Unconfirmed snapshots tolerated before the submission counts as rejected and
    # the controller re-arms; None waits for fills forever
    confirmation_timeout_snapshots: Optional[int] = 2
    order_tag: str = "lifecycle-engagement"


@dataclass(frozen=True)
class ControllerState:
    """Runtime state of the lifecycle controller."""

    state: LifecycleState = LifecycleState.FLAT
    substate: EngagementSubState = EngagementSubState.NONE

    engaged_at: Optional[datetime] = None
    last_snapshot_ts: Optional[datetime] = None

    cycle_count: int = 0                  # Completed FLAT -> ENGAGED engagements
    awaiting_snapshots: int = 0           # Snapshots seen while AWAITING_FILL

    @property
    def is_flat(self) -> bool:
        return self.state == LifecycleState.FLAT

    def with_engaged(self, timestamp: datetime) -> "ControllerState":
        """Enter ENGAGED after emitting orders."""
        return replace(
            self,
            state=LifecycleState.ENGAGED,
            substate=EngagementSubState.AWAITING_FILL,
            engaged_at=timestamp,
            cycle_count=self.cycle_count + 1,
            awaiting_snapshots=0
        )

    def with_filled(self) -> "ControllerState":
        """Confirmed positions observed."""
        return replace(
            self,
            state=LifecycleState.ENGAGED,
            substate=EngagementSubState.FILLED,
            awaiting_snapshots=0
        )

    def with_waiting(self) -> "ControllerState":
        return replace(self, awaiting_snapshots=self.awaiting_snapshots + 1)

    def with_flat(self) -> "ControllerState":
        """Re-arm: every tracked position is back to zero."""
        return replace(
            self,
            state=LifecycleState.FLAT,
            substate=EngagementSubState.NONE,
            engaged_at=None,
            awaiting_snapshots=0
        )

    def with_snapshot_ts(self, timestamp: datetime) -> "ControllerState":
        return replace(self, last_snapshot_ts=timestamp)


@dataclass(frozen=True)
class SnapshotDecision:
    """Result of evaluating one snapshot."""

    new_state: ControllerState
    intents: tuple[OrderIntent, ...] = ()
    skip_reason: Optional[SkipReason] = None
    triggers: tuple[str, ...] = field(default_factory=tuple)

    @property
    def should_emit(self) -> bool:
        return bool(self.intents)
