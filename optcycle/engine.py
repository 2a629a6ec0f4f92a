"""
Run harness facade.

Implements the two entry points the surrounding run harness calls: a setup
step that registers the underlying, selects the option legs and builds the
lifecycle controller, and a per-snapshot step that may emit order intents.
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

import structlog

from .bridge.runtime import CrossRuntimeBridge
from .config.loader import ConfigLoader
from .config.run_config import RunConfig
from .data.models import MarketSnapshot, OrderIntent, PositionView, Symbol, Underlying
from .data.providers import ContractChainProvider
from .errors import (
    ComputationError,
    NoMatchingContractError,
    StateTransitionError,
    TemporalDataError,
)
from .execution.base import OrderIntentSink
from .logging.config import configure_logging
from .selection.filter import ContractSelector
from .state.controller import PositionLifecycleController
from .state.models import LegSpec
from .utils.time import start_of_day

logger = structlog.get_logger(__name__)


class OptionLifecycleEngine:
    """
    Coordinates one run of the option lifecycle core.

    Manages the pipeline:
    Setup → Contract Selection → Snapshots → Lifecycle Controller → Order Intents
    """

    def __init__(
        self,
        chain_provider: ContractChainProvider,
        sink: Optional[OrderIntentSink] = None,
        bridge: Optional[CrossRuntimeBridge] = None,
        config_loader: Optional[ConfigLoader] = None
    ) -> None:
        self.logger = logger
        self.chain_provider = chain_provider
        self.sink = sink
        self.bridge = bridge
        self.config_loader = config_loader or ConfigLoader.create()

        self.selector = ContractSelector()
        self.run_config: Optional[RunConfig] = None
        self.underlying: Optional[Underlying] = None
        self.controller: Optional[PositionLifecycleController] = None
        self.leg_symbols: dict[str, Symbol] = {}
        self.auxiliary_results: dict[str, Any] = {}
        self.skipped_snapshots = 0

    @property
    def is_setup(self) -> bool:
        return self.controller is not None

    def setup_from_config(
        self,
        run_name: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Merge configuration for a named run, apply its logging settings and
        perform setup.

        Raises:
            ConfigurationError: If the run name is unknown or the merged
                configuration is invalid
        """
        config = self.config_loader.merge_config(run_name, overrides)
        run_config = RunConfig.from_dict(config)
        configure_logging(
            level=run_config.logging.level,
            format_json=run_config.logging.format_json,
            include_timestamp=run_config.logging.include_timestamp
        )
        self.setup(run_config)

    def setup(self, run_config: RunConfig, as_of: Optional[datetime] = None) -> None:
        """
        Register the underlying, select option legs and build the controller.

        Args:
            run_config: Validated run configuration
            as_of: Chain lookup time, defaults to the run start date

        Raises:
            StateTransitionError: If setup already ran
            NoMatchingContractError: If a leg cannot be matched; nothing is kept
        """
        if self.is_setup:
            raise StateTransitionError(
                "Setup already completed for this engine",
                current_state=self.controller.lifecycle_state.value,
                attempted_transition="setup"
            )

        underlying = Underlying(ticker=run_config.underlying, resolution=run_config.resolution)
        legs = [LegSpec(symbol=underlying.symbol, target_quantity=run_config.underlying_quantity)]
        leg_symbols = {"underlying": underlying.symbol}

        if run_config.legs:
            if as_of is None:
                as_of = (
                    start_of_day(run_config.start_date) if run_config.start_date
                    else datetime.now(timezone.utc)
                )
            chain = self.chain_provider.get_contract_list(underlying.ticker, as_of)
            selector = ContractSelector()

            for index, leg in enumerate(run_config.legs):
                try:
                    symbol = selector.select(chain, leg.right, leg.strike)
                except NoMatchingContractError as e:
                    self.logger.error(
                        "Setup aborted: option leg could not be selected",
                        underlying=underlying.ticker,
                        right=leg.right.value,
                        strike=str(leg.strike),
                        error=str(e)
                    )
                    raise
                legs.append(LegSpec(symbol=symbol, target_quantity=leg.quantity))
                leg_symbols[f"{leg.right.value}_{index}"] = symbol

            self.selector = selector

        self.controller = PositionLifecycleController(
            legs=legs,
            params=run_config.controller,
            sink=self.sink,
            run_id=underlying.ticker
        )
        if self.bridge is None and run_config.auxiliary:
            self.bridge = CrossRuntimeBridge(run_config.bridge_module)

        self.run_config = run_config
        self.underlying = underlying
        self.leg_symbols = leg_symbols

        self.logger.info(
            "Run setup complete",
            underlying=underlying.ticker,
            resolution=underlying.resolution.value,
            start_date=run_config.start_date.isoformat() if run_config.start_date else None,
            end_date=run_config.end_date.isoformat() if run_config.end_date else None,
            legs={name: symbol.value for name, symbol in leg_symbols.items()}
        )

    def on_snapshot(self, snapshot: MarketSnapshot, positions: PositionView) -> list[OrderIntent]:
        """
        Process one market snapshot.

        Args:
            snapshot: Current prices keyed by symbol
            positions: Confirmed positions from the execution side

        Returns:
            Order intents emitted for this snapshot
        """
        if not self.is_setup:
            raise StateTransitionError(
                "Snapshot received before setup",
                current_state="uninitialized",
                attempted_transition="on_snapshot"
            )

        try:
            intents = self.controller.on_snapshot(snapshot, positions)
        except TemporalDataError as e:
            self.skipped_snapshots += 1
            self.logger.warning(
                "Skipping out-of-order snapshot",
                error=str(e),
                timestamp=snapshot.timestamp.isoformat(),
                previous_timestamp=e.previous_timestamp.isoformat() if e.previous_timestamp else None
            )
            return []

        if snapshot.has_quote(self.underlying.symbol):
            self.underlying = self.underlying.with_price(snapshot.price(self.underlying.symbol))

        if intents:
            self._run_auxiliary_computations()

        return intents

    def compute(self, function_name: str, *args: Any):
        """Invoke a numeric runtime function; ComputationError propagates."""
        if self.bridge is None:
            self.bridge = CrossRuntimeBridge(
                self.run_config.bridge_module if self.run_config else "numpy"
            )
        return self.bridge.invoke(function_name, *args)

    def _run_auxiliary_computations(self) -> None:
        for computation in self.run_config.auxiliary:
            try:
                value = self.compute(computation.function, *computation.args)
            except ComputationError as e:
                self.logger.warning(
                    "Auxiliary computation failed, continuing without value",
                    name=computation.name,
                    function=computation.function,
                    error=e.foreign_message
                )
                self.auxiliary_results.pop(computation.name, None)
                continue

            self.auxiliary_results[computation.name] = value
            self.logger.info(
                "Auxiliary computation",
                name=computation.name,
                runtime_value=str(value),
                native_value=_native_value(computation.function, computation.args)
            )

    def summary(self) -> dict[str, Any]:
        """Run state summary."""
        if not self.is_setup:
            return {"setup": False}

        state = self.controller.state
        return {
            "setup": True,
            "underlying": self.underlying.ticker,
            "underlying_price": str(self.underlying.price),
            "state": state.state.value,
            "substate": state.substate.value,
            "cycles": state.cycle_count,
            "skipped_snapshots": self.skipped_snapshots,
            "legs": {name: symbol.value for name, symbol in self.leg_symbols.items()},
            "auxiliary": {name: str(value) for name, value in self.auxiliary_results.items()},
        }


def _native_value(function_name: str, args: tuple) -> Optional[float]:
    """Same function from the math module, for comparison in logs; None when unavailable."""
    native = getattr(math, function_name, None)
    if not callable(native):
        return None
    try:
        return native(*args)
    except (ValueError, OverflowError, TypeError):
        return None
