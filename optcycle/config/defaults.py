"""Default configuration parameters for optcycle runs."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunParams:
    """Static run parameters. Dates and cash are opaque to the core."""
    underlying: str = "SPY"
    resolution: str = "minute"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    cash: float = 100000.0
    underlying_quantity: int = 0             # 0 = tracked for quotes only


@dataclass(frozen=True)
class LifecycleParams:
    """Lifecycle controller parameters matching ControllerParams from state.models."""
    confirmation_timeout_snapshots: Optional[int] = 2      # None = wait for fills forever
    order_tag: str = "lifecycle-engagement"


@dataclass(frozen=True)
class BridgeParams:
    """Numeric runtime bridge parameters."""
    module: str = "numpy"


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters passed to configure_logging."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    run: RunParams
    controller: LifecycleParams
    bridge: BridgeParams
    logging: LoggingParams
    legs: tuple = ()
    auxiliary: tuple = ()


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        run=RunParams(),
        controller=LifecycleParams(),
        bridge=BridgeParams(),
        logging=LoggingParams(),
    )
