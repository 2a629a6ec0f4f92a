"""Typed run configuration built from a merged configuration dictionary."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..data.models import OptionRight, Resolution, as_decimal
from ..errors import ConfigurationError
from ..state.models import ControllerParams
from .defaults import LoggingParams
from .validation import ConfigValidator, parse_date


@dataclass(frozen=True)
class LegConfig:
    """One option leg: contract criteria plus target signed quantity."""
    right: OptionRight
    strike: Decimal
    quantity: int


@dataclass(frozen=True)
class AuxiliaryComputation:
    """Runtime function evaluated whenever the controller engages."""
    name: str
    function: str
    args: tuple = ()


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration for one run."""
    underlying: str
    resolution: Resolution
    start_date: Optional[date]
    end_date: Optional[date]
    cash: float
    underlying_quantity: int
    legs: tuple[LegConfig, ...]
    controller: ControllerParams
    bridge_module: str = "numpy"
    auxiliary: tuple[AuxiliaryComputation, ...] = ()
    logging: LoggingParams = LoggingParams()

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "RunConfig":
        """
        Build a RunConfig from a merged configuration dictionary.

        Raises:
            ConfigurationError: If the configuration fails validation
        """
        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(f"Invalid run configuration: {details}", errors=errors)

        run = config["run"]
        controller = config.get("controller", {})
        log_settings = config.get("logging", {})
        return cls(
            underlying=run["underlying"].strip().upper(),
            resolution=Resolution(run.get("resolution", Resolution.MINUTE.value)),
            start_date=parse_date(run.get("start_date")),
            end_date=parse_date(run.get("end_date")),
            cash=float(run.get("cash", 0.0)),
            underlying_quantity=run.get("underlying_quantity", 0),
            legs=tuple(
                LegConfig(
                    right=OptionRight.parse(leg["right"]),
                    strike=as_decimal(leg["strike"]),
                    quantity=leg["quantity"],
                )
                for leg in config.get("legs", [])
            ),
            controller=ControllerParams(
                confirmation_timeout_snapshots=controller.get(
                    "confirmation_timeout_snapshots",
                    ControllerParams.confirmation_timeout_snapshots
                ),
                order_tag=controller.get("order_tag", ControllerParams.order_tag),
            ),
            bridge_module=config.get("bridge", {}).get("module", "numpy"),
            auxiliary=tuple(
                AuxiliaryComputation(
                    name=entry.get("name", entry["function"]),
                    function=entry["function"],
                    args=tuple(entry.get("args", [])),
                )
                for entry in config.get("auxiliary", [])
            ),
            logging=LoggingParams(
                level=log_settings.get("level", LoggingParams.level).upper(),
                format_json=log_settings.get("format_json", LoggingParams.format_json),
                include_timestamp=log_settings.get("include_timestamp", LoggingParams.include_timestamp),
            ),
        )
