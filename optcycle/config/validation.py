"""Configuration validation utilities."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..data.models import OptionRight, Resolution, as_decimal

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def parse_date(value: Any) -> Optional[date]:
    """Accept a date or an ISO 'YYYY-MM-DD' string; None stays None."""
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class ConfigValidator:
    """Validates run configuration parameters."""

    @staticmethod
    def validate_run_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate run parameters."""
        errors = []

        # Validate underlying
        value = params.get("underlying")
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(
                field="run.underlying",
                message="Must be a non-empty ticker string",
                value=value
            ))

        # Validate resolution
        if "resolution" in params:
            value = params["resolution"]
            if value not in {r.value for r in Resolution}:
                errors.append(ValidationError(
                    field="run.resolution",
                    message=f"Must be one of {[r.value for r in Resolution]}",
                    value=value
                ))

        # Validate dates
        start = end = None
        for name in ("start_date", "end_date"):
            value = params.get(name)
            try:
                parsed = parse_date(value)
            except ValueError:
                errors.append(ValidationError(
                    field=f"run.{name}",
                    message="Must be an ISO date (YYYY-MM-DD)",
                    value=value
                ))
                continue
            if name == "start_date":
                start = parsed
            else:
                end = parsed

        if start and end and end < start:
            errors.append(ValidationError(
                field="run.end_date",
                message="Must not precede start_date",
                value=params.get("end_date")
            ))

        # Validate cash
        if "cash" in params:
            value = params["cash"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                errors.append(ValidationError(
                    field="run.cash",
                    message="Must be a non-negative number",
                    value=value
                ))

        # Validate underlying_quantity
        if "underlying_quantity" in params:
            value = params["underlying_quantity"]
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(ValidationError(
                    field="run.underlying_quantity",
                    message="Must be an integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_legs(legs: Any) -> list[ValidationError]:
        """Validate option leg definitions."""
        errors = []

        if not isinstance(legs, list):
            return [ValidationError(field="legs", message="Must be a list", value=legs)]

        for index, leg in enumerate(legs):
            prefix = f"legs[{index}]"
            if not isinstance(leg, dict):
                errors.append(ValidationError(field=prefix, message="Must be a mapping", value=leg))
                continue

            try:
                OptionRight.parse(leg.get("right"))
            except ValueError:
                errors.append(ValidationError(
                    field=f"{prefix}.right",
                    message="Must be 'call' or 'put'",
                    value=leg.get("right")
                ))

            strike = leg.get("strike")
            try:
                parsed = as_decimal(strike) if strike is not None else None
                if parsed is None or not parsed.is_finite() or parsed <= Decimal("0"):
                    raise ValueError
            except (ValueError, ArithmeticError):
                errors.append(ValidationError(
                    field=f"{prefix}.strike",
                    message="Must be a positive number",
                    value=strike
                ))

            quantity = leg.get("quantity")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity == 0:
                errors.append(ValidationError(
                    field=f"{prefix}.quantity",
                    message="Must be a non-zero integer",
                    value=quantity
                ))

        return errors

    @staticmethod
    def validate_controller_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate lifecycle controller parameters."""
        errors = []

        value = params.get("confirmation_timeout_snapshots")
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            errors.append(ValidationError(
                field="controller.confirmation_timeout_snapshots",
                message="Must be null or a non-negative integer",
                value=value
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        if not isinstance(params, dict):
            return [ValidationError(field="logging", message="Must be a mapping", value=params)]

        errors = []

        value = params.get("level", "INFO")
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            errors.append(ValidationError(
                field="logging.level",
                message=f"Must be one of {list(LOG_LEVELS)}",
                value=value
            ))

        for name in ("format_json", "include_timestamp"):
            if name in params and not isinstance(params[name], bool):
                errors.append(ValidationError(
                    field=f"logging.{name}",
                    message="Must be a boolean",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_auxiliary(entries: Any) -> list[ValidationError]:
        """Validate auxiliary computation entries."""
        errors = []

        if not isinstance(entries, list):
            return [ValidationError(field="auxiliary", message="Must be a list", value=entries)]

        for index, entry in enumerate(entries):
            prefix = f"auxiliary[{index}]"
            if not isinstance(entry, dict) or not entry.get("function"):
                errors.append(ValidationError(
                    field=f"{prefix}.function",
                    message="Must name a runtime function",
                    value=entry
                ))
                continue
            args = entry.get("args", [])
            if not isinstance(args, list) or any(
                isinstance(arg, bool) or not isinstance(arg, (int, float)) for arg in args
            ):
                errors.append(ValidationError(
                    field=f"{prefix}.args",
                    message="Must be a list of numbers",
                    value=args
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        errors.extend(ConfigValidator.validate_run_params(config.get("run", {})))
        errors.extend(ConfigValidator.validate_legs(config.get("legs", [])))

        if "controller" in config:
            errors.extend(ConfigValidator.validate_controller_params(config["controller"]))

        if "auxiliary" in config:
            errors.extend(ConfigValidator.validate_auxiliary(config["auxiliary"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
