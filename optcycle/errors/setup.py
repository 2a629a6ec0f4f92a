"""
Setup-time failures.

Raised while a run is being prepared. A run cannot proceed without its legs
defined, so these errors are fatal and never retried.
"""

from decimal import Decimal
from typing import Any, Optional

from .recovery import UnrecoverableError


class SetupError(UnrecoverableError):
    """Base class for failures that abort run setup."""


class NoMatchingContractError(SetupError):
    """No listed contract matches the requested (right, strike) combination."""

    def __init__(self, right: Any, strike: Decimal,
                 underlying: Optional[str] = None, candidates: int = 0):
        right_label = getattr(right, "value", right)
        location = f" for {underlying}" if underlying else ""
        super().__init__(
            f"No {right_label} contract with strike {strike}{location} "
            f"({candidates} {right_label} contracts listed)"
        )
        self.right = right
        self.strike = strike
        self.underlying = underlying
        self.candidates = candidates


class ConfigurationError(SetupError):
    """Run configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []
