"""
Error classification system for the option lifecycle core.

This module provides the exception hierarchy for setup failures, numeric
runtime failures, market data quality issues and state machine corruption.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
)
from .recovery import (
    RecoverableError,
    UnrecoverableError,
)
from .setup import (
    SetupError,
    NoMatchingContractError,
    ConfigurationError,
)
from .computation import ComputationError

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    # Recovery Categories
    "RecoverableError",
    "UnrecoverableError",
    # Setup Failures
    "SetupError",
    "NoMatchingContractError",
    "ConfigurationError",
    # Numeric Runtime
    "ComputationError",
]
