"""
Centralized logging configuration for the optcycle core.

This module provides standardized logging configuration using structlog
for all components. Contract selection, lifecycle transitions, emitted
order intents and numeric runtime calls all log through loggers obtained
here so that a run can be audited from its log stream alone.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for lifecycle state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    return get_logger(name).bind(
        subsystem="state_machine",
        audit_trail=True
    )


def get_selection_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for contract selection decisions."""
    return get_logger(name).bind(
        subsystem="selection",
        audit_trail=True
    )


def get_bridge_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for numeric runtime invocations."""
    return get_logger(name).bind(subsystem="bridge")


def log_state_transition(
    logger: FilteringBoundLogger,
    run_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a lifecycle state transition with standardized format.

    Args:
        logger: Structlog logger instance
        run_id: Identifier of the run (the underlying ticker by default)
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        run_id=run_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_order_intent(
    logger: FilteringBoundLogger,
    run_id: str,
    symbol: str,
    quantity: int,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an emitted order intent.

    Args:
        logger: Structlog logger instance
        run_id: Identifier of the run
        symbol: Rendered symbol value
        quantity: Signed order quantity
        context: Additional context data
    """
    bound_logger = logger.bind(
        run_id=run_id,
        symbol=symbol,
        quantity=quantity,
        side="buy" if quantity > 0 else "sell",
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Order intent emitted")
