"""
Centralized logging configuration for quotewatch.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
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
        processors.append(structlog.processors.JSONRenderer())
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


def get_alarm_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for alarm evaluation and firing.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for alarm decisions
    """
    return get_logger(name).bind(
        subsystem="alarms",
        audit_trail=True
    )


def get_feed_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for market data feed handling (backfills, ticks).

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for feed events
    """
    return get_logger(name).bind(subsystem="feed")


def log_alarm_fired(
    logger: FilteringBoundLogger,
    symbol: str,
    threshold: float,
    position: str,
    price: float,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a fired alarm with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol the alarm belongs to
        threshold: Alarm threshold price
        position: Side of the threshold the price was on when the alarm was added
        price: Price that crossed the threshold
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        threshold=threshold,
        position=position,
        price=price,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Alarm fired")


def log_backfill_attempt(
    logger: FilteringBoundLogger,
    symbol: str,
    resolution: str,
    attempt: int,
    entries: int,
    sufficient: bool,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a single backfill widening attempt with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol being backfilled
        resolution: Resolution wire code
        attempt: 1-based attempt number
        entries: Number of entries the provider returned
        sufficient: Whether the entry count met the resolution threshold
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        resolution=resolution,
        attempt=attempt,
        entries=entries,
        sufficient=sufficient,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if sufficient:
        bound_logger.info("Backfill attempt sufficient")
    else:
        bound_logger.debug("Backfill attempt insufficient")
