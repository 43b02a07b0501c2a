"""
Centralized logging configuration for the Predict client.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the client should use this
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
    # basicConfig is a no-op once handlers exist; the level must still apply
    logging.getLogger().setLevel(log_level)

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


def get_session_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for session and view-state events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the session subsystem
    """
    return get_logger(name).bind(
        subsystem="session",
        audit_trail=True
    )


def get_api_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for backend API traffic.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the api subsystem
    """
    return get_logger(name).bind(subsystem="api")


def log_view_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    generation: Optional[int] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a view state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: Current view state
        to_state: Target view state
        trigger: Operation that caused the transition
        generation: Request generation of the initialize() call, if any
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if generation is not None:
        bound_logger = bound_logger.bind(generation=generation)

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("View transition")
