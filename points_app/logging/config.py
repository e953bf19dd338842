"""
Centralized logging configuration for the points exchange workflow.

This module provides standardized logging configuration using structlog
for all components. Workflow steps and balance refreshes are logged through
the helpers below so every record carries the same keys.
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
    # basicConfig is a no-op once handlers exist
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
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

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


def get_workflow_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the exchange workflow subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for workflow steps
    """
    # Initial values instead of bind() keep the proxy lazy, so loggers created
    # at import time still pick up a later configure_logging() call.
    return structlog.get_logger(
        name,
        subsystem="exchange_workflow",
        audit_trail=True
    )


def log_workflow_step(
    logger: FilteringBoundLogger,
    operation: str,
    step: str,
    token_address: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a single workflow step with standardized format.

    Args:
        logger: Structlog logger instance
        operation: Workflow operation (execute, negotiate_rate, mint, ...)
        step: Step name within the operation
        token_address: Regular token the step applies to, if any
        context: Additional context data
    """
    bound_logger = logger.bind(
        operation=operation,
        step=step,
        token_address=token_address,
    )

    if context:
        bound_logger = bound_logger.bind(**context)

    bound_logger.info("Workflow step")


def log_balance_refresh(
    logger: FilteringBoundLogger,
    account: str,
    universal_balance: str,
    regular_balance: Optional[str],
    trigger: str
) -> None:
    """
    Log a completed balance reconciliation.

    Args:
        logger: Structlog logger instance
        account: Account whose balances were read
        universal_balance: Formatted universal token balance
        regular_balance: Formatted regular token balance, None if no token loaded
        trigger: Operation that caused the refresh
    """
    logger.info(
        "Balances reconciled",
        account=account,
        universal_balance=universal_balance,
        regular_balance=regular_balance,
        trigger=trigger,
    )
