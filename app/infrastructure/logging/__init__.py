"""Structured logging infrastructure.

Centralized logging configuration and utilities for the counters bot
using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_invocation_context(): Context manager for invocation-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_invocation_context(): Clear all invocation context

Example:
    from infrastructure.logging import get_module_logger, bind_invocation_context

    logger = get_module_logger()

    with bind_invocation_context(user_id="123", command="counters view"):
        logger.info("command_received")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_invocation_context,
    get_correlation_id,
    clear_invocation_context,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_invocation_context",
    "get_correlation_id",
    "clear_invocation_context",
]
