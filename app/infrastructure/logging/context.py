"""Invocation context binding for structured logging.

Binds command-invocation metadata (correlation id, invoking user, channel,
command trigger) to structlog's context variables so every log entry made
while a command runs carries it. Each invocation runs in its own asyncio
task, and tasks copy the context on creation, so concurrent invocations do
not see each other's values.

Usage:
    from infrastructure.logging import bind_invocation_context

    with bind_invocation_context(user_id=message.author.id, channel_id=message.channel_id):
        logger.info("command_received")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_invocation_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    channel_id: Optional[str] = None,
    guild_id: Optional[str] = None,
    command: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind invocation-scoped context to all logs within the block.

    Args:
        correlation_id: Unique invocation identifier. Auto-generated if not provided.
        user_id: ID of the invoking chat user.
        channel_id: ID of the channel the command was sent in.
        guild_id: ID of the guild the command was sent in.
        command: Matched command trigger (e.g. "counters view").
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id bound for the block.
    """
    context: dict[str, Any] = {
        "correlation_id": correlation_id or str(uuid.uuid4()),
    }
    if user_id is not None:
        context["user_id"] = user_id
    if channel_id is not None:
        context["channel_id"] = channel_id
    if guild_id is not None:
        context["guild_id"] = guild_id
    if command is not None:
        context["command"] = command
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")


def clear_invocation_context() -> None:
    """Clear all invocation-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
