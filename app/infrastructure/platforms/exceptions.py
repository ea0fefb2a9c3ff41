"""Custom exceptions for the platform layer.

Provides specialized exceptions for chat API lookups, argument
conversion, and follow-up prompts.
"""

from typing import Optional


class PlatformError(Exception):
    """Base exception for all platform-related errors.

    Example:
        try:
            user = await client.fetch_user(user_id)
        except PlatformError as e:
            logger.warning("platform_error", error=str(e))
    """

    pass


class EntityFetchError(PlatformError):
    """Raised by a chat client when an entity cannot be fetched from the API.

    Attributes:
        entity_id: ID that was looked up
        reason: Optional provider reason (e.g. "Unknown User", "timeout")

    Example:
        >>> await client.fetch_user("123456789012345678")
        Traceback (most recent call last):
        ...
        EntityFetchError: Could not fetch 123456789012345678: Unknown User
    """

    def __init__(self, entity_id: str, reason: Optional[str] = None):
        message = f"Could not fetch {entity_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.entity_id = entity_id
        self.reason = reason


class ArgumentConversionError(PlatformError):
    """Raised when a raw token cannot be converted to an argument's type.

    Signature matching treats this as "this shape does not fit", never as a
    user-facing failure on its own.
    """

    def __init__(self, argument: str, value: str, message: str):
        super().__init__(f"{argument}: {message} ({value!r})")
        self.argument = argument
        self.value = value


class PromptError(PlatformError):
    """Raised when a follow-up question cannot be delivered."""

    pass
