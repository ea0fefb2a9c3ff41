"""Counters feature settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings

STORE_BACKENDS = ("memory", "dynamodb")


class CountersSettings(FeatureSettings):
    """Configuration for the counters plugin.

    Environment Variables:
        COUNTERS_COMMAND_PREFIX: Prefix that marks a chat message as a command (default: "!")
        COUNTERS_PROMPT_TIMEOUT_SECONDS: How long a follow-up question waits for a reply (default: 15)
        COUNTERS_STORE_BACKEND: Counter value backend - 'memory' or 'dynamodb'
        COUNTERS_DYNAMODB_TABLE_NAME: DynamoDB table holding counter values

    Follow-up Questions:
        When a counter is per-channel or per-user and the invocation omits
        that dimension, the bot asks the invoking user and waits for their
        next message in the same channel. The wait is wall-clock bounded by
        ``prompt_timeout_seconds``; an elapsed wait cancels the command.

    Example:
        ```python
        from infrastructure.configuration import settings

        timeout = settings.counters.prompt_timeout_seconds
        if settings.counters.store_backend == "dynamodb":
            table = settings.counters.dynamodb_table_name
        ```
    """

    command_prefix: str = Field(
        default="!",
        alias="COUNTERS_COMMAND_PREFIX",
        description="Prefix that marks a chat message as a command",
    )
    prompt_timeout_seconds: float = Field(
        default=15.0,
        alias="COUNTERS_PROMPT_TIMEOUT_SECONDS",
        description="Seconds a follow-up question waits for the user's reply",
        gt=0,
    )
    store_backend: str = Field(
        default="memory",
        alias="COUNTERS_STORE_BACKEND",
        description="Counter value backend: 'memory' or 'dynamodb'",
    )
    dynamodb_table_name: str = Field(
        default="counters_bot_counter_values",
        alias="COUNTERS_DYNAMODB_TABLE_NAME",
        description="DynamoDB table name for counter values (if using DynamoDB backend)",
    )

    @field_validator("store_backend", mode="before")
    @classmethod
    def _validate_store_backend(cls, v: str) -> str:
        """Normalize and validate COUNTERS_STORE_BACKEND."""
        value = str(v).strip().lower()
        if value not in STORE_BACKENDS:
            raise ValueError(
                f"Invalid COUNTERS_STORE_BACKEND: {v} "
                f"(expected one of: {', '.join(STORE_BACKENDS)})"
            )
        return value
