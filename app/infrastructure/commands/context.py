"""Command execution context."""

from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from infrastructure.logging import get_module_logger
from infrastructure.platforms.client import ChatClient
from infrastructure.platforms.models import Guild, Message

logger = get_module_logger()


@dataclass
class CommandContext:
    """Per-invocation execution context handed to command handlers.

    Attributes:
        message: The message that invoked the command
        guild: Guild the message was sent in (cached channels and members)
        client: Chat client for API lookups and replies
        trigger: Trigger phrase that matched (e.g. "counters view")
        prefix: Command prefix in use (for usage messages)
        correlation_id: Invocation correlation id (bound into logs)

    Example:
        async def handle_command(ctx: CommandContext, raw_args: str):
            await ctx.respond(f"Hello, <@!{ctx.user_id}>!")
    """

    message: Message
    guild: Guild
    client: ChatClient
    trigger: str
    prefix: str = "!"
    correlation_id: Optional[str] = None

    def __post_init__(self):
        """Initialize defaults."""
        if self.correlation_id is None:
            self.correlation_id = str(uuid4())

    @property
    def user_id(self) -> str:
        return self.message.author.id

    @property
    def channel_id(self) -> str:
        return self.message.channel_id

    async def respond(self, text: str) -> None:
        """Send a message to the invoking channel."""
        await self.client.send_message(self.channel_id, text)

    async def respond_error(self, text: str) -> None:
        """Send a user-facing error message to the invoking channel."""
        logger.info("command_error_response", error_message=text)
        await self.client.send_message(self.channel_id, text)
