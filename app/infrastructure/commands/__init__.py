"""Command framework for chat commands.

This framework provides:
- Command / CommandMatch: Command definitions with triggers, signatures and a permission gate
- CommandRegistry: Register commands and look them up by trigger
- CommandContext: Per-invocation execution context
- CommandRouter: Feed inbound messages to prompts or commands; outer error handler

Example:
    from infrastructure.commands import CommandRegistry, CommandContext, CommandRouter

    registry = CommandRegistry("hello")

    @registry.command(triggers=["hello"])
    async def hello_command(ctx: CommandContext, raw_args: str):
        await ctx.respond(f"Hello, <@!{ctx.user_id}>!")

    router = CommandRouter(client, waiter, guild_resolver=guilds.get)
    router.register(registry)
"""

from infrastructure.commands.models import Command, CommandMatch
from infrastructure.commands.registry import CommandRegistry, PermissionResolver
from infrastructure.commands.context import CommandContext
from infrastructure.commands.router import (
    CommandRouter,
    GENERIC_FAILURE_MESSAGE,
    GuildResolver,
)

__all__ = [
    # Models
    "Command",
    "CommandMatch",
    # Core
    "CommandRegistry",
    "PermissionResolver",
    "CommandContext",
    "CommandRouter",
    "GuildResolver",
    "GENERIC_FAILURE_MESSAGE",
]
