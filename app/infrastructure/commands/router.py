"""Message router: turns inbound chat messages into command invocations."""

import asyncio
from typing import Callable, List, Optional, Set

from infrastructure.commands.context import CommandContext
from infrastructure.commands.models import CommandMatch
from infrastructure.commands.registry import CommandRegistry
from infrastructure.logging import bind_invocation_context, get_module_logger
from infrastructure.persistence import StorageUnavailableError
from infrastructure.platforms.client import ChatClient
from infrastructure.platforms.exceptions import PlatformError
from infrastructure.platforms.models import Guild, Message
from infrastructure.platforms.prompts import ReplyWaiter

logger = get_module_logger()

GENERIC_FAILURE_MESSAGE = "Something went wrong while running that command, please try again later"

GuildResolver = Callable[[str], Optional[Guild]]


class CommandRouter:
    """Routes inbound messages to pending follow-up prompts or to commands.

    Every message is first offered to the ReplyWaiter; a message that
    answers a pending prompt is not treated as a command. Otherwise, a
    message starting with the prefix is matched against the registered
    command triggers, the permission gate is checked, and the handler runs
    in its own task.

    The router is also the outer error handler: storage failures and
    unexpected exceptions raised by handlers are logged and answered with
    a generic failure notice, never re-raised into the message loop.

    Example:
        router = CommandRouter(client, waiter, guild_resolver=guilds.get, prefix="!")
        router.register(counters_registry)

        # In the gateway's message callback
        router.dispatch(message)
    """

    def __init__(
        self,
        client: ChatClient,
        waiter: ReplyWaiter,
        guild_resolver: GuildResolver,
        prefix: str = "!",
    ):
        self._client = client
        self._waiter = waiter
        self._guild_resolver = guild_resolver
        self.prefix = prefix
        self._registries: List[CommandRegistry] = []
        self._tasks: Set["asyncio.Task[bool]"] = set()

    def register(self, registry: CommandRegistry) -> None:
        self._registries.append(registry)
        logger.info(
            "registered_command_registry",
            namespace=registry.namespace,
            command_count=len(registry.list_commands()),
        )

    def dispatch(self, message: Message) -> Optional["asyncio.Task[bool]"]:
        """Handle an inbound message without blocking the message loop.

        Returns:
            The task running the command, or None if the message answered a
            pending prompt
        """
        if self._waiter.feed(message):
            return None
        task = asyncio.create_task(self.handle_message(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _find(self, text: str) -> Optional[tuple]:
        best = None
        for registry in self._registries:
            match = registry.find_command(text)
            if match is None:
                continue
            if best is None or len(match.trigger) > len(best[1].trigger):
                best = (registry, match)
        return best

    async def handle_message(self, message: Message) -> bool:
        """Run the command invoked by ``message``, if any.

        Returns:
            True if a command handler ran
        """
        if message.author.bot:
            return False

        content = message.content.strip()
        if not content.startswith(self.prefix):
            return False

        found = self._find(content[len(self.prefix):])
        if found is None:
            return False
        registry, match = found

        guild = self._guild_resolver(message.guild_id) if message.guild_id else None
        if guild is None:
            logger.debug("command_outside_guild", trigger=match.trigger)
            return False

        with bind_invocation_context(
            user_id=message.author.id,
            channel_id=message.channel_id,
            guild_id=guild.id,
            command=match.trigger,
        ) as correlation_id:
            if not registry.has_permission(match.command, message):
                logger.info(
                    "command_permission_denied",
                    permission=match.command.permission,
                )
                return False

            ctx = CommandContext(
                message=message,
                guild=guild,
                client=self._client,
                trigger=match.trigger,
                prefix=self.prefix,
                correlation_id=correlation_id,
            )
            await self._run(ctx, match)
        return True

    async def _run(self, ctx: CommandContext, match: CommandMatch) -> None:
        logger.info("command_started", raw_args=match.raw_args)
        try:
            await match.command.handler(ctx, match.raw_args)
        except StorageUnavailableError as e:
            logger.error(
                "command_storage_unavailable",
                error=str(e),
                error_code=e.error_code,
            )
            await self._notify_failure(ctx)
            return
        except Exception:  # pylint: disable=broad-except
            logger.exception("command_failed")
            await self._notify_failure(ctx)
            return
        logger.info("command_completed")

    async def _notify_failure(self, ctx: CommandContext) -> None:
        try:
            await ctx.respond(GENERIC_FAILURE_MESSAGE)
        except PlatformError as e:
            logger.error("failure_notice_not_delivered", error=str(e))

    async def drain(self) -> None:
        """Wait for every in-flight command task to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
