"""Counters plugin: config, state and the commands built on them."""

from typing import Any, Mapping, Optional, Union

from infrastructure.commands import CommandContext, CommandRegistry
from infrastructure.logging import get_module_logger
from infrastructure.platforms.models import Message
from infrastructure.platforms.prompts import PromptCoordinator
from modules.counters.config import CountersConfigAccessor, CountersPluginOptions
from modules.counters.state import CountersState
from modules.counters.view import (
    VIEW_COUNTER_PERMISSION,
    VIEW_COUNTER_SIGNATURES,
    VIEW_COUNTER_TRIGGERS,
    CountersInvocation,
    run_view_counter,
)

logger = get_module_logger()


class CountersPlugin:
    """Binds the counters config, id table and store to the view-counter command.

    Args:
        options: Plugin options (base config and overrides)
        state: Counter ids and value store
        prompts: Follow-up prompt coordinator shared with the router's waiter
    """

    name = "counters"
    pretty_name = "Counters"
    description = "Keep track of per-user, per-channel, or global numbers"

    def __init__(
        self,
        options: Union[CountersPluginOptions, Mapping[str, Any]],
        state: CountersState,
        prompts: PromptCoordinator,
    ):
        self.config = CountersConfigAccessor(options)
        self.state = state
        self.prompts = prompts
        self._registry: Optional[CommandRegistry] = None

    def has_permission(self, message: Message, permission: str) -> bool:
        """Whether the permission flag is truthy in the config for ``message``."""
        config = self.config.get_for_message(message)
        return bool(getattr(config, permission, False))

    def begin_invocation(self, ctx: CommandContext) -> CountersInvocation:
        return CountersInvocation(
            ctx=ctx,
            config=self.config.get_for_message(ctx.message),
            counter_ids=self.state.snapshot_ids(),
            store=self.state.store,
            prompts=self.prompts,
        )

    @property
    def registry(self) -> CommandRegistry:
        if self._registry is None:
            self._registry = self._build_registry()
        return self._registry

    def _build_registry(self) -> CommandRegistry:
        registry = CommandRegistry(self.name, permission_resolver=self.has_permission)

        @registry.command(
            triggers=VIEW_COUNTER_TRIGGERS,
            signatures=VIEW_COUNTER_SIGNATURES,
            permission=VIEW_COUNTER_PERMISSION,
            description="View a counter's current value",
        )
        async def view_counter(ctx: CommandContext, raw_args: str):
            await run_view_counter(self.begin_invocation(ctx), raw_args)

        logger.info(
            "counters_plugin_loaded",
            counter_count=len(self.config.base.counters),
            override_count=len(self.config.options.overrides),
        )
        return registry
