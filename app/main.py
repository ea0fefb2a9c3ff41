from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from infrastructure.commands import CommandRouter, GuildResolver
from infrastructure.configuration import Settings, settings
from infrastructure.logging import get_module_logger
from infrastructure.persistence import CounterScopeStore, build_counter_store
from infrastructure.platforms.client import ChatClient
from infrastructure.platforms.prompts import PromptCoordinator, ReplyWaiter
from modules.counters import CountersPlugin, CountersState

logger = get_module_logger()

load_dotenv()


@dataclass
class CountersBot:
    """The wired application: feed gateway messages to ``router.dispatch``."""

    router: CommandRouter
    plugin: CountersPlugin
    waiter: ReplyWaiter


def build_bot(
    client: ChatClient,
    guild_resolver: GuildResolver,
    plugin_options: Mapping[str, Any],
    counter_ids: Mapping[str, int],
    store: Optional[CounterScopeStore] = None,
    app_settings: Optional[Settings] = None,
) -> CountersBot:
    """Wire the counters plugin, prompt coordinator and router together.

    Args:
        client: Chat gateway client
        guild_resolver: Returns the cached Guild for a guild id
        plugin_options: Counters plugin options (base config and overrides)
        counter_ids: Counter config key -> counter id
        store: Counter store; built from settings when omitted
        app_settings: Settings to use instead of the module singleton
    """
    app_settings = app_settings or settings
    counters_settings = app_settings.counters

    waiter = ReplyWaiter()
    prompts = PromptCoordinator(
        client, waiter, default_timeout=counters_settings.prompt_timeout_seconds
    )
    if store is None:
        store = build_counter_store(app_settings)
    state = CountersState(
        store=store,
        counter_ids=dict(counter_ids),
    )
    plugin = CountersPlugin(plugin_options, state, prompts)

    router = CommandRouter(
        client,
        waiter,
        guild_resolver=guild_resolver,
        prefix=counters_settings.command_prefix,
    )
    router.register(plugin.registry)

    logger.info(
        "application_startup",
        prefix=counters_settings.command_prefix,
        prompt_timeout_seconds=counters_settings.prompt_timeout_seconds,
        store_backend=counters_settings.store_backend,
    )
    return CountersBot(router=router, plugin=plugin, waiter=waiter)
