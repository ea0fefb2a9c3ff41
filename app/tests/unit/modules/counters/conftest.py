"""Fixtures for counters plugin tests."""

import pytest

from infrastructure.persistence import InMemoryCounterStore
from infrastructure.platforms.prompts import PromptCoordinator, ReplyWaiter
from modules.counters import CountersPlugin, CountersState
from modules.counters.view import run_view_counter
from tests.factories.chat import GENERAL_ID
from tests.factories.commands import make_command_context

COUNTER_IDS = {
    "warnings": 1,
    "messages": 2,
    "activity": 3,
    "total": 4,
    "secret": 5,
}

BASE_CONFIG = {
    "can_view": True,
    "counters": {
        "warnings": {"per_user": True, "initial_value": 0},
        "messages": {"name": "Messages", "per_channel": True, "initial_value": 10},
        "activity": {"per_channel": True, "per_user": True},
        "total": {"name": "Total", "initial_value": 5},
        "secret": {"can_view": False},
        "orphan": {"name": "Orphan"},
    },
}


@pytest.fixture
def counter_store():
    return InMemoryCounterStore()


@pytest.fixture
def waiter():
    return ReplyWaiter()


@pytest.fixture
def prompts(fake_client, waiter):
    return PromptCoordinator(fake_client, waiter, default_timeout=1.0)


@pytest.fixture
def plugin_factory(counter_store, prompts):
    """Factory for CountersPlugin instances.

    Returns:
        Callable that creates a plugin with default or custom options
    """

    def _factory(config=None, overrides=None, counter_ids=None, store=None):
        options = {
            "config": BASE_CONFIG if config is None else config,
            "overrides": overrides or [],
        }
        state = CountersState(
            store=store or counter_store,
            counter_ids=dict(COUNTER_IDS if counter_ids is None else counter_ids),
        )
        return CountersPlugin(options, state, prompts)

    return _factory


@pytest.fixture
def plugin(plugin_factory):
    return plugin_factory()


@pytest.fixture
def replies(fake_client, waiter, message_factory):
    """Answer each follow-up question with the next queued reply.

    Replies come from the invoking user (alice) in the invoking channel.
    Returns the list to append reply texts to.
    """
    queued = []

    def _on_send(channel_id, content):
        if content.endswith("?") and queued:
            waiter.feed(message_factory(queued.pop(0), channel_id=channel_id))

    fake_client.on_send = _on_send
    return queued


@pytest.fixture
def view_counter(plugin, guild, fake_client, message_factory):
    """Run `!counters view <raw_args>` as alice in #general.

    Returns:
        Coroutine function returning the state the flow ended in
    """

    async def _run(raw_args, target_plugin=None, message=None):
        target_plugin = target_plugin or plugin
        message = message or message_factory(
            f"!counters view {raw_args}", channel_id=GENERAL_ID
        )
        ctx = make_command_context(message, guild, fake_client)
        return await run_view_counter(target_plugin.begin_invocation(ctx), raw_args)

    return _run
