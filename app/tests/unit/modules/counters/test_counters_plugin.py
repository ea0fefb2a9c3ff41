"""Unit tests for CountersPlugin and its plugin docs."""

import asyncio

import pytest

from infrastructure.commands import CommandRouter
from infrastructure.persistence import InMemoryCounterStore, ScopeKey
from modules.counters import generate_plugin_docs
from modules.counters.view import USER_QUESTION, VIEW_COUNTER_SIGNATURES
from tests.factories.chat import ALICE_ID, GENERAL_ID, GUILD_ID, RANDOM_ID
from tests.factories.commands import make_command_context


@pytest.mark.unit
class TestCountersPlugin:
    """Tests for the plugin's registry and permission gate."""

    def test_registry_triggers(self, plugin):
        """The view command answers to all three triggers."""
        command = plugin.registry.get_command("counters view")

        assert command.triggers == ["counters view", "counter view", "viewcounter"]
        assert command.permission == "can_view"
        assert command.signatures == VIEW_COUNTER_SIGNATURES

    def test_registry_built_once(self, plugin):
        """The same registry is returned every time."""
        assert plugin.registry is plugin.registry

    def test_permission_follows_overrides(self, plugin_factory, message_factory):
        """can_view is resolved per message, overrides included."""
        plugin = plugin_factory(
            config={"can_view": False, "counters": {}},
            overrides=[{"channel": [GENERAL_ID], "config": {"can_view": True}}],
        )

        assert plugin.has_permission(message_factory("x"), "can_view") is True
        assert plugin.has_permission(message_factory("x", channel_id=RANDOM_ID), "can_view") is False

    def test_unknown_permission_denied(self, plugin, message_factory):
        """A permission flag missing from the config denies."""
        assert plugin.has_permission(message_factory("x"), "can_reset") is False

    def test_invocation_snapshots_ids(self, plugin, guild, fake_client, message_factory):
        """An invocation keeps the id table it started with."""
        ctx = make_command_context(message_factory("!viewcounter warnings"), guild, fake_client)
        invocation = plugin.begin_invocation(ctx)
        plugin.state.counter_ids["warnings"] = 99

        assert invocation.counter_ids["warnings"] == 1


@pytest.mark.unit
class TestCountersThroughRouter:
    """The plugin wired behind a CommandRouter."""

    @pytest.mark.asyncio
    async def test_prompt_answered_through_dispatch(
        self, plugin_factory, fake_client, waiter, guild, message_factory
    ):
        """The follow-up reply reaches the prompt instead of running a command."""
        plugin = plugin_factory(store=InMemoryCounterStore({ScopeKey(1, None, ALICE_ID): 3}))
        router = CommandRouter(fake_client, waiter, guild_resolver={GUILD_ID: guild}.get)
        router.register(plugin.registry)

        task = router.dispatch(message_factory("!viewcounter warnings"))
        for _ in range(100):
            if waiter.pending_count:
                break
            await asyncio.sleep(0)
        assert router.dispatch(message_factory(f"<@!{ALICE_ID}>")) is None

        assert await task is True
        assert fake_client.sent_texts == [USER_QUESTION, f"warnings for <@!{ALICE_ID}> is 3"]

    @pytest.mark.asyncio
    async def test_denied_caller_gets_no_reply(
        self, plugin_factory, fake_client, waiter, guild, message_factory
    ):
        """Without can_view the command is silently ignored."""
        plugin = plugin_factory(config={"can_view": False, "counters": {}})
        router = CommandRouter(fake_client, waiter, guild_resolver={GUILD_ID: guild}.get)
        router.register(plugin.registry)

        assert await router.handle_message(message_factory("!counter view warnings")) is False
        assert fake_client.sent == []


@pytest.mark.unit
class TestGeneratePluginDocs:
    """Tests for generate_plugin_docs()."""

    def test_payload(self, plugin):
        """The payload describes the plugin, its config schema and commands."""
        docs = generate_plugin_docs(plugin)

        assert docs["name"] == "counters"
        assert docs["info"]["pretty_name"] == "Counters"
        assert docs["default_options"] == {
            "config": {"counters": {}, "can_view": False},
            "overrides": [],
        }
        assert docs["config_schema"].startswith("{\n  counters: {\n    [string]: {\n")
        assert "      name: Optional<Nullable<string>>" in docs["config_schema"]
        assert "      can_view: Optional<Nullable<boolean>>" in docs["config_schema"]
        assert docs["config_schema"].endswith("  can_view: boolean\n}")

    def test_message_commands(self, plugin):
        """Each command lists its triggers, permission and signatures."""
        (command,) = generate_plugin_docs(plugin)["message_commands"]

        assert command["trigger"] == ["counters view", "counter view", "viewcounter"]
        assert command["permission"] == "can_view"
        assert len(command["signature"]) == 5
        assert command["signature"][0] == [
            {"name": "counterName", "type": "string", "required": True},
            {"name": "user", "type": "user", "required": True},
            {"name": "channel", "type": "channel", "required": True},
        ]
