"""Unit tests for the view-counter command flow."""

from unittest.mock import AsyncMock

import pytest

from infrastructure.persistence import InMemoryCounterStore, ScopeKey, StorageUnavailableError
from modules.counters.view import (
    CHANNEL_QUESTION,
    USER_QUESTION,
    VIEW_COUNTER_SIGNATURES,
    ViewCounterState,
    format_counter_value,
)
from tests.factories.chat import (
    ALICE_ID,
    BOB_ID,
    CAROL_ID,
    GENERAL_ID,
    RANDOM_ID,
    VOICE_ID,
    make_channel,
    make_user,
)


@pytest.mark.unit
class TestViewCounterScenarios:
    """End-to-end view-counter invocations."""

    @pytest.mark.asyncio
    async def test_per_user_counter_prompts_for_user(
        self, plugin_factory, view_counter, fake_client, replies
    ):
        """A missing user is asked for and the reply is resolved."""
        store = InMemoryCounterStore({ScopeKey(1, None, ALICE_ID): 3})
        replies.append("@alice")

        state = await view_counter("warnings", plugin_factory(store=store))

        assert state is ViewCounterState.DONE
        assert fake_client.sent_texts == [
            USER_QUESTION,
            f"warnings for <@!{ALICE_ID}> is 3",
        ]

    @pytest.mark.asyncio
    async def test_unknown_counter(self, view_counter, fake_client):
        """An unconfigured counter fails without prompting."""
        state = await view_counter("votes")

        assert state is ViewCounterState.FAILED
        assert fake_client.sent_texts == ["Unknown counter: votes"]

    @pytest.mark.asyncio
    async def test_counter_without_id_is_unknown(self, view_counter, fake_client):
        """A configured counter with no assigned id is reported as unknown."""
        await view_counter("orphan")

        assert fake_client.sent_texts == ["Unknown counter: orphan"]

    @pytest.mark.asyncio
    async def test_counter_can_view_false(self, view_counter, fake_client):
        """A counter-level can_view=false wins over the plugin permission."""
        await view_counter("secret")

        assert fake_client.sent_texts == [
            "Missing permissions to view this counter's values"
        ]

    @pytest.mark.asyncio
    async def test_voice_channel_reply_cancels(self, view_counter, fake_client, replies):
        """A channel reply naming a voice channel ends the invocation."""
        replies.append(f"<#{VOICE_ID}>")

        await view_counter("messages")

        assert fake_client.sent_texts == [
            CHANNEL_QUESTION,
            "Channel is not a text channel, cancelling",
        ]

    @pytest.mark.asyncio
    async def test_unknown_channel_reply_cancels(self, view_counter, fake_client, replies):
        """A channel reply matching nothing ends the invocation."""
        replies.append("nowhere")

        await view_counter("messages")

        assert fake_client.sent_texts[-1] == "Unknown channel, cancelling"

    @pytest.mark.asyncio
    async def test_unknown_user_reply_cancels(self, view_counter, fake_client, replies):
        """A user reply matching nobody ends the invocation."""
        replies.append("nobody")

        await view_counter("warnings")

        assert fake_client.sent_texts == [USER_QUESTION, "Unknown user, cancelling"]

    @pytest.mark.asyncio
    async def test_prompt_timeout_cancels(self, view_counter, fake_client, prompts):
        """No reply before the deadline cancels."""
        prompts._default_timeout = 0.01  # pylint: disable=protected-access

        state = await view_counter("warnings")

        assert state is ViewCounterState.FAILED
        assert fake_client.sent_texts == [USER_QUESTION, "Cancelling"]

    @pytest.mark.asyncio
    async def test_uncached_user_reply_is_fetched(
        self, plugin_factory, view_counter, fake_client, replies
    ):
        """A reply with an uncached ID is fetched from the API."""
        fake_client.fetchable[CAROL_ID] = make_user(CAROL_ID, "carol")
        store = InMemoryCounterStore({ScopeKey(1, None, CAROL_ID): 8})
        replies.append(f"<@{CAROL_ID}>")

        await view_counter("warnings", plugin_factory(store=store))

        assert fake_client.fetch_calls == [CAROL_ID]
        assert fake_client.sent_texts[-1] == f"warnings for <@!{CAROL_ID}> is 8"

    @pytest.mark.asyncio
    async def test_unfetchable_user_reply_uses_placeholder(
        self, plugin_factory, view_counter, fake_client, replies
    ):
        """A well-formed ID that cannot be fetched is still usable."""
        store = InMemoryCounterStore({ScopeKey(1, None, CAROL_ID): 2})
        replies.append(CAROL_ID)

        await view_counter("warnings", plugin_factory(store=store))

        assert fake_client.sent_texts[-1] == f"warnings for <@!{CAROL_ID}> is 2"

    @pytest.mark.asyncio
    async def test_both_dimensions_prompted_in_order(
        self, plugin_factory, view_counter, fake_client, replies
    ):
        """Channel is asked before user."""
        store = InMemoryCounterStore({ScopeKey(3, RANDOM_ID, BOB_ID): 11})
        replies.extend(["#random", "bob"])

        await view_counter("activity", plugin_factory(store=store))

        assert fake_client.sent_texts == [
            CHANNEL_QUESTION,
            USER_QUESTION,
            f"activity for <@!{BOB_ID}> in <#{RANDOM_ID}> is 11",
        ]


@pytest.mark.unit
class TestScopeCompatibility:
    """Scope validation happens before any prompt or lookup."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw_args",
        [
            f"warnings <#{GENERAL_ID}>",
            f"warnings <@!{ALICE_ID}> <#{GENERAL_ID}>",
            f"warnings <#{GENERAL_ID}> <@!{ALICE_ID}>",
            f"total <#{GENERAL_ID}>",
        ],
    )
    async def test_channel_on_non_per_channel_counter(
        self, plugin_factory, view_counter, fake_client, raw_args
    ):
        """Supplying a channel to a counter that is not per-channel always fails."""
        store = AsyncMock()

        await view_counter(raw_args, plugin_factory(store=store))

        assert fake_client.sent_texts == ["This counter is not per-channel"]
        store.get_current_value.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_on_non_per_user_counter(self, plugin_factory, view_counter, fake_client):
        """Supplying a user to a counter that is not per-user fails."""
        store = AsyncMock()

        await view_counter(f"messages <@!{ALICE_ID}>", plugin_factory(store=store))

        assert fake_client.sent_texts == ["This counter is not per-user"]
        store.get_current_value.assert_not_awaited()


@pytest.mark.unit
class TestValueLookup:
    """Stored values versus initial values."""

    @pytest.mark.asyncio
    async def test_unset_value_shows_initial_value(self, view_counter, fake_client):
        """No recorded value displays initial_value."""
        await view_counter("total")

        assert fake_client.sent_texts == ["Total is 5"]

    @pytest.mark.asyncio
    async def test_zero_is_not_replaced(self, plugin_factory, view_counter, fake_client):
        """A recorded 0 displays 0."""
        store = InMemoryCounterStore({ScopeKey(4): 0})

        await view_counter("total", plugin_factory(store=store))

        assert fake_client.sent_texts == ["Total is 0"]

    @pytest.mark.asyncio
    async def test_supplied_channel_is_used(self, plugin_factory, view_counter, fake_client):
        """A channel argument skips the prompt and scopes the lookup."""
        store = InMemoryCounterStore({ScopeKey(2, GENERAL_ID, None): 42})

        await view_counter(f"messages <#{GENERAL_ID}>", plugin_factory(store=store))

        assert fake_client.sent_texts == [f"Messages in <#{GENERAL_ID}> is 42"]

    @pytest.mark.asyncio
    async def test_channel_name_resembling_a_username(
        self, plugin_factory, view_counter, fake_client
    ):
        """A bare channel name scopes a per-channel counter even if a username contains it."""
        fake_client.users[CAROL_ID] = make_user(CAROL_ID, "generalissimo")

        await view_counter("messages general", plugin_factory())

        assert fake_client.sent_texts == [f"Messages in <#{GENERAL_ID}> is 10"]

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, plugin_factory, view_counter, fake_client):
        """Storage failures are left to the router and produce no reply here."""
        store = InMemoryCounterStore()
        store.available = False

        with pytest.raises(StorageUnavailableError):
            await view_counter("total", plugin_factory(store=store))

        assert fake_client.sent == []


@pytest.mark.unit
class TestUsage:
    """Invocations that match no signature."""

    @pytest.mark.asyncio
    async def test_missing_counter_name(self, view_counter, fake_client):
        """No arguments replies with the usage text."""
        state = await view_counter("")

        assert state is ViewCounterState.FAILED
        assert fake_client.sent_texts[0].startswith("Usage:\n`!counters view <counterName>")
        assert len(fake_client.sent_texts[0].splitlines()) == len(VIEW_COUNTER_SIGNATURES) + 1

    @pytest.mark.asyncio
    async def test_unclosed_quote(self, view_counter, fake_client):
        """A tokenizer error is reported together with the usage text."""
        await view_counter('"warnings')

        assert "Unclosed quote" in fake_client.sent_texts[0]
        assert "Usage:" in fake_client.sent_texts[0]


@pytest.mark.unit
class TestFormatCounterValue:
    """Output templates."""

    def test_templates(self):
        """Each scope combination has its own template."""
        channel = make_channel(GENERAL_ID, "general")
        user = make_user(ALICE_ID, "alice")

        assert format_counter_value("n", 1, channel, user) == (
            f"n for <@!{ALICE_ID}> in <#{GENERAL_ID}> is 1"
        )
        assert format_counter_value("n", 1, channel=channel) == f"n in <#{GENERAL_ID}> is 1"
        assert format_counter_value("n", 1, user=user) == f"n for <@!{ALICE_ID}> is 1"
        assert format_counter_value("n", 1) == "n is 1"
