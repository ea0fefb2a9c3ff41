import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.configuration`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest

from infrastructure.platforms.models import ChannelType, Message
from tests.factories.chat import (
    ALICE_ID,
    BOB_ID,
    GENERAL_ID,
    GUILD_ID,
    RANDOM_ID,
    VOICE_ID,
    FakeChatClient,
    make_channel,
    make_guild,
    make_user,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")


@pytest.fixture
def alice():
    return make_user(ALICE_ID, "alice")


@pytest.fixture
def bob():
    return make_user(BOB_ID, "bob", discriminator="1234")


@pytest.fixture
def general_channel():
    return make_channel(GENERAL_ID, "general")


@pytest.fixture
def random_channel():
    return make_channel(RANDOM_ID, "random")


@pytest.fixture
def voice_channel():
    return make_channel(VOICE_ID, "lounge", ChannelType.VOICE)


@pytest.fixture
def guild(general_channel, random_channel, voice_channel, alice, bob):
    """Guild with two text channels, one voice channel and two members."""
    return make_guild(
        channels=[general_channel, random_channel, voice_channel],
        members=[alice, bob],
    )


@pytest.fixture
def fake_client(alice, bob):
    """FakeChatClient with alice and bob cached."""
    return FakeChatClient(users=[alice, bob])


@pytest.fixture
def message_factory(alice):
    """Factory for inbound Message instances.

    Returns:
        Callable that creates a Message with default or custom values
    """
    sequence = iter(range(300000000000000001, 399999999999999999))

    def _factory(
        content: str = "",
        author=None,
        channel_id: str = GENERAL_ID,
        guild_id: str = GUILD_ID,
    ) -> Message:
        return Message(
            id=str(next(sequence)),
            channel_id=channel_id,
            author=author or alice,
            content=content,
            guild_id=guild_id,
        )

    return _factory
