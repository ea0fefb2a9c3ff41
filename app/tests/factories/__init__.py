"""Test data factories for deterministic test data generation."""

from tests.factories.chat import (
    FakeChatClient,
    make_channel,
    make_guild,
    make_user,
)
from tests.factories.commands import (
    make_argument,
    make_command,
    make_command_context,
    make_shape,
)

__all__ = [
    "FakeChatClient",
    "make_channel",
    "make_guild",
    "make_user",
    "make_argument",
    "make_command",
    "make_command_context",
    "make_shape",
]
