"""Platform-agnostic chat entity models.

Transport adapters translate gateway payloads into these models so the
command framework, the reference resolver and the prompt coordinator never
touch platform SDK objects directly.

Usage:
    general = Channel(id="111111111111111111", name="general")
    guild = Guild(id="999999999999999999", name="Example", channels={general.id: general})

    message = Message(
        id="222222222222222222",
        channel_id=general.id,
        author=User(id="333333333333333333", username="alice"),
        content="!counters view warnings",
        guild_id=guild.id,
    )
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional


class ChannelType(Enum):
    """Kinds of guild channels."""

    TEXT = "text"
    NEWS = "news"
    VOICE = "voice"
    STAGE = "stage"
    CATEGORY = "category"
    FORUM = "forum"


TEXT_CHANNEL_TYPES = frozenset({ChannelType.TEXT, ChannelType.NEWS})


@dataclass(frozen=True)
class Channel:
    """A guild channel."""

    id: str
    name: str
    type: ChannelType = ChannelType.TEXT
    guild_id: Optional[str] = None

    @property
    def is_text_based(self) -> bool:
        """Whether messages can be sent to and read from this channel."""
        return self.type in TEXT_CHANNEL_TYPES

    @property
    def mention(self) -> str:
        return f"<#{self.id}>"


@dataclass(frozen=True)
class User:
    """A fully fetched chat user."""

    id: str
    username: str
    discriminator: str = "0"
    bot: bool = False

    @property
    def tag(self) -> str:
        """``username#discriminator``, or just the username for migrated accounts."""
        if self.discriminator in ("", "0"):
            return self.username
        return f"{self.username}#{self.discriminator}"

    @property
    def mention(self) -> str:
        return f"<@!{self.id}>"


@dataclass(frozen=True)
class UnknownUser:
    """Placeholder for a user referenced by ID whose profile could not be fetched.

    Callers can still address the user by ``id`` (mentions, store keys) but
    have no profile data.
    """

    id: str
    username: str = "Unknown"
    discriminator: str = "0000"

    @property
    def tag(self) -> str:
        return f"{self.username}#{self.discriminator}"

    @property
    def mention(self) -> str:
        return f"<@!{self.id}>"


@dataclass
class Guild:
    """A guild with its cached channels and members."""

    id: str
    name: str
    channels: Dict[str, Channel] = field(default_factory=dict)
    members: Dict[str, User] = field(default_factory=dict)

    def get_channel(self, channel_id: str) -> Optional[Channel]:
        return self.channels.get(channel_id)

    def iter_channels(self) -> Iterable[Channel]:
        return self.channels.values()


@dataclass(frozen=True)
class Message:
    """An inbound chat message."""

    id: str
    channel_id: str
    author: User
    content: str
    guild_id: Optional[str] = None


__all__ = [
    "ChannelType",
    "TEXT_CHANNEL_TYPES",
    "Channel",
    "User",
    "UnknownUser",
    "Guild",
    "Message",
]
