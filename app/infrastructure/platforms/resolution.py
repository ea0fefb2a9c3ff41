"""Fuzzy channel and user reference resolution.

Turns free-form text typed by a user into a chat entity. Accepted forms:

- raw snowflake IDs: ``123456789012345678``
- mentions: ``<#id>`` for channels, ``<@id>`` / ``<@!id>`` for users
- names: exact match first (case-insensitive, leading ``#``/``@`` ignored,
  users also by ``username#1234``), then a unique partial match

Lookups return a tagged ``ReferenceResolution`` so callers can tell a
valid reference with degraded data (``FOUND_UNKNOWN_PROFILE``) or of the
wrong kind (``WRONG_TYPE``) apart from no match at all (``NOT_FOUND``).
The ``resolve_*`` helpers collapse that into the plain entity-or-None
contract.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Tuple, TypeVar, Union

from infrastructure.logging import get_module_logger
from infrastructure.platforms.client import ChatClient
from infrastructure.platforms.exceptions import EntityFetchError
from infrastructure.platforms.models import Channel, Guild, UnknownUser, User

logger = get_module_logger()

SNOWFLAKE_REGEX = re.compile(r"^\d{17,20}$")
CHANNEL_MENTION_REGEX = re.compile(r"^<#(\d{17,20})>$")
USER_MENTION_REGEX = re.compile(r"^<@!?(\d{17,20})>$")

T = TypeVar("T")


class ResolutionStatus(Enum):
    """Outcome of a reference lookup."""

    FOUND = "found"
    FOUND_UNKNOWN_PROFILE = "found_unknown_profile"
    WRONG_TYPE = "wrong_type"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ReferenceResolution:
    """Tagged result of a reference lookup.

    Attributes:
        status: ResolutionStatus -- which variant this is
        entity: The matched entity (Channel, User or UnknownUser), if any
    """

    status: ResolutionStatus
    entity: Optional[Union[Channel, User, UnknownUser]] = None

    @property
    def is_resolved(self) -> bool:
        """True when the reference identifies a usable entity."""
        return self.status in (
            ResolutionStatus.FOUND,
            ResolutionStatus.FOUND_UNKNOWN_PROFILE,
        )

    @classmethod
    def found(cls, entity: Union[Channel, User]) -> "ReferenceResolution":
        return cls(status=ResolutionStatus.FOUND, entity=entity)

    @classmethod
    def unknown_profile(cls, user_id: str) -> "ReferenceResolution":
        return cls(
            status=ResolutionStatus.FOUND_UNKNOWN_PROFILE,
            entity=UnknownUser(id=user_id),
        )

    @classmethod
    def wrong_type(cls, entity: Channel) -> "ReferenceResolution":
        return cls(status=ResolutionStatus.WRONG_TYPE, entity=entity)

    @classmethod
    def not_found(cls) -> "ReferenceResolution":
        return cls(status=ResolutionStatus.NOT_FOUND)


def _match_by_name(
    candidates: Iterable[T],
    query: str,
    names: Callable[[T], Tuple[str, ...]],
    allow_partial: bool = True,
) -> Optional[T]:
    """Find the candidate whose name matches ``query``.

    An exact (case-insensitive) match wins, first in iteration order.
    Otherwise, when ``allow_partial`` is set, the single candidate
    containing ``query`` is returned; an ambiguous partial match returns None.
    """
    needle = query.casefold()
    if not needle:
        return None

    partial = []
    for candidate in candidates:
        candidate_names = [n.casefold() for n in names(candidate)]
        if needle in candidate_names:
            return candidate
        if any(needle in n for n in candidate_names):
            partial.append(candidate)

    if allow_partial and len(partial) == 1:
        return partial[0]
    return None


def _extract_channel_id(value: str) -> Optional[str]:
    match = CHANNEL_MENTION_REGEX.match(value)
    if match:
        return match.group(1)
    if SNOWFLAKE_REGEX.match(value):
        return value
    return None


def _extract_user_id(value: str) -> Optional[str]:
    match = USER_MENTION_REGEX.match(value)
    if match:
        return match.group(1)
    if SNOWFLAKE_REGEX.match(value):
        return value
    return None


def lookup_channel_reference(guild: Guild, text: str) -> ReferenceResolution:
    """Resolve ``text`` to a text-capable channel of ``guild``.

    A channel that exists but is not text-capable (voice, category, ...)
    is reported as ``WRONG_TYPE``.
    """
    value = text.strip()
    channel_id = _extract_channel_id(value)
    if channel_id is not None:
        channel = guild.get_channel(channel_id)
    else:
        channel = _match_by_name(
            guild.iter_channels(), value.lstrip("#"), lambda c: (c.name,)
        )

    if channel is None:
        return ReferenceResolution.not_found()
    if not channel.is_text_based:
        logger.debug(
            "channel_reference_wrong_type",
            channel_id=channel.id,
            channel_type=channel.type.value,
        )
        return ReferenceResolution.wrong_type(channel)
    return ReferenceResolution.found(channel)


def resolve_channel_reference(guild: Guild, text: str) -> Optional[Channel]:
    """Resolve ``text`` to a text channel, or None (wrong type counts as no match)."""
    result = lookup_channel_reference(guild, text)
    if result.status is ResolutionStatus.FOUND:
        return result.entity  # type: ignore[return-value]
    return None


def _user_candidates(
    client: ChatClient, guild: Optional[Guild]
) -> Iterable[User]:
    seen: Dict[str, User] = {}
    if guild is not None:
        seen.update(guild.members)
    for user in client.cached_users():
        seen.setdefault(user.id, user)
    return seen.values()


def _lookup_user_by_name(
    client: ChatClient, value: str, guild: Optional[Guild], allow_partial: bool
) -> ReferenceResolution:
    user = _match_by_name(
        _user_candidates(client, guild),
        value.lstrip("@"),
        lambda u: (u.tag, u.username),
        allow_partial=allow_partial,
    )
    if user is None:
        return ReferenceResolution.not_found()
    return ReferenceResolution.found(user)


def lookup_user_reference_cached(
    client: ChatClient,
    text: str,
    guild: Optional[Guild] = None,
    allow_partial: bool = True,
) -> ReferenceResolution:
    """Resolve ``text`` to a user using only cached data.

    ID and mention references that miss the cache degrade to an
    ``UnknownUser`` placeholder instead of hitting the API. With
    ``allow_partial`` off, names must equal a username or tag.
    """
    value = text.strip()
    user_id = _extract_user_id(value)
    if user_id is None:
        return _lookup_user_by_name(client, value, guild, allow_partial)

    user = client.get_user(user_id)
    if user is None and guild is not None:
        user = guild.members.get(user_id)
    if user is not None:
        return ReferenceResolution.found(user)
    return ReferenceResolution.unknown_profile(user_id)


async def lookup_user_reference(
    client: ChatClient, text: str, guild: Optional[Guild] = None
) -> ReferenceResolution:
    """Resolve ``text`` to a user, fetching from the API on a cache miss.

    A fetch failure for a well-formed ID or mention yields
    ``FOUND_UNKNOWN_PROFILE`` rather than ``NOT_FOUND``.
    """
    result = lookup_user_reference_cached(client, text, guild)
    if result.status is not ResolutionStatus.FOUND_UNKNOWN_PROFILE:
        return result

    user_id = result.entity.id  # type: ignore[union-attr]
    try:
        user = await client.fetch_user(user_id)
    except EntityFetchError as e:
        logger.info("user_fetch_failed", user_id=user_id, error=str(e))
        return result
    return ReferenceResolution.found(user)


async def resolve_user_reference(
    client: ChatClient, text: str, guild: Optional[Guild] = None
) -> Optional[Union[User, UnknownUser]]:
    """Resolve ``text`` to a User, an UnknownUser placeholder, or None."""
    result = await lookup_user_reference(client, text, guild)
    return result.entity if result.is_resolved else None  # type: ignore[return-value]


def resolve_user_reference_cached(
    client: ChatClient,
    text: str,
    guild: Optional[Guild] = None,
    allow_partial: bool = True,
) -> Optional[Union[User, UnknownUser]]:
    """Cache-only variant of ``resolve_user_reference``."""
    result = lookup_user_reference_cached(client, text, guild, allow_partial)
    return result.entity if result.is_resolved else None  # type: ignore[return-value]
