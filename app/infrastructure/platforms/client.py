"""Chat client collaborator interface.

The gateway connection itself lives outside this package. Anything that
implements ``ChatClient`` (a gateway adapter, or a fake in tests) can back
the reference resolver, the prompt coordinator and the command router.
"""

from typing import Iterable, Optional, Protocol

from infrastructure.platforms.models import User


class ChatClient(Protocol):
    """Protocol for the chat gateway client."""

    def get_user(self, user_id: str) -> Optional[User]:
        """Return a user from the client cache, without any API call."""
        ...  # pylint: disable=unnecessary-ellipsis

    def cached_users(self) -> Iterable[User]:
        """Iterate over every user in the client cache."""
        ...  # pylint: disable=unnecessary-ellipsis

    async def fetch_user(self, user_id: str) -> User:
        """Fetch a user from the API.

        Raises:
            EntityFetchError: If the user does not exist or the API call fails
        """
        ...  # pylint: disable=unnecessary-ellipsis

    async def send_message(self, channel_id: str, content: str) -> None:
        """Post a message to a channel."""
        ...  # pylint: disable=unnecessary-ellipsis
