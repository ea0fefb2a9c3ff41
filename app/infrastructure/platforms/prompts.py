"""Interactive follow-up prompts.

A command that is missing a required piece of information asks the
invoking user a question and suspends until that user answers in the same
channel, or until a wall-clock timeout elapses:

    Prompted ──(first message from asking user in channel)──> Resolved
        └─────(timeout, or the reply has no content)────────> Cancelled

``ReplyWaiter`` owns the pending reply futures and is fed every inbound
message by the router. ``PromptCoordinator`` sends the question and turns
the wait into a ``PromptOutcome``.
"""

import asyncio
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from infrastructure.logging import get_module_logger
from infrastructure.platforms.client import ChatClient
from infrastructure.platforms.exceptions import PlatformError, PromptError
from infrastructure.platforms.models import Message

logger = get_module_logger()


class ReferenceKind(Enum):
    """What a follow-up question expects the reply to name."""

    CHANNEL = "channel"
    USER = "user"


class PromptState(Enum):
    """Terminal states of a follow-up prompt."""

    RESOLVED = "resolved"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PendingPrompt:
    """A question that is waiting for its answer.

    Attributes:
        asking_user_id: Only this user's reply counts
        channel_id: Only replies in this channel count
        deadline: Event loop time after which the prompt is cancelled
        expected_kind: Kind of entity the reply should name
    """

    asking_user_id: str
    channel_id: str
    deadline: float
    expected_kind: ReferenceKind

    def remaining(self, now: float) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline - now)

    def log_context(self) -> Dict[str, str]:
        return {
            "channel_id": self.channel_id,
            "asking_user_id": self.asking_user_id,
            "expected_kind": self.expected_kind.value,
        }


@dataclass(frozen=True)
class PromptOutcome:
    """Result of a follow-up prompt."""

    state: PromptState
    text: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self.state is PromptState.CANCELLED

    @classmethod
    def resolved(cls, text: str) -> "PromptOutcome":
        return cls(state=PromptState.RESOLVED, text=text)

    @classmethod
    def cancelled(cls) -> "PromptOutcome":
        return cls(state=PromptState.CANCELLED)


class ReplyExpectation:
    """A registered wait for one message from one user in one channel.

    The expectation is registered as soon as it is created, so a reply
    that arrives before ``wait`` is awaited is not lost.
    """

    def __init__(self, waiter: "ReplyWaiter", channel_id: str, author_id: str):
        self.id = uuid.uuid4().hex
        self.channel_id = channel_id
        self.author_id = author_id
        self._waiter = waiter
        self._future: "asyncio.Future[Message]" = (
            asyncio.get_running_loop().create_future()
        )

    def matches(self, message: Message) -> bool:
        return (
            not self._future.done()
            and message.channel_id == self.channel_id
            and message.author.id == self.author_id
        )

    def deliver(self, message: Message) -> None:
        if not self._future.done():
            self._future.set_result(message)

    async def wait(self, timeout: float) -> Optional[Message]:
        """Wait for the reply; None if ``timeout`` seconds pass first."""
        try:
            return await asyncio.wait_for(self._future, timeout=max(timeout, 0))
        except asyncio.TimeoutError:
            logger.info(
                "reply_wait_timed_out",
                channel_id=self.channel_id,
                author_id=self.author_id,
                timeout=timeout,
            )
            return None
        finally:
            self.release()

    def release(self) -> None:
        self._waiter.discard(self.id)
        if not self._future.done():
            self._future.cancel()


class ReplyWaiter:
    """Registry of pending reply waits, fed by the message loop.

    Each wait is scoped to ``(channel_id, author_id)``. A message resolves
    every pending wait whose scope it matches and nothing else.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, ReplyExpectation] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def expect_reply(self, channel_id: str, author_id: str) -> ReplyExpectation:
        expectation = ReplyExpectation(self, channel_id, author_id)
        self._pending[expectation.id] = expectation
        return expectation

    def discard(self, expectation_id: str) -> None:
        self._pending.pop(expectation_id, None)

    def feed(self, message: Message) -> bool:
        """Offer an inbound message to pending waits.

        Returns:
            True if the message answered at least one pending wait
        """
        consumed = False
        for expectation in list(self._pending.values()):
            if expectation.matches(message):
                expectation.deliver(message)
                consumed = True
        if consumed:
            logger.debug(
                "reply_received",
                channel_id=message.channel_id,
                author_id=message.author.id,
            )
        return consumed

    async def wait_for_reply(
        self, channel_id: str, author_id: str, timeout: float
    ) -> Optional[Message]:
        """Wait for the next message from ``author_id`` in ``channel_id``."""
        return await self.expect_reply(channel_id, author_id).wait(timeout)


class PromptCoordinator:
    """Sends follow-up questions and waits for the asking user's answer.

    Args:
        client: Chat client used to post the question
        waiter: ReplyWaiter fed by the message loop
        default_timeout: Seconds to wait when ``prompt_and_wait`` gets no timeout
    """

    def __init__(
        self, client: ChatClient, waiter: ReplyWaiter, default_timeout: float
    ):
        self._client = client
        self._waiter = waiter
        self._default_timeout = default_timeout

    async def prompt_and_wait(
        self,
        channel_id: str,
        asking_user_id: str,
        question: str,
        expected_kind: ReferenceKind,
        timeout: Optional[float] = None,
    ) -> PromptOutcome:
        """Ask ``question`` in the channel and wait for the asking user's reply.

        Only the first reply is consulted. A reply with no content, or no
        reply before the deadline, cancels the prompt.

        Raises:
            PromptError: The question could not be sent.
        """
        loop = asyncio.get_running_loop()
        effective_timeout = self._default_timeout if timeout is None else timeout
        prompt = PendingPrompt(
            asking_user_id=asking_user_id,
            channel_id=channel_id,
            deadline=loop.time() + effective_timeout,
            expected_kind=expected_kind,
        )

        expectation = self._waiter.expect_reply(prompt.channel_id, prompt.asking_user_id)
        try:
            try:
                await self._client.send_message(prompt.channel_id, question)
            except PlatformError as e:
                logger.warning("prompt_not_delivered", error=str(e), **prompt.log_context())
                raise PromptError(f"Could not ask in channel {channel_id}") from e
            logger.info("prompt_sent", timeout=effective_timeout, **prompt.log_context())
            reply = await expectation.wait(prompt.remaining(loop.time()))
        finally:
            expectation.release()

        if reply is None or not reply.content.strip():
            logger.info("prompt_cancelled", timed_out=reply is None, **prompt.log_context())
            return PromptOutcome.cancelled()

        return PromptOutcome.resolved(reply.content.strip())
