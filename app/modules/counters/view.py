"""View-counter command flow.

One invocation walks these states in order, skipping the optional ones
when the dimension was supplied or the counter is not kept per it:

    MATCH_SIGNATURE -> VALIDATE_COUNTER -> VALIDATE_SCOPE_COMPAT
        -> RESOLVE_CHANNEL? -> RESOLVE_USER? -> LOOKUP_VALUE -> FORMAT_AND_SEND

Any state may end the invocation with a ``CounterViewError``, which is
posted as a single chat message. Storage failures are not handled here;
they reach the command router.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Union

from infrastructure.commands import CommandContext
from infrastructure.logging import get_module_logger
from infrastructure.persistence import CounterScopeStore
from infrastructure.platforms.models import Channel, UnknownUser, User
from infrastructure.platforms.parsing import (
    Argument,
    ArgumentParsingError,
    ArgumentShape,
    ArgumentType,
    build_converters,
    format_usage,
    match_signature,
)
from infrastructure.platforms.prompts import PromptCoordinator, ReferenceKind
from infrastructure.platforms.resolution import (
    ResolutionStatus,
    lookup_channel_reference,
    lookup_user_reference,
)
from modules.counters.config import CounterDefinition, CountersConfig
from modules.counters.errors import (
    CounterViewError,
    DisambiguationCancelledError,
    UnknownCounterError,
    UnresolvableReferenceError,
    UnsupportedScopeError,
    UsageError,
    ViewNotPermittedError,
)

logger = get_module_logger()

VIEW_COUNTER_TRIGGERS = ["counters view", "counter view", "viewcounter"]
VIEW_COUNTER_PERMISSION = "can_view"

_COUNTER_NAME = Argument("counterName", description="Counter to view")
_USER = Argument("user", ArgumentType.USER, description="User whose value to view")
_CHANNEL = Argument("channel", ArgumentType.CHANNEL, description="Channel whose value to view")

VIEW_COUNTER_SIGNATURES: List[ArgumentShape] = [
    ArgumentShape([_COUNTER_NAME, _USER, _CHANNEL]),
    ArgumentShape([_COUNTER_NAME, _USER]),
    ArgumentShape([_COUNTER_NAME, _CHANNEL]),
    ArgumentShape([_COUNTER_NAME, _CHANNEL, _USER]),
    ArgumentShape([_COUNTER_NAME]),
]

CHANNEL_QUESTION = "Which channel's counter value would you like to view?"
USER_QUESTION = "Which user's counter value would you like to view?"
NOT_TEXT_CHANNEL_MESSAGE = "Channel is not a text channel, cancelling"
UNKNOWN_CHANNEL_MESSAGE = "Unknown channel, cancelling"
UNKNOWN_USER_MESSAGE = "Unknown user, cancelling"


class ViewCounterState(Enum):
    MATCH_SIGNATURE = "match_signature"
    VALIDATE_COUNTER = "validate_counter"
    VALIDATE_SCOPE_COMPAT = "validate_scope_compat"
    RESOLVE_CHANNEL = "resolve_channel"
    RESOLVE_USER = "resolve_user"
    LOOKUP_VALUE = "lookup_value"
    FORMAT_AND_SEND = "format_and_send"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CountersInvocation:
    """Everything one view-counter invocation reads, captured when it starts.

    Attributes:
        ctx: Invocation context (message, guild, client)
        config: Effective plugin config for the invoking message
        counter_ids: Counter key -> counter id table
        store: Counter value store
        prompts: Follow-up prompt coordinator
    """

    ctx: CommandContext
    config: CountersConfig
    counter_ids: Mapping[str, int]
    store: CounterScopeStore
    prompts: PromptCoordinator


def format_counter_value(
    name: str,
    value: int,
    channel: Optional[Channel] = None,
    user: Optional[Union[User, UnknownUser]] = None,
) -> str:
    if channel is not None and user is not None:
        return f"{name} for {user.mention} in {channel.mention} is {value}"
    if channel is not None:
        return f"{name} in {channel.mention} is {value}"
    if user is not None:
        return f"{name} for {user.mention} is {value}"
    return f"{name} is {value}"


class ViewCounterFlow:
    """Runs one view-counter invocation.

    Args:
        invocation: Collaborators and per-message config for this invocation
        raw_args: Argument text following the command trigger
    """

    def __init__(self, invocation: CountersInvocation, raw_args: str):
        self._invocation = invocation
        self._raw_args = raw_args
        self.state = ViewCounterState.MATCH_SIGNATURE
        self.counter_name: Optional[str] = None
        self.counter: Optional[CounterDefinition] = None
        self.counter_id: Optional[int] = None
        self.channel: Optional[Channel] = None
        self.user: Optional[Union[User, UnknownUser]] = None

    @property
    def ctx(self) -> CommandContext:
        return self._invocation.ctx

    def _enter(self, state: ViewCounterState) -> None:
        self.state = state
        logger.debug("view_counter_state", state=state.value)

    async def run(self) -> None:
        """Run the flow to completion.

        Raises:
            StorageUnavailableError: If the counter store cannot be read
        """
        try:
            self._match_signature()
            self._validate_counter()
            self._validate_scope_compat()
            if self.channel is None and self.counter.per_channel:
                await self._resolve_channel()
            if self.user is None and self.counter.per_user:
                await self._resolve_user()
            value = await self._lookup_value()
            await self._format_and_send(value)
        except CounterViewError as e:
            logger.info(
                "view_counter_ended",
                state=self.state.value,
                reason=type(e).__name__,
                counter_name=self.counter_name,
            )
            self.state = ViewCounterState.FAILED
            await self.ctx.respond_error(e.user_message)
            return
        self.state = ViewCounterState.DONE

    def _match_signature(self) -> None:
        self._enter(ViewCounterState.MATCH_SIGNATURE)
        usage = format_usage(self.ctx.trigger, VIEW_COUNTER_SIGNATURES, self.ctx.prefix)
        converters = build_converters(self.ctx.client, self.ctx.guild)
        try:
            match = match_signature(VIEW_COUNTER_SIGNATURES, self._raw_args, converters)
        except ArgumentParsingError as e:
            raise UsageError(f"{e}\n{usage}") from e
        if match is None:
            raise UsageError(usage)

        self.counter_name = match.args["counterName"]
        self.channel = match.args.get("channel")
        self.user = match.args.get("user")

    def _validate_counter(self) -> None:
        self._enter(ViewCounterState.VALIDATE_COUNTER)
        counter = self._invocation.config.counters.get(self.counter_name)
        counter_id = self._invocation.counter_ids.get(self.counter_name)
        if counter is None or counter_id is None:
            raise UnknownCounterError(self.counter_name)
        if counter.can_view is False:
            raise ViewNotPermittedError()
        self.counter = counter
        self.counter_id = counter_id

    def _validate_scope_compat(self) -> None:
        self._enter(ViewCounterState.VALIDATE_SCOPE_COMPAT)
        if self.channel is not None and not self.counter.per_channel:
            raise UnsupportedScopeError("channel")
        if self.user is not None and not self.counter.per_user:
            raise UnsupportedScopeError("user")

    async def _ask(self, question: str, kind: ReferenceKind) -> str:
        outcome = await self._invocation.prompts.prompt_and_wait(
            channel_id=self.ctx.channel_id,
            asking_user_id=self.ctx.user_id,
            question=question,
            expected_kind=kind,
        )
        if outcome.is_cancelled:
            raise DisambiguationCancelledError()
        return outcome.text

    async def _resolve_channel(self) -> None:
        self._enter(ViewCounterState.RESOLVE_CHANNEL)
        reply = await self._ask(CHANNEL_QUESTION, ReferenceKind.CHANNEL)
        result = lookup_channel_reference(self.ctx.guild, reply)
        if result.status is ResolutionStatus.WRONG_TYPE:
            raise UnresolvableReferenceError(NOT_TEXT_CHANNEL_MESSAGE, reply)
        if result.status is not ResolutionStatus.FOUND:
            raise UnresolvableReferenceError(UNKNOWN_CHANNEL_MESSAGE, reply)
        self.channel = result.entity

    async def _resolve_user(self) -> None:
        self._enter(ViewCounterState.RESOLVE_USER)
        reply = await self._ask(USER_QUESTION, ReferenceKind.USER)
        result = await lookup_user_reference(self.ctx.client, reply, self.ctx.guild)
        if not result.is_resolved:
            raise UnresolvableReferenceError(UNKNOWN_USER_MESSAGE, reply)
        self.user = result.entity

    async def _lookup_value(self) -> int:
        self._enter(ViewCounterState.LOOKUP_VALUE)
        value = await self._invocation.store.get_current_value(
            self.counter_id,
            self.channel.id if self.channel is not None else None,
            self.user.id if self.user is not None else None,
        )
        if value is None:
            return self.counter.initial_value
        return value

    async def _format_and_send(self, value: int) -> None:
        self._enter(ViewCounterState.FORMAT_AND_SEND)
        await self.ctx.respond(
            format_counter_value(self.counter.display_name, value, self.channel, self.user)
        )
        logger.info(
            "counter_viewed",
            counter_name=self.counter_name,
            counter_id=self.counter_id,
            channel_id=self.channel.id if self.channel else None,
            target_user_id=self.user.id if self.user else None,
        )


async def run_view_counter(invocation: CountersInvocation, raw_args: str) -> ViewCounterState:
    """Run a view-counter invocation; returns the state it ended in."""
    flow = ViewCounterFlow(invocation, raw_args)
    await flow.run()
    return flow.state
