"""Command framework data models."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from infrastructure.platforms.parsing import ArgumentShape


@dataclass
class Command:
    """Command definition.

    Attributes:
        triggers: Phrases that invoke the command (e.g. "counters view"),
            the first one being the canonical name
        handler: Coroutine called with (CommandContext, raw argument text)
        signatures: Accepted argument shapes, in precedence order
        permission: Name of the config flag that must be truthy for the
            invoking user, or None for no permission gate
        description: Human-readable description
        usage: Optional usage hint overriding the generated one

    Example:
        @registry.command(
            triggers=["counters view", "viewcounter"],
            permission="can_view",
            signatures=[ArgumentShape([Argument("counterName")])],
        )
        async def view_counter(ctx: CommandContext, raw_args: str):
            ...
    """

    triggers: List[str]
    handler: Callable[..., Awaitable[Any]]
    signatures: List[ArgumentShape] = field(default_factory=list)
    permission: Optional[str] = None
    description: str = ""
    usage: str = ""

    def __post_init__(self):
        """Validate command configuration."""
        if not self.triggers:
            raise ValueError("Commands need at least one trigger")
        self.triggers = [" ".join(t.lower().split()) for t in self.triggers]

    @property
    def name(self) -> str:
        return self.triggers[0]


@dataclass(frozen=True)
class CommandMatch:
    """A command found for a piece of message text.

    Attributes:
        command: The matched Command
        trigger: The trigger phrase that matched
        raw_args: Remaining text after the trigger
    """

    command: Command
    trigger: str
    raw_args: str
