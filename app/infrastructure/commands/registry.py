"""Command registry for registration and trigger lookup."""

import re
from typing import Callable, Dict, List, Optional

from infrastructure.commands.models import Command, CommandMatch
from infrastructure.logging import get_module_logger
from infrastructure.platforms.models import Message
from infrastructure.platforms.parsing import ArgumentShape

logger = get_module_logger()

PermissionResolver = Callable[[Message, str], bool]


class CommandRegistry:
    """Registry of the commands of one plugin.

    Attributes:
        namespace: Plugin namespace for the registry (e.g., "counters")
        permission_resolver: Callable deciding whether a message's author
            holds a named permission; commands without a permission always pass

    Example:
        registry = CommandRegistry("counters", permission_resolver=resolver)

        @registry.command(
            triggers=["counters view", "counter view", "viewcounter"],
            permission="can_view",
            signatures=[ArgumentShape([Argument("counterName")])],
        )
        async def view_counter(ctx: CommandContext, raw_args: str):
            ...
    """

    def __init__(
        self,
        namespace: str,
        permission_resolver: Optional[PermissionResolver] = None,
    ):
        self.namespace = namespace
        self.permission_resolver = permission_resolver
        self._commands: Dict[str, Command] = {}

    def add(self, command: Command) -> Command:
        """Register a Command object."""
        for trigger in command.triggers:
            for existing in self._commands.values():
                if trigger in existing.triggers:
                    raise ValueError(
                        f"Trigger '{trigger}' already registered in {self.namespace}"
                    )
        self._commands[command.name] = command
        logger.debug(
            "registered command",
            namespace=self.namespace,
            name=command.name,
            triggers=command.triggers,
        )
        return command

    def command(
        self,
        triggers: List[str],
        signatures: Optional[List[ArgumentShape]] = None,
        permission: Optional[str] = None,
        description: str = "",
        usage: str = "",
    ) -> Callable:
        """Decorator to register a command handler.

        Returns:
            Decorator function that registers the handler
        """

        def decorator(handler: Callable) -> Callable:
            self.add(
                Command(
                    triggers=triggers,
                    handler=handler,
                    signatures=signatures or [],
                    permission=permission,
                    description=description,
                    usage=usage,
                )
            )
            return handler

        return decorator

    def get_command(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> List[Command]:
        return list(self._commands.values())

    def find_command(self, text: str) -> Optional[CommandMatch]:
        """Find the command whose trigger starts ``text``.

        Triggers match case-insensitively on whole words, with any run of
        whitespace between words; the longest trigger wins.

        Example:
            registry.find_command("Counters  view warnings")
            # CommandMatch(command=..., trigger="counters view", raw_args="warnings")
        """
        best: Optional[CommandMatch] = None
        for command in self._commands.values():
            for trigger in command.triggers:
                pattern = r"\s+".join(re.escape(word) for word in trigger.split())
                match = re.match(rf"^\s*{pattern}(?:\s+|$)", text, re.IGNORECASE)
                if match is None:
                    continue
                if best is None or len(trigger) > len(best.trigger):
                    best = CommandMatch(
                        command=command,
                        trigger=trigger,
                        raw_args=text[match.end():].strip(),
                    )
        return best

    def has_permission(self, command: Command, message: Message) -> bool:
        """Check the command's permission gate for the message author."""
        if command.permission is None:
            return True
        if self.permission_resolver is None:
            logger.warning(
                "permission_resolver_missing",
                namespace=self.namespace,
                permission=command.permission,
            )
            return False
        return bool(self.permission_resolver(message, command.permission))
