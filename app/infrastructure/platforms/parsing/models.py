"""Argument definition models for command signatures.

Provides:
- ArgumentType: Enum of supported argument types
- Argument: Definition of a single positional argument
- ArgumentShape: One accepted signature (ordered list of arguments)
- SignatureMatch: Result of matching raw input against signatures
- ArgumentParsingError: Exception raised when tokenization fails
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ArgumentType(str, Enum):
    """Supported argument types for parsing and validation."""

    STRING = "string"
    USER = "user"  # Loose user reference (mention, ID or name)
    CHANNEL = "channel"  # Text channel reference (mention, ID or name)


@dataclass(frozen=True)
class Argument:
    """Definition of a single positional command argument.

    Attributes:
        name: Argument name (e.g., 'counterName', 'user').
        type: Argument type used to accept or reject a token.
        required: Optional arguments are skipped when no token is left.
        description: Human-readable description.
    """

    name: str
    type: ArgumentType = ArgumentType.STRING
    required: bool = True
    description: str = ""

    def usage(self) -> str:
        """Usage fragment, e.g. ``<user>`` or ``[reason]``."""
        if self.required:
            return f"<{self.name}>"
        return f"[{self.name}]"


@dataclass(frozen=True)
class ArgumentShape:
    """One accepted argument signature of a command.

    Shapes of a command are evaluated in declaration order, so more
    specific shapes should be declared first.
    """

    arguments: List[Argument] = field(default_factory=list)

    def usage(self) -> str:
        return " ".join(arg.usage() for arg in self.arguments)


@dataclass(frozen=True)
class SignatureMatch:
    """A successful signature match.

    Attributes:
        shape_index: Index of the winning shape in the declared list
        args: Converted values keyed by argument name
    """

    shape_index: int
    args: Dict[str, Any]


@dataclass
class ArgumentParsingError(Exception):
    """Raised when raw command text cannot be tokenized.

    Attributes:
        argument: The offending input fragment.
        message: Error message.
        suggestion: Optional suggestion for fixing the error.
    """

    argument: str
    message: str
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        """Format error message for display."""
        result = f"Error parsing {self.argument}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result
