"""Multi-signature argument matching.

A command declares an ordered list of ``ArgumentShape``s. Raw input is
tokenized once and matched against each shape in order; the first shape
whose arguments all accept a token, with no token left over, wins.
There is no backtracking across shapes, so the same input and shape list
always select the same shape.

Tokens are accepted per argument type by converters: synchronous callables
that return the converted value or raise ``ArgumentConversionError``.
Converters only consult cached chat data, so matching never suspends.

Example:
    shapes = [
        ArgumentShape([Argument("counterName"), Argument("user", ArgumentType.USER)]),
        ArgumentShape([Argument("counterName")]),
    ]
    match = match_signature(shapes, "warnings <@!123456789012345678>", converters)
    # SignatureMatch(shape_index=0, args={"counterName": "warnings", "user": User(...)})
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from infrastructure.logging import get_module_logger
from infrastructure.platforms.client import ChatClient
from infrastructure.platforms.exceptions import ArgumentConversionError
from infrastructure.platforms.models import Guild
from infrastructure.platforms.parsing.models import (
    ArgumentShape,
    ArgumentType,
    SignatureMatch,
)
from infrastructure.platforms.parsing.tokenizer import tokenize
from infrastructure.platforms.resolution import (
    ResolutionStatus,
    lookup_channel_reference,
    resolve_user_reference_cached,
)

logger = get_module_logger()

Converter = Callable[[str], Any]


def convert_string(value: str) -> str:
    return value


def make_user_converter(client: ChatClient, guild: Optional[Guild]) -> Converter:
    """Converter accepting user IDs, mentions and exact usernames or tags (cache only)."""

    def convert(value: str) -> Any:
        user = resolve_user_reference_cached(client, value, guild, allow_partial=False)
        if user is None:
            raise ArgumentConversionError("user", value, "no matching user")
        return user

    return convert


def make_channel_converter(guild: Guild) -> Converter:
    """Converter accepting references to text channels of ``guild``."""

    def convert(value: str) -> Any:
        result = lookup_channel_reference(guild, value)
        if result.status is ResolutionStatus.WRONG_TYPE:
            raise ArgumentConversionError("channel", value, "not a text channel")
        if result.status is not ResolutionStatus.FOUND:
            raise ArgumentConversionError("channel", value, "no matching channel")
        return result.entity

    return convert


def build_converters(client: ChatClient, guild: Guild) -> Dict[ArgumentType, Converter]:
    """Converters for every ArgumentType, bound to one invocation's guild."""
    return {
        ArgumentType.STRING: convert_string,
        ArgumentType.USER: make_user_converter(client, guild),
        ArgumentType.CHANNEL: make_channel_converter(guild),
    }


def _match_shape(
    shape: ArgumentShape,
    tokens: List[str],
    converters: Mapping[ArgumentType, Converter],
) -> Optional[Dict[str, Any]]:
    args: Dict[str, Any] = {}
    position = 0

    for argument in shape.arguments:
        if position >= len(tokens):
            if argument.required:
                return None
            continue

        converter = converters.get(argument.type, convert_string)
        try:
            args[argument.name] = converter(tokens[position])
        except ArgumentConversionError:
            if argument.required:
                return None
            continue
        position += 1

    if position < len(tokens):
        return None
    return args


def match_signature(
    shapes: Sequence[ArgumentShape],
    raw_args: Union[str, Sequence[str]],
    converters: Mapping[ArgumentType, Converter],
) -> Optional[SignatureMatch]:
    """Match raw arguments against ``shapes`` in declaration order.

    Args:
        shapes: Accepted signatures, most specific first.
        raw_args: Raw argument text, or already tokenized arguments.
        converters: Token converters per ArgumentType.

    Returns:
        SignatureMatch for the first matching shape, or None if none match.

    Raises:
        ArgumentParsingError: If ``raw_args`` text cannot be tokenized.
    """
    tokens = tokenize(raw_args) if isinstance(raw_args, str) else list(raw_args)

    for index, shape in enumerate(shapes):
        args = _match_shape(shape, tokens, converters)
        if args is not None:
            logger.debug("signature_matched", shape_index=index, token_count=len(tokens))
            return SignatureMatch(shape_index=index, args=args)

    logger.debug("signature_not_matched", shape_count=len(shapes), token_count=len(tokens))
    return None


def format_usage(trigger: str, shapes: Sequence[ArgumentShape], prefix: str = "") -> str:
    """Usage text listing every accepted signature of a command."""
    lines = ["Usage:"]
    for shape in shapes:
        signature = f"{prefix}{trigger} {shape.usage()}".rstrip()
        lines.append(f"`{signature}`")
    return "\n".join(lines)
