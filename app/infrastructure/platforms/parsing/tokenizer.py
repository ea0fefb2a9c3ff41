"""Quote-aware tokenization of raw command text."""

from typing import List, Optional

from infrastructure.platforms.parsing.models import ArgumentParsingError

QUOTE_CHARS = ('"', "'", "`")


def tokenize(text: str) -> List[str]:
    """Split command text on whitespace, keeping quoted values intact.

    Supports double quotes, single quotes and backticks, backslash escapes,
    other quote types nested inside a quoted value, and empty quoted
    strings.

    Example:
        >>> tokenize('view "daily warnings" <@!123456789012345678>')
        ['view', 'daily warnings', '<@!123456789012345678>']

        >>> tokenize('view ""')
        ['view', '']

    Raises:
        ArgumentParsingError: If a quoted value is never closed.
    """
    if not text or not text.strip():
        return []

    tokens: List[str] = []
    current: List[str] = []
    quote_char: Optional[str] = None
    escaped = False
    was_quoted = False

    for char in text:
        if escaped:
            current.append(char)
            escaped = False
            continue

        if char == "\\":
            escaped = True
            continue

        if char in QUOTE_CHARS:
            if quote_char is None:
                quote_char = char
                was_quoted = True
            elif char == quote_char:
                quote_char = None
            else:
                current.append(char)
            continue

        if char.isspace() and quote_char is None:
            if current or was_quoted:
                tokens.append("".join(current))
                current = []
                was_quoted = False
            continue

        current.append(char)

    if quote_char is not None:
        raise ArgumentParsingError(
            argument=text,
            message=f"Unclosed quote: {quote_char}",
            suggestion="Close the quoted value or escape the quote with a backslash",
        )

    if current or was_quoted:
        tokens.append("".join(current))

    return tokens
