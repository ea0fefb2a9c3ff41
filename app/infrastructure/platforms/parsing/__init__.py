"""Command argument parsing infrastructure.

Provides quote-aware tokenization and multi-signature argument matching
for chat commands.
"""

from infrastructure.platforms.parsing.models import (
    Argument,
    ArgumentShape,
    ArgumentType,
    ArgumentParsingError,
    SignatureMatch,
)
from infrastructure.platforms.parsing.tokenizer import tokenize
from infrastructure.platforms.parsing.matcher import (
    Converter,
    build_converters,
    format_usage,
    match_signature,
)

__all__ = [
    "Argument",
    "ArgumentShape",
    "ArgumentType",
    "ArgumentParsingError",
    "SignatureMatch",
    "Converter",
    "build_converters",
    "format_usage",
    "match_signature",
    "tokenize",
]
