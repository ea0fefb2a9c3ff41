"""Render plugin configuration schemas as human-readable type trees.

Folds a Pydantic model (or any typing annotation) into a compact
TypeScript-like description used by the plugin documentation:

    {
      counters: {
        [string]: {
          name: Optional<Nullable<string>>
          per_channel: boolean
        }
      }
      can_view: boolean
    }

Rules:
    - models render as ``{ field: <type> }``, one field per indented line
    - ``Dict[str, T]`` renders as ``{ [string]: <T> }``
    - a field that is not required and defaults to None renders as ``Optional<T>``
    - ``List[T]`` / ``Tuple[T, ...]`` / ``Set[T]`` render as ``Array<T>``
    - ``Union[A, B]`` renders as ``A | B``; ``Union[T, None]`` as ``Nullable<T>``
    - ``Literal`` values render as the literal value itself
    - str / int / float / bool render as string / number / number / boolean
    - ``Never`` / ``NoReturn`` render as ``never``
    - anything else renders as ``unknown``
"""

import types
from typing import Annotated, Any, Literal, Never, NoReturn, Union, get_args, get_origin

from pydantic import BaseModel

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)
_PRIMITIVES = {
    bool: "boolean",
    str: "string",
    int: "number",
    float: "number",
}


def _indent_lines(text: str, indent: int) -> str:
    padding = " " * indent
    return "\n".join(f"{padding}{line}" for line in text.split("\n"))


def _format_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_model(model: type) -> str:
    lines = []
    for field_name, field_info in model.model_fields.items():
        rendered = format_config_schema(field_info.annotation)
        if (
            not field_info.is_required()
            and field_info.default is None
            and field_info.default_factory is None
        ):
            rendered = f"Optional<{rendered}>"
        lines.append(_indent_lines(f"{field_name}: {rendered}", 2))
    return "{\n" + "\n".join(lines) + "\n}"


def _format_union(args: tuple) -> str:
    non_none = [arg for arg in args if arg is not type(None)]
    if len(non_none) < len(args):
        inner = non_none[0] if len(non_none) == 1 else Union[tuple(non_none)]
        return f"Nullable<{format_config_schema(inner)}>"
    return " | ".join(format_config_schema(arg) for arg in args)


def format_config_schema(schema: Any) -> str:
    """Render a Pydantic model class or typing annotation as a type tree.

    Args:
        schema: Pydantic BaseModel subclass or typing annotation.

    Returns:
        Multi-line string description of the schema.

    Example:
        >>> format_config_schema(Dict[str, List[int]])
        '{\\n  [string]: Array<number>\\n}'
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return _format_model(schema)

    origin = get_origin(schema)
    args = get_args(schema)

    if origin is Annotated:
        return format_config_schema(args[0])

    if origin is dict:
        value_type = args[1] if len(args) == 2 else Any
        return (
            "{\n"
            + _indent_lines(f"[string]: {format_config_schema(value_type)}", 2)
            + "\n}"
        )

    if origin in _SEQUENCE_ORIGINS:
        item_type = args[0] if args else Any
        return f"Array<{format_config_schema(item_type)}>"

    if origin is Union or origin is types.UnionType:
        return _format_union(args)

    if origin is Literal:
        return " | ".join(_format_literal(value) for value in args)

    if schema is Never or schema is NoReturn:
        return "never"

    if isinstance(schema, type) and schema in _PRIMITIVES:
        return _PRIMITIVES[schema]

    return "unknown"
