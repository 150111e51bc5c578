"""Text rendering helpers for diagnostic messages."""

import numbers
from collections.abc import Mapping
from typing import Any, Final

from sqlbind.utils.type_guards import is_list_like, is_resource

__all__ = ("MAX_RENDERED_STRING_LENGTH", "render_value", "truncate")

MAX_RENDERED_STRING_LENGTH: Final[int] = 100
_ELLIPSIS: Final[str] = "..."


def truncate(text: str, max_length: int = MAX_RENDERED_STRING_LENGTH) -> str:
    """Shorten a string to at most ``max_length`` code points.

    Args:
        text: The string to shorten.
        max_length: Maximum number of code points in the result.

    Returns:
        The original string, or its head followed by ``...`` when it is too long.
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(_ELLIPSIS)] + _ELLIPSIS


def _type_name(value: Any) -> str:
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _is_positional_mapping(value: "Mapping[Any, Any]") -> bool:
    return all(type(key) is int and key == index for index, key in enumerate(value))


def render_value(value: Any) -> str:
    """Render an arbitrary value for an error message.

    Strings are quoted without escaping and capped at
    :data:`MAX_RENDERED_STRING_LENGTH` code points. Lists, tuples and mappings
    are rendered recursively; a mapping whose keys are not ``0..n-1`` in order
    is rendered as ``[key => value, ...]``.

    Args:
        value: The value to render.

    Returns:
        A single-line representation that is safe to embed in a message.

    Example:
        >>> render_value([True, None, "hi"])
        '[true, null, "hi"]'
        >>> render_value({":foo": "bar"})
        '[":foo" => "bar"]'
    """
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        return f'"{truncate(value)}"'
    if is_list_like(value):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        if _is_positional_mapping(value):
            return "[" + ", ".join(render_value(item) for item in value.values()) + "]"
        return "[" + ", ".join(f"{render_value(key)} => {render_value(item)}" for key, item in value.items()) + "]"
    if is_resource(value):
        return "a resource"
    if isinstance(value, numbers.Number):
        return str(value)
    return f"a {_type_name(value)} instance"
