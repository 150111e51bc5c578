from collections.abc import Mapping, Sequence
from typing import Any, Union

from typing_extensions import TypeAlias

__all__ = (
    "BindTarget",
    "DictRow",
    "LastInsertId",
    "ParameterMap",
    "ScalarValue",
)


DictRow: TypeAlias = "dict[str, Any]"
"""A result row indexed by column name."""
ScalarValue: TypeAlias = "Union[None, bool, int, float, str, bytes]"
"""Values that may be bound to a statement placeholder."""
BindTarget: TypeAlias = "Union[str, int]"
"""A placeholder name (``":name"``) or a 1-based placeholder position."""
ParameterMap: TypeAlias = "Union[Sequence[Any], Mapping[Any, Any]]"
"""Type alias for statement parameters.

Represents:
- :type:`Sequence[Any]` of positional values
- :type:`Mapping[Any, Any]` where ``str`` keys are placeholder names and any other key is positional
"""
LastInsertId: TypeAlias = "Union[int, str, None]"
"""Identifier reported by the driver for the last inserted row."""
