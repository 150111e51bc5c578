"""Parameter binding for prepared statements.

Values are bound one at a time, in the order they are given, with a bind type
inferred from the Python type of each value.
"""

from collections.abc import Iterator, Mapping
from enum import Enum
from functools import singledispatch
from typing import TYPE_CHECKING, Any

from sqlbind.exceptions import InvalidArgumentError
from sqlbind.utils.type_guards import is_scalar_value, is_sequence_parameters

if TYPE_CHECKING:
    from sqlbind.protocols import StatementProtocol
    from sqlbind.typing import BindTarget, ParameterMap

__all__ = ("BindType", "bind_value", "bind_values", "describe_target", "infer_bind_type", "iter_bind_targets")


class BindType(str, Enum):
    """Driver-level type used when binding a value."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    STRING = "string"

    def __str__(self) -> str:
        """String representation for better error messages."""
        return self.value


@singledispatch
def infer_bind_type(value: Any) -> BindType:
    """Infer the bind type of a value.

    Precedence is ``None``, then ``bool``, then ``int``; every other accepted
    scalar (``float``, ``str``, ``bytes``) binds as a string so floats keep the
    exact formatting they were given.

    Args:
        value: The value to classify.

    Raises:
        InvalidArgumentError: If the value is not a scalar or ``None``.

    Returns:
        The bind type for the value.
    """
    msg = f"Value expected to be scalar or null, a {type(value).__name__} given"
    raise InvalidArgumentError(msg)


@infer_bind_type.register(type(None))
def _infer_none(value: None) -> BindType:
    return BindType.NULL


@infer_bind_type.register(bool)
def _infer_bool(value: bool) -> BindType:
    return BindType.BOOLEAN


@infer_bind_type.register(int)
def _infer_int(value: int) -> BindType:
    return BindType.INTEGER


@infer_bind_type.register(float)
@infer_bind_type.register(str)
@infer_bind_type.register(bytes)
def _infer_string(value: Any) -> BindType:
    return BindType.STRING


def describe_target(target: "BindTarget") -> str:
    """Describe a bind target for messages: ``#2`` for positions, ```:name``` for names."""
    if isinstance(target, int):
        return f"#{target}"
    return f"`{target}`"


def iter_bind_targets(parameters: "ParameterMap") -> "Iterator[tuple[BindTarget, Any]]":
    """Resolve the bind target of every parameter.

    String keys are placeholder names. Every other entry binds to the running
    1-based position. The position advances on every entry, named or not, so
    ``["Foo", ":number" => 123, "bar"]`` resolves to ``1``, ``":number"``, ``3``.

    Args:
        parameters: A sequence of values or a mapping of keys to values.

    Raises:
        InvalidArgumentError: If parameters are neither a sequence nor a mapping.

    Yields:
        Pairs of bind target and value, in iteration order.
    """
    if is_sequence_parameters(parameters):
        items: Any = ((None, value) for value in parameters)
    elif isinstance(parameters, Mapping):
        items = parameters.items()
    else:
        msg = f"Parameters expected to be a sequence or a mapping, a {type(parameters).__name__} given"
        raise InvalidArgumentError(msg)

    number = 1
    for key, value in items:
        yield (key if isinstance(key, str) else number), value
        number += 1


def bind_value(statement: "StatementProtocol", target: "BindTarget", value: Any) -> None:
    """Bind a single value to a statement.

    Args:
        statement: Prepared statement.
        target: Placeholder name or 1-based position.
        value: Value to bind.

    Raises:
        InvalidArgumentError: If the value is not a scalar or ``None``.
    """
    if not is_scalar_value(value):
        msg = f"Bound value {describe_target(target)} expected to be scalar or null, a {type(value).__name__} given"
        raise InvalidArgumentError(msg)

    statement.bind(target, value, infer_bind_type(value))


def bind_values(statement: "StatementProtocol", parameters: "ParameterMap") -> None:
    """Bind every parameter to a statement, in order.

    Binding stops at the first invalid value. Values bound before it are not
    unbound; the statement must be discarded.

    Args:
        statement: Prepared statement.
        parameters: A sequence of values or a mapping of names or positions to values.

    Raises:
        InvalidArgumentError: If a value is not a scalar or ``None``.
    """
    for target, value in iter_bind_targets(parameters):
        bind_value(statement, target, value)
