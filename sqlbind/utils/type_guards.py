"""Type guard functions for runtime type checking in sqlbind.

This module provides type-safe runtime checks that help the type checker
understand type narrowing, replacing defensive hasattr() and duck typing patterns.
"""

import io
import os
import socket
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlbind.protocols import ReadableProtocol

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

    from sqlbind.typing import ScalarValue

__all__ = (
    "SqliteErrorProtocol",
    "has_sqlite_error",
    "is_list_like",
    "is_path_like",
    "is_readable",
    "is_resource",
    "is_scalar_value",
    "is_sequence_parameters",
)

_SCALAR_TYPES = (bool, int, float, str, bytes)


@runtime_checkable
class SqliteErrorProtocol(Protocol):
    """Protocol for ``sqlite3.Error`` instances carrying extended error details."""

    sqlite_errorcode: int
    sqlite_errorname: str


def is_scalar_value(value: Any) -> "TypeGuard[ScalarValue]":
    """Check if a value can be bound to a statement placeholder.

    Args:
        value: The value to check

    Returns:
        True if the value is ``None`` or a bool, int, float, str or bytes, False otherwise
    """
    return value is None or isinstance(value, _SCALAR_TYPES)


def is_sequence_parameters(parameters: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if parameters are a positional sequence (but not string or mapping).

    Args:
        parameters: The parameters to check

    Returns:
        True if the parameters are a sequence of values, False otherwise
    """
    return isinstance(parameters, Sequence) and not isinstance(parameters, (str, bytes, bytearray, Mapping))


def is_list_like(value: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if a value renders as a list (list or tuple)."""
    return isinstance(value, (list, tuple))


def is_resource(value: Any) -> bool:
    """Check if a value is an opaque OS-level handle such as a file or socket."""
    return isinstance(value, (io.IOBase, socket.socket))


def is_readable(value: Any) -> "TypeGuard[ReadableProtocol]":
    """Check if a value is a readable file-like object.

    Args:
        value: The value to check

    Returns:
        True if the object exposes callable ``read`` and ``close`` methods, False otherwise
    """
    return isinstance(value, ReadableProtocol) and callable(value.read)


def is_path_like(value: Any) -> "TypeGuard[str | os.PathLike[str]]":
    """Check if a value names a file on disk."""
    return isinstance(value, (str, os.PathLike))


def has_sqlite_error(error: Any) -> "TypeGuard[SqliteErrorProtocol]":
    """Check if an exception carries SQLite extended error code and name.

    Args:
        error: The exception to check

    Returns:
        True if ``sqlite_errorcode`` and ``sqlite_errorname`` are available, False otherwise
    """
    return isinstance(error, SqliteErrorProtocol)
