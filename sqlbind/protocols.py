"""Runtime-checkable protocols for the driver capability that sqlbind consumes.

A driver adapter prepares statements, binds one value at a time and executes.
Anything implementing these protocols can back a :class:`sqlbind.Connection`.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlbind.parameters import BindType
    from sqlbind.typing import BindTarget, DictRow, LastInsertId

__all__ = ("DriverProtocol", "ReadableProtocol", "StatementProtocol")


@runtime_checkable
class StatementProtocol(Protocol):
    """A prepared statement produced by :meth:`DriverProtocol.prepare`."""

    def bind(self, target: "BindTarget", value: Any, bind_type: "BindType") -> None:
        """Bind a single value to a placeholder name or 1-based position."""
        ...

    def execute(self) -> None:
        """Execute the statement with the values bound so far."""
        ...

    def fetch_all(self) -> "list[DictRow]":
        """Return every remaining result row."""
        ...

    def fetch_one(self) -> "Optional[DictRow]":
        """Return the next result row or ``None`` when there are no rows."""
        ...

    def row_count(self) -> int:
        """Return the number of rows affected by the statement."""
        ...

    def close(self) -> None:
        """Discard unread rows and release driver resources."""
        ...


@runtime_checkable
class DriverProtocol(Protocol):
    """A database connection capable of preparing statements."""

    error_types: "tuple[type[BaseException], ...]"

    def prepare(self, query: str) -> StatementProtocol:
        """Prepare a single SQL statement."""
        ...

    def exec_raw(self, sql: str) -> None:
        """Execute one or more SQL statements without parameter binding."""
        ...

    def last_insert_id(self, sequence: "Optional[str]" = None) -> "LastInsertId":
        """Return the identifier of the last inserted row."""
        ...

    def close(self) -> None:
        """Close the underlying connection."""
        ...


@runtime_checkable
class ReadableProtocol(Protocol):
    """Protocol for file-like objects that SQL text can be read from."""

    def read(self, *args: Any) -> Any:
        """Read the content."""
        ...

    def close(self) -> None:
        """Release the underlying resource."""
        ...
