import contextlib
import sqlite3
from typing import TYPE_CHECKING, Any, Optional

from mypy_extensions import mypyc_attr

from sqlbind.adapters.sqlite.core import coerce_bind_value, collect_rows, compile_placeholders, resolve_rowcount
from sqlbind.parameters import describe_target

if TYPE_CHECKING:
    from sqlbind.adapters.sqlite._types import SqliteConnection
    from sqlbind.parameters import BindType
    from sqlbind.typing import BindTarget, DictRow, LastInsertId

__all__ = ("SqliteCursor", "SqliteDriver", "SqliteStatement")


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


@mypyc_attr(allow_interpreted_subclasses=True)
class SqliteStatement:
    """A prepared SQLite statement that binds one value at a time.

    Placeholders are numbered the way SQLite numbers them, so a position refers
    to the same parameter index SQLite would use, named placeholders included.
    Rows are read from the open cursor as they are fetched; the cursor is
    closed once the result is exhausted or the statement is closed.
    """

    __slots__ = ("_compiled", "_connection", "_cursor", "_description", "_rowcount", "_values", "query")

    def __init__(self, connection: "SqliteConnection", query: str) -> None:
        self._connection = connection
        self.query = query
        self._compiled = compile_placeholders(query)
        self._values: dict[int, Any] = {}
        self._cursor: Optional[sqlite3.Cursor] = None
        self._description: Optional[Any] = None
        self._rowcount = 0

    @property
    def sql(self) -> str:
        """The query with every placeholder rewritten to ``?NNN``."""
        return self._compiled.sql

    @property
    def parameter_count(self) -> int:
        """The largest placeholder index in the query."""
        return self._compiled.parameter_count

    def _resolve_index(self, target: "BindTarget") -> int:
        if isinstance(target, str):
            index = self._compiled.resolve_name(target)
            if index is None:
                msg = f"Parameter {describe_target(target)} is not defined in the statement"
                raise sqlite3.ProgrammingError(msg)
            return index
        if not 1 <= target <= self._compiled.parameter_count:
            msg = (
                f"Parameter {describe_target(target)} is out of range, "
                f"the statement has {self._compiled.parameter_count} parameter(s)"
            )
            raise sqlite3.ProgrammingError(msg)
        return target

    def bind(self, target: "BindTarget", value: Any, bind_type: "BindType") -> None:
        """Bind a value to a placeholder name or 1-based index.

        Raises:
            sqlite3.ProgrammingError: If the placeholder does not exist.
        """
        self._values[self._resolve_index(target)] = coerce_bind_value(value, bind_type)

    def execute(self) -> None:
        """Execute the statement, leaving its cursor open for fetching.

        Raises:
            sqlite3.ProgrammingError: If a placeholder has no bound value.
        """
        used = sorted({placeholder.index for placeholder in self._compiled.placeholders})
        missing = [index for index in used if index not in self._values]
        if missing:
            msg = f"No value bound to parameter #{missing[0]}"
            raise sqlite3.ProgrammingError(msg)

        self.close()
        parameters = [self._values.get(index) for index in range(1, self._compiled.parameter_count + 1)]
        cursor = self._connection.cursor()
        try:
            cursor.execute(self._compiled.sql, parameters)
        except Exception:
            with contextlib.suppress(Exception):
                cursor.close()
            raise
        self._rowcount = resolve_rowcount(cursor)
        if cursor.description:
            self._cursor = cursor
            self._description = cursor.description
        else:
            cursor.close()

    def fetch_all(self) -> "list[DictRow]":
        if self._cursor is None:
            return []
        rows = collect_rows(self._cursor.fetchall(), self._description)
        self.close()
        return rows

    def fetch_one(self) -> "Optional[DictRow]":
        if self._cursor is None:
            return None
        row = self._cursor.fetchone()
        if row is None:
            self.close()
            return None
        return collect_rows([row], self._description)[0]

    def row_count(self) -> int:
        return self._rowcount

    def close(self) -> None:
        """Release the cursor. Unread rows are discarded."""
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            with contextlib.suppress(Exception):
                cursor.close()


@mypyc_attr(allow_interpreted_subclasses=True)
class SqliteDriver:
    """Driver adapter over a :class:`sqlite3.Connection`."""

    dialect = "sqlite"
    error_types: "tuple[type[BaseException], ...]" = (sqlite3.Error,)

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection

    def prepare(self, query: str) -> SqliteStatement:
        return SqliteStatement(self.connection, query)

    def exec_raw(self, sql: str) -> None:
        """Execute a script of semicolon-separated statements."""
        self.connection.executescript(sql)

    def last_insert_id(self, sequence: "Optional[str]" = None) -> "LastInsertId":
        """Return the rowid of the most recent successful insert.

        SQLite has no sequence objects, so ``sequence`` is ignored.
        """
        with SqliteCursor(self.connection) as cursor:
            cursor.execute("SELECT last_insert_rowid()")
            row = cursor.fetchone()
        return row[0] if row else None

    def close(self) -> None:
        self.connection.close()
