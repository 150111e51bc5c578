"""Database connection facade.

Every operation prepares a statement, binds the given values and executes it.
Failures are translated into :mod:`sqlbind.exceptions` types at this single
boundary, with the query and its bound values attached to driver errors.
"""

import os
import re
import time
from collections.abc import Generator
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional, Union

from mypy_extensions import mypyc_attr

from sqlbind.adapters.sqlite.config import SqliteConfig
from sqlbind.adapters.sqlite.driver import SqliteDriver
from sqlbind.exceptions import InvalidArgumentError, ResourceError, SQLBindError, wrap_exceptions
from sqlbind.parameters import bind_values
from sqlbind.utils.logging import get_logger
from sqlbind.utils.type_guards import is_path_like, is_readable

if TYPE_CHECKING:
    from types import TracebackType

    from sqlbind.protocols import DriverProtocol, ReadableProtocol, StatementProtocol
    from sqlbind.typing import DictRow, LastInsertId, ParameterMap

__all__ = ("Connection",)

logger = get_logger("connection")

_NUMERIC_ID = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")


def _normalize_insert_id(identifier: "LastInsertId") -> "LastInsertId":
    if not isinstance(identifier, str) or not _NUMERIC_ID.match(identifier):
        return identifier
    return int(Decimal(identifier.strip()))


@mypyc_attr(allow_interpreted_subclasses=True)
class Connection:
    """Runs SQL queries through a driver adapter.

    Parameters are a sequence of positional values or a mapping whose string
    keys are placeholder names (``":name"``) and whose other keys are
    positional. Only ``None``, ``bool``, ``int``, ``float``, ``str`` and
    ``bytes`` values can be bound.
    """

    def __init__(self, driver: "DriverProtocol") -> None:
        """Wrap a driver adapter.

        Args:
            driver: The driver adapter to run queries with. The connection takes
                ownership of it and closes it in :meth:`close`.
        """
        self._driver = driver

    @classmethod
    def create(cls, database: "Union[str, os.PathLike[str]]" = ":memory:", **params: Any) -> "Connection":
        """Open a SQLite database.

        Args:
            database: Database file path, ``file:`` URI or ``":memory:"``.
            **params: Other :class:`~sqlbind.adapters.sqlite.SqliteConnectionParams`.

        Raises:
            ImproperConfigurationError: If a connection parameter is invalid.
            DatabaseError: If the database cannot be opened.

        Returns:
            A connection to the database.
        """
        return cls.from_config(SqliteConfig.from_params({"database": database, **params}))

    @classmethod
    def from_config(cls, config: SqliteConfig) -> "Connection":
        """Open a SQLite database described by a configuration.

        Raises:
            DatabaseError: If the database cannot be opened.
        """
        with wrap_exceptions(driver_errors=SqliteDriver.error_types):
            connection = config.create_connection()
        logger.debug("Opened SQLite database %s", config.database)
        return cls(SqliteDriver(connection))

    @property
    def driver(self) -> "DriverProtocol":
        """The driver adapter in use. It must not be reconfigured."""
        return self._driver

    @contextmanager
    def _handle_errors(
        self, query: str, parameters: "Optional[ParameterMap]" = None
    ) -> Generator[None, None, None]:
        start_time = time.perf_counter()
        try:
            with wrap_exceptions(query, parameters, driver_errors=self._driver.error_types):
                yield
        except SQLBindError as exc:
            logger.debug(
                "Query failed after %.3fms: %s",
                (time.perf_counter() - start_time) * 1000,
                type(exc).__name__,
                extra={"extra_fields": {"query": query, "error_type": type(exc).__name__}},
            )
            raise
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Executed query in %.3fms",
            duration_ms,
            extra={
                "extra_fields": {
                    "query": query,
                    "parameter_count": len(parameters) if parameters is not None else 0,
                    "duration_ms": duration_ms,
                }
            },
        )

    @contextmanager
    def _execute_statement(
        self, query: str, parameters: "ParameterMap"
    ) -> "Generator[StatementProtocol, None, None]":
        statement = self._driver.prepare(query)
        try:
            bind_values(statement, parameters)
            statement.execute()
            yield statement
        finally:
            statement.close()

    def select(self, query: str, parameters: "ParameterMap" = ()) -> "list[DictRow]":
        """Perform a select query and return the result rows.

        Args:
            query: Full SQL query
            parameters: Values to bind, by placeholder name or position

        Returns:
            The result rows, each indexed by column name.

        Raises:
            InvalidArgumentError: If a value cannot be bound.
            DatabaseError: If the driver reports an error.
        """
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters) as statement:
            return statement.fetch_all()

    def select_first(self, query: str, parameters: "ParameterMap" = ()) -> "Optional[DictRow]":
        """Perform a select query and return the first result row.

        Returns:
            The first row indexed by column name, or ``None`` if nothing is found.
        """
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters) as statement:
            return statement.fetch_one()

    def insert(self, query: str, parameters: "ParameterMap" = ()) -> int:
        """Perform an insert query and return the number of inserted rows."""
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters) as statement:
            return statement.row_count()

    def insert_get_id(
        self, query: str, parameters: "ParameterMap" = (), sequence: "Optional[str]" = None
    ) -> "LastInsertId":
        """Perform an insert query and return the identifier of the last inserted row.

        Args:
            query: Full SQL query
            parameters: Values to bind, by placeholder name or position
            sequence: Name of the sequence object the identifier is taken from

        Returns:
            The identifier. Numeric strings reported by the driver are converted to ``int``.
        """
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters):
            identifier = self._driver.last_insert_id(sequence)
        return _normalize_insert_id(identifier)

    def update(self, query: str, parameters: "ParameterMap" = ()) -> int:
        """Perform an update query and return the number of updated rows."""
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters) as statement:
            return statement.row_count()

    def delete(self, query: str, parameters: "ParameterMap" = ()) -> int:
        """Perform a delete query and return the number of deleted rows."""
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters) as statement:
            return statement.row_count()

    def statement(self, query: str, parameters: "ParameterMap" = ()) -> None:
        """Perform a single general statement, such as DDL."""
        with self._handle_errors(query, parameters), self._execute_statement(query, parameters):
            pass

    def statements(self, sql: str) -> None:
        """Perform every statement of a semicolon-separated script. Nothing is bound."""
        with self._handle_errors(sql):
            self._driver.exec_raw(sql)

    def import_file(self, source: "Union[str, os.PathLike[str], ReadableProtocol]") -> None:
        """Execute the statements of a SQL file.

        Args:
            source: A file path or a readable object. A readable object is read
                to the end and closed.

        Raises:
            ResourceError: If the file cannot be opened or read.
            InvalidArgumentError: If the source is neither a path nor readable, or reading it
                yields neither text nor bytes.
            DatabaseError: If the driver reports an error.
        """
        resource = self._open_source(source)
        try:
            content = resource.read()
            sql_text = content.decode("utf-8") if isinstance(content, bytes) else content
        except (OSError, ValueError) as e:
            msg = f"Failed to read from the resource: {e}"
            raise ResourceError(msg) from e
        finally:
            resource.close()

        if not isinstance(sql_text, str):
            msg = f"The given resource expected to yield a string or bytes, a {type(sql_text).__name__} given"
            raise InvalidArgumentError(msg)

        logger.info("Importing SQL statements", extra={"extra_fields": {"source": str(source), "length": len(sql_text)}})
        self.statements(sql_text)

    @staticmethod
    def _open_source(source: Any) -> "ReadableProtocol":
        if is_readable(source):
            return source
        if is_path_like(source):
            path = os.fspath(source)
            try:
                return open(path, encoding="utf-8")  # noqa: SIM115
            except OSError as e:
                msg = f"Unable to open the file `{path}` for reading: {e.strerror or e}"
                raise ResourceError(msg) from e

        type_name = type(source).__name__
        msg = f"The given source expected to be a file path or a readable object, a {type_name} given"
        raise InvalidArgumentError(msg)

    def close(self) -> None:
        """Close the underlying driver connection."""
        self._driver.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()
