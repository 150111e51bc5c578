import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlbind.utils.text import render_value
from sqlbind.utils.type_guards import has_sqlite_error

if TYPE_CHECKING:
    from sqlbind.typing import ParameterMap

__all__ = (
    "DEFAULT_DRIVER_ERRORS",
    "DatabaseError",
    "ImproperConfigurationError",
    "InvalidArgumentError",
    "ResourceError",
    "SQLBindError",
    "wrap_exception",
    "wrap_exceptions",
)

DEFAULT_DRIVER_ERRORS: "tuple[type[BaseException], ...]" = (sqlite3.Error,)
"""Exception classes treated as driver failures when no others are given."""

_ARGUMENT_ERRORS: "tuple[type[BaseException], ...]" = (TypeError, ValueError, OverflowError)


class SQLBindError(Exception):
    """Base exception class from which all sqlbind exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLBindError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class InvalidArgumentError(SQLBindError, ValueError):
    """A caller supplied an argument that cannot be used.

    Raised for non-scalar bound values and for import sources that are neither a
    path nor a readable object.
    """


class ImproperConfigurationError(SQLBindError):
    """Improper Configuration error.

    This exception is raised when a connection configuration holds invalid values.
    """


class ResourceError(SQLBindError, OSError):
    """Opening or reading an external file or stream failed."""


class DatabaseError(SQLBindError):
    """The database driver reported a failure.

    The message is composed from the driver message, the SQL query and a
    rendering of the bound values, when they are known.
    """

    code: "Optional[int]"
    error_name: "Optional[str]"
    error_info: "Optional[tuple[Any, ...]]"
    query: "Optional[str]"
    parameters: "Optional[ParameterMap]"

    def __init__(
        self,
        message: str = "",
        code: "Optional[int]" = None,
        *,
        query: "Optional[str]" = None,
        parameters: "Optional[ParameterMap]" = None,
        error_name: "Optional[str]" = None,
        error_info: "Optional[tuple[Any, ...]]" = None,
    ) -> None:
        """Initialize with driver details and query context.

        Args:
            message: The driver error message.
            code: Driver error code, if any.
            query: SQL query which caused the error.
            parameters: Values bound to the query.
            error_name: Symbolic name of the driver error code.
            error_info: Driver-specific diagnostic payload, kept verbatim.
        """
        detail = message
        if query is not None:
            detail = f"{detail}; SQL query: ({query})"
        if parameters is not None:
            detail = f"{detail}; bound values: {render_value(parameters)}"
        super().__init__(detail=detail)
        self.code = code
        self.error_name = error_name
        self.error_info = error_info
        self.query = query
        self.parameters = parameters

    @classmethod
    def from_driver_error(
        cls,
        error: BaseException,
        query: "Optional[str]" = None,
        parameters: "Optional[ParameterMap]" = None,
    ) -> "DatabaseError":
        """Create a ``DatabaseError`` that wraps a driver exception.

        Args:
            error: The original driver exception.
            query: SQL query which caused the error.
            parameters: Values bound to the query.

        Returns:
            A new exception instance with the original as its cause.
        """
        if has_sqlite_error(error):
            code: Optional[int] = error.sqlite_errorcode
            error_name: Optional[str] = error.sqlite_errorname
        else:
            code = None
            error_name = None
        exc = cls(
            str(error),
            code,
            query=query,
            parameters=parameters,
            error_name=error_name,
            error_info=error.args,
        )
        exc.__cause__ = error
        return exc


def wrap_exception(
    error: BaseException,
    query: "Optional[str]" = None,
    parameters: "Optional[ParameterMap]" = None,
    *,
    driver_errors: "tuple[type[BaseException], ...]" = DEFAULT_DRIVER_ERRORS,
) -> BaseException:
    """Translate an exception into the sqlbind error taxonomy.

    This is a factory function that returns an exception instance rather than
    raising, so it is safe to use from ``except`` blocks and ``__exit__`` handlers.

    Mapping:
    1. sqlbind exceptions are returned unchanged
    2. driver exceptions become :class:`DatabaseError` with query context
    3. argument errors (``TypeError``, ``ValueError``, ``OverflowError``) become :class:`InvalidArgumentError`
    4. anything else is returned unchanged

    Args:
        error: The exception to translate.
        query: SQL query which caused the error (if caused by a query).
        parameters: Bound values (if caused by a query).
        driver_errors: Exception classes raised by the database driver.

    Returns:
        The exception to raise.
    """
    if isinstance(error, SQLBindError):
        return error
    if isinstance(error, driver_errors):
        return DatabaseError.from_driver_error(error, query, parameters)
    if isinstance(error, _ARGUMENT_ERRORS):
        exc = InvalidArgumentError(str(error))
        exc.__cause__ = error
        return exc
    return error


@contextmanager
def wrap_exceptions(
    query: "Optional[str]" = None,
    parameters: "Optional[ParameterMap]" = None,
    driver_errors: "tuple[type[BaseException], ...]" = DEFAULT_DRIVER_ERRORS,
) -> Generator[None, None, None]:
    try:
        yield

    except Exception as exc:
        wrapped = wrap_exception(exc, query, parameters, driver_errors=driver_errors)
        if wrapped is exc:
            raise
        raise wrapped from exc
