import io
import sqlite3

import pytest

from sqlbind.exceptions import (
    DatabaseError,
    ImproperConfigurationError,
    InvalidArgumentError,
    ResourceError,
    SQLBindError,
    wrap_exception,
    wrap_exceptions,
)


def test_exception_hierarchy():
    """Test exception classes inherit correctly."""
    assert issubclass(DatabaseError, SQLBindError)
    assert issubclass(InvalidArgumentError, SQLBindError)
    assert issubclass(InvalidArgumentError, ValueError)
    assert issubclass(ResourceError, SQLBindError)
    assert issubclass(ResourceError, OSError)
    assert issubclass(ImproperConfigurationError, SQLBindError)


def test_exception_detail():
    exc = SQLBindError("Something failed")
    assert exc.detail == "Something failed"
    assert str(exc) == "Something failed"
    assert repr(exc) == "SQLBindError - Something failed"


def test_database_error_content():
    """Test the message carries the query and a rendering of every bound value."""
    long_text = "The quick brown fox jumps over the lazy dog. " * 4
    values = [True, False, None, 1234, "short string", long_text, DatabaseError(), io.StringIO(), [1, 2, 3]]

    exc = DatabaseError("Something has happened", 42, query="INCORRECT SQL FOR ERROR", parameters=values)

    assert str(exc) == (
        "Something has happened; SQL query: (INCORRECT SQL FOR ERROR); bound values: "
        f'[true, false, null, 1234, "short string", "{long_text[:97]}...", '
        "a sqlbind.exceptions.DatabaseError instance, a resource, [1, 2, 3]]"
    )
    assert exc.code == 42
    assert exc.query == "INCORRECT SQL FOR ERROR"
    assert exc.parameters is values


def test_database_error_without_context():
    exc = DatabaseError("Disk I/O failure")

    assert str(exc) == "Disk I/O failure"
    assert exc.code is None
    assert exc.query is None
    assert exc.parameters is None


def test_database_error_query_without_parameters():
    exc = DatabaseError("boom", query="VACUUM")

    assert str(exc) == "boom; SQL query: (VACUUM)"


def test_wrap_driver_error():
    error = sqlite3.OperationalError("Everything is broken")

    wrapped = wrap_exception(error, "BAD SQL", [True, None, "hi"])

    assert isinstance(wrapped, DatabaseError)
    assert str(wrapped) == 'Everything is broken; SQL query: (BAD SQL); bound values: [true, null, "hi"]'
    assert wrapped.error_info == ("Everything is broken",)
    assert wrapped.__cause__ is error


def test_wrap_driver_error_with_named_parameters():
    wrapped = wrap_exception(sqlite3.OperationalError("fail"), "SELECT :foo", {":foo": "bar"})

    assert str(wrapped).endswith('; bound values: [":foo" => "bar"]')


def test_wrap_driver_error_uses_extended_error_details():
    error = sqlite3.IntegrityError("UNIQUE constraint failed: t.id")
    error.sqlite_errorcode = 2067  # type: ignore[attr-defined]
    error.sqlite_errorname = "SQLITE_CONSTRAINT_UNIQUE"  # type: ignore[attr-defined]

    wrapped = wrap_exception(error)

    assert isinstance(wrapped, DatabaseError)
    assert wrapped.code == 2067
    assert wrapped.error_name == "SQLITE_CONSTRAINT_UNIQUE"
    assert str(wrapped) == "UNIQUE constraint failed: t.id"


def test_wrap_is_idempotent():
    """Test wrapping an already wrapped error returns it unchanged."""
    wrapped = wrap_exception(sqlite3.DatabaseError("fail"), "SELECT 1", [1])

    assert wrap_exception(wrapped) is wrapped
    assert wrap_exception(wrapped, "OTHER", [2]) is wrapped


def test_wrap_keeps_sqlbind_errors():
    error = InvalidArgumentError("Bound value #1 expected to be scalar or null, a list given")

    assert wrap_exception(error, "SELECT ?", [[1]]) is error


@pytest.mark.parametrize("error", [TypeError("bad type"), ValueError("bad value"), OverflowError("too large")])
def test_wrap_argument_errors(error: Exception):
    wrapped = wrap_exception(error, "SELECT ?", [1])

    assert isinstance(wrapped, InvalidArgumentError)
    assert str(wrapped) == str(error)
    assert wrapped.__cause__ is error


def test_wrap_passes_through_unrelated_errors():
    error = RuntimeError("unrelated")

    assert wrap_exception(error) is error


def test_wrap_custom_driver_errors():
    class VendorError(Exception):
        pass

    error = VendorError("vendor failure")

    assert wrap_exception(error) is error
    assert isinstance(wrap_exception(error, driver_errors=(VendorError,)), DatabaseError)


def test_wrap_exceptions_context_manager():
    with pytest.raises(DatabaseError, match=r"^no such table: t; SQL query: \(SELECT \* FROM t\)$") as exc_info:
        with wrap_exceptions("SELECT * FROM t"):
            raise sqlite3.OperationalError("no such table: t")

    assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


def test_wrap_exceptions_reraises_unwrapped_errors():
    error = KeyError("missing")

    with pytest.raises(KeyError) as exc_info:
        with wrap_exceptions("SELECT 1"):
            raise error

    assert exc_info.value is error


def test_exception_chaining():
    """Test exceptions support chaining with 'from'."""
    try:
        try:
            raise OSError("Original error")
        except OSError as e:
            raise ResourceError("Failed to read from the resource") from e
    except ResourceError as exc:
        assert exc.__cause__ is not None
        assert isinstance(exc.__cause__, OSError)
