from collections.abc import Generator
from pathlib import Path

import pytest

from sqlbind import Connection

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def sqlite_connection() -> Generator[Connection, None, None]:
    """An in-memory SQLite connection, closed after the test."""
    connection = Connection.create(":memory:")
    try:
        yield connection
    finally:
        connection.close()
