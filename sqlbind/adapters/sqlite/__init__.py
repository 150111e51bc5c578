"""SQLite adapter for sqlbind."""

from sqlbind.adapters.sqlite._types import SqliteConnection
from sqlbind.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlbind.adapters.sqlite.driver import SqliteCursor, SqliteDriver, SqliteStatement

__all__ = (
    "SqliteConfig",
    "SqliteConnection",
    "SqliteConnectionParams",
    "SqliteCursor",
    "SqliteDriver",
    "SqliteStatement",
)
