"""SQLite connection configuration."""

import os
import sqlite3
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlbind.exceptions import ImproperConfigurationError
from sqlbind.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlbind.adapters.sqlite._types import SqliteConnection

__all__ = ("SqliteConfig", "SqliteConnectionParams")

logger = get_logger("adapters.sqlite")

_ISOLATION_LEVELS = frozenset({None, "", "DEFERRED", "IMMEDIATE", "EXCLUSIVE"})


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired["Union[str, os.PathLike[str]]"]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


@dataclass(frozen=True)
class SqliteConfig:
    """Immutable SQLite connection settings.

    The configuration is fixed when the connection is created. ``isolation_level``
    defaults to ``None`` so every statement commits on its own.
    """

    database: "Union[str, os.PathLike[str]]" = ":memory:"
    timeout: float = 5.0
    detect_types: int = 0
    isolation_level: "Optional[str]" = None
    check_same_thread: bool = True
    cached_statements: int = 128
    uri: bool = False

    def __post_init__(self) -> None:
        database = os.fspath(self.database)
        if not database:
            msg = "SQLite database must not be empty"
            raise ImproperConfigurationError(msg)
        if self.timeout < 0:
            msg = f"SQLite timeout must not be negative, {self.timeout!r} given"
            raise ImproperConfigurationError(msg)
        if self.cached_statements < 0:
            msg = f"SQLite cached_statements must not be negative, {self.cached_statements!r} given"
            raise ImproperConfigurationError(msg)
        if self.isolation_level not in _ISOLATION_LEVELS:
            msg = (
                f"SQLite isolation_level must be one of None, 'DEFERRED', 'IMMEDIATE' or 'EXCLUSIVE', "
                f"{self.isolation_level!r} given"
            )
            raise ImproperConfigurationError(msg)

        object.__setattr__(self, "database", database)
        if database.startswith("file:") and not self.uri:
            logger.debug("Database URI detected (%s) but uri=True not set. Auto-enabling URI mode.", database)
            object.__setattr__(self, "uri", True)

    @classmethod
    def from_params(cls, params: "Union[SqliteConnectionParams, dict[str, Any]]") -> "SqliteConfig":
        """Build a configuration from a parameter mapping.

        Raises:
            ImproperConfigurationError: If a parameter is unknown or invalid.
        """
        unknown = set(params) - set(SqliteConnectionParams.__annotations__)
        if unknown:
            msg = f"Unknown SQLite connection parameter(s): {', '.join(sorted(unknown))}"
            raise ImproperConfigurationError(msg)
        return cls(**params)

    def connection_params(self) -> "dict[str, Any]":
        """Return the keyword arguments for :func:`sqlite3.connect`."""
        return asdict(self)

    def create_connection(self) -> "SqliteConnection":
        """Open a new SQLite connection.

        Raises:
            sqlite3.Error: If the database cannot be opened.
        """
        return sqlite3.connect(**self.connection_params())
