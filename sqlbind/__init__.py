"""sqlbind: a thin database access layer with typed parameter binding."""

from sqlbind import adapters, exceptions, parameters, typing, utils
from sqlbind.__metadata__ import __version__
from sqlbind.adapters.sqlite import SqliteConfig, SqliteConnectionParams, SqliteDriver
from sqlbind.connection import Connection
from sqlbind.exceptions import (
    DatabaseError,
    ImproperConfigurationError,
    InvalidArgumentError,
    ResourceError,
    SQLBindError,
    wrap_exception,
    wrap_exceptions,
)
from sqlbind.parameters import BindType, bind_value, bind_values, infer_bind_type
from sqlbind.protocols import DriverProtocol, StatementProtocol
from sqlbind.typing import DictRow, ParameterMap
from sqlbind.utils.text import render_value

__all__ = (
    "BindType",
    "Connection",
    "DatabaseError",
    "DictRow",
    "DriverProtocol",
    "ImproperConfigurationError",
    "InvalidArgumentError",
    "ParameterMap",
    "ResourceError",
    "SQLBindError",
    "SqliteConfig",
    "SqliteConnectionParams",
    "SqliteDriver",
    "StatementProtocol",
    "__version__",
    "adapters",
    "bind_value",
    "bind_values",
    "exceptions",
    "infer_bind_type",
    "parameters",
    "render_value",
    "typing",
    "utils",
    "wrap_exception",
    "wrap_exceptions",
)
