"""Unit tests for SQLite configuration."""

import dataclasses
import sqlite3
from pathlib import Path

import pytest

from sqlbind.adapters.sqlite import SqliteConfig
from sqlbind.exceptions import ImproperConfigurationError


def test_default_values() -> None:
    """Test default configuration values."""
    config = SqliteConfig()

    assert config.database == ":memory:"
    assert config.timeout == 5.0
    assert config.detect_types == 0
    assert config.isolation_level is None
    assert config.check_same_thread is True
    assert config.cached_statements == 128
    assert config.uri is False


def test_config_is_immutable() -> None:
    config = SqliteConfig()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.timeout = 1.0  # type: ignore[misc]


def test_path_database_is_converted(tmp_path: Path) -> None:
    config = SqliteConfig(database=tmp_path / "test.db")

    assert config.database == str(tmp_path / "test.db")


def test_uri_mode_is_detected() -> None:
    """Test a file: URI enables URI mode."""
    config = SqliteConfig(database="file:memdb1?mode=memory&cache=shared")

    assert config.uri is True


@pytest.mark.parametrize(
    "params,match",
    [
        ({"database": ""}, "must not be empty"),
        ({"timeout": -1}, "timeout must not be negative"),
        ({"cached_statements": -5}, "cached_statements must not be negative"),
        ({"isolation_level": "SERIALIZABLE"}, "isolation_level must be one of"),
    ],
    ids=["empty_database", "negative_timeout", "negative_cache", "bad_isolation_level"],
)
def test_invalid_values(params: dict, match: str) -> None:
    with pytest.raises(ImproperConfigurationError, match=match):
        SqliteConfig(**params)


@pytest.mark.parametrize("isolation_level", [None, "", "DEFERRED", "IMMEDIATE", "EXCLUSIVE"])
def test_valid_isolation_levels(isolation_level: "str | None") -> None:
    assert SqliteConfig(isolation_level=isolation_level).isolation_level == isolation_level


def test_from_params() -> None:
    config = SqliteConfig.from_params({"database": "test.db", "timeout": 10.0})

    assert config.database == "test.db"
    assert config.timeout == 10.0


def test_from_params_rejects_unknown_keys() -> None:
    with pytest.raises(ImproperConfigurationError, match="Unknown SQLite connection parameter\\(s\\): foo, pool_size"):
        SqliteConfig.from_params({"database": "test.db", "pool_size": 5, "foo": 1})


def test_connection_params() -> None:
    config = SqliteConfig(database="test.db", timeout=1.0)

    assert config.connection_params() == {
        "database": "test.db",
        "timeout": 1.0,
        "detect_types": 0,
        "isolation_level": None,
        "check_same_thread": True,
        "cached_statements": 128,
        "uri": False,
    }


def test_create_connection() -> None:
    connection = SqliteConfig().create_connection()
    try:
        assert isinstance(connection, sqlite3.Connection)
        assert connection.isolation_level is None
    finally:
        connection.close()
