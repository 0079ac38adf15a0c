"""
Pytest configuration for the export job.

Provides fixtures for:
- Settings construction without touching the process environment
- A seeded SQLite database reached through the stdlib DB-API driver
- A scriptable fake DB-API driver for failure paths
"""

from __future__ import annotations

import sqlite3
import types
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from param_export.config import ExportSettings

SQLITE_QUERY = "SELECT id, category, day, amount FROM records WHERE category = ? AND day = ? ORDER BY id"


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., ExportSettings]:
    """
    Factory for settings with test defaults; keyword arguments override fields.
    """

    def factory(**overrides: Any) -> ExportSettings:
        values: Dict[str, Any] = {
            "param_file": str(tmp_path / "params.tsv"),
            "base_dir": str(tmp_path),
            "db_driver": "sqlite3",
            "db_url": str(tmp_path / "source.db"),
            "db_user": None,
            "db_password": None,
            "db_timeout_seconds": 0,
            "db_query": SQLITE_QUERY,
            "output_file": str(tmp_path / "out" / "export.txt"),
            "output_delimiter": "|",
            "output_max_count": 2,
            "output_number_length": 3,
            "sleep_seconds": 1,
        }
        values.update(overrides)
        return ExportSettings(_env_file=None, **values)

    return factory


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Path:
    """
    SQLite file with three rows for (A, B) and one row for (C, D).
    """
    db_path = tmp_path / "source.db"
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "CREATE TABLE records (id INTEGER PRIMARY KEY, category TEXT, day TEXT, amount TEXT)"
        )
        conn.executemany(
            "INSERT INTO records (category, day, amount) VALUES (?, ?, ?)",
            [
                ("A", "B", "  10.50 "),
                ("A", "B", "20"),
                ("A", "B", None),
                ("C", "D", "\t40 "),
            ],
        )
        conn.commit()
    finally:
        conn.close()
    return db_path


class FakeError(Exception):
    pass


class FakeProgrammingError(FakeError):
    pass


class FakeCursor:
    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection
        self.description: Optional[List[tuple]] = None
        self._rows: List[tuple] = []

    def execute(self, query: str, params: Sequence[str] = ()) -> None:
        self.connection.executed.append((query, tuple(params)))
        if self.connection.execute_error is not None:
            raise self.connection.execute_error
        self.description = [(name, None, None, None, None, None, None) for name in self.connection.columns]
        self._rows = list(self.connection.rows)

    def fetchall(self) -> List[tuple]:
        return self._rows

    def close(self) -> None:
        pass


class FakeConnection:
    def __init__(self, driver: "FakeDriverState") -> None:
        self.columns = driver.columns
        self.rows = driver.rows
        self.execute_error = driver.execute_error
        self.close_error = driver.close_error
        self.executed: List[tuple] = []
        self.autocommit = True
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeDriverState:
    def __init__(self) -> None:
        self.columns: List[str] = ["value"]
        self.rows: List[tuple] = []
        self.execute_error: Optional[Exception] = None
        self.close_error: Optional[Exception] = None
        self.connect_error: Optional[Exception] = None
        self.connections: List[FakeConnection] = []
        self.connect_kwargs: List[Dict[str, Any]] = []


@pytest.fixture
def fake_driver() -> types.ModuleType:
    """
    A DB-API-shaped module whose results and failures are set through `.state`.
    """
    state = FakeDriverState()
    module = types.ModuleType("fake_driver")

    def connect(url: str, **kwargs: Any) -> FakeConnection:
        state.connect_kwargs.append({"url": url, **kwargs})
        if state.connect_error is not None:
            raise state.connect_error
        conn = FakeConnection(state)
        state.connections.append(conn)
        return conn

    module.connect = connect
    module.Error = FakeError
    module.ProgrammingError = FakeProgrammingError
    module.state = state
    return module
