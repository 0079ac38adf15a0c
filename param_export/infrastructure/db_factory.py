"""
Database connection factory for the export job.

The relational source is reached through any DB-API 2.0 driver module named by
`DB_DRIVER` (psycopg by default). This module loads that driver, opens one
dedicated connection per parameter tuple with auto-commit disabled, and applies
the configured statement timeout.

There is no pooling and no retry: a connection failure is fatal to the run.
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, Callable

from param_export.domain.models import ConnectionSpec
from param_export.errors import DriverLoadError, SourceConnectionError
from param_export.utils.logging import get_logger

log = get_logger(__name__)

Connector = Callable[[ConnectionSpec], Any]


def load_driver(name: str) -> ModuleType:
    """
    Import a DB-API 2.0 driver module by name.

    Raises
    ------
    DriverLoadError
        If the module cannot be imported or does not expose `connect` and `Error`.
    """
    try:
        driver = importlib.import_module(name)
    except ImportError as exc:
        raise DriverLoadError(
            f"Cannot import database driver '{name}'", details={"driver": name}
        ) from exc
    for attr in ("connect", "Error"):
        if not hasattr(driver, attr):
            raise DriverLoadError(
                f"Module '{name}' is not a DB-API driver (missing '{attr}')",
                details={"driver": name},
            )
    return driver


def is_postgres_driver(driver: ModuleType) -> bool:
    return driver.__name__.split(".")[0] in ("psycopg", "psycopg2")


def apply_statement_timeout(driver: ModuleType, cursor: Any, timeout_seconds: int) -> None:
    """
    Bound how long a single statement may run on this connection.

    PostgreSQL drivers get a session-level `statement_timeout`; for other
    drivers the timeout is not enforced and a warning says so. A timeout of
    0 means no limit.
    """
    if timeout_seconds <= 0:
        return
    if is_postgres_driver(driver):
        cursor.execute(
            "SELECT set_config('statement_timeout', %s, false)",
            (f"{timeout_seconds * 1000}ms",),
        )
        return
    log.warning(
        "Statement timeout not supported for driver",
        extra={"driver": driver.__name__, "timeout_seconds": timeout_seconds},
    )


def make_connector(driver: ModuleType) -> Connector:
    """
    Build a callable that opens a connection with auto-commit disabled.

    User and password are only passed when configured, so drivers whose
    `connect` does not accept them (e.g. sqlite3) still work.
    """

    def connect(spec: ConnectionSpec) -> Any:
        kwargs = {}
        if spec.user is not None:
            kwargs["user"] = spec.user
        if spec.password is not None:
            kwargs["password"] = spec.password
        try:
            conn = driver.connect(spec.url, **kwargs)
        except Exception as exc:  # noqa: BLE001 - drivers also raise TypeError/OSError on bad arguments
            raise SourceConnectionError(
                f"Cannot connect to database: {exc}",
                details={"url": spec.url, "user": spec.user},
            ) from exc
        if hasattr(conn, "autocommit"):
            conn.autocommit = False
        return conn

    return connect


__all__ = [
    "Connector",
    "apply_statement_timeout",
    "is_postgres_driver",
    "load_driver",
    "make_connector",
]
