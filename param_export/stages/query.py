"""
Query runner: one parameter tuple in, a fully materialized result out.

A fresh connection is opened for every tuple and always closed before
returning. The whole result set is read into memory; the writer drains it
row by row afterwards.
"""

from __future__ import annotations

from collections import deque
from contextlib import closing
from types import ModuleType
from typing import Any, Deque, Dict, Optional, Sequence

from param_export.domain.models import ConnectionSpec, ParameterTuple, ResultRow
from param_export.errors import BindError, ExportError, QueryError, SourceConnectionError
from param_export.infrastructure.db_factory import (
    Connector,
    apply_statement_timeout,
    make_connector,
)
from param_export.utils.logging import get_logger

log = get_logger(__name__)


def normalize_value(value: Any) -> Optional[str]:
    """Render a column value as text, trimming surrounding whitespace."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text.strip() if text else text


def map_row(columns: Sequence[str], row: Sequence[Any]) -> ResultRow:
    """
    Build a result row by looking columns up by label.

    A label that appears twice resolves to its first column, so duplicate
    labels repeat the first value.
    """
    index: Dict[str, int] = {}
    for position, name in enumerate(columns):
        index.setdefault(name, position)
    return tuple(normalize_value(row[index[name]]) for name in columns)


class QueryRunner:
    """
    Execute the configured query once per parameter tuple.

    Parameters
    ----------
    driver : module
        The loaded DB-API driver; its exception classes classify failures.
    spec : ConnectionSpec
        URL, credentials and statement timeout.
    query : str
        The parameterized query, placeholders in the driver's paramstyle.
    connector : callable, optional
        Overrides how connections are opened (defaults to `make_connector(driver)`).
    """

    def __init__(
        self,
        driver: ModuleType,
        spec: ConnectionSpec,
        query: str,
        connector: Optional[Connector] = None,
    ) -> None:
        self.driver = driver
        self.spec = spec
        self.query = query
        self._connect = connector or make_connector(driver)

    def execute(self, params: ParameterTuple) -> Deque[ResultRow]:
        """
        Bind `params` positionally, run the query and return every row.

        Raises
        ------
        SourceConnectionError
            If the connection cannot be opened, or closing it fails after a
            successful query.
        BindError
            If the parameter count does not match the query's placeholders.
        QueryError
            For any other failure while executing or fetching.
        """
        log.info(
            "Creating connection of database",
            extra={"url": self.spec.url, "user": self.spec.user},
        )
        try:
            conn = self._connect(self.spec)
        except SourceConnectionError as exc:
            raise SourceConnectionError(
                exc.message, params=params, details=exc.details
            ) from exc.__cause__

        failure: Optional[ExportError] = None
        try:
            return self._select(conn, params)
        except ExportError as exc:
            failure = exc
            raise
        finally:
            self._close(conn, params, failure)

    def _select(self, conn: Any, params: ParameterTuple) -> Deque[ResultRow]:
        rows: Deque[ResultRow] = deque()
        try:
            with closing(conn.cursor()) as cur:
                apply_statement_timeout(self.driver, cur, self.spec.timeout_seconds)
                cur.execute(self.query, tuple(params))
                if cur.description is None:
                    return rows
                columns = [column[0] for column in cur.description]
                for row in cur.fetchall():
                    rows.append(map_row(columns, row))
        except self.driver.Error as exc:
            raise self._classify(exc, params) from exc
        return rows

    def _classify(self, exc: Exception, params: ParameterTuple) -> ExportError:
        # Client-side binding failures are raised as the bare ProgrammingError;
        # server-reported errors use subclasses of it.
        programming_error = getattr(self.driver, "ProgrammingError", None)
        if programming_error is not None and type(exc) is programming_error:
            return BindError(
                f"Cannot bind {len(params)} parameters to query: {exc}", params=params
            )
        return QueryError(f"Error occurred during select of database: {exc}", params=params)

    def _close(self, conn: Any, params: ParameterTuple, failure: Optional[ExportError]) -> None:
        try:
            conn.close()
        except self.driver.Error as exc:
            log.error(
                "Error occurred during close of database connection",
                extra={"params": list(params), "error": str(exc)},
            )
            if failure is not None:
                failure.close_error = exc
                return
            raise SourceConnectionError(
                f"Error occurred during close of database connection: {exc}", params=params
            ) from exc


__all__ = ["QueryRunner", "map_row", "normalize_value"]
