"""
Orchestrator for the parameter-driven export.

Usage (example from CLI):
    from param_export.config import get_settings
    from param_export.orchestrator import run_export

    result = run_export(get_settings())
    print(result["ok"], result["rows_written"])

For every parameter tuple the run goes QUERY -> WRITE -> SLEEP (skipped after
the last tuple). The first failure of any stage stops the run; files already
written stay on disk. The outcome is always returned as a `RunResult`.
"""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Callable, List, Optional, Sequence

from param_export.config import ExportSettings
from param_export.domain.models import ConnectionSpec, ParameterTuple, RunCounters, RunResult
from param_export.errors import (
    ConfigMissingError,
    ExportError,
    PathError,
    SleepInterruptedError,
)
from param_export.infrastructure.db_factory import load_driver
from param_export.stages.params import load_params
from param_export.stages.query import QueryRunner
from param_export.stages.writer import RecordWriter
from param_export.utils.logging import get_logger
from param_export.utils.profiler import stage_block

log = get_logger(__name__)

RUN_DIR_FORMAT = "%Y%m%d%H%M%S"


def derive_run_output(output_file: str, now: Optional[datetime] = None) -> Path:
    """
    Insert a timestamp directory before the last path segment and create it.

    `data/out.txt` becomes `data/20240131235959/out.txt`. Both `/` and `\\`
    count as separators.

    Raises
    ------
    PathError
        If `output_file` is empty or the directory cannot be created.
    """
    if not output_file or not output_file.strip():
        raise PathError("Output file path is empty")

    stamp = (now or datetime.now()).strftime(RUN_DIR_FORMAT)
    index = max(output_file.rfind("/"), output_file.rfind("\\"))
    parent, name = output_file[: index + 1], output_file[index + 1 :]
    if not name:
        raise PathError("Output file path has no file name", details={"output_file": output_file})

    run_dir = Path(parent + stamp)
    try:
        run_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathError(
            f"Error occurred create save path: {exc}", details={"path": str(run_dir)}
        ) from exc
    return run_dir / name


class ExportOrchestrator:
    """
    Drive the export loop over a list of parameter tuples.

    Parameters
    ----------
    runner : QueryRunner
        Executes the query for one tuple.
    writer : RecordWriter
        Owns output rotation; its running count persists across tuples.
    sleep_seconds : int
        Pause between consecutive tuples.
    sleep : callable, optional
        Blocking sleep function (defaults to `time.sleep`).
    """

    def __init__(
        self,
        runner: QueryRunner,
        writer: RecordWriter,
        sleep_seconds: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.runner = runner
        self.writer = writer
        self.sleep_seconds = sleep_seconds
        self._sleep = sleep

    def run(self, param_tuples: Sequence[ParameterTuple], output_base: str | Path) -> RunResult:
        """
        Process every tuple in order and return the run outcome.

        Never raises `ExportError`; a failure is reported through the result
        with `ok=False` and the offending tuple in `failed_params`.
        """
        counters = RunCounters()
        start = time.perf_counter()
        write_count = 0
        current: Optional[ParameterTuple] = None

        try:
            for index, params in enumerate(param_tuples):
                current = params
                log.info(
                    f"Checking target parameter ( {', '.join(params)} )",
                    extra={"params": list(params), "position": index + 1},
                )

                with stage_block("selection", log) as stats:
                    rows = self.runner.execute(params)
                    stats.extra["rows"] = len(rows)
                counters.selected += len(rows)

                with stage_block("write", log) as stats:
                    stats.extra["rows"] = len(rows)
                    write_count = self.writer.write(output_base, rows, write_count)
                counters.written = self.writer.rows_written
                counters.tuples += 1

                if index < len(param_tuples) - 1:
                    self._pause(params)
        except ExportError as exc:
            if exc.params is None and current is not None:
                exc.params = tuple(current)
            return self._failed(exc, counters, param_tuples, output_base, start)

        log.info(
            f"Completed all {counters.selected} processing",
            extra={"rows_selected": counters.selected, "rows_written": counters.written},
        )
        return RunResult(
            ok=True,
            rows_selected=counters.selected,
            rows_written=counters.written,
            tuples_processed=counters.tuples,
            tuples_total=len(param_tuples),
            output_dir=str(Path(output_base).parent),
            files=[str(path) for path in self.writer.files],
            duration_seconds=round(time.perf_counter() - start, 3),
        )

    def _pause(self, params: ParameterTuple) -> None:
        log.info(f"Sleeping {self.sleep_seconds}s before next parameter")
        try:
            self._sleep(self.sleep_seconds)
        except KeyboardInterrupt as exc:
            raise SleepInterruptedError("Error occurred sleep", params=params) from exc

    def _failed(
        self,
        exc: ExportError,
        counters: RunCounters,
        param_tuples: Sequence[ParameterTuple],
        output_base: str | Path,
        start: float,
    ) -> RunResult:
        counters.written = self.writer.rows_written
        log.error(f"Export aborted: {exc}", extra={"error": exc.to_dict()})
        return RunResult(
            ok=False,
            rows_selected=counters.selected,
            rows_written=counters.written,
            tuples_processed=counters.tuples,
            tuples_total=len(param_tuples),
            output_dir=str(Path(output_base).parent),
            files=[str(path) for path in self.writer.files],
            duration_seconds=round(time.perf_counter() - start, 3),
            error=str(exc),
            error_type=type(exc).__name__,
            failed_params=list(exc.params) if exc.params is not None else None,
            extra=exc.to_dict(),
        )


def _setup_failure(exc: ExportError) -> RunResult:
    log.error(f"Export aborted before processing: {exc}", extra={"error": exc.to_dict()})
    return RunResult(
        ok=False,
        rows_selected=0,
        rows_written=0,
        tuples_processed=0,
        tuples_total=0,
        output_dir=None,
        files=[],
        duration_seconds=0.0,
        error=str(exc),
        error_type=type(exc).__name__,
        failed_params=None,
        extra=exc.to_dict(),
    )


def build_orchestrator(
    settings: ExportSettings,
    driver: ModuleType,
    sleep: Callable[[float], None] = time.sleep,
) -> ExportOrchestrator:
    """Wire the query runner and writer from settings."""
    spec = ConnectionSpec(
        url=settings.db_url or "",
        user=settings.db_user,
        password=settings.password(),
        timeout_seconds=settings.db_timeout_seconds,
    )
    runner = QueryRunner(driver, spec, settings.db_query or "")
    writer = RecordWriter(
        max_rows_per_file=settings.output_max_count,
        delimiter=settings.output_delimiter,
        number_width=settings.output_number_length,
        encoding=settings.output_encoding,
        null_text=settings.output_null,
    )
    return ExportOrchestrator(runner, writer, settings.sleep_seconds, sleep=sleep)


def run_export(
    settings: ExportSettings,
    now: Optional[datetime] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunResult:
    """
    Run a complete export from settings.

    Setup (settings check, parameter file, driver, run directory) happens
    before any query; a failure there aborts with nothing written.
    """
    try:
        missing = settings.missing_required()
        if missing:
            raise ConfigMissingError(
                f"Required settings are missing: {', '.join(missing)}",
                details={"missing": missing},
            )

        log.info("Find parameter list file for query binding")
        with stage_block("reading parameter list file", log) as stats:
            params: List[ParameterTuple] = load_params(settings.param_file, settings.base_dir)
            stats.extra["tuples"] = len(params)

        with stage_block("loading database driver", log):
            driver = load_driver(settings.db_driver)

        orchestrator = build_orchestrator(settings, driver, sleep=sleep)
        output_base = derive_run_output(settings.output_file, now)
        log.info("Output directory ready", extra={"path": str(output_base.parent)})
    except ExportError as exc:
        return _setup_failure(exc)

    return orchestrator.run(params, output_base)


__all__ = [
    "ExportOrchestrator",
    "RUN_DIR_FORMAT",
    "build_orchestrator",
    "derive_run_output",
    "run_export",
]
