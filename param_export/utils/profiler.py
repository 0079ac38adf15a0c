"""
Stage timing for the export job.

Each stage of a run (finding the parameter file, loading the driver, one
query, one write) is wrapped in `stage_block`, which measures wall-clock time
and samples the resident set size once the stage finishes, then logs a
"Completed <label> ( <n>s )" line.

Usage:
    from param_export.utils.profiler import stage_block

    with stage_block("selection", log) as stats:
        rows = runner.execute(params)
    print(stats.duration_seconds, stats.rss_bytes)
"""

from __future__ import annotations

import contextlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class StageStats:
    """
    Measurements for one stage.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    rss_bytes: Optional[int] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)


def _current_rss() -> Optional[int]:
    try:
        return psutil.Process().memory_info().rss
    except psutil.Error:
        return None


@contextlib.contextmanager
def stage_block(
    label: str, log: Optional[logging.Logger] = None
) -> Generator[StageStats, None, None]:
    """
    Time a block of code and log its completion.

    Parameters
    ----------
    label : str
        Human-friendly stage name used in the completion message.
    log : logging.Logger, optional
        Logger for the completion line. Nothing is logged when omitted or when
        the block raises; the caller reports failures itself.

    Notes
    -----
    Anything the block stores in `stats.extra` is attached to the completion
    line as structured fields.
    """
    stats = StageStats(label=label)
    stats.start_ts = time.perf_counter()
    yield stats
    stats.end_ts = time.perf_counter()
    stats.duration_seconds = stats.end_ts - stats.start_ts
    stats.rss_bytes = _current_rss()
    if log is not None:
        log.info(
            f"Completed {label} ( {stats.duration_seconds:.3f}s )",
            extra={
                "stage": label,
                "duration_seconds": round(stats.duration_seconds, 3),
                "rss_bytes": stats.rss_bytes,
                **stats.extra,
            },
        )


__all__ = ["StageStats", "stage_block"]
