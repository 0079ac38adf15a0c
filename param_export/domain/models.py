"""
Domain models for the export job.

Parameter tuples and result rows are plain tuples of strings; the run-level
bookkeeping lives in `RunCounters` (mutated during a run) and `RunResult`
(the terminal outcome handed back to the caller).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, TypedDict

ParameterTuple = Tuple[str, ...]
ResultRow = Tuple[Optional[str], ...]


@dataclass
class RunCounters:
    """
    Row totals accumulated across all parameter tuples of one run.
    """

    selected: int = 0
    written: int = 0
    tuples: int = 0


class RunResult(TypedDict, total=False):
    """
    Terminal outcome of a run.

    `ok` is always present; error fields are only set when the run aborted.
    """

    ok: bool
    rows_selected: int
    rows_written: int
    tuples_processed: int
    tuples_total: int
    output_dir: Optional[str]
    files: List[str]
    duration_seconds: float
    error: Optional[str]
    error_type: Optional[str]
    failed_params: Optional[List[str]]
    extra: Dict[str, Any]


@dataclass(frozen=True)
class ConnectionSpec:
    """
    Everything needed to open one connection to the relational source.
    """

    url: str
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    timeout_seconds: int = 0


__all__ = ["ConnectionSpec", "ParameterTuple", "ResultRow", "RunCounters", "RunResult"]
