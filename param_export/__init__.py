"""
Param Export - parameter-driven batch export from a relational source.

For each line of a tab-separated parameter file the job binds the values into
one query, runs it, and appends the rows as delimited text to numbered output
files that rotate at a configured row count, pausing between parameter lines
so the source is not overloaded.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from param_export.config import ExportSettings, get_settings
from param_export.domain.models import ConnectionSpec, RunCounters, RunResult
from param_export.errors import ExportError
from param_export.orchestrator import ExportOrchestrator, derive_run_output, run_export
from param_export.stages import QueryRunner, RecordWriter, load_params
from param_export.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "ExportSettings",
    "get_settings",
    # Domain
    "ConnectionSpec",
    "RunCounters",
    "RunResult",
    "ExportError",
    # Orchestration
    "ExportOrchestrator",
    "derive_run_output",
    "run_export",
    # Stages
    "QueryRunner",
    "RecordWriter",
    "load_params",
    # Logging
    "configure_logging",
    "get_logger",
]
