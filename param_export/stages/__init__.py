"""
Stages package for the export job.

Re-exports the three stages the orchestrator drives: loading the parameter
list, running the query for one tuple, and writing rows with rotation.
"""

from param_export.stages.params import load_params, parse_param_lines, resolve_param_path
from param_export.stages.query import QueryRunner
from param_export.stages.writer import (
    RecordWriter,
    current_write_file,
    last_existing_suffix,
    next_missing_suffix,
    next_write_file,
    suffixed_path,
)

__all__ = [
    # Parameters
    "load_params",
    "parse_param_lines",
    "resolve_param_path",
    # Query
    "QueryRunner",
    # Output
    "RecordWriter",
    "current_write_file",
    "last_existing_suffix",
    "next_missing_suffix",
    "next_write_file",
    "suffixed_path",
]
