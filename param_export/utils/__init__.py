"""
Utilities package for the export job.

Exports shared helpers for logging and stage timing.
Keep this package lightweight and free of export-specific logic.
"""

from param_export.utils.logging import configure_logging, get_logger
from param_export.utils.profiler import StageStats, stage_block

__all__ = [
    "configure_logging",
    "get_logger",
    "StageStats",
    "stage_block",
]
