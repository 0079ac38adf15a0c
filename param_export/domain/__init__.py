"""
Domain package for the export job.

Exports the value types shared by the stages and the orchestrator.
"""

from param_export.domain.models import (
    ConnectionSpec,
    ParameterTuple,
    ResultRow,
    RunCounters,
    RunResult,
)

__all__ = [
    "ConnectionSpec",
    "ParameterTuple",
    "ResultRow",
    "RunCounters",
    "RunResult",
]
