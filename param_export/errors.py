"""
Exception hierarchy for the export job.

Every failure is fatal to the whole run. Stages raise one of these types with
enough context (offending parameter tuple, underlying cause) to diagnose the
failure without re-running; the orchestrator turns them into a terminal
`RunResult`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

__all__ = [
    "ExportError",
    "ConfigMissingError",
    "ParamFileNotFoundError",
    "ParamReadError",
    "DriverLoadError",
    "PathError",
    "SourceConnectionError",
    "QueryError",
    "BindError",
    "WriteError",
    "SleepInterruptedError",
]


class ExportError(Exception):
    """Base exception for all export errors."""

    stage: str = "export"

    def __init__(
        self,
        message: str,
        *,
        params: Optional[Sequence[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.params = tuple(params) if params is not None else None
        self.details = details or {}
        self.close_error: Optional[BaseException] = None

        text = message
        if self.params is not None:
            text = f"{text} (params: {', '.join(self.params)})"
        super().__init__(text)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        payload: Dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "stage": self.stage,
            "message": self.message,
            "params": list(self.params) if self.params is not None else None,
            "details": self.details,
        }
        if self.__cause__ is not None:
            payload["cause"] = f"{type(self.__cause__).__name__}: {self.__cause__}"
        if self.close_error is not None:
            payload["close_error"] = f"{type(self.close_error).__name__}: {self.close_error}"
        return payload


class ConfigMissingError(ExportError):
    """A required setting or file is absent."""

    stage = "config"


class ParamFileNotFoundError(ConfigMissingError):
    """Neither the configured parameter file nor its BASE_DIR fallback exists."""

    stage = "params"


class ParamReadError(ExportError):
    """The parameter file exists but could not be read."""

    stage = "params"


class DriverLoadError(ExportError):
    """The configured DB-API driver module cannot be imported or is unusable."""

    stage = "driver"


class PathError(ExportError):
    """The run-scoped output directory cannot be derived or created."""

    stage = "path"


class SourceConnectionError(ExportError):
    """Opening or closing a connection to the relational source failed."""

    stage = "connect"


class QueryError(ExportError):
    """Executing the query or reading its result set failed."""

    stage = "query"


class BindError(QueryError):
    """The parameter tuple does not match the query's placeholders."""

    stage = "bind"


class WriteError(ExportError):
    """Writing an output file failed."""

    stage = "write"


class SleepInterruptedError(ExportError):
    """The inter-tuple delay was interrupted."""

    stage = "sleep"
