"""
Parameter source: the tab-separated list of bind values, one query per line.

Blank lines are kept as empty tuples so that tuple positions always match
line numbers in the file. Arity is not validated here; a tuple that does not
fit the query fails later as a bind error.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from param_export.domain.models import ParameterTuple
from param_export.errors import ParamFileNotFoundError, ParamReadError
from param_export.utils.logging import get_logger

log = get_logger(__name__)


def resolve_param_path(path: str | Path, base_dir: Optional[str | Path] = None) -> Path:
    """
    Return the configured path if it exists, else the same path under `base_dir`.
    """
    candidate = Path(path)
    if candidate.exists():
        return candidate
    if base_dir is not None:
        fallback = Path(base_dir) / path
        if fallback.exists():
            return fallback
    raise ParamFileNotFoundError(
        "Parameter file does not exist",
        details={"path": str(path), "base_dir": str(base_dir) if base_dir else None},
    )


def parse_param_lines(lines: Iterable[str]) -> List[ParameterTuple]:
    """Split each line on tabs. An empty line yields an empty tuple."""
    return [tuple(line.split("\t")) if line else () for line in lines]


def load_params(path: str | Path, base_dir: Optional[str | Path] = None) -> List[ParameterTuple]:
    """
    Load the parameter file into an ordered list of parameter tuples.

    Raises
    ------
    ParamFileNotFoundError
        If neither `path` nor `base_dir / path` exists.
    ParamReadError
        If the file cannot be read or decoded as UTF-8.
    """
    resolved = resolve_param_path(path, base_dir)
    try:
        text = resolved.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParamReadError(
            "Error occurred during reading parameter list file", details={"path": str(resolved)}
        ) from exc

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    params = parse_param_lines(line.rstrip("\r") for line in lines)
    log.info(
        f"Read {len(params)} parameter tuples", extra={"param_file": str(resolved)}
    )
    return params


__all__ = ["load_params", "parse_param_lines", "resolve_param_path"]
