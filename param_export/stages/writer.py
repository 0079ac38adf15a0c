"""
Record writer: appends result rows to delimited text files and rotates them.

Output files for one base path are numbered like this:

    out.txt        written first, while out_000.txt does not exist yet
    out_000.txt    first rotation
    out_001.txt    second rotation, and so on

The "current" file is the highest-numbered suffixed file that exists (or the
base path itself when there is none); the "next" file is the lowest-numbered
suffixed file that does not exist. Both are found by probing suffixes upward
from 0 on every row, so the file system is the only rotation state besides the
running row count the caller threads through `write`.

A row that fills a file to `max_rows_per_file` is written without a trailing
newline; every other row is followed by one.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Callable, Deque, Iterable, List, Optional

from param_export.domain.models import ResultRow
from param_export.errors import WriteError
from param_export.utils.logging import get_logger

log = get_logger(__name__)

Exists = Callable[[Path], bool]


def next_missing_suffix(exists: Callable[[int], bool], start: int = 0) -> int:
    """Return the first number, counting up from `start`, for which `exists` is false."""
    number = start
    while exists(number):
        number += 1
    return number


def last_existing_suffix(exists: Callable[[int], bool]) -> Optional[int]:
    """Return the last number of the unbroken run 0, 1, 2, ... that exists, or None."""
    first_missing = next_missing_suffix(exists)
    return first_missing - 1 if first_missing > 0 else None


def suffixed_path(path: Path, number: int, width: int) -> Path:
    """Insert `_<number>` zero-padded to `width` between the file stem and its extension."""
    return path.with_name(f"{path.stem}_{number:0{width}d}{path.suffix}")


def current_write_file(base: Path, width: int, exists: Exists = Path.exists) -> Path:
    number = last_existing_suffix(lambda n: exists(suffixed_path(base, n, width)))
    return base if number is None else suffixed_path(base, number, width)


def next_write_file(base: Path, width: int, exists: Exists = Path.exists) -> Path:
    number = next_missing_suffix(lambda n: exists(suffixed_path(base, n, width)))
    return suffixed_path(base, number, width)


class RecordWriter:
    """
    Write result rows through the rotation protocol.

    Parameters
    ----------
    max_rows_per_file : int
        Rows per file before rotating to the next numbered file.
    delimiter : str
        Field separator.
    number_width : int
        Zero-padding width of the rotation suffix.
    encoding : str
        Text encoding of the output files.
    null_text : str
        Text written for SQL NULL values.
    """

    def __init__(
        self,
        max_rows_per_file: int,
        delimiter: str = ",",
        number_width: int = 3,
        encoding: str = "utf-8",
        null_text: str = "",
    ) -> None:
        if max_rows_per_file < 1:
            raise ValueError("max_rows_per_file must be at least 1")
        self.max_rows_per_file = max_rows_per_file
        self.delimiter = delimiter
        self.number_width = number_width
        self.encoding = encoding
        self.null_text = null_text
        try:
            self._newline = "\n".encode(encoding)
        except LookupError as exc:
            raise WriteError(f"Unknown output encoding: {encoding}", details={"encoding": encoding}) from exc
        self.files: List[Path] = []
        self.rows_written = 0

    def format_row(self, row: ResultRow) -> str:
        return self.delimiter.join(self.null_text if value is None else value for value in row)

    def write(self, output_base: str | Path, rows: Iterable[ResultRow], running_count: int) -> int:
        """
        Drain `rows` into the output files and return the new running count.

        A deque passed as `rows` is emptied in place as rows are written, so
        at most one row is held outside the caller's buffer at a time.

        Raises
        ------
        WriteError
            On any file-system error, or a value the output encoding cannot represent.
        """
        base = Path(output_base)
        buffer: Deque[ResultRow] = rows if isinstance(rows, deque) else deque(rows)
        count = running_count

        while buffer:
            row = buffer.popleft()
            if not row:
                continue

            line = self.format_row(row)
            try:
                data = line.encode(self.encoding)
            except (UnicodeError, LookupError) as exc:
                raise WriteError(
                    f"Cannot encode row as {self.encoding}: {exc}", details={"encoding": self.encoding}
                ) from exc

            if count >= self.max_rows_per_file:
                target = next_write_file(base, self.number_width)
                count = 0
            else:
                target = current_write_file(base, self.number_width)

            try:
                with open(target, "wb" if count == 0 else "ab") as fh:
                    fh.write(data)
                    count += 1
                    if count < self.max_rows_per_file:
                        fh.write(self._newline)
            except OSError as exc:
                raise WriteError(
                    f"Error occurred write file: {exc}", details={"path": str(target)}
                ) from exc

            self.rows_written += 1
            if not self.files or self.files[-1] != target:
                self.files.append(target)
                log.debug("Writing to output file", extra={"path": str(target)})

        return count


__all__ = [
    "RecordWriter",
    "current_write_file",
    "last_existing_suffix",
    "next_missing_suffix",
    "next_write_file",
    "suffixed_path",
]
