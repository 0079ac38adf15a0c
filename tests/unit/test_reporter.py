from __future__ import annotations

from rich.console import Console

from param_export.domain.models import RunResult
from param_export.reporter import print_result


def _render(result: RunResult) -> str:
    console = Console(record=True, width=200)
    print_result(result, console=console)
    return console.export_text()


def test_print_result_success_lists_files() -> None:
    text = _render(
        RunResult(
            ok=True,
            rows_selected=1234,
            rows_written=1234,
            tuples_processed=2,
            tuples_total=2,
            output_dir="/data/20240101000000",
            files=["/data/20240101000000/out.txt", "/data/20240101000000/out_000.txt"],
            duration_seconds=1.5,
        )
    )

    assert "Export Completed" in text
    assert "1,234" in text
    assert "out_000.txt" in text
    assert "Error type" not in text


def test_print_result_failure_shows_error_and_params() -> None:
    text = _render(
        RunResult(
            ok=False,
            rows_selected=3,
            rows_written=3,
            tuples_processed=1,
            tuples_total=3,
            output_dir=None,
            files=[],
            duration_seconds=0.2,
            error="Error occurred during select of database: [boom]",
            error_type="QueryError",
            failed_params=["C", "D"],
        )
    )

    assert "Export Failed" in text
    assert "QueryError" in text
    assert "C, D" in text
    assert "[boom]" in text
