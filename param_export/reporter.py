from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from param_export.domain.models import RunResult


def print_result(result: RunResult, console: Optional[Console] = None) -> None:
    """
    Render a run outcome as a rich table.

    Successful runs list the files written; failed runs add the error type,
    the offending parameter tuple and the message.
    """
    console = console or Console()
    ok = result.get("ok", False)

    title = "Export Completed" if ok else "Export Failed"
    table = Table(
        title=f"[{'green' if ok else 'red'}]{title}[/]",
        box=box.ROUNDED,
        show_header=False,
    )
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")

    processed = result.get("tuples_processed", 0)
    total = result.get("tuples_total", 0)
    table.add_row("Parameters", f"{processed:,} / {total:,}")
    table.add_row("Rows selected", f"{result.get('rows_selected', 0):,}")
    table.add_row("Rows written", f"{result.get('rows_written', 0):,}")
    table.add_row("Duration (s)", f"{result.get('duration_seconds', 0.0):.1f}")
    table.add_row("Output directory", escape(result.get("output_dir") or "N/A"))

    files = result.get("files") or []
    table.add_row("Files", escape("\n".join(files)) if files else "[dim]none[/dim]")

    if not ok:
        table.add_row("Error type", f"[red]{result.get('error_type') or 'Unknown'}[/red]")
        failed = result.get("failed_params")
        if failed is not None:
            table.add_row("Parameters at failure", escape(", ".join(failed)) or "[dim](empty line)[/dim]")
        table.add_row("Error", escape(result.get("error") or ""))

    console.print(table)


__all__ = ["print_result"]
