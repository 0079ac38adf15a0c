from __future__ import annotations

import sys
from typing import Optional

import typer
from pydantic import ValidationError

from param_export.config import ExportSettings, get_settings
from param_export.orchestrator import run_export
from param_export.reporter import print_result
from param_export.utils.logging import configure_logging

app = typer.Typer(help="Parameter-driven batch export CLI.")


def _load_settings() -> ExportSettings:
    try:
        return get_settings()
    except ValidationError as exc:
        typer.echo(f"Invalid configuration:\n{exc}", err=True)
        raise typer.Exit(code=2)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = _load_settings()
    password = "****" if settings.db_password else "-"
    typer.echo(
        f"DB={settings.db_driver}:{settings.db_url} user={settings.db_user or '-'} "
        f"password={password} timeout={settings.db_timeout_seconds}s"
    )
    typer.echo(
        f"params={settings.param_file} (base_dir={settings.base_dir}) | "
        f"output={settings.output_file} max_count={settings.output_max_count} "
        f"width={settings.output_number_length} delimiter={settings.output_delimiter!r} "
        f"sleep={settings.sleep_seconds}s"
    )
    missing = settings.missing_required()
    if missing:
        typer.echo(f"Missing required settings: {', '.join(missing)}", err=True)


@app.command()
def run(
    param_file: Optional[str] = typer.Option(
        None,
        "--param-file",
        "-p",
        help="Override the tab-separated parameter file (default from PARAM_FILE).",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Override the output base path (default from OUTPUT_FILE).",
    ),
    sleep: Optional[int] = typer.Option(
        None,
        "--sleep",
        min=0,
        help="Override the pause in seconds between parameter tuples (default from SLEEP).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON.",
    ),
) -> None:
    """
    Run the export and print a summary. Exits 1 if any stage failed.
    """
    settings = _load_settings()
    overrides = {
        "param_file": param_file,
        "output_file": output,
        "sleep_seconds": sleep,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(level=settings.log_level, json_logs=json_logs or settings.log_json)
    result = run_export(settings)
    print_result(result)
    if not result["ok"]:
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
