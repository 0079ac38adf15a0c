"""
Parameter file generator for trying the export job locally.

Writes a deterministic tab-separated parameter file (category, day) and can
seed a small SQLite database whose `records` table answers the matching query:

    SELECT id, category, day, amount FROM records WHERE category = ? AND day = ?
"""

from __future__ import annotations

import random
import sqlite3
import sys
from datetime import date, timedelta
from pathlib import Path

import typer

app = typer.Typer(help="Generate a tab-separated parameter file (and an optional SQLite demo DB).")

CATEGORIES = ["alpha", "beta", "gamma", "delta"]


def _generate_params(path: Path, rows: int, seed: int, start: date) -> list[tuple[str, str]]:
    rng = random.Random(seed)
    params = [
        (rng.choice(CATEGORIES), (start + timedelta(days=i)).isoformat()) for i in range(rows)
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        for category, day in params:
            f.write(f"{category}\t{day}\n")
    return params


def _seed_demo_db(db_path: Path, params: list[tuple[str, str]], per_param: int, seed: int) -> int:
    rng = random.Random(seed)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS records ("
            "id INTEGER PRIMARY KEY, category TEXT, day TEXT, amount TEXT)"
        )
        inserted = 0
        for category, day in params:
            for _ in range(per_param):
                conn.execute(
                    "INSERT INTO records (category, day, amount) VALUES (?, ?, ?)",
                    (category, day, f"  {rng.uniform(1, 10_000):.2f}  "),
                )
                inserted += 1
        conn.commit()
    finally:
        conn.close()
    return inserted


@app.command()
def main(
    output: Path = typer.Option(
        Path("params.tsv"),
        "--output",
        "-o",
        help="Parameter file to write.",
    ),
    rows: int = typer.Option(
        10,
        "--rows",
        "-r",
        help="Number of parameter lines to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    demo_db: Path | None = typer.Option(
        None,
        "--demo-db",
        help="Optional SQLite file to seed with rows matching the parameters.",
    ),
    per_param: int = typer.Option(
        5,
        "--per-param",
        help="Rows inserted into the demo DB for each parameter line.",
    ),
) -> None:
    """
    Generate a parameter file and optionally a SQLite database to export from.
    """
    params = _generate_params(output, rows=rows, seed=seed, start=date(2024, 1, 1))
    typer.echo(f"Wrote {len(params):,} parameter lines -> {output}")

    if demo_db is None:
        return

    inserted = _seed_demo_db(demo_db, params, per_param=per_param, seed=seed)
    typer.echo(f"Seeded {inserted:,} rows -> {demo_db}")
    typer.echo("Try: DB_DRIVER=sqlite3 DB_URL=<demo-db> DB_QUERY='SELECT id, category, day, amount "
               "FROM records WHERE category = ? AND day = ?' param-export run")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
