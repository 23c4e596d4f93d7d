#!/usr/bin/env python3
"""Record casework benchmark runs in DuckDB and compare them.

Usage:
    uv run pytest tests/bench --benchmark-only --benchmark-json bench/raw/cpython-3.12.json
    uv run scripts/bench_ingest.py ingest [--db bench/casework_bench.duckdb] [--notes "baseline"]
    uv run scripts/bench_ingest.py report [--db bench/casework_bench.duckdb]

Every JSON file under bench/raw/ is one interpreter variant (named after the
file stem). An ingest stores them all under a single run tagged with the
current commit.
"""

from __future__ import annotations

import json
import platform
import re
import subprocess
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import click
import duckdb

DB_DEFAULT = "bench/casework_bench.duckdb"
RAW_DEFAULT = Path("bench") / "raw"

SCHEMA = """
CREATE SEQUENCE IF NOT EXISTS run_ids START 1;

CREATE TABLE IF NOT EXISTS runs (
    id        INTEGER PRIMARY KEY DEFAULT nextval('run_ids'),
    revision  VARCHAR NOT NULL,
    taken_at  TIMESTAMP NOT NULL,
    host      VARCHAR,
    notes     VARCHAR
);

CREATE TABLE IF NOT EXISTS samples (
    run       INTEGER NOT NULL REFERENCES runs(id),
    variant   VARCHAR NOT NULL,
    suite     VARCHAR NOT NULL,
    scenario  VARCHAR NOT NULL,
    param     VARCHAR NOT NULL,
    mean_ns   DOUBLE NOT NULL,
    stddev_ns DOUBLE,
    min_ns    DOUBLE,
    max_ns    DOUBLE,
    rounds    BIGINT,
    PRIMARY KEY (run, variant, suite, scenario, param)
);
"""

# test_bench_{suite}_{scenario}[param]
_NAME = re.compile(r"^test_bench_(?P<suite>[a-z0-9]+)_(?P<scenario>[^\[]+)(?:\[(?P<param>.*)\])?$")

_NS_PER_S = 1e9

_COLUMNS = ("variant", "suite", "scenario", "param", "mean_ns", "stddev_ns", "min_ns", "max_ns", "rounds")


def provenance() -> tuple[str, str]:
    """Short commit SHA (or "unknown") and a host/arch label."""
    git = subprocess.run(
        ["git", "rev-parse", "--short", "HEAD"],
        capture_output=True,
        text=True,
        check=False,
    )
    commit = git.stdout.strip() if git.returncode == 0 else "unknown"
    return commit, f"{platform.node()}/{platform.machine()}"


def start_run(con: duckdb.DuckDBPyConnection, notes: str | None) -> int:
    con.execute(SCHEMA)
    commit, host = provenance()
    row = con.execute(
        "INSERT INTO runs (revision, taken_at, host, notes) VALUES (?, ?, ?, ?) RETURNING id",
        [commit, datetime.now(UTC), host, notes],
    ).fetchone()
    return row[0]


def samples_from(report: dict[str, Any], variant: str) -> list[dict[str, Any]]:
    """Flatten a pytest-benchmark report into one row per benchmark.

    Names that don't follow ``test_bench_<suite>_<scenario>`` are skipped.
    Timings are converted from seconds to nanoseconds.
    """
    rows = []
    for entry in report.get("benchmarks", []):
        found = _NAME.match(entry.get("name", ""))
        if found is None:
            click.echo(f"  skip {entry.get('name')!r}: not a test_bench_<suite>_<scenario> name")
            continue
        stats = entry.get("stats", {})
        rows.append({
            "variant": variant,
            "suite": found["suite"],
            "scenario": found["scenario"],
            "param": found["param"] or "",
            "mean_ns": stats.get("mean", 0) * _NS_PER_S,
            "stddev_ns": (stats.get("stddev") or 0) * _NS_PER_S,
            "min_ns": stats.get("min", 0) * _NS_PER_S,
            "max_ns": stats.get("max", 0) * _NS_PER_S,
            "rounds": stats.get("rounds"),
        })
    return rows


@click.group()
def cli() -> None:
    """casework benchmark history."""


@cli.command()
@click.option("--db", default=DB_DEFAULT, show_default=True, help="DuckDB file")
@click.option("--notes", default=None, help="Free-form label stored with the run")
@click.option(
    "--raw-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=RAW_DEFAULT,
    show_default=True,
    help="Where the pytest-benchmark JSON files live",
)
def ingest(db: str, notes: str | None, raw_dir: Path) -> None:
    """Store every JSON report in RAW_DIR as a new run."""
    reports = sorted(raw_dir.glob("*.json"))
    if not reports:
        click.echo(f"nothing to ingest in {raw_dir}", err=True)
        sys.exit(1)

    placeholders = ", ".join("?" * (len(_COLUMNS) + 1))
    insert = f"INSERT INTO samples (run, {', '.join(_COLUMNS)}) VALUES ({placeholders})"

    with duckdb.connect(db) as con:
        run = start_run(con, notes)
        total = 0
        for path in reports:
            rows = samples_from(json.loads(path.read_text()), path.stem)
            if rows:
                con.executemany(insert, [[run, *(row[c] for c in _COLUMNS)] for row in rows])
            total += len(rows)
            click.echo(f"  {path.name}: {len(rows)} samples")

    click.echo(f"\nrun {run}: {total} samples -> {db}")


@cli.command()
@click.option("--db", default=DB_DEFAULT, show_default=True, help="DuckDB file")
@click.option("--threshold", default=10.0, show_default=True, help="Mark changes above this percentage")
def report(db: str, threshold: float) -> None:
    """Compare the latest run against the one before it."""
    with duckdb.connect(db, read_only=True) as con:
        rows = con.execute(
            """
            WITH recent AS (
                SELECT id, ROW_NUMBER() OVER (ORDER BY id DESC) AS age FROM runs
            )
            SELECT cur.variant, cur.suite, cur.scenario, cur.param,
                   prev.mean_ns, cur.mean_ns
            FROM samples cur
            JOIN recent latest ON latest.id = cur.run AND latest.age = 1
            LEFT JOIN recent prior ON prior.age = 2
            LEFT JOIN samples prev
                   ON prev.run = prior.id
                  AND prev.variant = cur.variant
                  AND prev.suite = cur.suite
                  AND prev.scenario = cur.scenario
                  AND prev.param = cur.param
            ORDER BY cur.variant, cur.suite, cur.scenario, cur.param
            """
        ).fetchall()

    if not rows:
        click.echo(f"no samples in {db}", err=True)
        sys.exit(1)

    for variant, suite, scenario, param, before, after in rows:
        label = f"{variant} {suite}/{scenario}" + (f"[{param}]" if param else "")
        if before is None:
            click.echo(f"  {label}: {after:,.0f} ns (new)")
            continue
        change = (after - before) / before * 100 if before else 0.0
        mark = " !" if abs(change) >= threshold else ""
        click.echo(f"  {label}: {before:,.0f} -> {after:,.0f} ns ({change:+.1f}%){mark}")


if __name__ == "__main__":
    cli()
