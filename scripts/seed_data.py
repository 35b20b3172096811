"""
Schema and sample-data loader for Jobly.

Applies `db/init.sql` and inserts a small, fixed set of companies and jobs
using psycopg. Used for local development and by the integration test fixtures.
"""

from __future__ import annotations

import sys
import time
from decimal import Decimal
from pathlib import Path

import psycopg
import typer

from jobly.infrastructure.db_factory import get_sync_connection

app = typer.Typer(help="Create the Jobly schema and load sample companies and jobs.")

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "db" / "init.sql"

SAMPLE_COMPANIES = [
    # handle, name, num_employees, description, logo_url
    ("c1", "C1", 1, "Desc1", "http://c1.img"),
    ("c2", "C2", 2, "Desc2", "http://c2.img"),
    ("c3", "C3", 3, "Desc3", "http://c3.img"),
]

SAMPLE_JOBS = [
    # title, salary, equity, company_handle
    ("Farmer", 50000, Decimal("0"), "c1"),
    ("Engineer", 75000, Decimal("0"), "c2"),
    ("Technician", 40000, Decimal("0"), "c2"),
]


def _apply_schema(conn: psycopg.Connection, schema_path: Path = SCHEMA_PATH) -> None:
    with conn.cursor() as cur:
        cur.execute(schema_path.read_text(encoding="utf-8"))
    conn.commit()


def _reset(conn: psycopg.Connection) -> None:
    with conn.cursor() as cur:
        cur.execute("TRUNCATE TABLE jobs, companies RESTART IDENTITY CASCADE;")
    conn.commit()


def _seed(conn: psycopg.Connection) -> int:
    """Insert the sample rows and return how many were written."""
    with conn.cursor() as cur:
        cur.executemany(
            """
            INSERT INTO companies (handle, name, num_employees, description, logo_url)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (handle) DO NOTHING
            """,
            SAMPLE_COMPANIES,
        )
        cur.executemany(
            """
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (title, company_handle) DO NOTHING
            """,
            SAMPLE_JOBS,
        )
    conn.commit()
    return len(SAMPLE_COMPANIES) + len(SAMPLE_JOBS)


def load(dsn: str | None = None, reset: bool = False) -> int:
    """Apply the schema, optionally empty the tables, and seed sample rows."""
    conn = get_sync_connection(dsn)
    try:
        _apply_schema(conn)
        if reset:
            _reset(conn)
        return _seed(conn)
    finally:
        conn.close()


@app.command()
def main(
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Empty the jobs and companies tables before seeding.",
    ),
) -> None:
    """
    Create tables if needed and load sample companies and jobs.
    """
    start = time.perf_counter()
    typer.echo(f"Applying schema from {SCHEMA_PATH}")
    rows = load(dsn=dsn, reset=reset)
    typer.echo(f"Seeded {rows} rows in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
