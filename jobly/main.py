from __future__ import annotations

import asyncio
import json
import sys
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional, TypeVar

import typer
from pydantic import BaseModel, ValidationError

from jobly.config import get_settings
from jobly.domain.models import (
    CompanyCreate,
    CompanyFilters,
    CompanyUpdate,
    JobCreate,
    JobFilters,
    JobUpdate,
)
from jobly.exceptions import ConflictError, JoblyError, NotFoundError, UsageError
from jobly.infrastructure.db_factory import async_connection
from jobly.reporter import print_companies, print_company_detail, print_jobs
from jobly.repositories import CompanyRepository, JobRepository
from jobly.utils.logging import configure_logging

T = TypeVar("T")

app = typer.Typer(help="Jobly CLI: manage jobs and companies.")
jobs_app = typer.Typer(help="Create, search, update and delete jobs.")
companies_app = typer.Typer(help="Create, search, update and delete companies.")
app.add_typer(jobs_app, name="jobs")
app.add_typer(companies_app, name="companies")

EXIT_CODES = {
    NotFoundError: 1,
    UsageError: 2,
    ConflictError: 3,
}


def _exit_code(exc: JoblyError) -> int:
    for cls in type(exc).__mro__:
        if cls in EXIT_CODES:
            return EXIT_CODES[cls]
    return 1


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except ValidationError as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=EXIT_CODES[UsageError])
    except JoblyError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=_exit_code(exc))


def _run(action: Callable[[Any], Awaitable[T]]) -> T:
    """Open a connection, run `action` with it and close it again."""

    async def _go() -> T:
        async with async_connection() as conn:
            return await action(conn)

    return asyncio.run(_go())


def _echo_json(payload: Any) -> None:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    elif isinstance(payload, list):
        payload = [item.model_dump(mode="json") for item in payload]
    typer.echo(json.dumps(payload, indent=2))


def _provided(**options: Any) -> Dict[str, Any]:
    return {key: value for key, value in options.items() if value is not None}


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_logs=settings.log_json,
    )


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"env={settings.app_env} log_level={settings.log_level}"
    )


# ---------------------------------------------------------------- jobs


@jobs_app.command("list")
def list_jobs(
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Case-insensitive title substring."),
    min_salary: Optional[int] = typer.Option(None, "--min-salary", help="Minimum salary."),
    has_equity: bool = typer.Option(False, "--has-equity", help="Only jobs offering equity."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """Search jobs."""
    with _handle_errors():
        filters = JobFilters(title=title, minSalary=min_salary, hasEquity=has_equity or None)
        jobs = _run(lambda conn: JobRepository(conn).find_all(filters.as_filters()))
    if as_json:
        _echo_json(jobs)
    else:
        print_jobs(jobs)


@jobs_app.command("get")
def get_job(title: str, as_json: bool = typer.Option(False, "--json")) -> None:
    """Show a single job by title."""
    with _handle_errors():
        job = _run(lambda conn: JobRepository(conn).get(title))
    if as_json:
        _echo_json(job)
    else:
        print_jobs([job])


@jobs_app.command("create")
def create_job(
    title: str = typer.Option(..., "--title", "-t"),
    company_handle: str = typer.Option(..., "--company-handle", "-c"),
    salary: Optional[int] = typer.Option(None, "--salary"),
    equity: Optional[str] = typer.Option(None, "--equity", help="Fraction between 0 and 1."),
) -> None:
    """Create a job."""
    with _handle_errors():
        payload = JobCreate(title=title, companyHandle=company_handle, salary=salary, equity=equity)
        job = _run(lambda conn: JobRepository(conn).create(payload))
    _echo_json(job)


@jobs_app.command("update")
def update_job(
    title: str,
    salary: Optional[int] = typer.Option(None, "--salary"),
    equity: Optional[str] = typer.Option(None, "--equity"),
    company_handle: Optional[str] = typer.Option(None, "--company-handle", "-c"),
) -> None:
    """Change some fields of a job; fields not given are left alone."""
    with _handle_errors():
        payload = JobUpdate(**_provided(salary=salary, equity=equity, companyHandle=company_handle))
        job = _run(lambda conn: JobRepository(conn).update(title, payload.as_update()))
    _echo_json(job)


@jobs_app.command("delete")
def delete_job(title: str) -> None:
    """Delete a job by title."""
    with _handle_errors():
        _run(lambda conn: JobRepository(conn).remove(title))
    _echo_json({"deleted": title})


# ----------------------------------------------------------- companies


@companies_app.command("list")
def list_companies(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Case-insensitive name substring."),
    min_employees: Optional[int] = typer.Option(None, "--min-employees"),
    max_employees: Optional[int] = typer.Option(None, "--max-employees"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """Search companies."""
    with _handle_errors():
        filters = CompanyFilters(name=name, minEmployees=min_employees, maxEmployees=max_employees)
        companies = _run(lambda conn: CompanyRepository(conn).find_all(filters.as_filters()))
    if as_json:
        _echo_json(companies)
    else:
        print_companies(companies)


@companies_app.command("get")
def get_company(handle: str, as_json: bool = typer.Option(False, "--json")) -> None:
    """Show a company and its jobs."""
    with _handle_errors():
        company = _run(lambda conn: CompanyRepository(conn).get(handle))
    if as_json:
        _echo_json(company)
    else:
        print_company_detail(company)


@companies_app.command("create")
def create_company(
    handle: str = typer.Option(..., "--handle"),
    name: str = typer.Option(..., "--name", "-n"),
    description: Optional[str] = typer.Option(None, "--description"),
    num_employees: Optional[int] = typer.Option(None, "--num-employees"),
    logo_url: Optional[str] = typer.Option(None, "--logo-url"),
) -> None:
    """Create a company."""
    with _handle_errors():
        payload = CompanyCreate(
            handle=handle,
            name=name,
            description=description,
            numEmployees=num_employees,
            logoUrl=logo_url,
        )
        company = _run(lambda conn: CompanyRepository(conn).create(payload))
    _echo_json(company)


@companies_app.command("update")
def update_company(
    handle: str,
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    description: Optional[str] = typer.Option(None, "--description"),
    num_employees: Optional[int] = typer.Option(None, "--num-employees"),
    logo_url: Optional[str] = typer.Option(None, "--logo-url"),
) -> None:
    """Change some fields of a company; fields not given are left alone."""
    with _handle_errors():
        payload = CompanyUpdate(
            **_provided(
                name=name,
                description=description,
                numEmployees=num_employees,
                logoUrl=logo_url,
            )
        )
        company = _run(lambda conn: CompanyRepository(conn).update(handle, payload.as_update()))
    _echo_json(company)


@companies_app.command("delete")
def delete_company(handle: str) -> None:
    """Delete a company and, with it, its jobs."""
    with _handle_errors():
        _run(lambda conn: CompanyRepository(conn).remove(handle))
    _echo_json({"deleted": handle})


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
