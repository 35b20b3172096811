from __future__ import annotations

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from jobly.domain.models import Company, CompanyDetail, Job


def _fmt(value: object) -> str:
    return "-" if value is None else str(value)


def jobs_table(jobs: Iterable[Job], title: str = "Jobs") -> Table:
    """Build a rich table of jobs."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Title", style="bold")
    table.add_column("Salary", justify="right")
    table.add_column("Equity", justify="right")
    table.add_column("Company")
    for job in jobs:
        table.add_row(job.title, _fmt(job.salary), _fmt(job.equity), job.company_handle)
    return table


def companies_table(companies: Iterable[Company], title: str = "Companies") -> Table:
    """Build a rich table of companies."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Handle", style="bold")
    table.add_column("Name")
    table.add_column("Employees", justify="right")
    table.add_column("Description", overflow="fold")
    for company in companies:
        table.add_row(
            company.handle,
            company.name,
            _fmt(company.num_employees),
            _fmt(company.description),
        )
    return table


def print_jobs(jobs: Iterable[Job], console: Optional[Console] = None) -> None:
    (console or Console()).print(jobs_table(jobs))


def print_companies(companies: Iterable[Company], console: Optional[Console] = None) -> None:
    (console or Console()).print(companies_table(companies))


def print_company_detail(company: CompanyDetail, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(companies_table([company], title=company.name))
    if company.logo_url:
        console.print(f"Logo: {company.logo_url}")
    if company.jobs:
        console.print(jobs_table(company.jobs, title=f"Jobs at {company.handle}"))
    else:
        console.print("[dim]No open jobs.[/dim]")


__all__ = [
    "companies_table",
    "jobs_table",
    "print_companies",
    "print_company_detail",
    "print_jobs",
]
