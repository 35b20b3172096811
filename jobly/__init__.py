"""
Jobly - record management for jobs and companies on PostgreSQL.

The package is organized in layers:

- `jobly.sql`: pure builders that turn caller-supplied mappings into
  parameterized SET and WHERE fragments
- `jobly.repositories`: per-table record access composing those fragments
  with fixed statements
- `jobly.domain`: pydantic record and payload models
- `jobly.infrastructure`: connection factories
- `jobly.main`: the typer CLI
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from jobly.config import Settings, get_settings
from jobly.exceptions import ConflictError, JoblyError, NotFoundError, UsageError
from jobly.repositories import CompanyRepository, JobRepository
from jobly.sql import (
    FilterKind,
    FilterRule,
    SqlFragment,
    sql_for_partial_update,
    sql_where_from_filters,
)
from jobly.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ConflictError",
    "JoblyError",
    "NotFoundError",
    "UsageError",
    # Query construction
    "FilterKind",
    "FilterRule",
    "SqlFragment",
    "sql_for_partial_update",
    "sql_where_from_filters",
    # Record access
    "CompanyRepository",
    "JobRepository",
    # Logging
    "configure_logging",
    "get_logger",
]
