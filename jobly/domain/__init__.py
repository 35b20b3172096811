"""
Domain package for Jobly.

Exports the record and payload models used by the repositories and the CLI.
Keep this package focused on data definitions and validation concerns.
"""

from jobly.domain.models import (
    Company,
    CompanyCreate,
    CompanyDetail,
    CompanyFilters,
    CompanyUpdate,
    Job,
    JobCreate,
    JobFilters,
    JobUpdate,
)

__all__ = [
    "Company",
    "CompanyCreate",
    "CompanyDetail",
    "CompanyFilters",
    "CompanyUpdate",
    "Job",
    "JobCreate",
    "JobFilters",
    "JobUpdate",
]
