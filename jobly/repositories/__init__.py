"""
Repositories package for Jobly.

Re-exports the abstract base and the concrete table repositories so callers
can import from `jobly.repositories` directly.
"""

from jobly.repositories.abstract import AbstractRepository, Executor
from jobly.repositories.companies import CompanyRepository
from jobly.repositories.jobs import JobRepository

__all__ = [
    # Abstracts
    "AbstractRepository",
    "Executor",
    # Concrete repositories
    "CompanyRepository",
    "JobRepository",
]
