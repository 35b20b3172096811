"""
Jobs repository.

Responsibilities:
- Create, search, update and delete rows of the `jobs` table.
- Translate empty results into NotFoundError and duplicate (title, company)
  pairs into ConflictError.

Non-Responsibilities:
- No payload validation (see `jobly.domain.models`).
- No transaction management.
"""

from __future__ import annotations

from typing import Any

from jobly.domain.models import Job, JobCreate
from jobly.repositories.abstract import AbstractRepository
from jobly.sql import FilterKind, FilterRule


class JobRepository(AbstractRepository[Job]):
    """
    Record access for jobs. Jobs are addressed by title for get/update/delete.

    Search filters understood by `find_all`: ``title`` (case-insensitive
    substring), ``minSalary`` (salary at least this much), ``hasEquity`` (when
    true, only jobs with non-zero equity).
    """

    entity = "job"
    table = "jobs"
    columns = ("title", "salary", "equity", "company_handle")
    key_column = "title"
    natural_key = ("title", "company_handle")
    field_name_map = {"companyHandle": "company_handle"}
    updatable = frozenset({"salary", "equity", "companyHandle"})
    filter_rules = (
        FilterRule("title", "title", FilterKind.CONTAINS),
        FilterRule("minSalary", "salary", FilterKind.MIN),
        FilterRule("hasEquity", "equity", FilterKind.POSITIVE),
    )
    order_by = "id"

    def _to_model(self, row: Any) -> Job:
        return Job.model_validate(dict(row))

    async def create(self, job: JobCreate) -> Job:
        """
        Insert a new job and return it as stored.

        Raises ConflictError if the company already has a job with this title.
        """
        return await self._insert(
            {
                "title": job.title,
                "salary": job.salary,
                "equity": job.equity,
                "company_handle": job.company_handle,
            }
        )

    async def get(self, title: str) -> Job:
        """Return the job with exactly this title. Raises NotFoundError."""
        return self._to_model(await self._get_row(title))


__all__ = ["JobRepository"]
