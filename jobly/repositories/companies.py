"""
Companies repository.

Responsibilities:
- Create, search, update and delete rows of the `companies` table.
- Attach a company's jobs when a single company is fetched.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from jobly.domain.models import Company, CompanyCreate, CompanyDetail, Job
from jobly.exceptions import UsageError
from jobly.repositories.abstract import AbstractRepository
from jobly.sql import FilterKind, FilterRule


class CompanyRepository(AbstractRepository[Company]):
    entity = "company"
    table = "companies"
    columns = ("handle", "name", "description", "num_employees", "logo_url")
    key_column = "handle"
    natural_key = ("handle",)
    field_name_map = {"numEmployees": "num_employees", "logoUrl": "logo_url"}
    updatable = frozenset({"name", "description", "numEmployees", "logoUrl"})
    filter_rules = (
        FilterRule("name", "name", FilterKind.CONTAINS),
        FilterRule("minEmployees", "num_employees", FilterKind.MIN),
        FilterRule("maxEmployees", "num_employees", FilterKind.MAX),
    )
    order_by = "name"

    def _to_model(self, row: Any) -> Company:
        return Company.model_validate(dict(row))

    async def create(self, company: CompanyCreate) -> Company:
        """
        Insert a new company and return it as stored.

        Raises ConflictError if the handle (or name) is already taken.
        """
        return await self._insert(
            {
                "handle": company.handle,
                "name": company.name,
                "description": company.description,
                "num_employees": company.num_employees,
                "logo_url": company.logo_url,
            }
        )

    async def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Company]:
        """
        Search companies.

        Recognized filters: ``name`` (case-insensitive substring),
        ``minEmployees`` and ``maxEmployees`` (inclusive bounds).

        Employee bounds are converted to integers before use. Raises UsageError
        when a bound is not an integer or minEmployees is greater than
        maxEmployees.
        """
        if filters:
            filters = dict(filters)
            for name in ("minEmployees", "maxEmployees"):
                if filters.get(name) is not None:
                    try:
                        filters[name] = int(filters[name])
                    except (TypeError, ValueError) as exc:
                        raise UsageError(f"{name} must be an integer") from exc
            low, high = filters.get("minEmployees"), filters.get("maxEmployees")
            if low is not None and high is not None and low > high:
                raise UsageError("minEmployees cannot be greater than maxEmployees")
        return await super().find_all(filters)

    async def get(self, handle: str) -> CompanyDetail:
        """Return a company and its jobs. Raises NotFoundError."""
        row = await self._get_row(handle)
        job_rows = await self._fetch(
            "SELECT title, salary, equity, company_handle FROM jobs "
            "WHERE company_handle = $1 ORDER BY id",
            handle,
        )
        return CompanyDetail.model_validate(
            {**dict(row), "jobs": [Job.model_validate(dict(j)) for j in job_rows]}
        )


__all__ = ["CompanyRepository"]
