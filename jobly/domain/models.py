"""
Domain models for Jobly.

Record models mirror the rows returned from `db/init.sql` tables. Payload
models validate caller input before it reaches the repositories; they accept
the camelCase names a JSON body or query string would use and dump back to
those names, which the repositories translate to column names.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_RECORD_CONFIG = ConfigDict(frozen=True, populate_by_name=True)
_PAYLOAD_CONFIG = ConfigDict(populate_by_name=True, extra="forbid")
_FILTER_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


class Job(BaseModel):
    """
    Representation of a single row in the `jobs` table.
    """

    title: str = Field(..., description="Job title; unique per company.")
    salary: Optional[int] = Field(None, description="Annual salary.")
    equity: Optional[str] = Field(None, description="Equity fraction as a decimal string.")
    company_handle: str = Field(..., description="Handle of the owning company.")

    model_config = _RECORD_CONFIG

    @field_validator("equity", mode="before")
    @classmethod
    def _numeric_as_string(cls, value: Any) -> Any:
        # NUMERIC comes back from asyncpg as Decimal
        if isinstance(value, (Decimal, int, float)):
            return str(value)
        return value


class Company(BaseModel):
    """
    Representation of a single row in the `companies` table.
    """

    handle: str
    name: str
    description: Optional[str] = None
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None

    model_config = _RECORD_CONFIG


class CompanyDetail(Company):
    """A company together with the jobs it offers."""

    jobs: List[Job] = Field(default_factory=list)


class JobCreate(BaseModel):
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, alias="companyHandle")

    model_config = _PAYLOAD_CONFIG


class JobUpdate(BaseModel):
    """
    Fields of a job that may be changed. The title is the lookup key and
    cannot be updated.
    """

    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: Optional[str] = Field(None, min_length=1, alias="companyHandle")

    model_config = _PAYLOAD_CONFIG

    def as_update(self) -> Dict[str, Any]:
        """Only the fields the caller actually set, keyed by their public names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class JobFilters(BaseModel):
    title: Optional[str] = None
    min_salary: Optional[int] = Field(None, ge=0, alias="minSalary")
    has_equity: Optional[bool] = Field(None, alias="hasEquity")

    model_config = _FILTER_CONFIG

    def as_filters(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CompanyCreate(BaseModel):
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    model_config = _PAYLOAD_CONFIG


class CompanyUpdate(BaseModel):
    """
    Fields of a company that may be changed. The handle cannot be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    model_config = _PAYLOAD_CONFIG

    def as_update(self) -> Dict[str, Any]:
        """Only the fields the caller actually set, keyed by their public names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CompanyFilters(BaseModel):
    name: Optional[str] = None
    min_employees: Optional[int] = Field(None, ge=0, alias="minEmployees")
    max_employees: Optional[int] = Field(None, ge=0, alias="maxEmployees")

    model_config = _FILTER_CONFIG

    def as_filters(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


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
