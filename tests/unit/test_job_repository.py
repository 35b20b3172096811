from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

import asyncpg
import pytest

from jobly.domain.models import Job, JobCreate
from jobly.exceptions import ConflictError, NotFoundError, UsageError
from jobly.repositories import Executor, JobRepository

ASSIGNMENT = re.compile(r'"(\w+)"=\$(\d+)')


class _InMemoryJobs:
    """
    Stand-in for an asyncpg connection holding a `jobs` table.

    Understands exactly the statements JobRepository issues.
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self.rows: List[Dict[str, Any]] = [dict(r) for r in rows or []]
        self.statements: List[tuple] = []
        self.fail_insert_with: Optional[Exception] = None

    def _public(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {k: row[k] for k in ("title", "salary", "equity", "company_handle")}

    async def fetch(self, sql: str, *args: Any) -> List[Dict[str, Any]]:
        self.statements.append((sql, args))
        assert sql.startswith("SELECT title, salary, equity, company_handle FROM jobs")
        assert sql.endswith("ORDER BY id")
        rows = self.rows
        match = re.search(r"title ILIKE \$(\d+)", sql)
        if match:
            needle = args[int(match.group(1)) - 1].strip("%").lower()
            rows = [r for r in rows if needle in r["title"].lower()]
        match = re.search(r"salary >= \$(\d+)", sql)
        if match:
            floor = args[int(match.group(1)) - 1]
            rows = [r for r in rows if r["salary"] is not None and r["salary"] >= floor]
        if "equity > 0" in sql:
            rows = [r for r in rows if r["equity"] is not None and r["equity"] > 0]
        return [self._public(r) for r in rows]

    async def fetchrow(self, sql: str, *args: Any) -> Optional[Dict[str, Any]]:
        self.statements.append((sql, args))
        if sql.startswith("SELECT title, company_handle FROM jobs WHERE"):
            title, handle = args
            for row in self.rows:
                if (row["title"], row["company_handle"]) == (title, handle):
                    return {"title": title, "company_handle": handle}
            return None
        if sql.startswith("SELECT title, salary, equity, company_handle FROM jobs WHERE title = $1"):
            return next((self._public(r) for r in self.rows if r["title"] == args[0]), None)
        if sql.startswith("INSERT INTO jobs"):
            if self.fail_insert_with is not None:
                raise self.fail_insert_with
            row = dict(zip(("title", "salary", "equity", "company_handle"), args))
            self.rows.append(row)
            return self._public(row)
        if sql.startswith("UPDATE jobs"):
            *values, title = args
            for row in self.rows:
                if row["title"] == title:
                    for column, idx in ASSIGNMENT.findall(sql):
                        row[column] = values[int(idx) - 1]
                    return self._public(row)
            return None
        if sql.startswith("DELETE FROM jobs"):
            for row in self.rows:
                if row["title"] == args[0]:
                    self.rows.remove(row)
                    return {"title": row["title"]}
            return None
        raise AssertionError(f"unexpected statement: {sql}")


SEED = [
    {"title": "Farmer", "salary": 50000, "equity": Decimal("0"), "company_handle": "c1"},
    {"title": "Engineer", "salary": 75000, "equity": Decimal("0"), "company_handle": "c2"},
    {"title": "Technician", "salary": 40000, "equity": Decimal("0"), "company_handle": "c2"},
]

NEW_JOB = JobCreate(title="newJob", salary=30000, equity="0", companyHandle="c3")


@pytest.fixture
def db() -> _InMemoryJobs:
    return _InMemoryJobs(SEED)


@pytest.fixture
def repo(db: _InMemoryJobs) -> JobRepository:
    return JobRepository(db)


def test_fake_satisfies_executor_protocol(db):
    assert isinstance(db, Executor)


# ------------------------------------------------------------------ create


@pytest.mark.asyncio
async def test_create_returns_stored_job(repo, db):
    job = await repo.create(NEW_JOB)

    assert job == Job(title="newJob", salary=30000, equity="0", company_handle="c3")
    assert db.rows[-1]["equity"] == Decimal("0")


@pytest.mark.asyncio
async def test_create_duplicate_conflicts_on_second_attempt_only(repo, db):
    outcomes = []
    for _ in range(2):
        try:
            await repo.create(NEW_JOB)
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    assert outcomes == ["ok", "conflict"]
    assert sum(1 for r in db.rows if r["title"] == "newJob") == 1


@pytest.mark.asyncio
async def test_same_title_at_another_company_is_allowed(repo):
    job = await repo.create(JobCreate(title="Farmer", companyHandle="c2"))

    assert job.company_handle == "c2"
    assert job.salary is None
    assert job.equity is None


@pytest.mark.asyncio
async def test_create_race_unique_violation_becomes_conflict(repo, db):
    db.fail_insert_with = asyncpg.UniqueViolationError("duplicate key value")

    with pytest.raises(ConflictError, match="newJob"):
        await repo.create(NEW_JOB)


@pytest.mark.asyncio
async def test_create_other_database_errors_propagate_unchanged(repo, db):
    db.fail_insert_with = asyncpg.ForeignKeyViolationError("violates foreign key constraint")

    with pytest.raises(asyncpg.ForeignKeyViolationError):
        await repo.create(NEW_JOB)


# -------------------------------------------------------------------- read


@pytest.mark.asyncio
async def test_find_all_without_filters(repo):
    jobs = await repo.find_all()

    assert [j.title for j in jobs] == ["Farmer", "Engineer", "Technician"]
    assert all(j.equity == "0" for j in jobs)


@pytest.mark.asyncio
async def test_find_all_by_title_substring(repo):
    jobs = await repo.find_all({"title": "engineer"})

    assert jobs == [Job(title="Engineer", salary=75000, equity="0", company_handle="c2")]


@pytest.mark.asyncio
async def test_find_all_min_salary_binds_value(repo, db):
    jobs = await repo.find_all({"minSalary": 50000})

    assert [j.title for j in jobs] == ["Farmer", "Engineer"]
    sql, args = db.statements[-1]
    assert "salary >= $1" in sql
    assert "50000" not in sql
    assert args == (50000,)


@pytest.mark.asyncio
async def test_find_all_has_equity(repo):
    await repo.create(JobCreate(title="entrepreneur", salary=2000000, equity="0.5", companyHandle="c3"))

    jobs = await repo.find_all({"hasEquity": True})

    assert jobs == [Job(title="entrepreneur", salary=2000000, equity="0.5", company_handle="c3")]


@pytest.mark.asyncio
async def test_find_all_has_equity_false_is_unfiltered(repo):
    jobs = await repo.find_all({"hasEquity": False})

    assert len(jobs) == len(SEED)


@pytest.mark.asyncio
async def test_find_all_ignores_unknown_filters(repo, db):
    jobs = await repo.find_all({"color": "blue"})

    assert len(jobs) == len(SEED)
    assert "WHERE" not in db.statements[-1][0]


@pytest.mark.asyncio
async def test_find_all_no_match_is_not_found(repo):
    assert len(await repo.find_all({"minSalary": 0})) == len(SEED)

    with pytest.raises(NotFoundError):
        await repo.find_all({"minSalary": 1_000_000})


@pytest.mark.asyncio
async def test_find_all_on_empty_table_is_not_found():
    with pytest.raises(NotFoundError):
        await JobRepository(_InMemoryJobs()).find_all()


@pytest.mark.asyncio
async def test_get_by_title(repo):
    job = await repo.get("Technician")

    assert job.salary == 40000


@pytest.mark.asyncio
async def test_get_missing(repo):
    with pytest.raises(NotFoundError, match="nope"):
        await repo.get("nope")


# ------------------------------------------------------------------ update


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(repo, db):
    job = await repo.update("Farmer", {"salary": 55000, "companyHandle": "c3"})

    assert job == Job(title="Farmer", salary=55000, equity="0", company_handle="c3")
    sql, args = db.statements[-1]
    assert sql == (
        'UPDATE jobs SET "salary"=$1, "company_handle"=$2 WHERE title = $3 '
        "RETURNING title, salary, equity, company_handle"
    )
    assert args == (55000, "c3", "Farmer")


@pytest.mark.asyncio
async def test_update_accepts_column_names(repo, db):
    job = await repo.update("Technician", {"salary": 42500, "equity": "0", "company_handle": "c2"})

    assert job == Job(title="Technician", salary=42500, equity="0", company_handle="c2")
    sql, args = db.statements[-1]
    assert sql.startswith('UPDATE jobs SET "salary"=$1, "equity"=$2, "company_handle"=$3 WHERE title = $4')
    assert args == (42500, "0", "c2", "Technician")


@pytest.mark.asyncio
async def test_update_with_null(repo):
    job = await repo.update("Farmer", {"salary": None})

    assert job.salary is None


@pytest.mark.asyncio
async def test_update_missing_job(repo):
    with pytest.raises(NotFoundError):
        await repo.update("nope", {"salary": 1})


@pytest.mark.asyncio
async def test_update_without_fields_issues_no_statement(repo, db):
    with pytest.raises(UsageError):
        await repo.update("Farmer", {})

    assert db.statements == []


@pytest.mark.asyncio
async def test_update_refuses_title_change(repo, db):
    with pytest.raises(UsageError, match="title"):
        await repo.update("Farmer", {"title": "Rancher"})

    assert db.statements == []


# ------------------------------------------------------------------ remove


@pytest.mark.asyncio
async def test_remove(repo, db):
    await repo.remove("Farmer")

    assert "Farmer" not in [r["title"] for r in db.rows]


@pytest.mark.asyncio
async def test_remove_missing(repo):
    with pytest.raises(NotFoundError):
        await repo.remove("nope")
