"""
Pytest configuration for Jobly.

Provides fixtures for:
- Database connection management
- Schema setup and sample data seeding
- Settings override for integration tests
"""

from __future__ import annotations

import os
from typing import AsyncGenerator, Generator

import asyncpg
import psycopg
import pytest
import pytest_asyncio

from jobly.config import Settings
from jobly.infrastructure.db_factory import build_dsn, get_async_connection


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        _env_file=None,
        DB_HOST=os.getenv("DB_HOST", "localhost"),
        DB_PORT=int(os.getenv("DB_PORT", "5432")),
        DB_USER=os.getenv("DB_USER", "postgres"),
        DB_PASSWORD=os.getenv("DB_PASSWORD", "postgres"),
        DB_NAME=os.getenv("DB_NAME", "jobly_test"),
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped psycopg connection for schema setup and seeding.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the jobs and companies tables exist.
    """
    from scripts.seed_data import _apply_schema

    _apply_schema(db_connection)
    return True


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty both tables before and after each test function.
    """
    from scripts.seed_data import _reset

    _reset(db_connection)
    yield
    _reset(db_connection)


@pytest.fixture(scope="function")
def seeded_db(db_connection: psycopg.Connection, clean_tables) -> int:
    """
    Seed the sample companies and jobs.

    Returns the number of jobs seeded.
    """
    from scripts.seed_data import SAMPLE_JOBS, _seed

    _seed(db_connection)
    with db_connection.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM jobs;")
        count = cur.fetchone()[0]
    assert count == len(SAMPLE_JOBS)
    return count


@pytest_asyncio.fixture
async def conn(test_dsn: str, db_schema_initialized: bool) -> AsyncGenerator[asyncpg.Connection, None]:
    """
    An asyncpg connection for exercising repositories against Postgres.
    """
    connection = await get_async_connection(dsn_override=test_dsn)
    try:
        yield connection
    finally:
        await connection.close()
