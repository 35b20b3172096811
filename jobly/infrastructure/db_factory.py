"""
Database connection factory utilities for Jobly.

Repositories run on asyncpg, whose native ``$n`` placeholders match the
fragments produced by `jobly.sql`. Scripts that load schema and seed data use
a plain psycopg connection.

Connection establishment (never statement execution) is retried for transient
failures using tenacity.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import asyncpg
import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from jobly.config import Settings, get_settings
from jobly.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def _server_settings(settings: Settings) -> Dict[str, str]:
    if settings.db_statement_timeout_ms > 0:
        return {"statement_timeout": str(settings.db_statement_timeout_ms)}
    return {}


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn_override: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    Used by maintenance scripts (schema load, seeding).

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    settings = get_settings()
    return psycopg.connect(
        dsn_override or build_dsn(settings),
        connect_timeout=int(settings.db_connect_timeout_s),
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((OSError, ConnectionError, asyncpg.CannotConnectNowError)),
    reraise=True,
)
async def get_async_connection(dsn_override: Optional[str] = None) -> asyncpg.Connection:
    """
    Acquire an asyncpg connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    The caller owns the connection and must close it; prefer `async_connection`.

    Returns
    -------
    asyncpg.Connection
        A new asyncpg connection instance.

    Raises
    ------
    ConnectionError
        If connection fails after all retry attempts.
    """
    settings = get_settings()
    return await asyncpg.connect(
        dsn_override or build_dsn(settings),
        timeout=settings.db_connect_timeout_s,
        server_settings=_server_settings(settings),
    )


@asynccontextmanager
async def async_connection(dsn_override: Optional[str] = None) -> AsyncIterator[asyncpg.Connection]:
    """
    Async context manager yielding a connection that is closed on exit.

    Example
    -------
        async with async_connection() as conn:
            jobs = await JobRepository(conn).find_all({"minSalary": 50000})
    """
    conn = await get_async_connection(dsn_override)
    log.debug("Database connection opened")
    try:
        yield conn
    finally:
        await conn.close()
        log.debug("Database connection closed")


__all__ = [
    "async_connection",
    "build_dsn",
    "get_async_connection",
    "get_sync_connection",
]
