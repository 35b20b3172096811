"""
Infrastructure package for Jobly.

Centralizes database connectivity concerns (DSN composition, sync and async
connection factories). Keep this layer focused on I/O and resource
management, decoupled from query construction and repository logic.
"""

from jobly.infrastructure.db_factory import (
    async_connection,
    build_dsn,
    get_async_connection,
    get_sync_connection,
)

__all__ = [
    "async_connection",
    "build_dsn",
    "get_async_connection",
    "get_sync_connection",
]
