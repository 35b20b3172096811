"""
Error taxonomy for Jobly.

Builders raise `UsageError` before any SQL is produced; repositories raise
`ConflictError` and `NotFoundError`. Driver errors not listed here propagate
unchanged.
"""

from __future__ import annotations


class JoblyError(Exception):
    """Base application exception."""


class UsageError(JoblyError):
    """Raised when the caller supplies unusable input (e.g. no update fields)."""


class ConflictError(JoblyError):
    """Raised when a natural-key uniqueness constraint would be violated."""


class NotFoundError(JoblyError):
    """Raised when a target record is absent or a read yields no rows."""


__all__ = [
    "ConflictError",
    "JoblyError",
    "NotFoundError",
    "UsageError",
]
