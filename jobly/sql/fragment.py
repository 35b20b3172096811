"""
Result contract shared by the SQL clause builders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class SqlFragment:
    """
    A clause of SQL text paired with the values bound to its placeholders.

    Attributes
    ----------
    text : str
        Clause text using sequential positional placeholders (``$1``, ``$2``...).
        May be empty when the builder had nothing to emit.
    values : tuple
        Values for the placeholders, in placeholder order.
    start : int
        Number of the first placeholder in `text`.
    """

    text: str = ""
    values: Tuple[Any, ...] = ()
    start: int = 1

    def __bool__(self) -> bool:
        return bool(self.text)

    @property
    def next_placeholder(self) -> int:
        """Index the next placeholder appended after this fragment should use."""
        return self.start + len(self.values)


EMPTY_FRAGMENT = SqlFragment()


__all__ = ["EMPTY_FRAGMENT", "SqlFragment"]
