"""
Filter clause builder.

Translates caller-supplied search parameters into a ``WHERE`` clause fragment.
Which parameters are understood, which column each one targets and how it
compares are declared per table as an ordered tuple of `FilterRule` entries:

    JOB_RULES = (
        FilterRule("title", "title", FilterKind.CONTAINS),
        FilterRule("minSalary", "salary", FilterKind.MIN),
        FilterRule("hasEquity", "equity", FilterKind.POSITIVE),
    )

    sql_where_from_filters({"title": "eng", "minSalary": 50000}, JOB_RULES)
        => SqlFragment("WHERE title ILIKE $1 AND salary >= $2", ("%eng%", 50000))

Rules are checked in their declared order, so the same filter set always yields
the same SQL. Parameters without a rule are ignored. Caller values are always
bound to placeholders, never written into the SQL text.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from jobly.sql.fragment import SqlFragment


class FilterKind(str, Enum):
    """Comparison semantics a filter parameter maps to."""

    CONTAINS = "contains"  # case-insensitive substring
    MIN = "min"  # column >= value
    MAX = "max"  # column <= value
    POSITIVE = "positive"  # flag; when truthy, column > 0


@dataclass(frozen=True)
class FilterRule:
    """
    Binds a filter parameter name to a column and a comparison.

    Column names come from application code, never from the caller.
    """

    param: str
    column: str
    kind: FilterKind


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def sql_where_from_filters(
    filters: Optional[Mapping[str, Any]],
    rules: Sequence[FilterRule],
    start: int = 1,
) -> SqlFragment:
    """
    Build a ``WHERE`` clause fragment from search parameters.

    Parameters
    ----------
    filters : mapping, optional
        Parameter name -> value, typically deserialized query parameters.
        ``None`` values count as absent.
    rules : sequence of FilterRule
        Recognized parameters, in the order their clauses are emitted.
    start : int
        Number of the first placeholder, for fragments appended after other
        bound parameters.

    Returns
    -------
    SqlFragment
        ``WHERE`` followed by ``AND``-joined comparisons, or an empty fragment
        when no recognized parameter was supplied.
    """
    if not filters:
        return SqlFragment(start=start)

    clauses: List[str] = []
    values: List[Any] = []
    idx = start

    for rule in rules:
        value = filters.get(rule.param)
        if value is None:
            continue

        if rule.kind is FilterKind.POSITIVE:
            if value:
                clauses.append(f"{rule.column} > 0")
            continue

        if rule.kind is FilterKind.CONTAINS:
            clauses.append(f"{rule.column} ILIKE ${idx}")
            values.append(f"%{escape_like(str(value))}%")
        elif rule.kind is FilterKind.MIN:
            clauses.append(f"{rule.column} >= ${idx}")
            values.append(value)
        elif rule.kind is FilterKind.MAX:
            clauses.append(f"{rule.column} <= ${idx}")
            values.append(value)
        idx += 1

    if not clauses:
        return SqlFragment(start=start)
    return SqlFragment(
        text="WHERE " + " AND ".join(clauses),
        values=tuple(values),
        start=start,
    )


__all__ = ["FilterKind", "FilterRule", "escape_like", "sql_where_from_filters"]
