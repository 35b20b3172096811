"""
Partial-update clause builder.

Turns the fields a caller wants to change into the body of an ``UPDATE ... SET``
statement plus the ordered values for its placeholders:

    {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        => SqlFragment('"first_name"=$1, "age"=$2', ("Aliya", 32))

Values are never quoted or escaped here; the fragment must be executed through
a parameterized call such as ``conn.fetchrow(sql, *values)``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, List, Optional, Tuple, Union

from jobly.exceptions import UsageError
from jobly.sql.fragment import SqlFragment

UpdateRequest = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]
FieldNameMap = Mapping[str, str]


def _entries(update: UpdateRequest) -> List[Tuple[str, Any]]:
    if isinstance(update, Mapping):
        return list(update.items())
    return [(key, value) for key, value in update]


def sql_for_partial_update(
    update: UpdateRequest,
    field_name_map: Optional[FieldNameMap] = None,
) -> SqlFragment:
    """
    Build a ``SET`` clause fragment for a partial update.

    Parameters
    ----------
    update : mapping or iterable of (field, value) pairs
        Logical field names and their new values, in the order placeholders
        should be assigned. ``None`` sets the column to NULL.
    field_name_map : mapping, optional
        Logical field name -> physical column name, for fields whose storage
        name differs. Fields missing from the map are used verbatim.

    Returns
    -------
    SqlFragment
        Comma-joined ``"column"=$n`` assignments (no ``SET`` keyword) and the
        values in the same order.

    Raises
    ------
    UsageError
        If ``update`` has no entries.
    """
    entries = _entries(update)
    if not entries:
        raise UsageError("No data supplied")

    names = field_name_map or {}
    cols = [
        f'"{names.get(field, field)}"=${idx}'
        for idx, (field, _) in enumerate(entries, start=1)
    ]
    return SqlFragment(
        text=", ".join(cols),
        values=tuple(value for _, value in entries),
    )


__all__ = ["FieldNameMap", "UpdateRequest", "sql_for_partial_update"]
