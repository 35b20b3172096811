"""
SQL clause builders for Jobly.

Pure functions that turn caller-supplied mappings into parameterized SQL
fragments. Nothing in this package touches a connection.
"""

from jobly.sql.filters import FilterKind, FilterRule, escape_like, sql_where_from_filters
from jobly.sql.fragment import EMPTY_FRAGMENT, SqlFragment
from jobly.sql.partial_update import FieldNameMap, UpdateRequest, sql_for_partial_update

__all__ = [
    "EMPTY_FRAGMENT",
    "FieldNameMap",
    "FilterKind",
    "FilterRule",
    "SqlFragment",
    "UpdateRequest",
    "escape_like",
    "sql_for_partial_update",
    "sql_where_from_filters",
]
