"""
Shared record-access logic for Jobly repositories.

A concrete repository declares its table layout (columns, natural key, field
name translations, filter rules) and inherits create/list/update/delete
composed from the `jobly.sql` builders. Statements run through any object
exposing asyncpg's ``fetch``/``fetchrow`` coroutines, typically an
``asyncpg.Connection``; transactions are the caller's concern.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any, Generic, List, Optional, Protocol, Sequence, Tuple, TypeVar, runtime_checkable

import asyncpg

from jobly.exceptions import ConflictError, NotFoundError, UsageError
from jobly.sql import FilterRule, SqlFragment, sql_for_partial_update, sql_where_from_filters
from jobly.utils.logging import get_logger

log = get_logger(__name__)

ModelT = TypeVar("ModelT")


@runtime_checkable
class Executor(Protocol):
    """
    The slice of the asyncpg connection API repositories rely on.
    """

    async def fetch(self, query: str, *args: Any) -> List[Any]:
        ...

    async def fetchrow(self, query: str, *args: Any) -> Optional[Any]:
        ...


class AbstractRepository(abc.ABC, Generic[ModelT]):
    """
    Base class for table repositories.

    Subclasses set the class attributes below and implement `_to_model`.

    Attributes
    ----------
    entity : str
        Human-readable record name used in error messages.
    table : str
        Table name.
    columns : tuple of str
        Columns selected and returned by every statement.
    key_column : str
        Column that addresses a record for get/update/delete.
    natural_key : tuple of str
        Columns that must be unique together; checked before insert.
    field_name_map : mapping
        Public field name -> column name, where the two differ.
    updatable : frozenset of str
        Public field names accepted by `update`. Their column names are
        accepted too.
    filter_rules : tuple of FilterRule
        Search parameters understood by `find_all`, in emission order.
    order_by : str
        ``ORDER BY`` expression for list reads.
    """

    entity: str
    table: str
    columns: Tuple[str, ...]
    key_column: str
    natural_key: Tuple[str, ...]
    field_name_map: Mapping[str, str] = {}
    updatable: frozenset = frozenset()
    filter_rules: Tuple[FilterRule, ...] = ()
    order_by: str

    def __init__(self, db: Executor) -> None:
        self._db = db

    @abc.abstractmethod
    def _to_model(self, row: Any) -> ModelT:  # pragma: no cover - interface only
        """Convert a database row into the repository's model."""
        raise NotImplementedError

    @property
    def _returning(self) -> str:
        return ", ".join(self.columns)

    async def _fetch(self, sql: str, *args: Any) -> List[Any]:
        log.debug("SQL fetch", extra={"table": self.table, "sql": sql, "param_count": len(args)})
        return await self._db.fetch(sql, *args)

    async def _fetchrow(self, sql: str, *args: Any) -> Optional[Any]:
        log.debug("SQL fetchrow", extra={"table": self.table, "sql": sql, "param_count": len(args)})
        return await self._db.fetchrow(sql, *args)

    def _describe_key(self, values: Sequence[Any]) -> str:
        return ", ".join(f"{col}={val}" for col, val in zip(self.natural_key, values))

    async def _insert(self, record: Mapping[str, Any]) -> ModelT:
        """
        Insert a record given as column -> value, refusing natural-key duplicates.
        """
        key_values = [record[col] for col in self.natural_key]
        key_where = " AND ".join(
            f"{col} = ${idx}" for idx, col in enumerate(self.natural_key, start=1)
        )
        duplicate = await self._fetchrow(
            f"SELECT {', '.join(self.natural_key)} FROM {self.table} WHERE {key_where}",
            *key_values,
        )
        if duplicate is not None:
            log.warning(
                f"[DUPLICATE] {self.entity}",
                extra={"table": self.table, "key": self._describe_key(key_values)},
            )
            raise ConflictError(f"Duplicate {self.entity}: {self._describe_key(key_values)}")

        cols = list(record)
        placeholders = ", ".join(f"${idx}" for idx in range(1, len(cols) + 1))
        sql = (
            f"INSERT INTO {self.table} ({', '.join(cols)}) "
            f"VALUES ({placeholders}) "
            f"RETURNING {self._returning}"
        )
        try:
            row = await self._fetchrow(sql, *record.values())
        except asyncpg.UniqueViolationError as exc:
            # Another writer inserted the same key after our check
            log.warning(
                f"[DUPLICATE] {self.entity}",
                extra={"table": self.table, "key": self._describe_key(key_values)},
            )
            raise ConflictError(
                f"Duplicate {self.entity}: {self._describe_key(key_values)}"
            ) from exc

        log.info(f"[CREATED] {self.entity}", extra={"table": self.table, "key": self._describe_key(key_values)})
        return self._to_model(row)

    async def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[ModelT]:
        """
        Return records matching `filters`, ordered by `order_by`.

        Unknown filter names are ignored.

        Raises
        ------
        NotFoundError
            If no record matches, including an unfiltered read of an empty table.
        """
        where = sql_where_from_filters(filters, self.filter_rules)
        sql = self._select(where)
        rows = await self._fetch(sql, *where.values)
        if not rows:
            log.warning(f"[NOT FOUND] {self.entity} search", extra={"table": self.table})
            raise NotFoundError(f"No {self.entity} matches the search parameters")
        return [self._to_model(row) for row in rows]

    def _select(self, where: SqlFragment) -> str:
        parts = [f"SELECT {self._returning} FROM {self.table}"]
        if where:
            parts.append(where.text)
        parts.append(f"ORDER BY {self.order_by}")
        return " ".join(parts)

    async def _get_row(self, key: Any) -> Any:
        row = await self._fetchrow(
            f"SELECT {self._returning} FROM {self.table} "
            f"WHERE {self.key_column} = $1 ORDER BY {self.order_by} LIMIT 1",
            key,
        )
        if row is None:
            raise NotFoundError(f"No {self.entity}: {key}")
        return row

    @property
    def _updatable_names(self) -> frozenset:
        # Updatable fields under either their public or their column name
        return self.updatable | {
            self.field_name_map.get(field, field) for field in self.updatable
        }

    async def update(self, key: Any, data: Mapping[str, Any]) -> ModelT:
        """
        Partially update the record addressed by `key`.

        Only the fields present in `data` change; a ``None`` value sets NULL.
        Fields may be named by public name or by column name.

        Raises
        ------
        UsageError
            If `data` is empty or names a field that cannot be updated. No
            statement is issued in that case.
        NotFoundError
            If no record has that key.
        ConflictError
            If the change collides with another record's natural key.
        """
        unknown = sorted(set(data) - self._updatable_names)
        if unknown:
            raise UsageError(f"Cannot update {self.entity} field(s): {', '.join(unknown)}")
        assignments = sql_for_partial_update(data, self.field_name_map)

        sql = (
            f"UPDATE {self.table} "
            f"SET {assignments.text} "
            f"WHERE {self.key_column} = ${assignments.next_placeholder} "
            f"RETURNING {self._returning}"
        )
        try:
            row = await self._fetchrow(sql, *assignments.values, key)
        except asyncpg.UniqueViolationError as exc:
            raise ConflictError(f"Update would duplicate an existing {self.entity}: {key}") from exc

        if row is None:
            log.warning(f"[NOT FOUND] {self.entity} update", extra={"table": self.table, "key": key})
            raise NotFoundError(f"No {self.entity}: {key}")
        log.info(f"[UPDATED] {self.entity}", extra={"table": self.table, "key": key, "fields": list(data)})
        return self._to_model(row)

    async def remove(self, key: Any) -> None:
        """
        Delete the record addressed by `key`.

        Raises
        ------
        NotFoundError
            If no record has that key.
        """
        row = await self._fetchrow(
            f"DELETE FROM {self.table} WHERE {self.key_column} = $1 RETURNING {self.key_column}",
            key,
        )
        if row is None:
            log.warning(f"[NOT FOUND] {self.entity} delete", extra={"table": self.table, "key": key})
            raise NotFoundError(f"No {self.entity}: {key}")
        log.info(f"[DELETED] {self.entity}", extra={"table": self.table, "key": key})


__all__ = ["AbstractRepository", "Executor"]
