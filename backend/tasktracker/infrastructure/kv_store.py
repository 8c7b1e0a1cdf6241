"""Key-Value Maps — the Task Store and User Index implementations.

Invariants:
    - Both implementations satisfy core.repository_protocols.KeyValueMap
    - Values are copied on the way in and out: callers never mutate stored state
    - insert/remove on the SQL map commit individually (no multi-map transaction)
    - Every SQLAlchemy failure is rolled back, logged and raised as StorageError
    - Reads always hit the database (populate_existing): a row cached earlier in
      the request never hides another request's committed write

Design Decisions:
    - Generic SqlKeyValueMap over (model, key column, value column): one class
      serves both tables
    - InMemoryKeyValueMap for the memory backend and unit tests
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.core.errors import StorageError
from tasktracker.core.repository_protocols import KeyValueMap
from tasktracker.models.task_entry import TaskEntry
from tasktracker.models.user_task_entry import UserTaskEntry

logger = logging.getLogger(__name__)


class InMemoryKeyValueMap:
    """Process-scoped dict map. Never suspends, never fails."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    async def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def insert(self, key: str, value: Any) -> Any | None:
        previous = self._data.get(key)
        self._data[key] = copy.deepcopy(value)
        return previous

    async def remove(self, key: str) -> Any | None:
        return self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class SqlKeyValueMap:
    """Map stored as one table: key in a primary-key column, value in a JSON column."""

    def __init__(
        self, db: AsyncSession, model: type, key_attr: str, value_attr: str,
    ):
        self._db = db
        self._model = model
        self._key_attr = key_attr
        self._value_attr = value_attr

    async def get(self, key: str) -> Any | None:
        try:
            row = await self._db.get(self._model, key, populate_existing=True)
        except SQLAlchemyError as e:
            raise await self._fail("get", key, e) from e
        if row is None:
            return None
        return copy.deepcopy(getattr(row, self._value_attr))

    async def insert(self, key: str, value: Any) -> Any | None:
        try:
            row = await self._db.get(self._model, key, populate_existing=True)
            previous = None
            if row is None:
                self._db.add(self._model(**{
                    self._key_attr: key, self._value_attr: copy.deepcopy(value),
                }))
            else:
                previous = getattr(row, self._value_attr)
                setattr(row, self._value_attr, copy.deepcopy(value))
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("insert", key, e) from e
        return previous

    async def remove(self, key: str) -> Any | None:
        try:
            row = await self._db.get(self._model, key, populate_existing=True)
            if row is None:
                return None
            removed = getattr(row, self._value_attr)
            await self._db.delete(row)
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("remove", key, e) from e
        return removed

    async def _fail(self, operation: str, key: str, exc: Exception) -> StorageError:
        await self._db.rollback()
        table = self._model.__tablename__
        logger.error(
            f"{table} {operation} failed for key {key}: {exc}",
            extra={"operation": operation, "error_code": "STORAGE_ERROR"},
        )
        return StorageError(f"{table} rejected the {operation}", operation)


@dataclass
class TaskMaps:
    """The two maps that make up all persistent state."""
    task_store: KeyValueMap
    user_index: KeyValueMap


def sql_task_maps(db: AsyncSession) -> TaskMaps:
    """Task Store and User Index bound to one database session."""
    return TaskMaps(
        task_store=SqlKeyValueMap(db, TaskEntry, "id", "data"),
        user_index=SqlKeyValueMap(db, UserTaskEntry, "user_id", "task_ids"),
    )


def memory_task_maps() -> TaskMaps:
    return TaskMaps(
        task_store=InMemoryKeyValueMap(), user_index=InMemoryKeyValueMap(),
    )
