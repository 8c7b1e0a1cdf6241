"""Task Access Layer — consistency-preserving CRUD over the Task Store and User Index.

Invariants:
    - Every created task is registered in its owner's index entry, or not stored at all
    - Every deleted task is deregistered from its owner's index entry (best effort)
    - Validation happens before any write (no partial state on bad input)
    - Writes are whole-record replacements (read, merge, write back)
    - updated_at strictly increases on every mutation; created_at never changes
    - Read-modify-write of one index entry (or one task record) runs under that
      key's lock, so concurrent requests never overwrite each other's writes

Design Decisions:
    - Maps, clock, id factory and locks are injected: no ambient globals, so tests
      run against in-memory maps and a controllable clock
    - create_task holds the owner's index lock across insert, append and rollback
    - create_task compensates a failed index write by removing the task; if that
      removal fails too, the orphan is logged and StorageError surfaces
    - list_owned_tasks skips dangling index ids instead of failing the listing
"""

import logging
import uuid
from dataclasses import replace

from tasktracker.core.domain_types import (
    CallerId, Clock, CommentId, IdFactory, TaskId,
)
from tasktracker.core.errors import (
    ErrorContext, ResourceNotFoundError, StorageError,
)
from tasktracker.core.repository_protocols import KeyValueMap
from tasktracker.core.task_fields import (
    advance_timestamp, parse_text, require_creation_fields, validate_task_fields,
)
from tasktracker.core.task_model import Comment, Task
from tasktracker.core.task_record import task_from_record, task_to_record
from tasktracker.services.key_locks import KeyedLocks

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class TaskAccessLayer:
    """Mediates every read and write of the two maps."""

    def __init__(
        self,
        task_store: KeyValueMap,
        user_index: KeyValueMap,
        clock: Clock,
        id_factory: IdFactory = _new_id,
        locks: KeyedLocks | None = None,
    ):
        self._tasks = task_store
        self._index = user_index
        self._clock = clock
        self._new_id = id_factory
        self._locks = locks if locks is not None else KeyedLocks()

    def _index_lock(self, identity: CallerId):
        return self._locks(("index", identity))

    def _task_lock(self, task_id: str):
        return self._locks(("task", task_id))

    # ─── Create ─────────────────────────────────────────────────

    async def create_task(self, owner: CallerId, fields: dict) -> Task:
        """Validate, store, then index. Rolls the store back if indexing fails."""
        cleaned = validate_task_fields(fields)
        require_creation_fields(cleaned)
        now = self._clock()
        task = Task(
            id=TaskId(self._new_id()),
            owner=owner,
            created_at=now,
            updated_at=now,
            **cleaned,
        )
        async with self._index_lock(owner):
            await self._tasks.insert(task.id, task_to_record(task))
            try:
                await self._append_to_index(owner, task.id)
            except StorageError:
                await self._rollback_create(owner, task.id)
                raise
        logger.info(
            f"Task {task.id} created",
            extra={"caller_id": owner, "task_id": task.id},
        )
        return task

    async def _rollback_create(self, owner: CallerId, task_id: TaskId) -> None:
        try:
            await self._tasks.remove(task_id)
        except StorageError as e:
            logger.error(
                f"Rollback failed, task {task_id} is orphaned (in store, not indexed)",
                extra={"caller_id": owner, "task_id": task_id, "error_code": e.code},
            )
            raise StorageError(
                "task stored but could not be indexed or rolled back", "rollback",
                ErrorContext(caller_id=owner, task_id=task_id),
            ) from e
        logger.warning(
            f"Task {task_id} rolled back after index write failure",
            extra={"caller_id": owner, "task_id": task_id},
        )

    # ─── Read ───────────────────────────────────────────────────

    async def get_task(self, task_id: str) -> Task:
        record = await self._tasks.get(task_id)
        if record is None:
            raise ResourceNotFoundError(
                "Task", task_id, ErrorContext(task_id=task_id),
            )
        return task_from_record(record)

    async def owned_task_ids(self, identity: CallerId) -> list[str]:
        """Raw index entry for identity (empty when it has none)."""
        entry = await self._index.get(identity)
        return list(entry) if entry else []

    async def list_owned_tasks(self, identity: CallerId) -> list[Task]:
        """Owned tasks in creation order, skipping ids that no longer resolve."""
        tasks = []
        for task_id in await self.owned_task_ids(identity):
            record = await self._tasks.get(task_id)
            if record is None:
                logger.warning(
                    f"Dangling index entry {task_id} skipped",
                    extra={"caller_id": identity, "task_id": task_id},
                )
                continue
            tasks.append(task_from_record(record))
        return tasks

    # ─── Update ─────────────────────────────────────────────────

    async def update_task(self, task_id: str, fields: dict) -> Task:
        """Merge supplied fields over the stored record and write it back."""
        async with self._task_lock(task_id):
            existing = await self.get_task(task_id)
            cleaned = validate_task_fields(fields, allow_status=True)
            updated = replace(
                existing,
                **cleaned,
                updated_at=advance_timestamp(self._clock(), existing.updated_at),
            )
            await self._tasks.insert(updated.id, task_to_record(updated))
        logger.info(
            f"Task {task_id} updated ({', '.join(sorted(cleaned)) or 'no fields'})",
            extra={"task_id": task_id},
        )
        return updated

    async def add_comment(
        self, task_id: str, author: CallerId, content: object,
    ) -> Comment:
        """Append a comment and advance the task's updated_at."""
        async with self._task_lock(task_id):
            task = await self.get_task(task_id)
            text = parse_text(content, "content")
            now = self._clock()
            comment = Comment(
                id=CommentId(self._new_id()),
                content=text,
                author=author,
                created_at=now,
            )
            updated = task.with_comment(
                comment, advance_timestamp(now, task.updated_at),
            )
            await self._tasks.insert(updated.id, task_to_record(updated))
        logger.info(
            f"Comment {comment.id} added to task {task_id}",
            extra={"caller_id": author, "task_id": task_id},
        )
        return comment

    # ─── Delete ─────────────────────────────────────────────────

    async def delete_task(self, task_id: str) -> Task:
        """Remove from the store, then deregister from the owner's index."""
        async with self._task_lock(task_id):
            record = await self._tasks.remove(task_id)
        if record is None:
            raise ResourceNotFoundError(
                "Task", task_id, ErrorContext(task_id=task_id),
            )
        task = task_from_record(record)
        try:
            await self._remove_from_index(task.owner, task.id)
        except StorageError as e:
            logger.error(
                f"Task {task_id} deleted but still indexed for its owner",
                extra={"caller_id": task.owner, "task_id": task_id, "error_code": e.code},
            )
        logger.info(
            f"Task {task_id} deleted",
            extra={"caller_id": task.owner, "task_id": task_id},
        )
        return task

    # ─── Index helpers ──────────────────────────────────────────

    async def _append_to_index(self, owner: CallerId, task_id: TaskId) -> None:
        ids = await self.owned_task_ids(owner)
        if task_id not in ids:
            ids.append(task_id)
        await self._index.insert(owner, ids)

    async def _remove_from_index(self, owner: CallerId, task_id: TaskId) -> None:
        async with self._index_lock(owner):
            entry = await self._index.get(owner)
            if entry is None:
                return
            await self._index.insert(owner, [i for i in entry if i != task_id])
