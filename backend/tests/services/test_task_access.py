"""Task Access Layer — store/index consistency across create, update, comment, delete.

Invariants checked:
    - Created tasks are retrievable, indexed exactly once, created_at == updated_at
    - Update merges supplied fields only and strictly advances updated_at
    - Comments append one element and strictly advance updated_at
    - Delete removes from store and owner index; second delete is 404
    - A failed index write rolls the task back; a failed rollback surfaces StorageError
    - Dangling index ids are skipped by list_owned_tasks
"""

import logging
from datetime import datetime, timezone

import pytest

from tasktracker.core.domain_types import CallerId, TaskPriority, TaskStatus
from tasktracker.core.errors import (
    ResourceNotFoundError, StorageError, TaskValidationError,
)
from tasktracker.infrastructure.kv_store import InMemoryKeyValueMap
from tasktracker.services.task_access import TaskAccessLayer
from tests.fakes import FailingMap, SequentialIds

U1 = CallerId("user-1")
U2 = CallerId("user-2")
BASIC = {"title": "Write report", "description": "draft v1"}


async def test_create_returns_pending_medium_task(access):
    task = await access.create_task(U1, BASIC)
    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.owner == U1
    assert task.assignee is None
    assert task.due_date is None
    assert task.comments == ()
    assert task.created_at == task.updated_at


async def test_created_task_is_retrievable_and_indexed_once(access):
    task = await access.create_task(U1, BASIC)
    assert await access.get_task(task.id) == task
    assert await access.owned_task_ids(U1) == [task.id]
    assert await access.owned_task_ids(U2) == []


async def test_create_keeps_supplied_optionals(access):
    task = await access.create_task(U1, {
        **BASIC, "priority": "high", "assignee": U2, "due_date": "2026-02-01",
    })
    assert task.priority is TaskPriority.HIGH
    assert task.assignee == U2
    assert task.due_date == datetime(2026, 2, 1, tzinfo=timezone.utc)


async def test_create_ignores_status_field(access):
    task = await access.create_task(U1, {**BASIC, "status": "completed"})
    assert task.status is TaskStatus.PENDING


@pytest.mark.parametrize("fields", [
    {"title": "only title"},
    {"title": "", "description": "d"},
    {**BASIC, "priority": "urgent"},
    {**BASIC, "assignee": "has space"},
    {**BASIC, "due_date": "someday"},
])
async def test_invalid_create_writes_nothing(access, task_store, user_index, fields):
    with pytest.raises(TaskValidationError):
        await access.create_task(U1, fields)
    assert len(task_store) == 0
    assert len(user_index) == 0


async def test_index_preserves_creation_order(access):
    ids = [(await access.create_task(U1, BASIC)).id for _ in range(3)]
    assert await access.owned_task_ids(U1) == ids
    assert [t.id for t in await access.list_owned_tasks(U1)] == ids


async def test_get_missing_task_is_not_found(access):
    with pytest.raises(ResourceNotFoundError) as exc:
        await access.get_task("nope")
    assert exc.value.http_status == 404


# ─── Update ─────────────────────────────────────────────────────


async def test_update_merges_only_supplied_fields(access, clock):
    task = await access.create_task(U1, {**BASIC, "priority": "low", "assignee": U2})
    clock.advance(minutes=1)
    updated = await access.update_task(task.id, {"status": "completed"})

    assert updated.id == task.id
    assert updated.created_at == task.created_at
    assert updated.status is TaskStatus.COMPLETED
    assert updated.title == task.title
    assert updated.description == task.description
    assert updated.priority is TaskPriority.LOW
    assert updated.assignee == U2
    assert updated.updated_at > task.updated_at
    assert await access.get_task(task.id) == updated


async def test_update_with_null_fields_keeps_prior_values(access):
    task = await access.create_task(U1, {**BASIC, "assignee": U2})
    updated = await access.update_task(task.id, {"title": None, "assignee": None})
    assert updated.title == task.title
    assert updated.assignee == U2


async def test_update_advances_updated_at_even_when_clock_stalls(access):
    task = await access.create_task(U1, BASIC)
    first = await access.update_task(task.id, {"title": "v2"})
    second = await access.update_task(task.id, {"title": "v3"})
    assert task.updated_at < first.updated_at < second.updated_at


async def test_invalid_update_leaves_task_untouched(access):
    task = await access.create_task(U1, BASIC)
    with pytest.raises(TaskValidationError):
        await access.update_task(task.id, {"title": "new", "status": "done"})
    assert await access.get_task(task.id) == task


async def test_update_missing_task_is_not_found(access):
    with pytest.raises(ResourceNotFoundError):
        await access.update_task("nope", {"title": "x"})


# ─── Comments ───────────────────────────────────────────────────


async def test_add_comment_appends_and_advances_updated_at(access, clock):
    task = await access.create_task(U1, BASIC)
    clock.advance(seconds=10)
    first = await access.add_comment(task.id, U2, "first")
    second = await access.add_comment(task.id, U1, "second")

    stored = await access.get_task(task.id)
    assert [c.id for c in stored.comments] == [first.id, second.id]
    assert stored.comments[0].author == U2
    assert stored.comments[0].content == "first"
    assert first.id != second.id
    assert stored.updated_at > task.updated_at
    assert stored.created_at == task.created_at


async def test_empty_comment_is_rejected(access):
    task = await access.create_task(U1, BASIC)
    with pytest.raises(TaskValidationError) as exc:
        await access.add_comment(task.id, U1, "  ")
    assert exc.value.field == "content"
    assert (await access.get_task(task.id)).comments == ()


async def test_comment_on_missing_task_is_not_found(access):
    with pytest.raises(ResourceNotFoundError):
        await access.add_comment("nope", U1, "hello")


# ─── Delete ─────────────────────────────────────────────────────


async def test_delete_removes_from_store_and_index(access):
    keep = await access.create_task(U1, BASIC)
    gone = await access.create_task(U1, BASIC)

    deleted = await access.delete_task(gone.id)

    assert deleted == gone
    with pytest.raises(ResourceNotFoundError):
        await access.get_task(gone.id)
    assert await access.owned_task_ids(U1) == [keep.id]


async def test_delete_twice_is_not_found(access):
    task = await access.create_task(U1, BASIC)
    await access.delete_task(task.id)
    with pytest.raises(ResourceNotFoundError):
        await access.delete_task(task.id)


async def test_delete_deregisters_from_owner_not_deleter(access):
    # the owner's entry is cleaned up whoever performs the delete
    task = await access.create_task(U1, {**BASIC, "assignee": U2})
    await access.delete_task(task.id)
    assert await access.owned_task_ids(U1) == []


async def test_delete_survives_index_failure(clock, caplog):
    index = FailingMap()
    access = TaskAccessLayer(InMemoryKeyValueMap(), index, clock, SequentialIds())
    task = await access.create_task(U1, BASIC)
    index.fail_on = {"insert"}

    with caplog.at_level(logging.ERROR):
        deleted = await access.delete_task(task.id)

    assert deleted.id == task.id
    assert "still indexed" in caplog.text


# ─── Create rollback ────────────────────────────────────────────


async def test_failed_index_write_rolls_back_task(clock):
    store = InMemoryKeyValueMap()
    access = TaskAccessLayer(store, FailingMap({"insert"}), clock, SequentialIds())

    with pytest.raises(StorageError):
        await access.create_task(U1, BASIC)

    assert len(store) == 0


async def test_failed_rollback_surfaces_storage_error_and_logs_orphan(clock, caplog):
    store = FailingMap({"remove"})
    access = TaskAccessLayer(
        store, FailingMap({"insert"}), clock, SequentialIds("task"),
    )

    with caplog.at_level(logging.ERROR):
        with pytest.raises(StorageError) as exc:
            await access.create_task(U1, BASIC)

    assert exc.value.operation == "rollback"
    assert exc.value.context.task_id == "task-1"
    assert "orphaned" in caplog.text
    assert len(store) == 1


async def test_failed_store_write_never_touches_index(clock):
    index = FailingMap()
    access = TaskAccessLayer(FailingMap({"insert"}), index, clock, SequentialIds())
    with pytest.raises(StorageError):
        await access.create_task(U1, BASIC)
    assert index.calls == []


# ─── Listing ────────────────────────────────────────────────────


async def test_list_owned_tasks_skips_dangling_ids(access, task_store):
    a = await access.create_task(U1, BASIC)
    b = await access.create_task(U1, BASIC)
    await task_store.remove(a.id)  # simulate a delete that never reached the index

    assert [t.id for t in await access.list_owned_tasks(U1)] == [b.id]
    assert await access.owned_task_ids(U1) == [a.id, b.id]


async def test_list_for_unknown_identity_is_empty(access):
    assert await access.list_owned_tasks(CallerId("nobody")) == []


async def test_assignment_does_not_touch_index(access):
    await access.create_task(U1, {**BASIC, "assignee": U2})
    assert await access.list_owned_tasks(U2) == []
