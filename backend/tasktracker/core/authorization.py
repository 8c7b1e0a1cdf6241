"""Authorization Guard — decides whether a caller may touch a specific task.

Invariants:
    - Access granted iff caller owns the task (id in caller's index entry)
      OR caller is the task's assignee
    - Pure: no IO, no store access — the caller's owned ids are passed in
    - Denial raises ForbiddenError whose message never mentions task content

Design Decisions:
    - Ownership is read from the caller's own index entry, not from Task.owner:
      the index is the authoritative ownership relation
    - Collection endpoints need no per-task check (they only read the caller's index)
"""

from collections.abc import Collection

from tasktracker.core.domain_types import CallerId
from tasktracker.core.errors import ErrorContext, ForbiddenError
from tasktracker.core.task_model import Task


def is_owner(task: Task, owned_ids: Collection[str]) -> bool:
    return task.id in owned_ids


def is_assignee(caller: CallerId, task: Task) -> bool:
    return task.assignee is not None and task.assignee == caller


def can_access(caller: CallerId, task: Task, owned_ids: Collection[str]) -> bool:
    """Owner or assignee."""
    return is_owner(task, owned_ids) or is_assignee(caller, task)


def check_task_access(
    caller: CallerId, task: Task, owned_ids: Collection[str],
) -> None:
    """Raise ForbiddenError unless caller may read or mutate task."""
    if not can_access(caller, task, owned_ids):
        raise ForbiddenError(
            ErrorContext(caller_id=caller, task_id=task.id),
        )
