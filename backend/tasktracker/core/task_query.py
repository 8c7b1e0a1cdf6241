"""Task Query — pure filtering and statistics over a caller's owned tasks.

Invariants:
    - Input order (index / creation order) is preserved by every filter
    - Filters compose with AND; an empty TaskFilters is the identity
    - A blank filter value (e.g. ?status=) counts as not supplied
    - Tasks without a due date never match a due_before bound
    - search bound is inclusive (<=); overdue is strict (< now)
    - pending + in_progress + completed == total, always

Design Decisions:
    - Filters are kept as the raw query strings: a value naming no status or
      priority, or an unparseable date, simply matches nothing (search has no
      failure mode)
    - compute_task_stats is a single pass (no re-filtering per counter)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from tasktracker.core.domain_types import TaskPriority, TaskStatus
from tasktracker.core.errors import TaskValidationError
from tasktracker.core.task_fields import parse_due_date
from tasktracker.core.task_model import Task


@dataclass(frozen=True)
class TaskFilters:
    """Optional search criteria. None or blank = not supplied."""
    status: str | None = None
    priority: str | None = None
    due_before: str | None = None

    def __post_init__(self) -> None:
        for name in ("status", "priority", "due_before"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                object.__setattr__(self, name, None)

    def is_empty(self) -> bool:
        return self.status is None and self.priority is None and self.due_before is None


def _parse_bound(raw: str) -> datetime | None:
    try:
        return parse_due_date(raw)
    except TaskValidationError:
        return None


def _due_on_or_before(task: Task, bound: datetime | None) -> bool:
    return bound is not None and task.due_date is not None and task.due_date <= bound


def filter_tasks(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    """Apply every supplied filter, keeping input order."""
    result = list(tasks)
    if filters.status is not None:
        result = [t for t in result if t.status.value == filters.status]
    if filters.priority is not None:
        result = [t for t in result if t.priority.value == filters.priority]
    if filters.due_before is not None:
        bound = _parse_bound(filters.due_before)
        result = [t for t in result if _due_on_or_before(t, bound)]
    return result


def compute_task_stats(tasks: Iterable[Task], now: datetime) -> dict:
    """Counts by status, high priority and overdue. Pure, no IO."""
    counts = {status: 0 for status in TaskStatus}
    total = high = overdue = 0
    for task in tasks:
        total += 1
        counts[task.status] += 1
        if task.priority == TaskPriority.HIGH:
            high += 1
        if task.is_overdue(now):
            overdue += 1

    return {
        "total_tasks": total,
        "completed_tasks": counts[TaskStatus.COMPLETED],
        "pending_tasks": counts[TaskStatus.PENDING],
        "in_progress_tasks": counts[TaskStatus.IN_PROGRESS],
        "high_priority_tasks": high,
        "overdue_tasks": overdue,
    }
