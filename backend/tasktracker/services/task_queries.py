"""Task Queries — search and statistics over the caller's owned tasks.

Invariants:
    - Only tasks reachable from the caller's index are considered
    - Result order is index (creation) order regardless of filters
    - search with empty filters returns exactly list_owned_tasks

Design Decisions:
    - IO here, logic in core/task_query.py (impureim sandwich: load, compute, return)
"""

from tasktracker.core.domain_types import CallerId, Clock
from tasktracker.core.task_model import Task
from tasktracker.core.task_query import TaskFilters, compute_task_stats, filter_tasks
from tasktracker.services.task_access import TaskAccessLayer


async def search_tasks(
    access: TaskAccessLayer, caller: CallerId, filters: TaskFilters,
) -> list[Task]:
    tasks = await access.list_owned_tasks(caller)
    if filters.is_empty():
        return tasks
    return filter_tasks(tasks, filters)


async def task_stats(
    access: TaskAccessLayer, caller: CallerId, clock: Clock,
) -> dict:
    """Status / priority / overdue counts, overdue measured against clock()."""
    tasks = await access.list_owned_tasks(caller)
    return compute_task_stats(tasks, clock())
