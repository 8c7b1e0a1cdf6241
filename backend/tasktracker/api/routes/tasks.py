"""Task Routes — HTTP surface for task CRUD, comments, search and stats.

Invariants:
    - /tasks/search and /tasks/stats are registered before /tasks/{task_id}
    - Routes contain no business logic: validation, authorization and index
      consistency all live behind TaskService / TaskAccessLayer
    - Domain errors propagate to the global handlers (api/error_handlers.py)

Design Decisions:
    - Caller identity, clock and storage arrive through dependencies
      (api/dependencies.py), never module globals
"""

from fastapi import APIRouter, Depends, Query, status

from tasktracker.api.dependencies import (
    get_access_layer, get_caller, get_clock, get_task_service,
)
from tasktracker.core.domain_types import CallerId, Clock
from tasktracker.core.task_query import TaskFilters
from tasktracker.schemas.task import (
    CommentCreate, CommentResponse, TaskCreate, TaskResponse,
    TaskStatsResponse, TaskUpdate,
)
from tasktracker.services.task_access import TaskAccessLayer
from tasktracker.services.task_queries import search_tasks, task_stats
from tasktracker.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "", response_model=TaskResponse, status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate,
    caller: CallerId = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """Create a task owned by the caller."""
    task = await service.create_task(caller, body.to_fields())
    return TaskResponse.from_task(task)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    caller: CallerId = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """All tasks the caller created, in creation order."""
    tasks = await service.list_tasks(caller)
    return [TaskResponse.from_task(t) for t in tasks]


@router.get("/search", response_model=list[TaskResponse])
async def search(
    status_filter: str | None = Query(None, alias="status"),
    priority: str | None = Query(None),
    due_date: str | None = Query(None, alias="dueDate"),
    caller: CallerId = Depends(get_caller),
    access: TaskAccessLayer = Depends(get_access_layer),
):
    """Owned tasks narrowed by status, priority and due date (<= dueDate)."""
    filters = TaskFilters(
        status=status_filter, priority=priority, due_before=due_date,
    )
    tasks = await search_tasks(access, caller, filters)
    return [TaskResponse.from_task(t) for t in tasks]


@router.get("/stats", response_model=TaskStatsResponse)
async def stats(
    caller: CallerId = Depends(get_caller),
    access: TaskAccessLayer = Depends(get_access_layer),
    clock: Clock = Depends(get_clock),
):
    """Counts over the caller's owned tasks."""
    return TaskStatsResponse(**await task_stats(access, caller, clock))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    caller: CallerId = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """One task with its comments. Owner or assignee only."""
    task = await service.get_task(caller, task_id)
    return TaskResponse.from_task(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    caller: CallerId = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """Merge the supplied fields into the task."""
    task = await service.update_task(caller, task_id, body.to_fields())
    return TaskResponse.from_task(task)


@router.delete("/{task_id}", response_model=TaskResponse)
async def delete_task(
    task_id: str,
    caller: CallerId = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """Delete the task and return it as it was."""
    task = await service.delete_task(caller, task_id)
    return TaskResponse.from_task(task)


@router.post(
    "/{task_id}/comments", response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    task_id: str,
    body: CommentCreate,
    caller: CallerId = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """Append a comment authored by the caller."""
    comment = await service.add_comment(caller, task_id, body.content)
    return CommentResponse.from_comment(comment)
