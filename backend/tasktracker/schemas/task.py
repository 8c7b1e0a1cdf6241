"""Task Schemas — Pydantic models for the /tasks API boundary.

Invariants:
    - JSON keys are camelCase (dueDate, createdAt, totalTasks); requests also
      accept the snake_case field names
    - Request models only check JSON shape; field rules (non-empty, enums,
      parseable dates, identities) live in core/task_fields.py so the access
      layer enforces them for every caller, HTTP or not
    - null in a request body means "not supplied"

Design Decisions:
    - alias_generator=to_camel over per-field aliases: one rule for every model
    - from_task / from_comment constructors keep the domain dataclasses free of
      API concerns
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tasktracker.core.domain_types import TaskPriority, TaskStatus
from tasktracker.core.task_model import Comment, Task


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests -----------------------------------------------------------------

class TaskCreate(_CamelModel):
    """POST /tasks body. title and description are required by the access layer."""
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    assignee: str | None = None
    due_date: str | None = None

    def to_fields(self) -> dict:
        return self.model_dump(exclude_none=True)


class TaskUpdate(TaskCreate):
    """PUT /tasks/{id} body — any subset of the mutable fields."""
    status: str | None = None


class CommentCreate(_CamelModel):
    content: str | None = None


# --- Responses ----------------------------------------------------------------

class CommentResponse(_CamelModel):
    id: str
    content: str
    author: str
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            content=comment.content,
            author=comment.author,
            created_at=comment.created_at,
        )


class TaskResponse(_CamelModel):
    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    owner: str
    assignee: str | None = None
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    comments: list[CommentResponse] = []

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            owner=task.owner,
            assignee=task.assignee,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
            comments=[CommentResponse.from_comment(c) for c in task.comments],
        )


class TaskStatsResponse(_CamelModel):
    """Counts over the caller's owned tasks."""
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    high_priority_tasks: int
    overdue_tasks: int
