"""Task Model — immutable Task and Comment records.

Invariants:
    - Records are frozen: every mutation builds a complete new record (dataclasses.replace)
    - comments is a tuple in insertion order, append-only
    - updated_at >= created_at; created_at never changes after creation
    - owner is set once at creation and never reassigned

Design Decisions:
    - Frozen dataclasses over ORM rows: the store holds whole JSON records,
      so the domain never patches individual fields in place
    - Optional attributes use None for "absent" (never an empty default)
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from tasktracker.core.domain_types import (
    CallerId, CommentId, TaskId, TaskPriority, TaskStatus,
)


@dataclass(frozen=True)
class Comment:
    """A note attached to a task. Has no lifecycle outside its parent."""
    id: CommentId
    content: str
    author: CallerId
    created_at: datetime


@dataclass(frozen=True)
class Task:
    """Full task record as held by the Task Store."""
    id: TaskId
    title: str
    description: str
    owner: CallerId
    created_at: datetime
    updated_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: CallerId | None = None
    due_date: datetime | None = None
    comments: tuple[Comment, ...] = field(default_factory=tuple)

    def with_comment(self, comment: Comment, updated_at: datetime) -> "Task":
        """New record with comment appended and updated_at advanced."""
        return replace(
            self, comments=self.comments + (comment,), updated_at=updated_at,
        )

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date is not None and self.due_date < now
