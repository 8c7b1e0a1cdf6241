"""Task Record — serialization / deserialization between Task and stored JSON.

Invariants:
    - to_record produces a JSON-safe dict (no Enums, no datetimes, no tuples)
    - from_record reconstructs an equal Task from any record to_record produced
    - Timestamps round-trip as ISO 8601 strings with their UTC offset

Design Decisions:
    - Extracted from task_model.py: the model stays free of storage format concerns
    - snake_case keys in the store; camelCase is an API concern (schemas/task.py)
"""

from datetime import datetime

from tasktracker.core.domain_types import (
    CallerId, CommentId, TaskId, TaskPriority, TaskStatus,
)
from tasktracker.core.task_model import Comment, Task


def _dump_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _load_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


def comment_to_record(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "author": comment.author,
        "created_at": _dump_dt(comment.created_at),
    }


def comment_from_record(record: dict) -> Comment:
    return Comment(
        id=CommentId(record["id"]),
        content=record["content"],
        author=CallerId(record["author"]),
        created_at=datetime.fromisoformat(record["created_at"]),
    )


def task_to_record(task: Task) -> dict:
    """Serialize a Task to the JSON dict stored in the Task Store."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "owner": task.owner,
        "status": task.status.value,
        "priority": task.priority.value,
        "assignee": task.assignee,
        "due_date": _dump_dt(task.due_date),
        "created_at": _dump_dt(task.created_at),
        "updated_at": _dump_dt(task.updated_at),
        "comments": [comment_to_record(c) for c in task.comments],
    }


def task_from_record(record: dict) -> Task:
    """Rebuild a Task from its stored JSON dict."""
    assignee = record.get("assignee")
    return Task(
        id=TaskId(record["id"]),
        title=record["title"],
        description=record["description"],
        owner=CallerId(record["owner"]),
        status=TaskStatus(record["status"]),
        priority=TaskPriority(record["priority"]),
        assignee=CallerId(assignee) if assignee is not None else None,
        due_date=_load_dt(record.get("due_date")),
        created_at=datetime.fromisoformat(record["created_at"]),
        updated_at=datetime.fromisoformat(record["updated_at"]),
        comments=tuple(
            comment_from_record(c) for c in record.get("comments", [])
        ),
    )
