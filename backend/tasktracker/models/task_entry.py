"""TaskEntry ORM — one row per task in the Task Store.

Invariants:
    - id is the task identifier (uuid4 string), primary key
    - data holds the complete task record as JSON (core/task_record.py format)

Design Decisions:
    - Whole record in one JSON column: the store is a key-value map, every
      write replaces the full value (no column-level patches)
"""

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tasktracker.db.base import Base


class TaskEntry(Base):
    """Task Store row — task id -> task record."""
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
