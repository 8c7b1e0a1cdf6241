"""UserTaskEntry ORM — one row per caller in the User Index.

Invariants:
    - user_id is the opaque caller identity, primary key
    - task_ids is the ordered list of task ids the caller created

Design Decisions:
    - No foreign key to tasks: index and store are independent maps, kept
      consistent by the access layer (services/task_access.py)
"""

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tasktracker.db.base import Base


class UserTaskEntry(Base):
    """User Index row — caller identity -> owned task ids."""
    __tablename__ = "user_tasks"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    task_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
