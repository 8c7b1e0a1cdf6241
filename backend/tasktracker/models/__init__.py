"""ORM Models — SQLAlchemy declarative models backing the two key-value maps.

Invariants:
    - All models inherit from Base (db/base.py)
    - One table per map: tasks (Task Store), user_tasks (User Index)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from tasktracker.models.task_entry import TaskEntry  # noqa: F401
from tasktracker.models.user_task_entry import UserTaskEntry  # noqa: F401
