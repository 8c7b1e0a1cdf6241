"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TaskId, CommentId wrap uuid4 strings — never use bare str in domain logic
    - CallerId is opaque: only equality and use as a map key, no parsing
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Clock is a plain callable so the host time source can be swapped in tests
"""

from datetime import datetime
from enum import Enum
from typing import Callable, NewType


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", str)
CommentId = NewType("CommentId", str)
CallerId = NewType("CallerId", str)


# ─── Host Collaborators ──────────────────────────────────────────

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


# ─── Enums ───────────────────────────────────────────────────────

class TaskStatus(str, Enum):
    """Task lifecycle states. New tasks start PENDING."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority. MEDIUM when the creator does not choose one."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
