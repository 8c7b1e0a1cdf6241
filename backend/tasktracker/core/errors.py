"""Error Hierarchy — typed, categorized exceptions for every task tracker failure.

Invariants:
    - Each subclass fixes its code, category, severity and HTTP status as class attributes
    - 4xx errors are detected before any write; StorageError (500) is the only
      error that can follow a partial write (create rollback)
    - to_response() produces the REST envelope used by api/error_handlers.py
    - ForbiddenError never carries task content in its message

Design Decisions:
    - Class attributes over constructor arguments: a subclass is fully described
      by its declaration, the base __init__ only takes message + context
    - ErrorContext as dataclass: caller/task ids for logs without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    FORBIDDEN = "forbidden"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Who asked, about which task, and when."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    caller_id: str | None = None
    task_id: str | None = None


class TaskTrackerError(Exception):
    """Base exception for all task tracker errors."""

    code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.CRITICAL
    http_status: int = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Standard REST error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "caller_id": self.context.caller_id,
                    "task_id": self.context.task_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class TaskValidationError(TaskTrackerError):
    """A task or comment field is missing, malformed or outside its enum."""
    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.ERROR
    http_status = 400

    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(message, context)
        self.field = field


class ResourceNotFoundError(TaskTrackerError):
    """Requested resource does not exist."""
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    severity = ErrorSeverity.ERROR
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)


class ForbiddenError(TaskTrackerError):
    """Caller is neither owner nor assignee of the task."""
    code = "FORBIDDEN"
    category = ErrorCategory.FORBIDDEN
    severity = ErrorSeverity.WARNING
    http_status = 403

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Not allowed to access this task", context)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(TaskTrackerError):
    """A Task Store or User Index operation failed."""
    code = "STORAGE_ERROR"
    category = ErrorCategory.STORAGE
    severity = ErrorSeverity.CRITICAL
    http_status = 500

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Storage {operation} failed: {message}", context)
        self.operation = operation
