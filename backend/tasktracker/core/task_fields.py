"""Task Field Validation — pure parsing of user-supplied task and comment fields.

Invariants:
    - Every check runs before any store write (fail fast, no partial state)
    - None means "not supplied" and is never validated or returned
    - Raises TaskValidationError naming the offending field; never returns bad data
    - Due dates are always returned timezone-aware (naive input is read as UTC)

Design Decisions:
    - One parser per field, composed by validate_task_fields: creation and update
      share exactly the same rules (update additionally accepts status)
    - Caller identities are only checked for shape (non-blank, no whitespace,
      bounded length) — their internal structure is never inspected
"""

from datetime import datetime, timedelta, timezone

from tasktracker.core.domain_types import CallerId, TaskPriority, TaskStatus
from tasktracker.core.errors import TaskValidationError

MAX_CALLER_ID_LENGTH: int = 255
_TICK = timedelta(microseconds=1)


def parse_text(value: object, field: str) -> str:
    """Non-blank string, returned exactly as given."""
    if not isinstance(value, str) or not value.strip():
        raise TaskValidationError(f"{field} must be a non-empty string", field)
    return value


def parse_priority(value: object) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        allowed = ", ".join(p.value for p in TaskPriority)
        raise TaskValidationError(
            f"priority must be one of: {allowed}", "priority",
        ) from None


def parse_status(value: object) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise TaskValidationError(
            f"status must be one of: {allowed}", "status",
        ) from None


def parse_caller_id(value: object, field: str = "assignee") -> CallerId:
    """Shape check for an opaque caller identity."""
    if not isinstance(value, str):
        raise TaskValidationError(f"{field} must be a string identity", field)
    text = value.strip()
    if not text or len(text) > MAX_CALLER_ID_LENGTH or any(c.isspace() for c in text):
        raise TaskValidationError(f"{field} is not a valid identity", field)
    return CallerId(text)


def parse_due_date(value: object) -> datetime:
    """ISO 8601 date or datetime. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise TaskValidationError(
                f"dueDate '{value}' is not a valid ISO 8601 date", "dueDate",
            ) from None
    else:
        raise TaskValidationError("dueDate must be an ISO 8601 string", "dueDate")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def validate_task_fields(fields: dict, *, allow_status: bool = False) -> dict:
    """Validate supplied task fields; return only the supplied ones, parsed.

    Keys: title, description, priority, assignee, due_date (and status when
    allow_status). Unknown keys are ignored.
    """
    cleaned: dict = {}
    for name in ("title", "description"):
        if fields.get(name) is not None:
            cleaned[name] = parse_text(fields[name], name)
    if allow_status and fields.get("status") is not None:
        cleaned["status"] = parse_status(fields["status"])
    if fields.get("priority") is not None:
        cleaned["priority"] = parse_priority(fields["priority"])
    if fields.get("assignee") is not None:
        cleaned["assignee"] = parse_caller_id(fields["assignee"])
    if fields.get("due_date") is not None:
        cleaned["due_date"] = parse_due_date(fields["due_date"])
    return cleaned


def require_creation_fields(cleaned: dict) -> None:
    """Title and description are mandatory on creation."""
    for name in ("title", "description"):
        if name not in cleaned:
            raise TaskValidationError(f"{name} is required", name)


def advance_timestamp(now: datetime, previous: datetime) -> datetime:
    """Next updated_at: the host time, but always strictly after previous."""
    return now if now > previous else previous + _TICK
