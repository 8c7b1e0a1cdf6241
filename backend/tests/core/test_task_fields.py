"""Task Field Validation — creation/update rules shared by the access layer.

Tests:
    - Text fields reject missing, blank and non-string values
    - Enum fields reject values outside their enum
    - Assignee must look like an identity; due dates must parse
    - None means "not supplied"
    - advance_timestamp is strictly increasing
"""

from datetime import datetime, timedelta, timezone

import pytest

from tasktracker.core.domain_types import TaskPriority, TaskStatus
from tasktracker.core.errors import TaskValidationError
from tasktracker.core.task_fields import (
    advance_timestamp, parse_caller_id, parse_due_date, parse_text,
    require_creation_fields, validate_task_fields,
)


@pytest.mark.parametrize("value", ["", "   ", None, 42])
def test_parse_text_rejects_blank_or_non_string(value):
    with pytest.raises(TaskValidationError) as exc:
        parse_text(value, "title")
    assert exc.value.field == "title"
    assert exc.value.http_status == 400


def test_parse_text_keeps_value_as_given():
    assert parse_text("  Write report \n", "title") == "  Write report \n"


def test_validate_returns_only_supplied_fields():
    cleaned = validate_task_fields({"title": "T", "priority": None, "assignee": None})
    assert cleaned == {"title": "T"}


def test_validate_parses_enums_and_dates():
    cleaned = validate_task_fields({
        "title": "T", "description": "D", "priority": "high",
        "due_date": "2026-03-01T10:00:00Z", "assignee": "bob-principal",
    })
    assert cleaned["priority"] is TaskPriority.HIGH
    assert cleaned["due_date"] == datetime(2026, 3, 1, 10, tzinfo=timezone.utc)
    assert cleaned["assignee"] == "bob-principal"


def test_invalid_priority_is_rejected():
    with pytest.raises(TaskValidationError) as exc:
        validate_task_fields({"priority": "urgent"})
    assert exc.value.field == "priority"


def test_status_ignored_unless_allowed():
    assert "status" not in validate_task_fields({"status": "completed"})
    cleaned = validate_task_fields({"status": "completed"}, allow_status=True)
    assert cleaned["status"] is TaskStatus.COMPLETED


def test_invalid_status_is_rejected_on_update():
    with pytest.raises(TaskValidationError) as exc:
        validate_task_fields({"status": "done"}, allow_status=True)
    assert exc.value.field == "status"


@pytest.mark.parametrize("value", ["", "two words", "x" * 256, 7])
def test_parse_caller_id_rejects_malformed_identities(value):
    with pytest.raises(TaskValidationError):
        parse_caller_id(value)


def test_parse_due_date_reads_naive_values_as_utc():
    assert parse_due_date("2026-05-01") == datetime(2026, 5, 1, tzinfo=timezone.utc)


def test_parse_due_date_keeps_explicit_offset():
    parsed = parse_due_date("2026-05-01T08:00:00+02:00")
    assert parsed == datetime(2026, 5, 1, 6, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["tomorrow", "2026-13-40", ""])
def test_parse_due_date_rejects_garbage(value):
    with pytest.raises(TaskValidationError) as exc:
        parse_due_date(value)
    assert exc.value.field == "dueDate"


def test_creation_requires_title_and_description():
    with pytest.raises(TaskValidationError) as exc:
        require_creation_fields({"title": "T"})
    assert exc.value.field == "description"


def test_advance_timestamp_uses_clock_when_it_moved():
    prev = datetime(2026, 1, 1, tzinfo=timezone.utc)
    later = prev + timedelta(seconds=5)
    assert advance_timestamp(later, prev) == later


def test_advance_timestamp_bumps_when_clock_stalled():
    prev = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert advance_timestamp(prev, prev) == prev + timedelta(microseconds=1)
    assert advance_timestamp(prev - timedelta(seconds=1), prev) > prev
