# tests/test_task_validation.py

from __future__ import annotations

import pytest

from task_tracker.tasks.task_models import TaskFields
from task_tracker.tasks.task_validation import (
    MSG_DEADLINE,
    MSG_MIN_LENGTH,
    MSG_PRIORITY,
    MSG_REQUIRED,
    MSG_STATUS,
    validate,
    validate_priority,
    validate_title,
)


def test_valid_minimal_record() -> None:
    result = validate(TaskFields(title="Buy milk", priority="low"))
    assert result.valid is True
    assert result.errors == {}


@pytest.mark.parametrize(
    ("title", "message"),
    [(None, MSG_REQUIRED), ("", MSG_REQUIRED), ("   ", MSG_REQUIRED), ("ab", MSG_MIN_LENGTH), (" ab ", MSG_MIN_LENGTH)],
)
def test_title_rules_first_failure_wins(title, message) -> None:
    result = validate(TaskFields(title=title, priority="low"))
    assert result.valid is False
    assert result.errors == {"title": message}


def test_title_of_three_chars_after_trim_passes() -> None:
    assert validate_title("  abc ") is None


@pytest.mark.parametrize("priority", [None, "", "urgent", "LOWEST"])
def test_priority_must_be_known(priority) -> None:
    result = validate(TaskFields(title="Buy milk", priority=priority))
    assert result.errors == {"priority": MSG_PRIORITY}


def test_priority_is_case_insensitive() -> None:
    assert validate_priority("High") is None


def test_all_failing_fields_reported_once() -> None:
    result = validate(TaskFields(title="x", priority="nope", description="ab", status="done", deadline="tomorrow"))
    assert result.errors == {
        "title": MSG_MIN_LENGTH,
        "priority": MSG_PRIORITY,
        "description": MSG_MIN_LENGTH,
        "status": MSG_STATUS,
        "deadline": MSG_DEADLINE,
    }


# Description rule: optional, but a non-empty description must have at least 3 characters.
# An empty description is never an error (the field is not required).
@pytest.mark.parametrize(
    ("description", "ok"),
    [(None, True), ("", True), ("   ", True), ("ab", False), (" ab ", False), ("abc", True)],
)
def test_description_min_length_applies_only_when_provided(description, ok: bool) -> None:
    result = validate(TaskFields(title="Buy milk", priority="low", description=description))
    assert result.valid is ok
    if not ok:
        assert result.errors == {"description": MSG_MIN_LENGTH}


def test_empty_deadline_and_status_are_allowed() -> None:
    assert validate(TaskFields(title="Buy milk", priority="low", deadline="", status="")).valid


@pytest.mark.parametrize("deadline", ["2024W011", "2024-W01-1", "20240601", "2024-6-1", "2024-06-01T10:00"])
def test_deadline_must_be_calendar_date(deadline: str) -> None:
    result = validate(TaskFields(title="Buy milk", priority="low", deadline=deadline))
    assert result.errors == {"deadline": MSG_DEADLINE}


def test_partial_only_checks_supplied_fields() -> None:
    assert validate(TaskFields(), partial=True).valid
    assert validate(TaskFields(status="in-progress"), partial=True).valid
    assert validate(TaskFields(title="ab"), partial=True).errors == {"title": MSG_MIN_LENGTH}
    assert validate(TaskFields(priority=""), partial=True).errors == {"priority": MSG_PRIORITY}


def test_full_validation_requires_title_and_priority() -> None:
    assert validate(TaskFields()).errors == {"title": MSG_REQUIRED, "priority": MSG_PRIORITY}
