# src/task_tracker/tasks/task_validation.py

"""
Field rules for task input.

Pure functions: no store access, no I/O, never raise. Each failing field gets
exactly one message (the first rule that fails).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .task_models import TaskFields, TaskPriority, TaskStatus, parse_iso_date

MIN_TEXT_LENGTH = 3

MSG_REQUIRED = "required"
MSG_MIN_LENGTH = "minimum length"
MSG_PRIORITY = "must be one of low, medium, high"
MSG_STATUS = "must be one of not-started, in-progress, completed"
MSG_DEADLINE = "must be a date in YYYY-MM-DD format"


@dataclass(slots=True, frozen=True)
class ValidationResult:
    valid: bool
    errors: dict[str, str] = field(default_factory=dict)


def validate_title(title: Any) -> str | None:
    if not isinstance(title, str) or not title.strip():
        return MSG_REQUIRED
    if len(title.strip()) < MIN_TEXT_LENGTH:
        return MSG_MIN_LENGTH
    return None


def validate_priority(priority: Any) -> str | None:
    if TaskPriority.parse(priority) is None:
        return MSG_PRIORITY
    return None


def validate_description(description: Any) -> str | None:
    # Optional: only a non-empty description has to meet the minimum length.
    if description is None:
        return None
    text = str(description).strip()
    if text and len(text) < MIN_TEXT_LENGTH:
        return MSG_MIN_LENGTH
    return None


def validate_status(status: Any) -> str | None:
    if status is None or (isinstance(status, str) and not status.strip()):
        return None
    if TaskStatus.parse(status) is None:
        return MSG_STATUS
    return None


def validate_deadline(deadline: Any) -> str | None:
    try:
        parse_iso_date(deadline)
    except (TypeError, ValueError):
        return MSG_DEADLINE
    return None


def validate(candidate: TaskFields, *, partial: bool = False) -> ValidationResult:
    """
    Check a candidate record.

    partial=True is used for updates: title and priority are only required
    when they are supplied.
    """
    errors: dict[str, str] = {}

    if not partial or candidate.title is not None:
        msg = validate_title(candidate.title)
        if msg:
            errors["title"] = msg

    if not partial or candidate.priority is not None:
        msg = validate_priority(candidate.priority)
        if msg:
            errors["priority"] = msg

    checks = (
        ("description", validate_description, candidate.description),
        ("status", validate_status, candidate.status),
        ("deadline", validate_deadline, candidate.deadline),
    )
    for name, check, value in checks:
        msg = check(value)
        if msg:
            errors[name] = msg

    return ValidationResult(valid=not errors, errors=errors)
