# src/task_tracker/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .task_models import TaskFields

logger = logging.getLogger(__name__)

# Form keys accepted from input collaborators; anything else is ignored.
FORM_KEYS = ("title", "status", "priority", "responsible", "deadline", "description", "tags", "completed")
ALIASES = {"name": "title"}

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _tags(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, list | tuple | set | frozenset):
        parts = [str(v) for v in value]
    else:
        parts = [str(value)]
    return tuple(p.strip() for p in parts if p.strip())


def _flag(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None


def fields_from_form(raw: Mapping[str, Any]) -> TaskFields:
    """
    Convert a plain field-value record (form submit, CLI args, JSON body) into TaskFields.

    - "name" is accepted as an alias of "title"
    - tags may be a comma separated string or a sequence
    - completed accepts booleans and the usual yes/no strings
    - unknown keys are dropped, never copied onto a task
    """
    data: dict[str, Any] = {}
    for key, value in raw.items():
        name = ALIASES.get(str(key).lower(), str(key).lower())
        if name in FORM_KEYS:
            data[name] = value
        else:
            logger.debug("Ignoring unknown task field %r", key)

    return TaskFields(
        title=_text(data.get("title")),
        status=_text(data.get("status")),
        priority=_text(data.get("priority")),
        responsible=_text(data.get("responsible")),
        deadline=_text(data.get("deadline")),
        description=_text(data.get("description")),
        tags=_tags(data.get("tags")),
        completed=_flag(data.get("completed")),
    )


def coerce_fields(fields: TaskFields | Mapping[str, Any]) -> TaskFields:
    if isinstance(fields, TaskFields):
        return fields
    return fields_from_form(fields)
