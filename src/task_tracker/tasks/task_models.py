# src/task_tracker/tasks/task_models.py

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - this enum is the single source of truth; the ``completed`` flag seen in
      snapshots and on disk is derived from it.
    - "in-progress" is only reachable through an explicit edit; toggling is binary.
    """

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None

    @classmethod
    def from_db(cls, raw: Any) -> TaskPriority:
        return cls.parse(raw) or cls.MEDIUM


class TaskFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    def matches(self, task: TaskSnapshot | Task) -> bool:
        if self is TaskFilter.PENDING:
            return task.status in (TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS)
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


# ---- time helpers ----


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix, e.g. 2024-05-01T09:30:00.000Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


_CALENDAR_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_iso_date(raw: str | date | None) -> date | None:
    """
    Parse a calendar date (YYYY-MM-DD). Empty/None -> None.

    Only the extended calendar form is accepted; week dates (2024W011) and the
    compact form (20240601) raise ValueError like anything else that does not parse.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    if not _CALENDAR_DATE.fullmatch(text):
        raise ValueError(f"not a YYYY-MM-DD date: {text!r}")
    return date.fromisoformat(text)


def clean_tags(tags: Iterable[Any] | None) -> list[str]:
    if not tags:
        return []
    out: list[str] = []
    for t in tags:
        s = str(t).strip()
        if s:
            out.append(s)
    return out


# ---- records ----


@dataclass(slots=True, frozen=True)
class TaskFields:
    """
    Explicit field record used for both create and partial update.

    Every field is optional; ``None`` means "not supplied". Optional text
    fields are cleared with an empty string (``deadline=""`` clears the deadline).
    Values are raw (status/priority as strings) until the validator accepts them.
    """

    title: str | None = None
    status: str | None = None
    priority: str | None = None
    responsible: str | None = None
    deadline: str | None = None
    description: str | None = None
    tags: tuple[str, ...] | None = None
    completed: bool | None = None


@dataclass(slots=True, frozen=True)
class TaskSnapshot:
    """Immutable plain copy of a task, safe to persist or hand to a renderer."""

    id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    responsible: str
    deadline: str | None
    description: str
    tags: tuple[str, ...]
    completed: bool
    created_at: str
    updated_at: str

    def is_overdue(self, today: date) -> bool:
        if self.completed or not self.deadline:
            return False
        try:
            return date.fromisoformat(self.deadline) < today
        except ValueError:
            return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "responsible": self.responsible,
            "deadline": self.deadline,
            "description": self.description,
            "tags": list(self.tags),
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> TaskSnapshot:
        """
        Parse one persisted record.

        Status reconciliation for older records:
        - a valid ``status`` wins and ``completed`` follows it
        - without a valid status, ``completed: true`` means completed, else not-started

        Raises ValueError/TypeError on records that cannot be used.
        """
        if not isinstance(raw, Mapping):
            raise TypeError(f"task record must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task record without id")

        title = raw.get("title", raw.get("name"))
        if not isinstance(title, str):
            raise ValueError(f"task {task_id} has no title")

        created_at = raw.get("createdAt")
        if not isinstance(created_at, str):
            raise ValueError(f"task {task_id} has no createdAt")
        parse_timestamp(created_at)

        updated_at = raw.get("updatedAt") or created_at
        if not isinstance(updated_at, str):
            raise ValueError(f"task {task_id} has invalid updatedAt")
        parse_timestamp(updated_at)

        status = TaskStatus.parse(raw.get("status"))
        if status is None:
            status = TaskStatus.COMPLETED if raw.get("completed") is True else TaskStatus.NOT_STARTED

        deadline_date = parse_iso_date(raw.get("deadline"))
        tags_raw = raw.get("tags") or []
        if not isinstance(tags_raw, list | tuple):
            raise ValueError(f"task {task_id} has non-list tags")

        return cls(
            id=task_id,
            title=title,
            status=status,
            priority=TaskPriority.from_db(raw.get("priority")),
            responsible=str(raw.get("responsible") or ""),
            deadline=deadline_date.isoformat() if deadline_date else None,
            description=str(raw.get("description") or ""),
            tags=tuple(clean_tags(tags_raw)),
            completed=status is TaskStatus.COMPLETED,
            created_at=created_at,
            updated_at=updated_at,
        )


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    pending: int
    completed: int


# ---- entity ----


@dataclass(slots=True)
class Task:
    id: str
    title: str
    priority: TaskPriority
    status: TaskStatus = TaskStatus.NOT_STARTED
    responsible: str = ""
    deadline: date | None = None
    description: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @classmethod
    def create(cls, fields: TaskFields, *, task_id: str, now: datetime) -> Task:
        """Build a new task from already validated fields."""
        status = TaskStatus.parse(fields.status)
        if status is None:
            status = TaskStatus.COMPLETED if fields.completed else TaskStatus.NOT_STARTED

        priority = TaskPriority.parse(fields.priority)
        if priority is None:
            raise ValueError(f"invalid priority: {fields.priority!r}")

        return cls(
            id=task_id,
            title=(fields.title or "").strip(),
            priority=priority,
            status=status,
            responsible=(fields.responsible or "").strip(),
            deadline=parse_iso_date(fields.deadline),
            description=(fields.description or "").strip(),
            tags=clean_tags(fields.tags),
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_snapshot(cls, snap: TaskSnapshot) -> Task:
        return cls(
            id=snap.id,
            title=snap.title,
            priority=snap.priority,
            status=snap.status,
            responsible=snap.responsible,
            deadline=parse_iso_date(snap.deadline),
            description=snap.description,
            tags=list(snap.tags),
            created_at=parse_timestamp(snap.created_at),
            updated_at=parse_timestamp(snap.updated_at),
        )

    def apply_update(self, fields: TaskFields, *, now: datetime) -> None:
        """
        Overwrite every supplied field (id and created_at are never touched).

        All values are parsed before anything is assigned, so a ValueError
        leaves the task unchanged. A blank status counts as not supplied.

        Status rule:
        - a supplied status wins; ``completed`` follows it
        - otherwise ``completed=True`` completes the task and ``completed=False``
          re-opens a completed task as not-started
        """
        priority = self.priority
        if fields.priority is not None:
            parsed_priority = TaskPriority.parse(fields.priority)
            if parsed_priority is None:
                raise ValueError(f"invalid priority: {fields.priority!r}")
            priority = parsed_priority

        status = self.status
        if fields.status is not None and fields.status.strip():
            parsed_status = TaskStatus.parse(fields.status)
            if parsed_status is None:
                raise ValueError(f"invalid status: {fields.status!r}")
            status = parsed_status
        elif fields.completed is not None:
            if fields.completed:
                status = TaskStatus.COMPLETED
            elif status is TaskStatus.COMPLETED:
                status = TaskStatus.NOT_STARTED

        deadline = self.deadline if fields.deadline is None else parse_iso_date(fields.deadline)

        if fields.title is not None:
            self.title = fields.title.strip()
        if fields.responsible is not None:
            self.responsible = fields.responsible.strip()
        if fields.description is not None:
            self.description = fields.description.strip()
        if fields.tags is not None:
            self.tags = clean_tags(fields.tags)
        self.priority = priority
        self.status = status
        self.deadline = deadline

        self._touch(now)

    def toggle_complete(self, *, now: datetime) -> None:
        if self.status is TaskStatus.COMPLETED:
            self.status = TaskStatus.NOT_STARTED
        else:
            self.status = TaskStatus.COMPLETED
        self._touch(now)

    def _touch(self, now: datetime) -> None:
        # updated_at never moves backwards, even if the clock does.
        if now > self.updated_at:
            self.updated_at = now

    def to_snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            id=self.id,
            title=self.title,
            status=self.status,
            priority=self.priority,
            responsible=self.responsible,
            deadline=self.deadline.isoformat() if self.deadline else None,
            description=self.description,
            tags=tuple(self.tags),
            completed=self.completed,
            created_at=format_timestamp(self.created_at),
            updated_at=format_timestamp(self.updated_at),
        )
