# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..core.ports import Clock, IdFactory, TaskGateway
from .task_api import coerce_fields
from .task_ids import IdGenerator
from .task_models import (
    Task,
    TaskFields,
    TaskFilter,
    TaskSnapshot,
    TaskStats,
    utc_now,
)
from .task_validation import validate

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class MutationResult:
    """
    Outcome of a store mutation.

    ok        -> the mutation was admitted and applied in memory
    errors    -> field -> message (validation rejected the input, nothing changed)
    not_found -> unknown task id (benign, nothing changed)
    persisted -> the full collection was saved afterwards; a failed save is
                 reported here but the in-memory change is kept
    """

    ok: bool
    task: TaskSnapshot | None = None
    errors: dict[str, str] = field(default_factory=dict)
    not_found: bool = False
    persisted: bool = False


class TaskStore:
    """
    Authoritative in-memory task collection.

    - tasks are kept newest-created first
    - every admitted mutation is validated first and persisted right after
    - callers only ever get TaskSnapshot copies, never live Task objects
    """

    def __init__(
        self,
        gateway: TaskGateway,
        *,
        id_generator: IdFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._gateway = gateway
        self._ids: IdFactory = id_generator or IdGenerator()
        self._clock: Clock = clock or utc_now

        self._tasks: list[Task] = []
        # Every id this store has ever held; deleted ids are never handed out again.
        self._issued: set[str] = set()
        self._filter = TaskFilter.ALL
        self._selected: TaskSnapshot | None = None

    # ---- lifecycle ----

    def initialize(self) -> None:
        """Load the persisted collection. An unreadable store yields an empty list."""
        tasks: list[Task] = []
        seen: set[str] = set()
        for snap in self._gateway.load():
            if snap.id in seen:
                logger.warning("Duplicate task id in storage, keeping first: %s", snap.id)
                continue
            seen.add(snap.id)
            tasks.append(Task.from_snapshot(snap))

        self._tasks = tasks
        self._issued |= seen
        self._filter = TaskFilter.ALL
        self._selected = None
        logger.info("TaskStore ready total=%d", len(self._tasks))

    # ---- low-level helpers ----

    def _find(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _new_id(self) -> str:
        task_id = self._ids.next_id()
        while task_id in self._issued:
            task_id = self._ids.next_id()
        self._issued.add(task_id)
        return task_id

    def _persist(self) -> bool:
        ok = self._gateway.save([t.to_snapshot() for t in self._tasks])
        if not ok:
            logger.warning("Persisting %d tasks failed; in-memory state kept", len(self._tasks))
        return ok

    def _refresh_selection(self, task: Task) -> None:
        if self._selected is not None and self._selected.id == task.id:
            self._selected = task.to_snapshot()

    # ---- mutations ----

    def create_task(self, fields: TaskFields | Mapping[str, Any]) -> MutationResult:
        candidate = coerce_fields(fields)
        result = validate(candidate)
        if not result.valid:
            logger.debug("create_task rejected errors=%s", result.errors)
            return MutationResult(ok=False, errors=result.errors)

        task = Task.create(candidate, task_id=self._new_id(), now=self._clock())
        self._tasks.insert(0, task)
        persisted = self._persist()
        logger.info("Task created id=%s priority=%s", task.id, task.priority.value)
        return MutationResult(ok=True, task=task.to_snapshot(), persisted=persisted)

    def update_task(self, task_id: str, fields: TaskFields | Mapping[str, Any]) -> MutationResult:
        candidate = coerce_fields(fields)
        result = validate(candidate, partial=True)
        if not result.valid:
            logger.debug("update_task rejected id=%s errors=%s", task_id, result.errors)
            return MutationResult(ok=False, errors=result.errors)

        task = self._find(task_id)
        if task is None:
            logger.info("update_task: unknown id=%s", task_id)
            return MutationResult(ok=False, not_found=True)

        task.apply_update(candidate, now=self._clock())
        persisted = self._persist()
        self._refresh_selection(task)
        logger.info("Task updated id=%s status=%s", task.id, task.status.value)
        return MutationResult(ok=True, task=task.to_snapshot(), persisted=persisted)

    def toggle_task(self, task_id: str) -> MutationResult:
        task = self._find(task_id)
        if task is None:
            logger.info("toggle_task: unknown id=%s", task_id)
            return MutationResult(ok=False, not_found=True)

        task.toggle_complete(now=self._clock())
        persisted = self._persist()
        self._refresh_selection(task)
        logger.info("Task toggled id=%s status=%s", task.id, task.status.value)
        return MutationResult(ok=True, task=task.to_snapshot(), persisted=persisted)

    def delete_task(self, task_id: str) -> MutationResult:
        task = self._find(task_id)
        if task is None:
            logger.info("delete_task: unknown id=%s", task_id)
            return MutationResult(ok=False, not_found=True)

        self._tasks.remove(task)
        persisted = self._persist()
        if self._selected is not None and self._selected.id == task_id:
            self._selected = None
        logger.info("Task deleted id=%s", task_id)
        return MutationResult(ok=True, task=task.to_snapshot(), persisted=persisted)

    def clear_all(self) -> bool:
        """Drop every task and remove the storage slot. Ids stay retired."""
        count = len(self._tasks)
        self._tasks = []
        self._selected = None
        ok = self._gateway.clear()
        logger.info("Cleared %d tasks (storage cleared=%s)", count, ok)
        return ok

    # ---- filter / selection (transient, never persisted) ----

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def set_filter(self, value: TaskFilter | str) -> TaskFilter:
        try:
            self._filter = TaskFilter(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown filter {value!r}; expected one of all, pending, completed") from None
        return self._filter

    @property
    def selected(self) -> TaskSnapshot | None:
        return self._selected

    def select_task(self, task_id: str) -> TaskSnapshot | None:
        task = self._find(task_id)
        self._selected = task.to_snapshot() if task is not None else None
        return self._selected

    def clear_selection(self) -> None:
        self._selected = None

    # ---- queries ----

    def get_task(self, task_id: str) -> TaskSnapshot | None:
        task = self._find(task_id)
        return task.to_snapshot() if task is not None else None

    def filtered_view(self, value: TaskFilter | str | None = None) -> list[TaskSnapshot]:
        flt = self._filter if value is None else TaskFilter(str(value).strip().lower())
        return [t.to_snapshot() for t in self._tasks if flt.matches(t)]

    def stats(self) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(total=total, pending=total - completed, completed=completed)

    def overdue(self, today: date | None = None) -> list[TaskSnapshot]:
        today = today or self._clock().astimezone().date()
        return [s for s in (t.to_snapshot() for t in self._tasks) if s.is_overdue(today)]

    def __len__(self) -> int:
        return len(self._tasks)
