# src/task_tracker/tasks/task_storage.py

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from ..core.ports import SlotStore
from .task_models import TaskSnapshot

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todoApp_tasks"


class TaskStorage:
    """
    Persistence gateway: the whole task collection lives in a single slot as a JSON array.

    Failures never escape:
    - load() returns [] on a missing slot, unreadable store or malformed data
      (no per-record recovery: one bad record discards the whole blob)
    - save()/clear() return False and log
    """

    def __init__(self, slots: SlotStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._slots = slots
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[TaskSnapshot]:
        try:
            raw = self._slots.get(self._key)
        except Exception:
            logger.exception("Failed to read task slot key=%s", self._key)
            return []

        if raw is None or not raw.strip():
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            tasks = [TaskSnapshot.from_dict(item) for item in data]
        except Exception:
            logger.exception("Malformed task data in slot key=%s; starting empty", self._key)
            return []

        logger.info("Loaded %d tasks from slot key=%s", len(tasks), self._key)
        return tasks

    def save(self, snapshots: Sequence[TaskSnapshot]) -> bool:
        try:
            payload = json.dumps([s.to_dict() for s in snapshots], ensure_ascii=False)
            self._slots.set(self._key, payload)
        except Exception:
            logger.exception("Failed to save %d tasks to slot key=%s", len(snapshots), self._key)
            return False
        logger.debug("Saved %d tasks to slot key=%s", len(snapshots), self._key)
        return True

    def clear(self) -> bool:
        try:
            self._slots.remove(self._key)
        except Exception:
            logger.exception("Failed to clear slot key=%s", self._key)
            return False
        logger.info("Cleared task slot key=%s", self._key)
        return True
