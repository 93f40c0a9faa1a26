# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage slot backend,
- wires the persistence gateway and the task store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import SlotStore
from ..core.state import AppState
from ..tasks.slot_stores import JsonFileSlotStore, MemorySlotStore, SqliteSlotStore
from ..tasks.task_storage import TaskStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_slot_store(settings) -> SlotStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "memory":
        return MemorySlotStore()
    if backend == "file":
        return JsonFileSlotStore(settings.data_dir)
    if backend != "sqlite":
        logger.warning("Unknown storage backend %r, using sqlite", backend)
    return SqliteSlotStore(settings.tasks_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings and load persisted tasks.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = TaskStorage(create_slot_store(settings), key=settings.storage_key)
    store = TaskStore(storage)
    store.initialize()

    logger.info(
        "State ready backend=%s key=%s tasks=%d",
        settings.storage_backend,
        settings.storage_key,
        len(store),
    )
    return AppState(settings=settings, store=store)
