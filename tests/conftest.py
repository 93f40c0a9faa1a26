# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.slot_stores import MemorySlotStore
from task_tracker.tasks.task_storage import TaskStorage
from task_tracker.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        storage_backend="memory",
        storage_key="todoApp_tasks",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        console_color=False,
    )


@pytest.fixture()
def slots() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture()
def storage(slots: MemorySlotStore) -> TaskStorage:
    return TaskStorage(slots)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(storage: TaskStorage, clock: FakeClock) -> TaskStore:
    s = TaskStore(storage, clock=clock)
    s.initialize()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
