# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.cli.bootstrap import create_initial_state, create_slot_store
from task_tracker.config import Settings
from task_tracker.tasks.slot_stores import JsonFileSlotStore, MemorySlotStore, SqliteSlotStore


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_APP_NAME", "my-tasks")
    monkeypatch.setenv("TODO_LOG_LEVEL", "debug")
    monkeypatch.setenv("TODO_STORAGE_BACKEND", "FILE")
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TODO_TASKS_DB_PATH", raising=False)
    monkeypatch.setenv("TODO_CONSOLE_COLOR", "no")

    s = Settings.from_env(dotenv=False)

    assert s.app_name == "my-tasks"
    assert s.log_level == "DEBUG"
    assert s.storage_backend == "file"
    assert s.storage_key == "todoApp_tasks"
    assert s.data_dir == tmp_path
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.console_color is False


def test_settings_unknown_backend_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_STORAGE_BACKEND", "redis")
    assert Settings.from_env(dotenv=False).storage_backend == "sqlite"


@pytest.mark.parametrize(
    ("backend", "cls"),
    [("memory", MemorySlotStore), ("file", JsonFileSlotStore), ("sqlite", SqliteSlotStore)],
)
def test_create_slot_store(settings: SimpleNamespace, backend: str, cls: type) -> None:
    settings.storage_backend = backend
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    assert isinstance(create_slot_store(settings), cls)


@pytest.mark.parametrize("backend", ["file", "sqlite"])
def test_tasks_survive_restart(settings: SimpleNamespace, backend: str) -> None:
    settings.storage_backend = backend

    state = create_initial_state(settings=settings)
    result = state.store.create_task({"title": "Persist me", "priority": "high"})
    assert result.persisted is True

    again = create_initial_state(settings=settings)
    view = again.store.filtered_view()
    assert [t.title for t in view] == ["Persist me"]
    assert again.pending_delete_id is None
