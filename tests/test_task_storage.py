# tests/test_task_storage.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from task_tracker.tasks.slot_stores import JsonFileSlotStore, MemorySlotStore, SqliteSlotStore
from task_tracker.tasks.task_models import TaskStatus
from task_tracker.tasks.task_storage import DEFAULT_STORAGE_KEY, TaskStorage
from task_tracker.tasks.task_store import TaskStore

from .fakes import FailingSlotStore, FakeClock


def _sample_snapshots(storage: TaskStorage):
    store = TaskStore(storage, clock=FakeClock())
    store.initialize()
    store.create_task({"title": "Buy milk", "priority": "low", "tags": "home, shop"})
    store.create_task({"title": "Call plumber", "priority": "high", "deadline": "2024-06-01"})
    created = store.create_task({"title": "Pay rent", "priority": "medium", "responsible": "Sam"})
    assert created.task is not None
    store.toggle_task(created.task.id)
    return store.filtered_view("all")


def test_missing_slot_loads_empty() -> None:
    assert TaskStorage(MemorySlotStore()).load() == []


def test_save_then_load_round_trip_preserves_order() -> None:
    storage = TaskStorage(MemorySlotStore())
    snapshots = _sample_snapshots(storage)

    assert storage.save(snapshots) is True
    assert storage.load() == snapshots
    assert [s.title for s in storage.load()] == ["Pay rent", "Call plumber", "Buy milk"]


def test_persisted_layout_is_a_json_array() -> None:
    slots = MemorySlotStore()
    storage = TaskStorage(slots)
    _sample_snapshots(storage)

    data = json.loads(slots.slots[DEFAULT_STORAGE_KEY])
    assert isinstance(data, list)
    assert len(data) == 3
    assert data[0]["completed"] is True
    assert data[0]["status"] == "completed"
    assert data[2]["tags"] == ["home", "shop"]


@pytest.mark.parametrize(
    "blob",
    [
        "{not json",
        '{"id": "task_1"}',
        '[{"id": "task_1", "title": "ok", "createdAt": "2024-05-01T09:00:00Z"}, {"title": "no id"}]',
        "[1, 2, 3]",
    ],
)
def test_malformed_data_loads_empty(blob: str) -> None:
    storage = TaskStorage(MemorySlotStore({DEFAULT_STORAGE_KEY: blob}))
    assert storage.load() == []


def test_read_failure_is_swallowed() -> None:
    assert TaskStorage(FailingSlotStore()).load() == []


def test_write_and_clear_failures_return_false() -> None:
    storage = TaskStorage(FailingSlotStore())
    assert storage.save([]) is False
    assert storage.clear() is False


def test_failed_save_keeps_previous_contents() -> None:
    slots = FailingSlotStore(fail_get=False, fail_set=False)
    storage = TaskStorage(slots)
    snapshots = _sample_snapshots(storage)

    slots.fail_set = True
    assert storage.save(snapshots[:1]) is False
    assert storage.load() == snapshots


def test_clear_removes_slot() -> None:
    slots = MemorySlotStore()
    storage = TaskStorage(slots, key="custom")
    storage.save([])
    assert "custom" in slots.slots

    assert storage.clear() is True
    assert slots.slots == {}
    assert storage.load() == []


def test_legacy_blob_without_status_or_tags_loads() -> None:
    blob = json.dumps(
        [
            {
                "id": "task_1714550000000_k2j3h4g5f",
                "title": "Legacy",
                "description": "",
                "priority": "high",
                "deadline": "2024-05-20",
                "completed": False,
                "createdAt": "2024-05-01T09:00:00.000Z",
                "updatedAt": "2024-05-01T09:00:00.000Z",
            }
        ]
    )
    (snap,) = TaskStorage(MemorySlotStore({DEFAULT_STORAGE_KEY: blob})).load()
    assert snap.status is TaskStatus.NOT_STARTED
    assert snap.tags == ()
    assert snap.deadline == "2024-05-20"


# ---- slot backends ----


def test_sqlite_slot_store(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "tasks.sqlite3"
    slots = SqliteSlotStore(db)

    assert slots.get("k") is None
    slots.set("k", "[1]")
    slots.set("k", "[1, 2]")
    assert slots.get("k") == "[1, 2]"

    # A second instance sees the same data.
    assert SqliteSlotStore(db).get("k") == "[1, 2]"

    slots.remove("k")
    assert slots.get("k") is None
    slots.remove("k")


def test_json_file_slot_store(tmp_path: Path) -> None:
    slots = JsonFileSlotStore(tmp_path / "data")

    assert slots.get("todoApp_tasks") is None
    slots.set("todoApp_tasks", "[]")

    path = slots.path_for("todoApp_tasks")
    assert path == tmp_path / "data" / "todoApp_tasks.json"
    assert path.read_text("utf-8") == "[]"
    assert not path.with_suffix(".tmp").exists()

    slots.remove("todoApp_tasks")
    assert not path.exists()
    slots.remove("todoApp_tasks")


def test_json_file_slot_store_sanitizes_keys(tmp_path: Path) -> None:
    slots = JsonFileSlotStore(tmp_path)
    assert slots.path_for("../../etc/passwd").parent == tmp_path


def test_gateway_over_sqlite_round_trip(tmp_path: Path) -> None:
    storage = TaskStorage(SqliteSlotStore(tmp_path / "tasks.sqlite3"))
    snapshots = _sample_snapshots(storage)
    assert TaskStorage(SqliteSlotStore(tmp_path / "tasks.sqlite3")).load() == snapshots
