# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any
    store: TaskStore

    # Delete confirmation flow: /rm remembers the id, /yes or /no resolves it.
    pending_delete_id: str | None = None
