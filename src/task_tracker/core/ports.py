# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Callable, Protocol

Clock = Callable[[], datetime]
# Must return timezone-aware datetimes.


class SlotStore(Protocol):
    """
    Opaque key/value persistence: one blocking get/set of a serialized blob per key.

    set() must replace the whole value or leave the previous one in place.
    Implementations may raise on I/O failure; the gateway above handles it.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class TaskGateway(Protocol):
    """Load/save the whole task collection. Never raises."""

    def load(self) -> list[Any]: ...
    def save(self, snapshots: Sequence[Any]) -> bool: ...
    def clear(self) -> bool: ...


class IdFactory(Protocol):
    def next_id(self) -> str: ...
