# src/task_tracker/tasks/task_ids.py

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Callable

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LEN = 9


class IdGenerator:
    """
    Task id factory: ``task_<unix-millis>_<9 base36 chars>``.

    The millisecond part is forced strictly increasing per generator, so two
    calls never return the same id within a process even on a coarse clock.
    The random suffix covers ids minted by other processes.
    """

    def __init__(self, clock_ms: Callable[[], int] | None = None) -> None:
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last_ms = 0

    def next_id(self) -> str:
        ms = int(self._clock_ms())
        if ms <= self._last_ms:
            ms = self._last_ms + 1
        self._last_ms = ms
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LEN))
        return f"task_{ms}_{suffix}"
