# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from task_tracker.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("task_tracker", logging.DEBUG, True),
        ("task_tracker.tasks.task_store", logging.INFO, True),
        ("task_tracker_other", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
        ("sqlite3", logging.WARNING, False),
        ("dotenv.main", logging.CRITICAL, True),
    ],
)
def test_console_filter_keeps_app_logs_and_errors(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown
