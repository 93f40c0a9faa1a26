# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: task-tracker).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    # Storage
    "TODO_STORAGE_BACKEND": "sqlite | file | memory (default: sqlite).",
    "TODO_STORAGE_KEY": "Slot key holding the task list (default: todoApp_tasks).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory (default: .local/task-tracker).",
    "TODO_TASKS_DB_PATH": "SQLite slot file (default: <data_dir>/tasks.sqlite3).",
    # Console
    "TODO_CONSOLE_COLOR": "Highlight overdue tasks with ANSI colors (true/false).",
}
