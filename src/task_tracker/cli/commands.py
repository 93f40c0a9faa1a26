# src/task_tracker/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable, Mapping
from datetime import date
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import TaskSnapshot, TaskStats, TaskStatus
from ..tasks.task_store import MutationResult

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def parse_assignments(args: list[str]) -> dict[str, str]:
    """
    key=value tokens -> dict. Bare words are joined into the title,
    so `/add Buy milk priority=low` works without quoting.
    """
    out: dict[str, str] = {}
    words: list[str] = []
    for token in args:
        key, sep, value = token.partition("=")
        if sep and key:
            out[key.strip().lower()] = value
        else:
            words.append(token)
    if words and "title" not in out and "name" not in out:
        out["title"] = " ".join(words)
    return out


def resolve_ref(state: AppState, ref: str) -> str:
    """A 1-based position in the current view, or a task id."""
    if ref.isdigit():
        view = state.store.filtered_view()
        n = int(ref)
        if 1 <= n <= len(view):
            return view[n - 1].id
    return ref


# ---- rendering ----


def format_deadline(deadline: str | None) -> str:
    if not deadline:
        return ""
    try:
        d = date.fromisoformat(deadline)
    except ValueError:
        return deadline
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def _paint(text: str, code: str, enabled: bool) -> str:
    return f"{code}{text}{RESET}" if enabled else text


def format_task_line(index: int, task: TaskSnapshot, *, today: date, color: bool = False) -> str:
    box = "[x]" if task.completed else ("[~]" if task.status is TaskStatus.IN_PROGRESS else "[ ]")
    line = f"{index:>3}. {box} {task.title} ({task.priority.value})"
    if task.deadline:
        due = f" due {format_deadline(task.deadline)}"
        if task.is_overdue(today):
            due = _paint(due + " (overdue)", RED, color)
        line += due
    if task.tags:
        line += " #" + " #".join(task.tags)
    return line + _paint(f"  {task.id}", DIM, color)


def format_task_detail(task: TaskSnapshot, *, today: date) -> str:
    lines = [
        f"{task.title}",
        f"  id:          {task.id}",
        f"  status:      {task.status.value}",
        f"  priority:    {task.priority.value}",
    ]
    if task.responsible:
        lines.append(f"  responsible: {task.responsible}")
    if task.deadline:
        overdue = " (overdue)" if task.is_overdue(today) else ""
        lines.append(f"  deadline:    {format_deadline(task.deadline)}{overdue}")
    if task.description:
        lines.append(f"  description: {task.description}")
    if task.tags:
        lines.append(f"  tags:        {', '.join(task.tags)}")
    lines.append(f"  created:     {task.created_at}")
    lines.append(f"  updated:     {task.updated_at}")
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    return f"Total: {stats.total}  Pending: {stats.pending}  Completed: {stats.completed}"


def format_errors(errors: Mapping[str, str]) -> str:
    lines = ["Task not saved:"]
    for name, msg in errors.items():
        lines.append(f"  {name}: {msg}")
    return "\n".join(lines)


def _use_color(state: AppState) -> bool:
    return bool(getattr(state.settings, "console_color", False))


def _today() -> date:
    return date.today()


def _describe(result: MutationResult, verb: str, ref: str) -> str:
    if result.errors:
        return format_errors(result.errors)
    if result.not_found or result.task is None:
        return f"No task {ref}."
    reply = f'Task "{result.task.title}" {verb}.'
    if not result.persisted:
        reply += " Warning: could not save to storage, changes are kept for this session only."
    return reply


def render_view(state: AppState) -> str:
    store = state.store
    view = store.filtered_view()
    today = _today()
    color = _use_color(state)
    header = f"Tasks ({store.filter.value}):"
    if not view:
        body = "  (no tasks)"
    else:
        body = "\n".join(
            format_task_line(i, t, today=today, color=color) for i, t in enumerate(view, start=1)
        )
    return f"{header}\n{body}\n{format_stats(store.stats())}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> current filter
    /list pending    -> switch filter, then list
    """
    if args:
        try:
            state.store.set_filter(args[0])
        except ValueError as e:
            return str(e)
    return render_view(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Current filter: {state.store.filter.value}. Use /filter all | pending | completed."
    try:
        flt = state.store.set_filter(args[0])
    except ValueError as e:
        return str(e)
    return f"Filter set to {flt.value}.\n{render_view(state)}"


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title words> priority=low|medium|high [deadline=YYYY-MM-DD] [tags=a,b] ..."""
    if not args:
        return "Usage: /add <title> priority=low|medium|high [deadline=YYYY-MM-DD] [tags=a,b]"
    result = state.store.create_task(parse_assignments(args))
    if result.ok and result.task is not None:
        return _describe(result, "added", result.task.id) + f"\n{render_view(state)}"
    return _describe(result, "added", "")


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <n|id> key=value ..."""
    if len(args) < 2:
        return "Usage: /edit <n|id> key=value ... (title, status, priority, responsible, deadline, description, tags)"
    ref = args[0]
    task_id = resolve_ref(state, ref)
    fields = parse_assignments(args[1:])
    result = state.store.update_task(task_id, fields)
    return _describe(result, "updated", ref)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        selected = state.store.selected
        if selected is None:
            return "Usage: /show <n|id>"
        return format_task_detail(selected, today=_today())
    snap = state.store.select_task(resolve_ref(state, args[0]))
    if snap is None:
        return f"No task {args[0]}."
    return format_task_detail(snap, today=_today())


def cmd_close(state: AppState, args: list[str]) -> str:
    if state.store.selected is None:
        return "No task is open."
    state.store.clear_selection()
    return "Closed task details."


def cmd_overdue(state: AppState, args: list[str]) -> str:
    today = _today()
    overdue = state.store.overdue(today)
    if not overdue:
        return "No overdue tasks."
    color = _use_color(state)
    lines = [f"Overdue ({len(overdue)}):"]
    lines.extend(format_task_line(i, t, today=today, color=color) for i, t in enumerate(overdue, start=1))
    return "\n".join(lines)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <n|id>"
    ref = args[0]
    result = state.store.toggle_task(resolve_ref(state, ref))
    if result.ok and result.task is not None:
        verb = "completed" if result.task.completed else "reopened"
        return _describe(result, verb, ref)
    return _describe(result, "toggled", ref)


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <n|id>"
    task_id = resolve_ref(state, args[0])
    snap = state.store.get_task(task_id)
    if snap is None:
        return f"No task {args[0]}."
    state.pending_delete_id = task_id
    return f'Delete "{snap.title}"? Type /yes to confirm or /no to cancel.'


def cmd_yes(state: AppState, args: list[str]) -> str:
    task_id = state.pending_delete_id
    if task_id is None:
        return "Nothing to confirm."
    state.pending_delete_id = None
    logger.debug("Delete confirmed id=%s", task_id)
    return _describe(state.store.delete_task(task_id), "deleted", task_id)


def cmd_no(state: AppState, args: list[str]) -> str:
    if state.pending_delete_id is None:
        return "Nothing to cancel."
    state.pending_delete_id = None
    return "Delete cancelled."


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(state.store.stats())


def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args or args[0].lower() != "yes":
        return "This removes every task. Use /clear yes to confirm."
    if emit:
        emit("Clearing all tasks...")
    logger.info("Clear-all requested from console")
    state.pending_delete_id = None
    ok = state.store.clear_all()
    return "All tasks removed." if ok else "Tasks removed for this session, but storage could not be cleared."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks: /list [all|pending|completed].", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Set the active filter: /filter all|pending|completed.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> priority=low|medium|high [key=value ...].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n|id> key=value ...")
registry.register("show", cmd_show, help_text="Show task details: /show <n|id>.")
registry.register("close", cmd_close, help_text="Close the task opened with /show.")
registry.register("overdue", cmd_overdue, help_text="List open tasks whose deadline has passed.")
registry.register("toggle", cmd_toggle, help_text="Mark a task completed / not started.", aliases=["done"])
registry.register("rm", cmd_rm, help_text="Delete a task (asks for confirmation).", aliases=["delete"])
registry.register("yes", cmd_yes, help_text="Confirm a pending delete.")
registry.register("no", cmd_no, help_text="Cancel a pending delete.")
registry.register("stats", cmd_stats, help_text="Show total / pending / completed counts.")
registry.register("clear", cmd_clear, help_text="Remove every task: /clear yes.")
