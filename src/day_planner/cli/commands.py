# src/day_planner/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar, cast

from ..core.state import AppState
from ..sync.errors import (
    BackupNotFoundError,
    InvalidCredentialError,
    SyncError,
    friendly_sync_error_message,
)
from ..tasks.task_models import (
    Category,
    Task,
    TaskStatus,
    completion_timing,
    date_key,
    parse_date_key,
    shift_date_key,
    today_key,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

T = TypeVar("T")


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

        parts = line[1:].split()
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


# ---- helpers ----

_STATUS_MARK = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
}


def format_task(position: int, task: Task) -> str:
    line = f"{position}. {_STATUS_MARK[task.status]} {task.text}"
    timing = completion_timing(task)
    if timing is not None:
        line += f" (done {task.completed_date}, {timing})"
    elif task.moved:
        line += " (moved)"
    return line


def _current_bucket(state: AppState) -> tuple[Task, ...]:
    return state.store.bucket(state.tab, state.viewed_date)


def _resolve(state: AppState, raw: str) -> Task | None:
    """1-based position in the viewed bucket -> task."""
    try:
        pos = int(raw)
    except ValueError:
        return None
    tasks = _current_bucket(state)
    if pos < 1 or pos > len(tasks):
        return None
    return tasks[pos - 1]


def _view_title(state: AppState) -> str:
    if state.tab is Category.POOL:
        return "Pool"
    return f"{state.tab.value.capitalize()} {state.viewed_date}"


def render_view(state: AppState) -> str:
    tasks = _current_bucket(state)
    lines = [_view_title(state)]
    if not tasks:
        lines.append("  (empty)")
    for i, task in enumerate(tasks, start=1):
        lines.append("  " + format_task(i, task))
    return "\n".join(lines)


def _run_sync(
    coro_factory: Callable[[], Coroutine[Any, Any, T]], emit: CommandEmitter | None, busy: str
) -> T:
    if emit:
        emit(busy)
    return asyncio.run(coro_factory())


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    token = "SET" if state.credentials.has_token() else "NOT SET"
    gist = state.credentials.document_id or "-"
    return (
        "Status:\n"
        f"  Viewing: {_view_title(state)}\n"
        f"  Tasks total: {state.store.count()}\n"
        f"  GitHub token: {token}\n"
        f"  Backup gist: {gist}"
    )


def cmd_show(state: AppState, args: list[str]) -> str:
    return render_view(state)


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day            -> back to today
    /day +1 | -1    -> relative to the viewed date
    /day 2024-03-05 -> jump to a date
    """
    arg = args[0].lower() if args else "today"
    if arg == "today":
        state.viewed_date = today_key()
    elif arg.startswith(("+", "-")):
        try:
            state.viewed_date = shift_date_key(state.viewed_date, int(arg))
        except (ValueError, OverflowError):
            return "Usage: /day [today|+N|-N|YYYY-MM-DD]"
    else:
        try:
            parsed = parse_date_key(arg)
        except ValueError:
            return "Usage: /day [today|+N|-N|YYYY-MM-DD]"
        state.viewed_date = date_key(parsed)
    return render_view(state)


def cmd_tab(state: AppState, args: list[str]) -> str:
    try:
        state.tab = Category(args[0].lower()) if args else Category.PERSONAL
    except ValueError:
        return "Usage: /tab personal | work | pool"
    return render_view(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    task = state.lifecycle.add_task(state.tab, " ".join(args), viewed_date=state.viewed_date)
    if task is None:
        return "Usage: /add <text>"
    return render_view(state)


def _by_position(usage: str):
    """Decorator: resolve args[0] as a bucket position, pass the task on."""

    def wrap(fn: Callable[[AppState, Task, list[str]], str | None]) -> CommandHandler2:
        def handler(state: AppState, args: list[str]) -> str:
            task = _resolve(state, args[0]) if args else None
            if task is None:
                return usage
            reply = fn(state, task, args[1:])
            return reply if reply is not None else render_view(state)

        handler.__name__ = fn.__name__
        handler.__doc__ = fn.__doc__
        return handler

    return wrap


@_by_position("Usage: /done N")
def cmd_done(state: AppState, task: Task, rest: list[str]) -> str | None:
    if state.lifecycle.complete_task(state.tab, task.id, viewed_date=state.viewed_date) is None:
        return "That task cannot be completed."
    if state.tab is Category.POOL:
        return f"Task completed and moved to personal/{state.viewed_date}.\n" + render_view(state)
    return None


@_by_position("Usage: /undo N")
def cmd_undo(state: AppState, task: Task, rest: list[str]) -> str | None:
    if state.lifecycle.uncomplete_task(state.tab, task.id, viewed_date=state.viewed_date) is None:
        return "That task is not completed."
    return None


@_by_position("Usage: /progress N")
def cmd_progress(state: AppState, task: Task, rest: list[str]) -> str | None:
    if state.lifecycle.toggle_in_progress(state.tab, task.id, viewed_date=state.viewed_date) is None:
        return "Only pending or in-progress tasks can be toggled."
    return None


@_by_position("Usage: /edit N <text>")
def cmd_edit(state: AppState, task: Task, rest: list[str]) -> str | None:
    state.lifecycle.edit_task(state.tab, task.id, " ".join(rest), viewed_date=state.viewed_date)
    return None


def _move_date(offset: int):
    def move(state: AppState, task: Task, rest: list[str]) -> str | None:
        moved = state.lifecycle.move_to_adjacent_date(
            state.tab, task.id, offset, viewed_date=state.viewed_date
        )
        if moved is None:
            return "That task was already moved."
        return None

    return move


cmd_next = _by_position("Usage: /next N")(_move_date(1))
cmd_prev = _by_position("Usage: /prev N")(_move_date(-1))


def cmd_to(state: AppState, args: list[str]) -> str:
    """/to <category> N -> drop the task on another category tab."""
    if len(args) < 2:
        return "Usage: /to personal|work|pool N"
    try:
        target = Category(args[0].lower())
    except ValueError:
        return "Usage: /to personal|work|pool N"
    task = _resolve(state, args[1])
    if task is None:
        return "Usage: /to personal|work|pool N"
    moved = state.lifecycle.drop_on_category(
        state.tab, target, task.id, viewed_date=state.viewed_date
    )
    if moved is None:
        return "Task is already in that category."
    return f"Task moved to {target.value}.\n" + render_view(state)


def cmd_reorder(state: AppState, args: list[str]) -> str:
    """/reorder N M [after] -> place task N before (or after) task M."""
    if len(args) < 2:
        return "Usage: /reorder N M [after]"
    dragged = _resolve(state, args[0])
    target = _resolve(state, args[1])
    if dragged is None or target is None:
        return "Usage: /reorder N M [after]"
    insert_before = not (len(args) > 2 and args[2].lower() == "after")
    state.lifecycle.reorder(
        state.tab,
        dragged.id,
        target.id,
        insert_before=insert_before,
        viewed_date=state.viewed_date,
    )
    return render_view(state)


@_by_position("Usage: /del N")
def cmd_del(state: AppState, task: Task, rest: list[str]) -> str | None:
    state.lifecycle.delete_task_in(state.tab, task.id, viewed_date=state.viewed_date)
    return None


def cmd_token(state: AppState, args: list[str]) -> str:
    """
    /token          -> show whether a token is set
    /token <token>  -> save token
    /token clear    -> forget token and cached gist id
    """
    if not args:
        return f"GitHub token is {'SET' if state.credentials.has_token() else 'NOT SET'}."
    if args[0].lower() == "clear":
        state.credentials.clear()
        return "GitHub token cleared."
    try:
        state.credentials.set_token(args[0])
    except InvalidCredentialError as e:
        return str(e)
    return "GitHub token saved successfully."


def cmd_sync(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    try:
        result = _run_sync(state.sync.sync, emit, "[SYNC] Syncing with GitHub...")
    except SyncError as e:
        logger.info("Sync failed: %s", e)
        return f"Sync failed: {friendly_sync_error_message(e)}"
    if not result.merged:
        return "No backup found in cloud; local tasks uploaded.\n" + render_view(state)
    return f"Synced ({result.added} task(s) added from cloud).\n" + render_view(state)


def cmd_pull(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    try:
        _run_sync(state.sync.pull, emit, "[SYNC] Downloading...")
    except BackupNotFoundError as e:
        return friendly_sync_error_message(e)
    except SyncError as e:
        logger.info("Pull failed: %s", e)
        return f"Download failed: {friendly_sync_error_message(e)}"
    return "Tasks downloaded from cloud!\n" + render_view(state)


def cmd_push(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    try:
        _run_sync(state.sync.push, emit, "[SYNC] Uploading...")
    except SyncError as e:
        logger.info("Push failed: %s", e)
        return f"Upload failed: {friendly_sync_error_message(e)}"
    return "Tasks backed up to cloud!"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show viewed bucket, task count and backup settings.")
registry.register("show", cmd_show, help_text="Show tasks in the viewed bucket.", aliases=["ls"])
registry.register("day", cmd_day, help_text="Change viewed date: /day [today|+N|-N|YYYY-MM-DD].")
registry.register("tab", cmd_tab, help_text="Switch category: /tab personal | work | pool.")
registry.register("add", cmd_add, help_text="Add a task to the viewed bucket: /add <text>.")
registry.register("done", cmd_done, help_text="Complete task N.")
registry.register("undo", cmd_undo, help_text="Mark completed task N as pending again.")
registry.register("progress", cmd_progress, help_text="Toggle in-progress on task N.")
registry.register("edit", cmd_edit, help_text="Edit task N: /edit N <text>.")
registry.register("next", cmd_next, help_text="Move task N to the next day.")
registry.register("prev", cmd_prev, help_text="Move task N to the previous day.")
registry.register("to", cmd_to, help_text="Move task N to another category: /to personal|work|pool N.")
registry.register("reorder", cmd_reorder, help_text="Place task N before task M: /reorder N M [after].")
registry.register("del", cmd_del, help_text="Delete task N.", aliases=["rm"])
registry.register("token", cmd_token, help_text="GitHub token: /token <ghp_...> | /token clear.")
registry.register("sync", cmd_sync, help_text="Merge with the cloud backup, then upload.")
registry.register("pull", cmd_pull, help_text="Replace local tasks with the cloud backup.")
registry.register("push", cmd_push, help_text="Upload local tasks to the cloud backup.")
