# src/study_tracker/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.task_models import Task
from .render import render_tasks

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)


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

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Backend errors (TaskBackendError) propagate to the caller.
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

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Plain text (no slash) adds a task, or replaces the edit text while editing.")
        return "\n".join(lines)


registry = CommandRegistry()


def _pick(state: AppState, args: list[str]) -> Task | str:
    """Resolve a 1-based position in the visible list; returns an error string on failure."""
    if not args:
        return "Which task? Give its number from /list."
    try:
        pos = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]!r}."
    visible = state.store.visible()
    if pos < 1 or pos > len(visible):
        return f"No task #{pos} in the current view ({len(visible)} shown)."
    return visible[pos - 1]


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    return render_tasks(state.store)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title>  -> add a task
    /add          -> add the pending draft text
    """
    title = " ".join(args) if args else None
    if not await state.store.add(title):
        return "Nothing to add (title is empty)."
    return render_tasks(state.store)


async def cmd_done(state: AppState, args: list[str]) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    await state.store.toggle_done(task.id)
    return render_tasks(state.store)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n> <new title>  -> rename directly
    /edit <n>              -> enter edit mode (type text, then /save or /cancel)
    """
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    if len(args) > 1:
        if not await state.store.edit(task.id, " ".join(args[1:])):
            return "Title cannot be empty."
        return render_tasks(state.store)
    state.store.begin_edit(task.id)
    return f"Editing: {task.title}\nType the new title, then /save (or /cancel)."


async def cmd_save(state: AppState, args: list[str]) -> str:
    store = state.store
    if store.editing_id is None:
        return "Not editing anything. Use /edit <n> first."
    if args:
        store.editing_text = " ".join(args)
    if not await store.save_edit():
        return "Title cannot be empty; edit cancelled."
    return render_tasks(store)


async def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.store.editing_id is None:
        return "Not editing anything."
    state.store.cancel_edit()
    return "Edit cancelled."


async def cmd_remove(state: AppState, args: list[str]) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    await state.store.remove(task.id)
    return render_tasks(state.store)


async def _move(state: AppState, args: list[str], direction: int) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    if not state.store.move(task.id, direction):
        return "Already at the " + ("top." if direction < 0 else "bottom.")
    return render_tasks(state.store)


async def cmd_up(state: AppState, args: list[str]) -> str:
    return await _move(state, args, -1)


async def cmd_down(state: AppState, args: list[str]) -> str:
    return await _move(state, args, 1)


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter             -> show current filter
    /filter all|active|done
    """
    if not args:
        return f"Filter is {state.store.filter.value}. Use /filter all | active | done."
    try:
        state.store.set_filter(args[0])
    except ValueError:
        return "Usage: /filter all | active | done."
    return render_tasks(state.store)


async def cmd_reload(state: AppState, args: list[str]) -> str:
    await state.store.load()
    return render_tasks(state.store)


async def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    tasks = store.tasks
    backend = getattr(state.settings, "backend", "local")
    lines = [
        "Status:",
        f"  Backend: {backend}",
        f"  User id: {state.identity.user_id}",
        f"  Load: {store.status.value}",
        f"  Tasks: {len(tasks)} ({sum(1 for t in tasks if t.done)} done)",
        f"  Filter: {store.filter.value}",
    ]
    if backend == "remote":
        lines.insert(2, f"  API: {getattr(state.settings, 'api_base', '')}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.")
registry.register("done", cmd_done, help_text="Toggle done/undone: /done <n>.", aliases=["toggle", "x"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <n> [new title].")
registry.register("save", cmd_save, help_text="Save the edit in progress: /save [new title].")
registry.register("cancel", cmd_cancel, help_text="Leave edit mode without changes.")
registry.register("rm", cmd_remove, help_text="Delete a task: /rm <n>.", aliases=["del", "delete"])
registry.register("up", cmd_up, help_text="Move a task one place up: /up <n>.")
registry.register("down", cmd_down, help_text="Move a task one place down: /down <n>.")
registry.register("filter", cmd_filter, help_text="Filter the view: /filter all | active | done.")
registry.register("reload", cmd_reload, help_text="Reload the list from storage/server.")
registry.register("status", cmd_status, help_text="Show backend, user id and counts.")
