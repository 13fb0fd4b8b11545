# src/study_tracker/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.render import render_tasks
from ..core.state import AppState
from ..errors import TaskBackendError, friendly_backend_error_message

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _resolve(fut: asyncio.Future[str], line: str | None, exc: Exception | None) -> None:
    if fut.done():
        return
    if exc is not None:
        fut.set_exception(exc)
    else:
        fut.set_result(line or "")


async def read_line_async(read_line: Callable[[str], str], prompt: str) -> str:
    """
    Run a blocking read_line(prompt) on a daemon thread and await its result.

    Cancelling the awaiting task (Ctrl-C under asyncio.run) returns at once;
    the daemon thread stays blocked in input() and dies with the process.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def worker() -> None:
        line: str | None = None
        error: Exception | None = None
        try:
            line = read_line(prompt)
        except Exception as exc:
            error = exc
        try:
            loop.call_soon_threadsafe(_resolve, fut, line, error)
        except RuntimeError:
            # Event loop already closed (shutdown after cancellation).
            pass

    threading.Thread(target=worker, name="console-input", daemon=True).start()
    return await fut


async def handle_line(state: AppState, line: str) -> str | None:
    """
    One console input line, the way the page reacts to it:
    - "/command args" -> command registry
    - plain text while editing -> new edit text
    - plain text otherwise -> draft submitted as a new task
    """
    reply = await command_registry.handle(state, line)
    if reply is not None:
        return reply

    store = state.store
    if store.editing_id is not None:
        store.editing_text = line
        return f"Edit text: {line}\nUse /save to apply or /cancel."

    store.draft = line
    if not await store.add():
        return None
    return render_tasks(store)


async def run_console_loop(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    emit: Callable[[str], None] = _print_ts,
) -> None:
    logger.info("Console connector started (backend=%s).", getattr(state.settings, "backend", "local"))
    emit("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.")
    emit(render_tasks(state.store))

    while True:
        try:
            # input() blocks; keep the event loop free for detached reorder calls.
            user_input = (await read_line_async(read_line, PROMPT)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await handle_line(state, user_input)
        except TaskBackendError as e:
            msg = friendly_backend_error_message(e)
            logger.info("Backend error: %s", e)
            emit(f"[SERVER] {msg}")
            continue
        except Exception:
            logger.exception("Console command handler crashed.")
            emit("Internal error while handling a command.")
            continue

        if reply is not None:
            emit(reply)

    logger.info("Console connector finished.")
