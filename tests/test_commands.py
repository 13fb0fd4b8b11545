# tests/test_commands.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from study_tracker.cli.bootstrap import create_initial_state
from study_tracker.cli.commands import CommandRegistry
from study_tracker.cli.commands import registry as command_registry
from study_tracker.cli.render import WAKING_UP_MESSAGE, render_tasks
from study_tracker.core.state import AppState
from study_tracker.tasks.task_models import LoadStatus
from study_tracker.tasks.task_store import TaskStore

from .fakes import FakeTaskBackend


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings)


async def _run(state: AppState, *lines: str) -> str | None:
    reply = None
    for line in lines:
        reply = await command_registry.handle(state, line)
    return reply


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_command_registry_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    async def handler(state, args):
        seen.append(args)
        return "ok"

    reg.register("ping", handler, "ping", aliases=["P"])
    assert await reg.handle(state, "/PING a b") == "ok"
    assert await reg.handle(state, "/p") == "ok"
    assert seen == [["a", "b"], []]
    assert "/ping - ping" in reg.build_help()


@pytest.mark.asyncio
async def test_add_toggle_move_remove_by_position(state: AppState) -> None:
    await state.store.load()
    await _run(state, "/add Flashcards", "/add Math HW", "/add Read ch.1")
    assert [t.title for t in state.store.tasks] == ["Read ch.1", "Math HW", "Flashcards"]

    reply = await _run(state, "/done 2")
    assert "[x] Math HW" in reply

    await _run(state, "/down 1")
    assert [t.title for t in state.store.tasks] == ["Math HW", "Read ch.1", "Flashcards"]
    assert await _run(state, "/up 1") == "Already at the top."

    await _run(state, "/rm 3")
    assert [t.title for t in state.store.tasks] == ["Math HW", "Read ch.1"]


@pytest.mark.asyncio
async def test_positions_follow_the_filtered_view(state: AppState) -> None:
    await _run(state, "/add b", "/add a", "/done 1")
    reply = await _run(state, "/filter active")
    assert "1. [ ] b" in reply

    await _run(state, "/done 1")
    assert all(t.done for t in state.store.tasks)
    assert "(nothing here)" in await _run(state, "/list")
    assert "Usage" in await _run(state, "/filter someday")


@pytest.mark.asyncio
async def test_edit_commands(state: AppState) -> None:
    await _run(state, "/add essay")

    await _run(state, "/edit 1 final essay")
    assert state.store.tasks[0].title == "final essay"

    reply = await _run(state, "/edit 1")
    assert "Editing: final essay" in reply
    assert await _run(state, "/cancel") == "Edit cancelled."
    assert state.store.editing_id is None

    await _run(state, "/edit 1", "/save polished essay")
    assert state.store.tasks[0].title == "polished essay"
    assert state.store.editing_id is None

    assert await _run(state, "/cancel") == "Not editing anything."
    assert "Not editing anything" in await _run(state, "/save")


@pytest.mark.asyncio
async def test_bad_positions(state: AppState) -> None:
    assert "Which task" in await _run(state, "/done")
    assert "Not a task number" in await _run(state, "/rm first")
    assert "No task #4" in await _run(state, "/up 4")


@pytest.mark.asyncio
async def test_blank_add_is_declined(state: AppState) -> None:
    assert await _run(state, "/add") == "Nothing to add (title is empty)."
    assert state.store.tasks == []


@pytest.mark.asyncio
async def test_status_and_help(state: AppState) -> None:
    await _run(state, "/add a")
    status = await _run(state, "/status")
    assert "Backend: local" in status
    assert state.identity.user_id in status
    assert "Tasks: 1 (0 done)" in status
    assert "/filter" in await _run(state, "/help")


@pytest.mark.asyncio
async def test_render_shows_waking_up_message() -> None:
    store = TaskStore(FakeTaskBackend(load_failures=2), load_retry_delay_seconds=0)
    assert render_tasks(store) == "Loading tasks..."

    assert await store.load() == LoadStatus.UNAVAILABLE
    assert render_tasks(store) == WAKING_UP_MESSAGE
