# tests/test_task_store_load.py

from __future__ import annotations

import asyncio

import pytest

from study_tracker.errors import TaskBackendError
from study_tracker.tasks.task_models import LoadStatus, Task
from study_tracker.tasks.task_store import TaskStore

from .fakes import FakeTaskBackend


@pytest.fixture()
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record asyncio.sleep delays instead of waiting."""
    delays: list[float] = []

    async def fake_sleep(delay: float, *args, **kwargs) -> None:
        delays.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_load_succeeds_first_time(sleeps: list[float]) -> None:
    backend = FakeTaskBackend([Task(id=1, title="a"), Task(id=2, title="b")])
    store = TaskStore(backend)
    assert store.status == LoadStatus.LOADING

    assert await store.load() == LoadStatus.READY
    assert [t.id for t in store.tasks] == [1, 2]
    assert backend.load_calls == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_load_retries_once_after_backoff(sleeps: list[float]) -> None:
    backend = FakeTaskBackend([Task(id=1, title="a")], load_failures=1)
    store = TaskStore(backend)

    assert await store.load() == LoadStatus.READY
    assert backend.load_calls == 2
    assert sleeps == [3.0]
    assert [t.title for t in store.tasks] == ["a"]


@pytest.mark.asyncio
async def test_load_gives_up_after_second_failure(sleeps: list[float]) -> None:
    backend = FakeTaskBackend([Task(id=1, title="a")], load_failures=5)
    store = TaskStore(backend, load_retry_delay_seconds=1.5)

    assert await store.load() == LoadStatus.UNAVAILABLE
    assert backend.load_calls == 2
    assert sleeps == [1.5]
    assert store.tasks == []

    # No automatic retries; an explicit reload starts a new cycle.
    backend.load_failures = 0
    assert await store.load() == LoadStatus.READY
    assert backend.load_calls == 3


@pytest.mark.asyncio
async def test_add_after_unavailable_marks_ready(sleeps: list[float]) -> None:
    backend = FakeTaskBackend(load_failures=2)
    store = TaskStore(backend)
    await store.load()
    assert store.status == LoadStatus.UNAVAILABLE

    assert await store.add("Read ch.1")
    assert store.status == LoadStatus.READY
    assert [t.title for t in store.tasks] == ["Read ch.1"]


@pytest.mark.asyncio
async def test_mutation_failure_propagates_and_keeps_list() -> None:
    backend = FakeTaskBackend([Task(id=1, title="a"), Task(id=2, title="b")])
    store = TaskStore(backend)
    await store.load()
    before = store.tasks

    backend.fail_mutations = True
    store.draft = "new"
    with pytest.raises(TaskBackendError):
        await store.add()
    with pytest.raises(TaskBackendError):
        await store.toggle_done(1)
    with pytest.raises(TaskBackendError):
        await store.edit(1, "renamed")
    with pytest.raises(TaskBackendError):
        await store.remove(2)

    assert store.tasks == before
    assert store.draft == "new"


@pytest.mark.asyncio
async def test_move_hands_new_order_to_backend() -> None:
    backend = FakeTaskBackend([Task(id=1, title="a"), Task(id=2, title="b"), Task(id=3, title="c")])
    store = TaskStore(backend)
    await store.load()

    assert store.move(3, -1)
    assert not store.move(1, -1)
    assert backend.orders == [[1, 3, 2]]


@pytest.mark.asyncio
async def test_remove_ends_edit_mode_of_removed_task() -> None:
    backend = FakeTaskBackend([Task(id=1, title="a")])
    store = TaskStore(backend)
    await store.load()

    store.begin_edit(1)
    await store.remove(1)
    assert store.editing_id is None


@pytest.mark.asyncio
async def test_aclose_closes_backend() -> None:
    backend = FakeTaskBackend()
    store = TaskStore(backend)
    await store.aclose()
    assert backend.closed


@pytest.mark.asyncio
async def test_failed_reload_drops_cached_tasks(sleeps: list[float]) -> None:
    backend = FakeTaskBackend([Task(id=1, title="a"), Task(id=2, title="b")])
    store = TaskStore(backend)
    assert await store.load() == LoadStatus.READY
    store.begin_edit(1)

    backend.load_failures = 2
    assert await store.load() == LoadStatus.UNAVAILABLE
    assert store.tasks == []
    assert store.visible() == []
    assert store.editing_id is None

    assert store.move(1, 1) is False
    assert backend.orders == []


@pytest.mark.asyncio
async def test_move_keeps_list_when_persisting_order_fails() -> None:
    backend = FakeTaskBackend([Task(id=1, title="a"), Task(id=2, title="b")])
    store = TaskStore(backend)
    await store.load()

    backend.fail_order = True
    with pytest.raises(OSError):
        store.move(1, 1)
    assert [t.id for t in store.tasks] == [1, 2]
