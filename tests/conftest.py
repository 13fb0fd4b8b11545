# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from study_tracker.core.identity import SessionIdentity
from study_tracker.storage.kv_store import JsonFileKeyValueStore
from study_tracker.tasks.local_backend import LocalTaskBackend
from study_tracker.tasks.remote_backend import RemoteTaskBackend
from study_tracker.tasks.task_store import TaskStore

from .fakes import FakeTaskServer


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="study-tracker-test",
        log_level="DEBUG",
        backend="local",
        api_base="http://tracker.test",
        http_timeout_seconds=5.0,
        load_retry_delay_seconds=0.0,
        data_dir=tmp_path,
        storage_path=tmp_path / "local_storage.json",
    )


@pytest.fixture()
def kv(settings: SimpleNamespace) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(settings.storage_path)


@pytest.fixture()
def local_store(kv: JsonFileKeyValueStore) -> TaskStore:
    return TaskStore(LocalTaskBackend(kv), load_retry_delay_seconds=0.0)


@pytest.fixture()
def identity() -> SessionIdentity:
    return SessionIdentity(user_id="user-123")


@pytest.fixture()
def server() -> FakeTaskServer:
    return FakeTaskServer()


@pytest.fixture()
def remote_backend(server: FakeTaskServer, identity: SessionIdentity) -> RemoteTaskBackend:
    """
    RemoteTaskBackend talking to the in-memory FakeTaskServer.

    NOTE: the httpx client is never closed by this fixture; tests that spawn
    reorder calls await backend.aclose() themselves.
    """
    return RemoteTaskBackend(identity, base_url="http://tracker.test", transport=server.transport)
