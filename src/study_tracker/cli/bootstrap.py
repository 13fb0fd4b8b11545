# src/study_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the session identity explicitly and passes it down,
- wires the configured backend (local slot or remote REST) into a TaskStore.
"""

from __future__ import annotations

import logging

from ..config import BACKEND_LOCAL, BACKEND_REMOTE, get_settings
from ..core.identity import load_or_create_identity
from ..core.ports import TaskBackend
from ..core.state import AppState
from ..storage.kv_store import JsonFileKeyValueStore
from ..tasks.local_backend import LocalTaskBackend
from ..tasks.remote_backend import RemoteTaskBackend
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, transport=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    `transport` is forwarded to httpx for the remote backend (tests use httpx.MockTransport).
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kv = JsonFileKeyValueStore(settings.storage_path)
    identity = load_or_create_identity(kv)

    backend_name = str(getattr(settings, "backend", BACKEND_LOCAL)).strip().lower()
    if backend_name not in (BACKEND_LOCAL, BACKEND_REMOTE):
        logger.warning("Unknown backend %r; falling back to %s.", backend_name, BACKEND_LOCAL)
        backend_name = BACKEND_LOCAL

    backend: TaskBackend
    if backend_name == BACKEND_REMOTE:
        backend = RemoteTaskBackend(
            identity,
            base_url=settings.api_base,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
    else:
        backend = LocalTaskBackend(kv)

    store = TaskStore(backend, load_retry_delay_seconds=settings.load_retry_delay_seconds)
    logger.info("Task store wired backend=%s user_id=%s", backend_name, identity.user_id)
    return AppState(settings=settings, kv=kv, identity=identity, store=store)
