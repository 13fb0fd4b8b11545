# src/study_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore
from .identity import SessionIdentity
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings object (config.Settings or a test namespace with the same fields).
    settings: Any

    kv: KeyValueStore
    identity: SessionIdentity
    store: TaskStore
