# src/study_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task store.

The store depends on Protocols instead of concrete implementations.
This keeps the local and remote persistence variants swappable and makes
testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task, TaskId


class KeyValueStore(Protocol):
    """Durable string slots (the browser's localStorage, on disk)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class TaskBackend(Protocol):
    """
    Persistence target of a TaskStore.

    Mutating calls receive the current ordered sequence and return the new
    one. Implementations decide whether the result comes from local
    bookkeeping, the server's response, or a full re-fetch.
    """

    async def load(self) -> list[Task]: ...

    async def create(self, tasks: list[Task], title: str) -> list[Task]: ...

    async def toggle(self, tasks: list[Task], task_id: TaskId) -> list[Task]: ...

    async def update_title(self, tasks: list[Task], task_id: TaskId, title: str) -> list[Task]: ...

    async def delete(self, tasks: list[Task], task_id: TaskId) -> list[Task]: ...

    def persist_order(self, tasks: list[Task]) -> None: ...

    async def aclose(self) -> None: ...
