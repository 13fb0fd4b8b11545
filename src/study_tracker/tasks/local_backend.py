# src/study_tracker/tasks/local_backend.py

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import replace

from ..core.ports import KeyValueStore
from .task_models import Task, TaskId, index_of, tasks_from_json, tasks_to_json

logger = logging.getLogger(__name__)

STORAGE_KEY = "study-tracker-items-v1"


class LocalTaskBackend:
    """
    Local variant: the whole list lives in one key-value slot.

    The slot holds a JSON array of {id, title, done} in display order and is
    rewritten after every mutation. Ids are random UUIDs generated here.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = STORAGE_KEY) -> None:
        self._kv = kv
        self._key = key

    def _save(self, tasks: list[Task]) -> None:
        self._kv.set(self._key, json.dumps(tasks_to_json(tasks), ensure_ascii=False))
        logger.debug("Saved %d tasks to slot %s", len(tasks), self._key)

    async def load(self) -> list[Task]:
        raw = self._kv.get(self._key)
        if not raw:
            return []
        try:
            tasks = tasks_from_json(json.loads(raw))
        except ValueError:
            # Malformed slot: start empty, the next mutation overwrites it.
            logger.warning("Slot %s holds malformed task JSON; starting with an empty list.", self._key)
            return []
        logger.info("Loaded %d tasks from slot %s", len(tasks), self._key)
        return tasks

    async def create(self, tasks: list[Task], title: str) -> list[Task]:
        task = Task(id=str(uuid.uuid4()), title=title, done=False)
        out = [task, *tasks]
        self._save(out)
        logger.debug("Task added id=%s", task.id)
        return out

    async def toggle(self, tasks: list[Task], task_id: TaskId) -> list[Task]:
        idx = index_of(tasks, task_id)
        if idx == -1:
            return tasks
        out = list(tasks)
        out[idx] = replace(out[idx], done=not out[idx].done)
        self._save(out)
        return out

    async def update_title(self, tasks: list[Task], task_id: TaskId, title: str) -> list[Task]:
        idx = index_of(tasks, task_id)
        if idx == -1:
            return tasks
        out = list(tasks)
        out[idx] = replace(out[idx], title=title)
        self._save(out)
        return out

    async def delete(self, tasks: list[Task], task_id: TaskId) -> list[Task]:
        out = [t for t in tasks if t.id != task_id]
        if len(out) == len(tasks):
            return tasks
        self._save(out)
        return out

    def persist_order(self, tasks: list[Task]) -> None:
        self._save(tasks)

    async def aclose(self) -> None:
        """Compatibility hook for shutdown (nothing to close)."""
        return
