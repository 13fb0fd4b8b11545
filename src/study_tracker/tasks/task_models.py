# src/study_tracker/tasks/task_models.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

TaskId = str | int


class TaskFilter(StrEnum):
    """View modes of the task list (the All / Active / Done buttons)."""

    ALL = "all"
    ACTIVE = "active"
    DONE = "done"

    @classmethod
    def parse(cls, raw: str | TaskFilter | None) -> TaskFilter:
        if isinstance(raw, TaskFilter):
            return raw
        if not raw:
            return cls.ALL
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"unknown filter: {raw!r} (expected all, active or done)") from None


class LoadStatus(StrEnum):
    """
    Initial load state of a TaskStore.

    UNAVAILABLE means the load and its single retry both failed; the UI keeps
    showing the "waking up" message until the user reloads.
    """

    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


@dataclass(slots=True, frozen=True)
class Task:
    id: TaskId
    title: str
    done: bool = False
    user_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "title": self.title, "done": self.done}
        if self.user_id is not None:
            out["userId"] = self.user_id
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from its JSON form.

        Extra keys (server timestamps, ordering columns, ...) are ignored.
        Raises ValueError when the record has no id or no title.
        """
        tid = raw.get("id")
        if tid is None or isinstance(tid, bool) or not isinstance(tid, (str, int)):
            raise ValueError(f"task record has no usable id: {raw!r}")
        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"task record has no title: {raw!r}")
        done = raw.get("done", False)
        if done not in (True, False) or not isinstance(done, (bool, int)):
            # Only real booleans (or 0/1); a string like "false" is malformed.
            raise ValueError(f"task record has a non-boolean done flag: {raw!r}")
        user_id = raw.get("userId")
        return cls(
            id=tid,
            title=title,
            done=bool(done),
            user_id=str(user_id) if user_id is not None else None,
        )


def tasks_from_json(data: Any) -> list[Task]:
    """Decode a JSON array of task records, skipping malformed entries."""
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array of tasks, got {type(data).__name__}")
    out: list[Task] = []
    seen: set[TaskId] = set()
    for item in data:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object task record: %r", item)
            continue
        try:
            task = Task.from_dict(item)
        except ValueError:
            logger.warning("Skipping malformed task record: %r", item)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s", task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out


def tasks_to_json(tasks: Iterable[Task]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


def filter_tasks(tasks: Iterable[Task], view: TaskFilter) -> list[Task]:
    if view == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.done]
    if view == TaskFilter.DONE:
        return [t for t in tasks if t.done]
    return list(tasks)


def index_of(tasks: list[Task], task_id: TaskId) -> int:
    """Position of task_id in tasks, or -1."""
    for i, t in enumerate(tasks):
        if t.id == task_id:
            return i
    return -1


def swap_adjacent(tasks: list[Task], task_id: TaskId, direction: int) -> list[Task] | None:
    """
    Exchange the task with its neighbour one step earlier (-1) or later (+1).

    Returns a new list, or None when the id is unknown or the neighbour
    would fall outside the list.
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or +1, got {direction!r}")
    idx = index_of(tasks, task_id)
    if idx == -1:
        return None
    new_idx = idx + direction
    if new_idx < 0 or new_idx >= len(tasks):
        return None
    copy = list(tasks)
    copy[idx], copy[new_idx] = copy[new_idx], copy[idx]
    return copy
