# src/study_tracker/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging

from ..core.ports import TaskBackend
from .task_models import LoadStatus, Task, TaskFilter, TaskId, filter_tasks, index_of, swap_adjacent

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task list for one session, kept in sync with a backend.

    The backend (local slot or remote REST) is chosen at construction time;
    this class owns validation, ordering, filtering and the interaction state
    of the page (draft input text, edit mode, current filter).

    Mutations are expected one at a time. Two overlapping mutations resolve
    as last-write-wins. A failed backend call leaves the list as it was and
    the error propagates to the caller.
    """

    def __init__(self, backend: TaskBackend, *, load_retry_delay_seconds: float = 3.0) -> None:
        self._backend = backend
        self._retry_delay_s = max(0.0, float(load_retry_delay_seconds))

        self._tasks: list[Task] = []
        self._status = LoadStatus.LOADING
        self._filter = TaskFilter.ALL

        self.draft = ""
        self._editing_id: TaskId | None = None
        self.editing_text = ""

    # ---- read-only state ----

    @property
    def backend(self) -> TaskBackend:
        return self._backend

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def status(self) -> LoadStatus:
        return self._status

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def editing_id(self) -> TaskId | None:
        return self._editing_id

    def get(self, task_id: TaskId) -> Task | None:
        idx = index_of(self._tasks, task_id)
        return self._tasks[idx] if idx != -1 else None

    def set_filter(self, view: TaskFilter | str) -> TaskFilter:
        self._filter = TaskFilter.parse(view)
        return self._filter

    def visible(self, view: TaskFilter | str | None = None) -> list[Task]:
        """Filtered view of the list; never reorders or mutates it."""
        mode = self._filter if view is None else TaskFilter.parse(view)
        return filter_tasks(self._tasks, mode)

    # ---- load ----

    async def load(self) -> LoadStatus:
        """
        Replace the list with the backend's copy.

        On failure waits load_retry_delay_seconds and retries exactly once.
        If the retry fails too, the store becomes UNAVAILABLE and stays so
        until the next explicit load() or a successful add().
        """
        self._status = LoadStatus.LOADING
        try:
            tasks = await self._backend.load()
        except Exception as exc:
            logger.warning("Task load failed (backend likely sleeping), retrying once: %s", exc)
            await asyncio.sleep(self._retry_delay_s)
            try:
                tasks = await self._backend.load()
            except Exception as exc2:
                logger.warning("Task load retry failed; still waking up: %s", exc2)
                # No stale data while unavailable: positions must not resolve against a hidden list.
                self._tasks = []
                self.cancel_edit()
                self._status = LoadStatus.UNAVAILABLE
                return self._status

        self._tasks = list(tasks)
        self._status = LoadStatus.READY
        logger.debug("Task list loaded: %d tasks", len(self._tasks))
        return self._status

    # ---- mutations ----

    async def add(self, title: str | None = None) -> bool:
        """
        Add a task from `title`, or from the draft text when omitted.

        Returns False (and changes nothing) when the trimmed title is empty.
        Clears the draft on success.
        """
        raw = self.draft if title is None else title
        trimmed = (raw or "").strip()
        if not trimmed:
            logger.debug("Add rejected: empty title")
            return False

        self._tasks = await self._backend.create(list(self._tasks), trimmed)
        self._status = LoadStatus.READY
        self.draft = ""
        return True

    async def toggle_done(self, task_id: TaskId) -> None:
        self._tasks = await self._backend.toggle(list(self._tasks), task_id)

    async def edit(self, task_id: TaskId, new_title: str) -> bool:
        trimmed = (new_title or "").strip()
        if not trimmed:
            logger.debug("Edit rejected: empty title task_id=%s", task_id)
            return False

        self._tasks = await self._backend.update_title(list(self._tasks), task_id, trimmed)
        return True

    async def remove(self, task_id: TaskId) -> None:
        self._tasks = await self._backend.delete(list(self._tasks), task_id)
        if self._editing_id == task_id:
            self.cancel_edit()

    def move(self, task_id: TaskId, direction: int) -> bool:
        """
        Swap the task with its neighbour one step earlier (-1) or later (+1).

        Out-of-bounds moves and unknown ids are no-ops (returns False).
        The new order is handed to backend.persist_order(), which for the
        remote variant is a detached call nobody waits on.
        """
        swapped = swap_adjacent(self._tasks, task_id, direction)
        if swapped is None:
            return False
        # Persist first: a failed local slot write leaves the list unchanged.
        self._backend.persist_order(list(swapped))
        self._tasks = swapped
        return True

    # ---- edit mode ----

    def begin_edit(self, task_id: TaskId) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        self._editing_id = task.id
        self.editing_text = task.title
        return True

    def cancel_edit(self) -> None:
        self._editing_id = None
        self.editing_text = ""

    async def save_edit(self) -> bool:
        """Apply the edit buffer to the task being edited, then leave edit mode."""
        if self._editing_id is None:
            return False
        task_id, text = self._editing_id, self.editing_text
        try:
            return await self.edit(task_id, text)
        finally:
            self.cancel_edit()

    # ---- shutdown ----

    async def aclose(self) -> None:
        await self._backend.aclose()
