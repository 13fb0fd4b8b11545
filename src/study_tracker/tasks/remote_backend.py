# src/study_tracker/tasks/remote_backend.py

from __future__ import annotations

"""
Remote variant: every mutation goes to the per-user REST collection.

Wire contract (JSON bodies):
- GET    /api/tasks?userId=<id>       -> [Task]
- POST   /api/tasks?userId=<id>       {title, done, userId} -> Task
- PATCH  /api/tasks/{id}              -> Task (server flips `done`)
- PUT    /api/tasks/{id}              {title} -> Task
- DELETE /api/tasks/{id}
- PUT    /api/tasks/reorder           {orderedIds: [...]}

Reorder is fire-and-forget: it runs as a detached asyncio task, failures are
logged and otherwise ignored.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.identity import SessionIdentity
from ..errors import TaskBackendError, TaskNotFoundError
from .task_models import Task, TaskId, tasks_from_json

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"
REORDER_PATH = f"{TASKS_PATH}/reorder"


def _task_path(task_id: TaskId) -> str:
    return f"{TASKS_PATH}/{quote(str(task_id), safe='')}"


class RemoteTaskBackend:
    def __init__(
        self,
        identity: SessionIdentity,
        *,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._identity = identity
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        # Detached reorder calls; referenced here so they are not garbage-collected mid-flight.
        self._pending: set[asyncio.Task[None]] = set()
        logger.info("RemoteTaskBackend ready base_url=%s user_id=%s", base_url, identity.user_id)

    @property
    def identity(self) -> SessionIdentity:
        return self._identity

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # ---- low-level helpers ----

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise TaskBackendError(f"{method} {path} failed: {exc!s}") from exc

        if resp.status_code == 404:
            raise TaskNotFoundError(f"{method} {path} failed: 404", status_code=404)
        if resp.is_error:
            raise TaskBackendError(
                f"{method} {path} failed: {resp.status_code}", status_code=resp.status_code
            )
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise TaskBackendError(
                f"{resp.request.method} {resp.request.url.path} returned invalid JSON",
                status_code=resp.status_code,
            ) from exc

    def _task_from_response(self, resp: httpx.Response) -> Task:
        data = self._json(resp)
        if not isinstance(data, dict):
            raise TaskBackendError("expected a task object in the response", status_code=resp.status_code)
        try:
            return Task.from_dict(data)
        except ValueError as exc:
            raise TaskBackendError(str(exc), status_code=resp.status_code) from exc

    @staticmethod
    def _replace(tasks: list[Task], task_id: TaskId, updated: Task) -> list[Task]:
        return [updated if t.id == task_id else t for t in tasks]

    # ---- TaskBackend ----

    async def load(self) -> list[Task]:
        resp = await self._request("GET", TASKS_PATH, params={"userId": self._identity.user_id})
        try:
            tasks = tasks_from_json(self._json(resp))
        except ValueError as exc:
            raise TaskBackendError(str(exc), status_code=resp.status_code) from exc
        logger.info("Loaded %d tasks for user_id=%s", len(tasks), self._identity.user_id)
        return tasks

    async def create(self, tasks: list[Task], title: str) -> list[Task]:
        resp = await self._request(
            "POST",
            TASKS_PATH,
            params={"userId": self._identity.user_id},
            json={"title": title, "done": False, "userId": self._identity.user_id},
        )
        logger.debug("Task created status=%s; reloading list", resp.status_code)
        # The reload decides the new record's identity and position.
        return await self.load()

    async def toggle(self, tasks: list[Task], task_id: TaskId) -> list[Task]:
        resp = await self._request("PATCH", _task_path(task_id))
        return self._replace(tasks, task_id, self._task_from_response(resp))

    async def update_title(self, tasks: list[Task], task_id: TaskId, title: str) -> list[Task]:
        resp = await self._request("PUT", _task_path(task_id), json={"title": title})
        return self._replace(tasks, task_id, self._task_from_response(resp))

    async def delete(self, tasks: list[Task], task_id: TaskId) -> list[Task]:
        await self._request("DELETE", _task_path(task_id))
        return [t for t in tasks if t.id != task_id]

    def persist_order(self, tasks: list[Task]) -> None:
        ordered_ids = [t.id for t in tasks]
        job = asyncio.get_running_loop().create_task(self._put_order(ordered_ids))
        self._pending.add(job)
        job.add_done_callback(self._on_reorder_done)

    async def _put_order(self, ordered_ids: list[TaskId]) -> None:
        await self._request("PUT", REORDER_PATH, json={"orderedIds": ordered_ids})
        logger.debug("Persisted order of %d tasks", len(ordered_ids))

    def _on_reorder_done(self, job: asyncio.Task[None]) -> None:
        self._pending.discard(job)
        if job.cancelled():
            logger.debug("Reorder call cancelled.")
            return
        exc = job.exception()
        if exc is not None:
            logger.warning("Reorder call failed (ignored): %s", exc, exc_info=exc)

    async def aclose(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        await self._client.aclose()
