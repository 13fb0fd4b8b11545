# src/study_tracker/errors.py

from __future__ import annotations


class TaskBackendError(RuntimeError):
    """A persistence call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TaskNotFoundError(TaskBackendError):
    """The backend does not know the requested task id (HTTP 404)."""


def friendly_backend_error_message(err: Exception) -> str:
    msg = str(err).strip() or "Backend error."
    if isinstance(err, TaskNotFoundError):
        return "That task no longer exists on the server. Use /reload to refresh the list."
    if isinstance(err, TaskBackendError) and err.status_code is None:
        return (
            "Server is not reachable (it may still be waking up). "
            "Try again in a minute or use /reload."
        )
    if isinstance(err, TaskBackendError) and err.status_code is not None and err.status_code >= 500:
        return f"Server error ({err.status_code}). Try again in a minute or use /reload."
    return msg
