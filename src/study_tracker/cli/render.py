# src/study_tracker/cli/render.py

from __future__ import annotations

from ..tasks.task_models import LoadStatus
from ..tasks.task_store import TaskStore

WAKING_UP_MESSAGE = (
    "Waking up server, add a task after a minute or /reload! "
    "(a free-tier backend can take a minute to start after inactivity)"
)


def render_tasks(store: TaskStore) -> str:
    """Text view of the visible (filtered) list, numbered from 1."""
    if store.status == LoadStatus.LOADING:
        return "Loading tasks..."
    if store.status == LoadStatus.UNAVAILABLE:
        return WAKING_UP_MESSAGE

    all_tasks = store.tasks
    visible = store.visible()
    n_done = sum(1 for t in all_tasks if t.done)

    lines = [f"Tasks [{store.filter.value}] {n_done}/{len(all_tasks)} done"]
    if not visible:
        lines.append("  (nothing here)")
    for i, task in enumerate(visible, start=1):
        mark = "x" if task.done else " "
        line = f"{i:>3}. [{mark}] {task.title}"
        if store.editing_id is not None and task.id == store.editing_id:
            line += f"  <- editing: {store.editing_text}"
        lines.append(line)
    return "\n".join(lines)
