# src/tasktrack/tasks/task_engine.py

"""
Mutation engine.

Pure functions over one owner's task collection (task id -> Task, in display
order, newest first). Compute functions return the new Task value and never
touch the collection; put_task/delete_task build the updated collection.
Callers persist the computed value first and apply it afterwards.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from ..errors import NotFoundError, ValidationError
from .task_models import (
    Subtask,
    Task,
    TaskStatus,
    new_id,
    normalize_subtask_input,
    validate_subtasks,
    validate_task_fields,
)

logger = logging.getLogger(__name__)

TaskCollection = Mapping[str, Task]


def get_task(tasks: TaskCollection, task_id: str) -> Task:
    task = tasks.get(task_id)
    if task is None:
        raise NotFoundError("task", task_id)
    return task


def create_task(
    owner_id: str,
    title: str,
    description: str | None = None,
    subtask_texts: Iterable[str] | None = None,
    *,
    now: float | None = None,
) -> Task:
    if not owner_id or not owner_id.strip():
        raise ValidationError("Owner is required.", field="owner_id")
    validate_task_fields(title, description).raise_for_error()

    task = Task(
        id=new_id(),
        owner_id=owner_id,
        title=title.strip(),
        description=(description or "").strip(),
        status=TaskStatus.PENDING,
        created_at=time.time() if now is None else float(now),
        subtasks=normalize_subtask_input(subtask_texts),
    )
    logger.debug("Task built id=%s subtasks=%d", task.id, len(task.subtasks))
    return task


def edit_task(
    tasks: TaskCollection,
    task_id: str,
    title: str,
    description: str | None,
    subtasks: Sequence[Subtask] | None,
) -> Task:
    """
    Replace title, description and the whole subtask list.

    Not a merge: subtasks missing from `subtasks` are gone afterwards.
    """
    task = get_task(tasks, task_id)
    validate_task_fields(title, description).raise_for_error()
    clean = validate_subtasks(subtasks)
    return replace(
        task,
        title=title.strip(),
        description=(description or "").strip(),
        subtasks=clean,
    )


def change_status(tasks: TaskCollection, task_id: str, new_status: TaskStatus | str) -> Task:
    task = get_task(tasks, task_id)
    status = TaskStatus.parse(new_status)
    return replace(task, status=status)


def toggle_subtask(tasks: TaskCollection, task_id: str, subtask_id: str, completed: bool) -> Task:
    # Task status is never derived from subtask completion.
    if not isinstance(completed, bool):
        raise ValidationError(f"completed must be a bool, got {completed!r}", field="completed")
    task = get_task(tasks, task_id)
    if task.subtask(subtask_id) is None:
        raise NotFoundError("subtask", subtask_id)
    subtasks = tuple(
        replace(sub, completed=completed) if sub.id == subtask_id else sub
        for sub in task.subtasks
    )
    return replace(task, subtasks=subtasks)


def append_subtasks(tasks: TaskCollection, task_id: str, texts: Iterable[str]) -> Task:
    task = get_task(tasks, task_id)
    added = normalize_subtask_input(texts, existing_ids=(s.id for s in task.subtasks))
    return replace(task, subtasks=task.subtasks + added)


def put_task(tasks: TaskCollection, task: Task) -> dict[str, Task]:
    """Replace a task in place, or insert a new one at the head."""
    if task.id in tasks:
        return {tid: (task if tid == task.id else t) for tid, t in tasks.items()}
    out = {task.id: task}
    out.update(tasks)
    return out


def delete_task(tasks: TaskCollection, task_id: str) -> dict[str, Task]:
    get_task(tasks, task_id)
    return {tid: t for tid, t in tasks.items() if tid != task_id}
