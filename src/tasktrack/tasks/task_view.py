# src/tasktrack/tasks/task_view.py

"""
View projection: what the owner sees.

Filter contract (card presentation):
- all:       every status, completed tasks moved after the rest (stable)
- active:    in-progress only
- completed: completed only
- pending:   pending only

Relative order otherwise follows the input (newest first).
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from ..errors import ValidationError
from .task_models import Task, TaskStatus


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def parse(cls, raw: TaskFilter | str | None) -> TaskFilter:
        if isinstance(raw, cls):
            return raw
        if raw is None or not str(raw).strip():
            return cls.ALL
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown filter: {raw!r}", field="filter") from None


_FILTER_STATUS = {
    TaskFilter.ACTIVE: TaskStatus.IN_PROGRESS,
    TaskFilter.COMPLETED: TaskStatus.COMPLETED,
    TaskFilter.PENDING: TaskStatus.PENDING,
}

# Order of the "move to" actions offered for a task.
_STATUS_MENU = (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.PENDING)


def project(tasks: Iterable[Task], task_filter: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
    flt = TaskFilter.parse(task_filter)
    items = list(tasks)

    if flt is TaskFilter.ALL:
        # sorted() is stable, so ties keep input order.
        return sorted(items, key=lambda t: t.status == TaskStatus.COMPLETED)

    wanted = _FILTER_STATUS[flt]
    return [t for t in items if t.status == wanted]


def progress_of(task: Task) -> tuple[int, int]:
    done = sum(1 for s in task.subtasks if s.completed)
    return done, len(task.subtasks)


def subtasks_editable(task: Task) -> bool:
    """Subtasks of a completed task are read-only."""
    return task.status != TaskStatus.COMPLETED


def status_choices(task: Task) -> list[TaskStatus]:
    return [s for s in _STATUS_MENU if s != task.status]


def count_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, int]:
    counts = {s: 0 for s in TaskStatus}
    for t in tasks:
        counts[t.status] += 1
    return counts
