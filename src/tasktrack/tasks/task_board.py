# src/tasktrack/tasks/task_board.py

from __future__ import annotations

"""
Task board: one owner's session.

Holds the in-memory snapshot of the owner's tasks and drives the mutation
engine with a two-phase contract:
- compute the new task value (engine, pure),
- persist it through the TaskRepo port (awaited),
- apply it to the snapshot only after the port call returned.

If the port raises (or the await is cancelled) the snapshot stays as it was.
"""

import logging
from collections.abc import Iterable, Sequence

from ..core.ports import SubtaskSuggester, TaskRepo
from ..errors import SuggestionUnavailable
from . import task_engine as engine
from .task_models import Subtask, Task, TaskStatus
from .task_view import TaskFilter, project

logger = logging.getLogger(__name__)


class TaskBoard:
    def __init__(
        self,
        repo: TaskRepo,
        owner_id: str,
        *,
        suggester: SubtaskSuggester | None = None,
    ) -> None:
        if not owner_id:
            raise ValueError("owner_id is required")
        self._repo = repo
        self._owner_id = owner_id
        self._suggester = suggester
        self._tasks: dict[str, Task] = {}

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def get(self, task_id: str) -> Task:
        return engine.get_task(self._tasks, task_id)

    def view(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
        return project(self._tasks.values(), task_filter)

    async def load(self) -> list[Task]:
        loaded = await self._repo.load(self._owner_id)
        tasks: dict[str, Task] = {}
        for t in loaded:
            if t.owner_id != self._owner_id:
                logger.warning("Skipping task id=%s of another owner", t.id)
                continue
            tasks[t.id] = t
        self._tasks = tasks
        logger.info("Board loaded owner=%s tasks=%d", self._owner_id, len(tasks))
        return self.tasks

    async def create(
        self,
        title: str,
        description: str | None = None,
        subtask_texts: Iterable[str] | None = None,
    ) -> Task:
        task = engine.create_task(self._owner_id, title, description, subtask_texts)
        stored = await self._repo.create(task)
        self._tasks = engine.put_task(self._tasks, stored)
        logger.info("Task created id=%s", stored.id)
        return stored

    async def edit(
        self,
        task_id: str,
        title: str,
        description: str | None,
        subtasks: Sequence[Subtask] | None,
    ) -> Task:
        task = engine.edit_task(self._tasks, task_id, title, description, subtasks)
        await self._repo.update(
            task_id,
            {"title": task.title, "description": task.description, "subtasks": task.subtasks},
        )
        return self._apply(task)

    async def set_status(self, task_id: str, status: TaskStatus | str) -> Task:
        task = engine.change_status(self._tasks, task_id, status)
        await self._repo.update(task_id, {"status": task.status})
        return self._apply(task)

    async def toggle_subtask(self, task_id: str, subtask_id: str, completed: bool) -> Task:
        task = engine.toggle_subtask(self._tasks, task_id, subtask_id, completed)
        await self._repo.update(task_id, {"subtasks": task.subtasks})
        return self._apply(task)

    async def append_subtasks(self, task_id: str, texts: Iterable[str]) -> Task:
        task = engine.append_subtasks(self._tasks, task_id, texts)
        await self._repo.update(task_id, {"subtasks": task.subtasks})
        return self._apply(task)

    async def delete(self, task_id: str) -> None:
        remaining = engine.delete_task(self._tasks, task_id)
        await self._repo.remove(task_id)
        self._tasks = remaining
        logger.info("Task deleted id=%s", task_id)

    async def suggest_subtasks(self, task_id: str) -> list[str]:
        """Ask the suggester using the description, or the title when there is none."""
        task = self.get(task_id)
        if self._suggester is None:
            raise SuggestionUnavailable("No suggestion service is configured.")
        return await self._suggester.suggest(task.description or task.title)

    def _apply(self, task: Task) -> Task:
        self._tasks = engine.put_task(self._tasks, task)
        logger.debug("Task updated id=%s status=%s", task.id, task.status)
        return task
