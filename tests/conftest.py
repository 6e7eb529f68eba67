# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktrack.core.state import AppState
from tasktrack.tasks.task_models import Subtask, Task, TaskStatus
from tasktrack.tasks.task_store import TaskStore

from .fakes import FakeAuth, FakeSuggester, FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasktrack-test",
        log_level="DEBUG",
        owner_id="owner-1",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.ai/api/v1",
        llm_models=["test/model"],
        extra_headers={},
        llm_first_token_timeout=1.0,
        llm_read_timeout=1.0,
        llm_connect_timeout=1.0,
        suggestion_max_items=5,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    # Real SQLite store: its owner scoping is part of what we test.
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def make_task():
    def _make(
        task_id: str = "t1",
        *,
        owner_id: str = "owner-1",
        title: str = "Write report",
        description: str = "",
        status: TaskStatus = TaskStatus.PENDING,
        created_at: float = 1000.0,
        subtasks: tuple[Subtask, ...] = (),
    ) -> Task:
        return Task(
            id=task_id,
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            created_at=created_at,
            subtasks=subtasks,
        )

    return _make


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired with in-memory fakes (no board opened yet)."""
    return AppState(
        settings=settings,
        repo=FakeTaskRepo(),
        auth=FakeAuth("owner-1"),
        suggester=FakeSuggester(["Draft outline", "Collect data"]),
    )
