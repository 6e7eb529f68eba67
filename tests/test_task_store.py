# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from tasktrack.errors import NotFoundError, PersistenceError
from tasktrack.tasks.task_models import Subtask, TaskStatus
from tasktrack.tasks.task_store import TaskStore


@pytest.mark.asyncio
async def test_create_load_roundtrip_is_owner_scoped(store: TaskStore, make_task) -> None:
    older = make_task("t1", created_at=10.0, subtasks=(Subtask("s1", "a", True), Subtask("s2", "b")))
    newer = make_task("t2", created_at=20.0, description="d")
    foreign = make_task("t3", owner_id="owner-2", created_at=30.0)
    for t in (older, newer, foreign):
        await store.create(t)

    loaded = await store.load("owner-1")
    assert [t.id for t in loaded] == ["t2", "t1"]
    assert loaded[1] == older
    assert [t.id for t in await store.load("owner-2")] == ["t3"]
    assert store.count_tasks() == 3
    assert store.count_tasks("owner-1") == 2


@pytest.mark.asyncio
async def test_partial_update(store: TaskStore, make_task) -> None:
    await store.create(make_task("t1"))
    await store.update("t1", {"status": TaskStatus.COMPLETED, "subtasks": (Subtask("x", "new"),)})
    (task,) = await store.load("owner-1")
    assert task.status is TaskStatus.COMPLETED
    assert task.subtasks == (Subtask("x", "new"),)
    assert task.title == "Write report"


@pytest.mark.asyncio
async def test_unknown_ids(store: TaskStore, make_task) -> None:
    with pytest.raises(NotFoundError):
        await store.update("nope", {"title": "x"})
    with pytest.raises(NotFoundError):
        await store.remove("nope")

    await store.create(make_task("t1"))
    await store.remove("t1")
    with pytest.raises(NotFoundError):
        await store.remove("t1")


@pytest.mark.asyncio
async def test_duplicate_id_is_persistence_error(store: TaskStore, make_task) -> None:
    await store.create(make_task("t1"))
    with pytest.raises(PersistenceError):
        await store.create(make_task("t1"))


@pytest.mark.asyncio
async def test_rejects_unknown_fields(store: TaskStore, make_task) -> None:
    await store.create(make_task("t1"))
    with pytest.raises(ValueError):
        await store.update("t1", {"owner_id": "owner-2"})


def test_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute(
        "CREATE TABLE tasks (id TEXT PRIMARY KEY, owner_id TEXT NOT NULL, "
        "title TEXT NOT NULL, created_at REAL NOT NULL)"
    )
    conn.execute("INSERT INTO tasks VALUES ('t1', 'o', 'Legacy', 5.0)")
    conn.commit()
    conn.close()

    store = TaskStore(db)
    (task,) = store.load_sync("o")
    assert task.status is TaskStatus.PENDING
    assert task.subtasks == ()
    assert task.description == ""


@pytest.mark.asyncio
async def test_corrupt_row_is_persistence_error(store: TaskStore, settings, make_task) -> None:
    await store.create(make_task("t1"))
    conn = sqlite3.connect(settings.tasks_db_path)
    conn.execute("UPDATE tasks SET status = 'archived' WHERE id = 't1'")
    conn.commit()
    conn.close()

    with pytest.raises(PersistenceError):
        await store.load("owner-1")


def test_unopenable_path_raises_persistence_error(tmp_path: Path) -> None:
    # A directory cannot be opened as a database file.
    with pytest.raises(PersistenceError):
        TaskStore(tmp_path)
