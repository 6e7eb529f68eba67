# src/tasktrack/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..errors import NotFoundError, PersistenceError, ValidationError
from .task_models import Subtask, Task, TaskStatus

logger = logging.getLogger(__name__)

_UPDATABLE = ("title", "description", "status", "subtasks")


class TaskStore:
    """
    SQLite task store (implements the TaskRepo port).

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Subtasks live in a JSON column: they are always read and written
    together with their task.

    Thread-safety:
    - each method opens its own SQLite connection
    - async methods run the blocking work in a worker thread
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
            total = self.count_tasks()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Cannot open task store at {self._db_path}") from e
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'pending',
                    subtasks TEXT NOT NULL DEFAULT '[]',
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("status", "TEXT NOT NULL DEFAULT 'pending'")
            add_col("subtasks", "TEXT NOT NULL DEFAULT '[]'")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_owner_created ON tasks(owner_id, created_at)"
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _subtasks_to_str(subtasks: Iterable[Subtask]) -> str:
        return json.dumps([s.to_dict() for s in subtasks], ensure_ascii=False)

    @staticmethod
    def _str_to_subtasks(s: str | None) -> tuple[Subtask, ...]:
        if not s:
            return ()
        val = json.loads(s)
        if not isinstance(val, list):
            raise ValueError("subtasks column is not a JSON array")
        return tuple(Subtask.from_dict(item) for item in val)

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        try:
            return Task(
                id=str(row["id"]),
                owner_id=str(row["owner_id"]),
                title=str(row["title"]),
                description=str(row["description"] or ""),
                status=TaskStatus.parse(row["status"]),
                created_at=float(row["created_at"] or 0.0),
                subtasks=self._str_to_subtasks(row["subtasks"]),
            )
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise PersistenceError(f"Corrupt task row id={row['id']}") from e

    def _encode_fields(self, fields: Mapping[str, Any]) -> tuple[list[str], list[Any]]:
        cols: list[str] = []
        params: list[Any] = []
        for name, value in fields.items():
            if name not in _UPDATABLE:
                raise ValueError(f"Field cannot be updated: {name}")
            cols.append(f"{name} = ?")
            if name == "subtasks":
                params.append(self._subtasks_to_str(value))
            elif name == "status":
                params.append(TaskStatus.parse(value).value)
            else:
                params.append(str(value))
        return cols, params

    # ---- sync API (runs in a worker thread) ----

    def count_tasks(self, owner_id: str | None = None) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if owner_id is None:
                cur.execute("SELECT COUNT(*) FROM tasks")
            else:
                cur.execute("SELECT COUNT(*) FROM tasks WHERE owner_id = ?", (owner_id,))
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def load_sync(self, owner_id: str) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT *
                FROM tasks
                WHERE owner_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (owner_id,),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def create_sync(self, task: Task) -> Task:
        now = time.time()
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, owner_id, title, description, status, subtasks, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.owner_id,
                    task.title,
                    task.description,
                    task.status.value,
                    self._subtasks_to_str(task.subtasks),
                    float(task.created_at),
                    now,
                ),
            )
            conn.commit()
            logger.debug("Task stored id=%s owner=%s", task.id, task.owner_id)
            return task
        finally:
            conn.close()

    def update_sync(self, task_id: str, fields: Mapping[str, Any]) -> None:
        cols, params = self._encode_fields(fields)
        if not cols:
            return

        cols.append("updated_at = ?")
        params.append(time.time())
        params.append(task_id)

        sql = f"UPDATE tasks SET {', '.join(cols)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            if cur.rowcount == 0:
                raise NotFoundError("task", task_id)
        finally:
            conn.close()

    def remove_sync(self, task_id: str) -> None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            if cur.rowcount == 0:
                raise NotFoundError("task", task_id)
        finally:
            conn.close()

    # ---- TaskRepo port ----

    async def load(self, owner_id: str) -> list[Task]:
        return await self._run(self.load_sync, owner_id)

    async def create(self, task: Task) -> Task:
        return await self._run(self.create_sync, task)

    async def update(self, task_id: str, fields: Mapping[str, Any]) -> None:
        await self._run(self.update_sync, task_id, fields)

    async def remove(self, task_id: str) -> None:
        await self._run(self.remove_sync, task_id)

    async def _run(self, fn: Any, *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except sqlite3.Error as e:
            logger.exception("TaskStore %s failed", getattr(fn, "__name__", fn))
            raise PersistenceError("Task store operation failed.") from e
