# src/tasktrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_board import TaskBoard
from .ports import AuthProvider, SubtaskSuggester, TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    repo: TaskRepo
    auth: AuthProvider
    suggester: SubtaskSuggester

    # Set once the owner is resolved and their tasks are loaded.
    board: TaskBoard | None = None

    # Last suggestions shown per task id (for /accept).
    pending_suggestions: dict[str, list[str]] = field(default_factory=dict)
