# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/auth/LLM providers swappable and makes testing easier.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from ..tasks.task_models import Task

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class TaskRepo(Protocol):
    """
    Persistence port. Every call is awaited by the board.

    Failures of the store itself are raised as PersistenceError;
    unknown ids on update/remove as NotFoundError.
    """

    async def load(self, owner_id: str) -> list[Task]: ...

    async def create(self, task: Task) -> Task: ...

    # fields: subset of {"title", "description", "status", "subtasks"}
    async def update(self, task_id: str, fields: Mapping[str, Any]) -> None: ...

    async def remove(self, task_id: str) -> None: ...


class AuthProvider(Protocol):
    """Resolves the signed-in owner; None means "not authenticated"."""
    async def current_owner(self) -> str | None: ...


class SubtaskSuggester(Protocol):
    """Candidate subtask texts for a task description. Raises SuggestionUnavailable."""
    async def suggest(self, description: str) -> list[str]: ...
