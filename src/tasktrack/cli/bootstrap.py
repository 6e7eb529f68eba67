# src/tasktrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/auth/LLM),
- signs the owner in and loads their board.
"""

from __future__ import annotations

import logging

from ..auth import SettingsAuthProvider
from ..config import get_settings
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..llm.suggester import LLMSubtaskSuggester
from ..tasks.task_board import TaskBoard
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_llm_client(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except RuntimeError as e:
        # Fallback for demos / local runs without external services.
        logger.info("Using offline LLM client: %s", e)
        return OfflineLLMClient()


def create_app_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    suggester = LLMSubtaskSuggester(
        build_llm_client(settings),
        max_items=int(getattr(settings, "suggestion_max_items", 8)),
    )

    return AppState(
        settings=settings,
        repo=TaskStore(settings.tasks_db_path),
        auth=SettingsAuthProvider(settings),
        suggester=suggester,
    )


async def open_board(state: AppState) -> TaskBoard | None:
    """Resolve the owner and load their tasks. None if nobody is signed in."""
    owner_id = await state.auth.current_owner()
    if owner_id is None:
        return None

    board = TaskBoard(state.repo, owner_id, suggester=state.suggester)
    await board.load()
    state.board = board
    state.pending_suggestions.clear()
    return board
