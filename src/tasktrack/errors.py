# src/tasktrack/errors.py

"""
Error kinds surfaced by the task core and its ports.

Callers render these differently ("validation failed" vs "not found" vs
"save failed"), so each kind is its own class.
"""

from __future__ import annotations


class TaskTrackError(Exception):
    """Base class for all TaskTrack errors."""


class ValidationError(TaskTrackError, ValueError):
    """Bad title/description/status/filter or subtask list."""

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.field = field


class NotFoundError(TaskTrackError, LookupError):
    """Unknown task or subtask id."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class PersistenceError(TaskTrackError, RuntimeError):
    """The persistence port failed; the cause is chained."""


class SuggestionUnavailable(TaskTrackError, RuntimeError):
    """The suggestion port could not produce suggestions."""
