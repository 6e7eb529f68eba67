# src/tasktrack/tasks/task_models.py

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..errors import ValidationError

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Transitions are unrestricted: any status can be set from any other,
    so a completed task can be reopened.
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def parse(cls, raw: TaskStatus | str | None) -> TaskStatus:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValidationError(f"Unknown status: {raw!r}", field="status")
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(f"Unknown status: {raw!r}", field="status") from None


_STATUS_LABELS = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}


@dataclass(slots=True, frozen=True)
class Subtask:
    id: str
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Subtask:
        return cls(id=str(raw["id"]), text=str(raw["text"]), completed=bool(raw.get("completed")))


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    owner_id: str
    title: str
    description: str
    status: TaskStatus
    created_at: float
    subtasks: tuple[Subtask, ...] = ()

    def subtask(self, subtask_id: str) -> Subtask | None:
        for sub in self.subtasks:
            if sub.id == subtask_id:
                return sub
        return None


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Tagged result of a field check: ok, or failed with a reason."""

    ok: bool
    reason: str | None = None
    field: str | None = None

    def raise_for_error(self) -> None:
        if not self.ok:
            raise ValidationError(self.reason or "Invalid input", field=self.field)


VALID = ValidationResult(ok=True)


def new_id(length: int = 12) -> str:
    return uuid.uuid4().hex[:length]


def normalize_subtask_input(
    raw_texts: Iterable[str] | None,
    existing_ids: Iterable[str] = (),
) -> tuple[Subtask, ...]:
    """
    Turn raw texts into fresh, unchecked subtasks.

    Blank entries are dropped, texts are trimmed, input order is kept.
    New ids never collide with each other or with existing_ids.
    """
    if raw_texts is None:
        return ()

    taken = set(existing_ids)
    out: list[Subtask] = []
    for raw in raw_texts:
        text = str(raw or "").strip()
        if not text:
            continue
        sid = new_id(8)
        while sid in taken:
            sid = new_id(8)
        taken.add(sid)
        out.append(Subtask(id=sid, text=text, completed=False))
    return tuple(out)


def validate_task_fields(title: str | None, description: str | None) -> ValidationResult:
    title = (title or "").strip()
    description = (description or "").strip()

    if not title:
        return ValidationResult(ok=False, reason="Title is required.", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        return ValidationResult(
            ok=False,
            reason=f"Title must be at most {TITLE_MAX_LENGTH} characters.",
            field="title",
        )
    if len(description) > DESCRIPTION_MAX_LENGTH:
        return ValidationResult(
            ok=False,
            reason=f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters.",
            field="description",
        )
    return VALID


def validate_subtasks(subtasks: Iterable[Subtask] | None) -> tuple[Subtask, ...]:
    """Check a caller-supplied subtask list: unique ids, non-blank texts."""
    if subtasks is None:
        return ()

    seen: set[str] = set()
    out: list[Subtask] = []
    for sub in subtasks:
        if not isinstance(sub, Subtask):
            raise ValidationError(f"Not a subtask: {sub!r}", field="subtasks")
        if not sub.id:
            raise ValidationError("Subtask id is required.", field="subtasks")
        if sub.id in seen:
            raise ValidationError(f"Duplicate subtask id: {sub.id}", field="subtasks")
        text = sub.text.strip()
        if not text:
            raise ValidationError("Subtask text is required.", field="subtasks")
        seen.add(sub.id)
        out.append(sub if text == sub.text else Subtask(id=sub.id, text=text, completed=sub.completed))
    return tuple(out)
