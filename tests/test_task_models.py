# tests/test_task_models.py

from __future__ import annotations

import pytest

from tasktrack.errors import ValidationError
from tasktrack.tasks.task_models import (
    Subtask,
    TaskStatus,
    normalize_subtask_input,
    validate_subtasks,
    validate_task_fields,
)


def test_normalize_trims_drops_blanks_and_keeps_order() -> None:
    subs = normalize_subtask_input(["  a ", "", "   ", "b", "c  "])
    assert [s.text for s in subs] == ["a", "b", "c"]
    assert all(s.completed is False for s in subs)
    assert len({s.id for s in subs}) == 3


def test_normalize_none_is_empty() -> None:
    assert normalize_subtask_input(None) == ()


def test_normalize_ids_avoid_existing(monkeypatch: pytest.MonkeyPatch) -> None:
    ids = iter(["dup", "dup", "fresh"])
    monkeypatch.setattr("tasktrack.tasks.task_models.new_id", lambda length=12: next(ids))

    subs = normalize_subtask_input(["x", "y"], existing_ids=["fresh-old"])
    # Second text collides with the first generated id and gets a new one.
    assert [s.id for s in subs] == ["dup", "fresh"]


def test_validate_task_fields() -> None:
    assert validate_task_fields("Title", "").ok
    assert validate_task_fields("x" * 100, "y" * 500).ok

    empty = validate_task_fields("   ", "desc")
    assert not empty.ok and empty.field == "title"

    long_title = validate_task_fields("x" * 101, None)
    assert not long_title.ok and long_title.field == "title"

    long_desc = validate_task_fields("ok", "y" * 501)
    assert not long_desc.ok and long_desc.field == "description"

    with pytest.raises(ValidationError) as exc:
        long_desc.raise_for_error()
    assert exc.value.field == "description"


def test_status_parse() -> None:
    assert TaskStatus.parse("completed") is TaskStatus.COMPLETED
    assert TaskStatus.parse("in-progress") is TaskStatus.IN_PROGRESS
    assert TaskStatus.parse(TaskStatus.PENDING) is TaskStatus.PENDING
    assert TaskStatus.IN_PROGRESS.label == "In Progress"

    for bad in ("done", "", None, 3, "In_Progress", "COMPLETED", " pending ", "in_progress"):
        with pytest.raises(ValidationError):
            TaskStatus.parse(bad)  # type: ignore[arg-type]


def test_validate_subtasks_rejects_duplicates_and_blank_text() -> None:
    ok = validate_subtasks([Subtask("a", " one "), Subtask("b", "two", True)])
    assert [s.text for s in ok] == ["one", "two"]
    assert ok[1].completed is True

    with pytest.raises(ValidationError):
        validate_subtasks([Subtask("a", "one"), Subtask("a", "two")])
    with pytest.raises(ValidationError):
        validate_subtasks([Subtask("a", "  ")])
    assert validate_subtasks(None) == ()
