# tests/test_commands.py

from __future__ import annotations

import pytest

from tasktrack.cli.bootstrap import open_board
from tasktrack.cli.commands import CommandRegistry, registry
from tasktrack.errors import PersistenceError
from tasktrack.tasks.task_models import TaskStatus

from .fakes import FakeAuth


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    async def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    notes: list[str] = []
    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


@pytest.mark.asyncio
async def test_commands_need_a_signed_in_owner(state) -> None:
    state.auth = FakeAuth(None)
    assert await open_board(state) is None
    assert "Not signed in" in (await registry.handle(state, "/list") or "")


@pytest.mark.asyncio
async def test_task_flow_through_commands(state) -> None:
    board = await open_board(state)
    assert board is not None

    reply = await registry.handle(state, "/add Write report | Quarterly numbers | intro; charts")
    assert reply is not None and reply.startswith("Added:")
    task = board.tasks[0]
    assert [s.text for s in task.subtasks] == ["intro", "charts"]

    await registry.handle(state, f"/check {task.id} {task.subtasks[0].id}")
    await registry.handle(state, f"/mark {task.id} in-progress")
    task = board.get(task.id)
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.subtasks[0].completed

    listing = await registry.handle(state, "/list active") or ""
    assert task.id in listing and "(1/2)" in listing

    # Edit without a subtask segment keeps the current subtasks.
    await registry.handle(state, f"/edit {task.id} Write annual report | Yearly numbers")
    task = board.get(task.id)
    assert task.title == "Write annual report"
    assert [(s.text, s.completed) for s in task.subtasks] == [("intro", True), ("charts", False)]

    # With a subtask segment the list is replaced.
    await registry.handle(state, f"/edit {task.id} Write annual report | Yearly | summary")
    assert [s.text for s in board.get(task.id).subtasks] == ["summary"]

    await registry.handle(state, f"/delete {task.id}")
    assert board.tasks == []
    assert "Not found" in (await registry.handle(state, f"/delete {task.id}") or "")


@pytest.mark.asyncio
async def test_completed_task_subtasks_are_read_only(state) -> None:
    board = await open_board(state)
    task = await board.create("Ship", None, ["pack"])
    await board.set_status(task.id, "completed")

    reply = await registry.handle(state, f"/check {task.id} {task.subtasks[0].id}") or ""
    assert "read-only" in reply
    assert board.get(task.id).subtasks[0].completed is False


@pytest.mark.asyncio
async def test_suggest_and_accept(state) -> None:
    board = await open_board(state)
    task = await board.create("Report", "Write the quarterly report")

    reply = await registry.handle(state, f"/suggest {task.id}") or ""
    assert "1. Draft outline" in reply and "2. Collect data" in reply

    reply = await registry.handle(state, f"/accept {task.id} 2") or ""
    assert reply.startswith("Added 1 subtask")
    assert [s.text for s in board.get(task.id).subtasks] == ["Collect data"]
    assert task.id not in state.pending_suggestions


@pytest.mark.asyncio
async def test_error_kinds_render_differently(state) -> None:
    board = await open_board(state)
    task = await board.create("Report")

    assert (await registry.handle(state, "/add  | no title") or "").startswith("Invalid input")
    assert (await registry.handle(state, f"/mark {task.id} archived") or "").startswith("Invalid input")
    assert (await registry.handle(state, "/show nope") or "").startswith("Not found")

    state.repo.fail_next = True
    assert (await registry.handle(state, f"/mark {task.id} completed") or "").startswith("Save failed")
    assert board.get(task.id).status is TaskStatus.PENDING

    state.suggester.fail = True
    assert (await registry.handle(state, f"/suggest {task.id}") or "").startswith(
        "Suggestions unavailable"
    )


@pytest.mark.asyncio
async def test_open_board_propagates_load_failure(state) -> None:
    state.repo.fail_next = True
    with pytest.raises(PersistenceError):
        await open_board(state)
    assert state.board is None


@pytest.mark.asyncio
async def test_mark_accepts_loose_console_spelling(state) -> None:
    board = await open_board(state)
    assert board is not None
    task = await board.create("Loose input")

    await registry.handle(state, f"/mark {task.id} In_Progress")
    assert board.get(task.id).status is TaskStatus.IN_PROGRESS
    await registry.handle(state, f"/mark {task.id} COMPLETED")
    assert board.get(task.id).status is TaskStatus.COMPLETED
