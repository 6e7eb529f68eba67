# src/tasktrack/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..errors import NotFoundError, PersistenceError, SuggestionUnavailable, ValidationError
from ..tasks.task_board import TaskBoard
from ..tasks.task_models import Task, TaskStatus, normalize_subtask_input
from ..tasks.task_view import (
    TaskFilter,
    count_by_status,
    progress_of,
    status_choices,
    subtasks_editable,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_STATUS_MARK = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task errors are turned into distinct replies; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        nparams = len(inspect.signature(handler).parameters)

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return await h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return await h2(state, args)
        except NotSignedInError:
            return "Not signed in. Set TASKTRACK_OWNER_ID and restart."
        except ValidationError as e:
            return f"Invalid input: {e.reason}"
        except NotFoundError as e:
            return f"Not found: {e.kind} {e.item_id}"
        except PersistenceError:
            logger.warning("Command /%s: save failed", name, exc_info=True)
            return "Save failed. Your tasks were not changed; try again."
        except SuggestionUnavailable as e:
            return f"Suggestions unavailable: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def format_task_line(task: Task) -> str:
    line = f"{_STATUS_MARK[task.status]} {task.id}  {task.title}"
    done, total = progress_of(task)
    if total:
        line += f"  ({done}/{total})"
    return line


def format_task_details(task: Task) -> str:
    lines = [format_task_line(task), f"    Status: {task.status.label}"]
    if task.description:
        lines.append(f"    {task.description}")

    done, total = progress_of(task)
    if total:
        lock = "" if subtasks_editable(task) else " (read-only)"
        lines.append(f"    Subtasks ({done}/{total}){lock}:")
        for sub in task.subtasks:
            mark = "[x]" if sub.completed else "[ ]"
            lines.append(f"      {mark} {sub.id}  {sub.text}")

    moves = ", ".join(s.value for s in status_choices(task))
    lines.append(f"    Move to: {moves}")
    return "\n".join(lines)


def _segments(args: list[str], *, maxsplit: int = 2) -> list[str]:
    return [p.strip() for p in " ".join(args).split("|", maxsplit)]


def _split_items(raw: str) -> list[str]:
    return raw.split(";")


class NotSignedInError(Exception):
    pass


def _require_board(state: AppState) -> TaskBoard:
    if state.board is None:
        raise NotSignedInError()
    return state.board


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    board = state.board
    if board is None:
        return "Not signed in. Set TASKTRACK_OWNER_ID and restart."
    return f"Signed in as {board.owner_id} ({len(board.tasks)} tasks)."


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title
    /add title | description
    /add title | description | sub1; sub2
    """
    board = _require_board(state)
    segs = _segments(args)
    title = segs[0]
    description = segs[1] if len(segs) > 1 else None
    subtasks = _split_items(segs[2]) if len(segs) > 2 else None

    task = await board.create(title, description, subtasks)
    return f"Added:\n{format_task_details(task)}"


async def cmd_list(state: AppState, args: list[str]) -> str:
    board = _require_board(state)
    flt = TaskFilter.parse(args[0] if args else None)
    items = board.view(flt)

    counts = count_by_status(board.tasks)
    header = (
        f"Tasks [{flt.value}]  "
        f"pending={counts[TaskStatus.PENDING]} "
        f"active={counts[TaskStatus.IN_PROGRESS]} "
        f"completed={counts[TaskStatus.COMPLETED]}"
    )
    if not items:
        hint = "You have no active tasks." if flt is TaskFilter.ACTIVE else "Add a new task with /add."
        return f"{header}\nNo tasks to show. {hint}"
    return "\n".join([header, *(format_task_line(t) for t in items)])


async def cmd_show(state: AppState, args: list[str]) -> str:
    board = _require_board(state)
    if not args:
        return "Usage: /show <task_id>"
    return format_task_details(board.get(args[0]))


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <task_id> title | description            -> keeps current subtasks
    /edit <task_id> title | description | a; b     -> replaces the subtask list
    """
    board = _require_board(state)
    if len(args) < 2:
        return "Usage: /edit <task_id> <title> [| <description> [| sub1; sub2]]"

    task = board.get(args[0])
    segs = _segments(args[1:])
    title = segs[0]
    description = segs[1] if len(segs) > 1 else task.description

    if len(segs) > 2:
        # A fresh list: nothing carried over from the old subtasks.
        subtasks = normalize_subtask_input(_split_items(segs[2]))
    else:
        subtasks = task.subtasks

    updated = await board.edit(task.id, title, description, subtasks)
    return f"Saved:\n{format_task_details(updated)}"


async def cmd_mark(state: AppState, args: list[str]) -> str:
    board = _require_board(state)
    if len(args) < 2:
        return "Usage: /mark <task_id> <pending|in-progress|completed>"
    # Console input is forgiving; the board only takes exact status values.
    status = args[1].strip().lower().replace("_", "-")
    task = await board.set_status(args[0], status)
    return f"{format_task_line(task)}  -> {task.status.label}"


async def _set_subtask(state: AppState, args: list[str], completed: bool) -> str:
    board = _require_board(state)
    if len(args) < 2:
        verb = "check" if completed else "uncheck"
        return f"Usage: /{verb} <task_id> <subtask_id>"
    task = board.get(args[0])
    if not subtasks_editable(task):
        return "This task is completed; its subtasks are read-only. Reopen it with /mark first."
    updated = await board.toggle_subtask(task.id, args[1], completed)
    return format_task_details(updated)


async def cmd_check(state: AppState, args: list[str]) -> str:
    return await _set_subtask(state, args, True)


async def cmd_uncheck(state: AppState, args: list[str]) -> str:
    return await _set_subtask(state, args, False)


async def cmd_suggest(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    board = _require_board(state)
    if not args:
        return "Usage: /suggest <task_id>"
    task = board.get(args[0])

    if emit:
        emit("Asking for subtask suggestions...")

    suggestions = await board.suggest_subtasks(task.id)
    if not suggestions:
        state.pending_suggestions.pop(task.id, None)
        return "No subtasks could be suggested. Try refining the task description."

    state.pending_suggestions[task.id] = suggestions
    lines = [f"Suggested subtasks for {task.id}:"]
    lines += [f"  {i}. {text}" for i, text in enumerate(suggestions, start=1)]
    lines.append(f"Use /accept {task.id} [numbers...] to add them (all if no numbers).")
    return "\n".join(lines)


async def cmd_accept(state: AppState, args: list[str]) -> str:
    board = _require_board(state)
    if not args:
        return "Usage: /accept <task_id> [n ...]"
    task_id = args[0]
    suggestions = state.pending_suggestions.get(task_id)
    if not suggestions:
        return f"No pending suggestions for {task_id}. Use /suggest {task_id} first."

    if len(args) > 1:
        picked: list[str] = []
        for raw in args[1:]:
            if not raw.isdigit() or not 1 <= int(raw) <= len(suggestions):
                return f"Invalid choice: {raw}. Pick numbers between 1 and {len(suggestions)}."
            text = suggestions[int(raw) - 1]
            if text not in picked:
                picked.append(text)
    else:
        picked = list(suggestions)

    task = await board.append_subtasks(task_id, picked)
    state.pending_suggestions.pop(task_id, None)
    return f"Added {len(picked)} subtask(s):\n{format_task_details(task)}"


async def cmd_delete(state: AppState, args: list[str]) -> str:
    board = _require_board(state)
    if not args:
        return "Usage: /delete <task_id>"
    await board.delete(args[0])
    state.pending_suggestions.pop(args[0], None)
    return f"Deleted {args[0]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("whoami", cmd_whoami, help_text="Show the signed-in owner.")
registry.register("add", cmd_add, help_text="Add a task: /add title [| description [| sub1; sub2]].")
registry.register(
    "list", cmd_list, help_text="List tasks: /list [all|active|completed|pending].", aliases=["ls"]
)
registry.register("show", cmd_show, help_text="Show a task with its subtasks: /show <task_id>.")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <task_id> title [| description [| sub1; sub2]].",
)
registry.register(
    "mark", cmd_mark, help_text="Change status: /mark <task_id> pending|in-progress|completed."
)
registry.register("check", cmd_check, help_text="Complete a subtask: /check <task_id> <subtask_id>.")
registry.register("uncheck", cmd_uncheck, help_text="Reopen a subtask: /uncheck <task_id> <subtask_id>.")
registry.register("suggest", cmd_suggest, help_text="Suggest subtasks: /suggest <task_id>.")
registry.register("accept", cmd_accept, help_text="Add suggested subtasks: /accept <task_id> [n ...].")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <task_id>.", aliases=["rm"])
