# src/tasktrack/llm/suggester.py

from __future__ import annotations

import asyncio
import json
import logging
import re

from ..core.ports import LLMClient
from ..errors import SuggestionUnavailable
from .client import friendly_llm_error_message

logger = logging.getLogger(__name__)

SUGGEST_SYSTEM_PROMPT = """
You are a planning assistant that breaks a task into concrete subtasks.

Input: a task description written by the user.

Task:
- Propose 3-8 short, actionable subtasks that together complete the task.

Rules:
- Each subtask is one imperative sentence, under 80 characters.
- No numbering, no explanations, no emojis.
- Reply with JSON only, exactly in this shape:
  {"subtasks": ["...", "..."]}
- If the description is too vague, reply {"subtasks": []}.
""".strip()

MAX_DESCRIPTION_CHARS = 2000

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def parse_suggestions(raw: str) -> list[str]:
    """
    Extract subtask texts from a model reply.

    Accepts {"subtasks": [...]}, a bare JSON list, or a plain bullet list.
    Raises ValueError if nothing usable can be read.
    """
    text = _FENCE.sub("", (raw or "").strip()).strip()
    if not text:
        raise ValueError("empty reply")

    items: list[object]
    if text[0] in "{[":
        start = text.find("{") if text[0] == "{" else text.find("[")
        end = text.rfind("}") if text[0] == "{" else text.rfind("]")
        data = json.loads(text[start : end + 1])
        if isinstance(data, dict):
            data = data.get("subtasks")
        if not isinstance(data, list):
            raise ValueError("reply has no subtasks list")
        items = data
    else:
        items = [_BULLET.sub("", line) for line in text.splitlines()]

    return [str(i).strip() for i in items if isinstance(i, str) and i.strip()]


class LLMSubtaskSuggester:
    """SubtaskSuggester backed by a streaming chat LLM."""

    def __init__(self, llm: LLMClient, *, max_items: int = 8) -> None:
        self._llm = llm
        self._max_items = max(1, int(max_items))

    async def suggest(self, description: str) -> list[str]:
        text = (description or "").strip()
        if not text:
            raise SuggestionUnavailable("Add a description to the task to get suggestions.")
        if len(text) > MAX_DESCRIPTION_CHARS:
            text = text[:MAX_DESCRIPTION_CHARS] + "…"

        try:
            raw = await asyncio.to_thread(self._collect, text)
        except Exception as e:
            # The suggester is opaque: whatever broke, the caller only sees "unavailable".
            logger.warning("Suggestion request failed: %s", e.__class__.__name__, exc_info=True)
            message = "Suggestions are unavailable right now."
            if isinstance(e, RuntimeError):
                message = friendly_llm_error_message(e)
            raise SuggestionUnavailable(message) from e

        try:
            items = parse_suggestions(raw)
        except ValueError as e:
            logger.warning("Suggestion reply could not be parsed (len=%d)", len(raw))
            raise SuggestionUnavailable("Suggestions are unavailable right now.") from e

        out: list[str] = []
        seen: set[str] = set()
        for item in items:
            key = item.casefold()
            if key in seen:
                continue
            seen.add(key)
            out.append(item)
            if len(out) >= self._max_items:
                break

        logger.debug("Suggestions produced n=%d", len(out))
        return out

    def _collect(self, description: str) -> str:
        raw = ""
        for piece in self._llm.stream_chat([{"role": "user", "content": description}], SUGGEST_SYSTEM_PROMPT):
            raw += piece
        return raw
