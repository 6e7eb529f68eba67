# src/tasktrack/llm/offline.py

from __future__ import annotations

import json
import re
from collections.abc import Iterable

from ..core.ports import ChatMessage

_STEP_SPLIT = re.compile(r"[.;!?\n]+|,\s*(?:and|then)\s+|\s+then\s+")


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Behavior:
    - Subtask suggestion prompts -> splits the task description into
      sentence-sized steps and returns them as {"subtasks": [...]}
    - Anything else -> a short "offline" note
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        if '"subtasks"' in (system_prompt or ""):
            steps = [p.strip() for p in _STEP_SPLIT.split(user_text) if p.strip()]
            yield json.dumps({"subtasks": steps}, ensure_ascii=False)
            return

        yield (
            "Offline demo mode: no external LLM is configured.\n"
            "Set TASKTRACK_OPENROUTER_API_KEY (and TASKTRACK_LLM_MODELS) to enable real responses."
        )
