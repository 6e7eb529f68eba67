# tests/test_suggester.py

from __future__ import annotations

import pytest

from tasktrack.errors import SuggestionUnavailable
from tasktrack.llm.offline import OfflineLLMClient
from tasktrack.llm.suggester import LLMSubtaskSuggester, parse_suggestions

from .fakes import FakeLLMClient


def test_parse_suggestions_formats() -> None:
    assert parse_suggestions('{"subtasks": ["a", " b ", "", 3]}') == ["a", "b"]
    assert parse_suggestions('```json\n{"subtasks": ["a"]}\n```') == ["a"]
    assert parse_suggestions('["x", "y"]') == ["x", "y"]
    assert parse_suggestions("- one\n2) two\n\n* three") == ["one", "two", "three"]

    with pytest.raises(ValueError):
        parse_suggestions("")
    with pytest.raises(ValueError):
        parse_suggestions('{"items": []}')
    with pytest.raises(ValueError):
        parse_suggestions("{not json")


@pytest.mark.asyncio
async def test_suggest_dedupes_and_caps() -> None:
    llm = FakeLLMClient('{"subtasks": ["Book venue", "book venue", "Send invites", "Order food"]}')
    suggester = LLMSubtaskSuggester(llm, max_items=2)

    out = await suggester.suggest("Organize a party")
    assert out == ["Book venue", "Send invites"]

    messages, system_prompt = llm.calls[0]
    assert messages == [{"role": "user", "content": "Organize a party"}]
    assert '"subtasks"' in system_prompt


@pytest.mark.asyncio
async def test_suggest_failures_become_unavailable() -> None:
    with pytest.raises(SuggestionUnavailable):
        await LLMSubtaskSuggester(FakeLLMClient(error=RuntimeError("All LLM models failed."))).suggest("x")
    with pytest.raises(SuggestionUnavailable):
        await LLMSubtaskSuggester(FakeLLMClient("{not json")).suggest("x")
    with pytest.raises(SuggestionUnavailable):
        await LLMSubtaskSuggester(FakeLLMClient()).suggest("   ")


@pytest.mark.asyncio
async def test_empty_suggestion_list_is_not_an_error() -> None:
    assert await LLMSubtaskSuggester(FakeLLMClient('{"subtasks": []}')).suggest("vague") == []


@pytest.mark.asyncio
async def test_offline_client_splits_description() -> None:
    suggester = LLMSubtaskSuggester(OfflineLLMClient())
    out = await suggester.suggest("Buy paint. Sand the walls; paint twice, then clean up")
    assert out == ["Buy paint", "Sand the walls", "paint twice", "clean up"]
