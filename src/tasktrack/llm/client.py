# src/tasktrack/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

# How long a model that answered 404 is skipped.
BAD_MODEL_COOLDOWN_SECONDS = 3600.0


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException, TimeoutError)):
        return True
    return exc.__class__.__name__ in {"Timeout", "WriteTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible SDK uses NotFoundError for HTTP 404
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "LLM is not configured (missing API key). Set TASKTRACK_OPENROUTER_API_KEY in .env."
    if "LLM model list is empty" in msg:
        return "LLM is not configured (no models). Set TASKTRACK_LLM_MODELS in .env."
    if "LLM base URL is not set" in msg:
        return "LLM is not configured (missing base URL). Set TASKTRACK_OPENROUTER_BASE_URL in .env."
    return msg


def _close_stream(stream: Any) -> None:
    """Best-effort close for streaming responses."""
    close = getattr(stream, "close", None)
    if callable(close):
        try:
            close()
        except (httpx.HTTPError, OSError):
            logger.debug("LLM: stream close failed", exc_info=True)


class OpenRouterLLMClient:
    """
    Streaming chat client for OpenRouter (or any OpenAI-compatible endpoint).

    Behavior:
    - Tries models in the configured order (TASKTRACK_LLM_MODELS).
    - If a model doesn't produce a first content token within the first-token
      timeout, we abort and try the next model.
    - 404 (model not available) -> remember for a while, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast (no retries across models).

    Automatic SDK retries are disabled to allow quick fallback across models.
    """

    def __init__(self, settings) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = getattr(settings, "openrouter_base_url", "") or ""

        if not api_key or not str(api_key).strip():
            raise RuntimeError("LLM API key is not set. Set TASKTRACK_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("LLM base URL is not set. Set TASKTRACK_OPENROUTER_BASE_URL in your .env.")

        self._models: List[str] = [m.strip() for m in (getattr(settings, "llm_models", []) or []) if m.strip()]
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set TASKTRACK_LLM_MODELS in your .env.")

        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._first_token_timeout = float(getattr(settings, "llm_first_token_timeout", 20.0))
        read_timeout = float(getattr(settings, "llm_read_timeout", 25.0))
        connect_timeout = float(getattr(settings, "llm_connect_timeout", 5.0))

        self._timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=10.0,
            pool=connect_timeout,
        )
        self._client = OpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=self._timeout,
            max_retries=0,
        )
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        last_error: Optional[Exception] = None
        now = time.monotonic()

        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info(
                "LLM: trying model=%s (first_token_timeout=%.1fs)",
                model,
                self._first_token_timeout,
            )
            t0 = time.monotonic()
            deadline = t0 + self._first_token_timeout

            stream = None
            used_any = False

            try:
                stream = self._client.chat.completions.create(
                    model=model,
                    stream=True,
                    extra_headers=self._headers or None,
                    messages=[{"role": "system", "content": system_prompt}, *messages],
                    timeout=self._timeout,
                )

                for chunk in stream:
                    if not used_any and time.monotonic() > deadline:
                        last_error = TimeoutError(f"First token timeout on model: {model}")
                        logger.info("LLM: first token timeout on model=%s -> trying next", model)
                        break

                    content = None
                    if chunk.choices:
                        delta = chunk.choices[0].delta
                        content = getattr(delta, "content", None) if delta is not None else None

                    if content:
                        if not used_any:
                            logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - t0)
                        used_any = True
                        yield content

                if used_any:
                    logger.debug("LLM: completed with model=%s", model)
                    return

                if last_error is None:
                    last_error = RuntimeError(f"Model returned no content: {model}")

            except (openai.OpenAIError, httpx.HTTPError) as e:
                last_error = e

                if _is_auth_error(e):
                    raise RuntimeError(
                        "LLM authentication failed. Check your API key (TASKTRACK_OPENROUTER_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + BAD_MODEL_COOLDOWN_SECONDS
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            finally:
                if stream is not None:
                    _close_stream(stream)

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise RuntimeError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise RuntimeError("LLM network/timeout error. Try again later or change models.") from last_error
            raise RuntimeError("All LLM models failed.") from last_error

        raise RuntimeError("All LLM models failed.")
