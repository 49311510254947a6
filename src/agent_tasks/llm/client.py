# src/agent_tasks/llm/client.py

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

# model -> retry_at (monotonic). Shared by all clients; subagents run on many threads.
_BAD_MODELS: dict[str, float] = {}
_BAD_MODELS_LOCK = threading.Lock()

_BAD_MODEL_COOLDOWN_SECONDS = 3600.0


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    return isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException))


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def _mark_bad_model(model: str) -> None:
    with _BAD_MODELS_LOCK:
        _BAD_MODELS[model] = time.monotonic() + _BAD_MODEL_COOLDOWN_SECONDS


def _is_bad_model(model: str, now: float) -> bool:
    with _BAD_MODELS_LOCK:
        retry_at = _BAD_MODELS.get(model)
    return retry_at is not None and retry_at > now


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "LLM is not configured (missing API key). Set AGENT_TASKS_OPENROUTER_API_KEY in .env."
    if "LLM model list is empty" in msg:
        return "LLM is not configured (no models). Set AGENT_TASKS_LLM_MODELS in .env."
    if "LLM base URL is not set" in msg:
        return "LLM is not configured (missing base URL). Set AGENT_TASKS_OPENROUTER_BASE_URL in .env."
    return msg


def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        close()


class OpenRouterLLMClient:
    """
    OpenAI-compatible streaming chat client (OpenRouter by default).

    Behavior:
    - Tries models in the order from settings.llm_models.
    - If a model doesn't produce a first content token within the first-token
      timeout, we abort and try the next model.
    - 404 (model not available) -> try next, skip the model for an hour.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast (no retries across models).

    Safe to share between threads: the underlying OpenAI client is thread-safe
    and per-call state lives on the stack.
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = getattr(settings, "openrouter_base_url", "") or ""

        if not api_key or not str(api_key).strip():
            raise RuntimeError("LLM API key is not set. Set AGENT_TASKS_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("LLM base URL is not set. Set AGENT_TASKS_OPENROUTER_BASE_URL in your .env.")

        self._models: List[str] = [m.strip() for m in getattr(settings, "llm_models", []) or [] if m.strip()]
        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})

        self._first_token_timeout = float(getattr(settings, "llm_first_token_timeout_seconds", 20.0))
        read_timeout = float(getattr(settings, "llm_read_timeout_seconds", 60.0))
        connect_timeout = float(getattr(settings, "llm_connect_timeout_seconds", 5.0))
        self._timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=10.0,
            pool=connect_timeout,
        )

        # Automatic retries are disabled to allow quick fallback across models.
        self._client = OpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=self._timeout,
            max_retries=0,
        )

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        """Stream the LLM response in text chunks."""
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set AGENT_TASKS_LLM_MODELS in your .env.")

        last_error: Optional[Exception] = None
        now = time.monotonic()

        for model in self._models:
            if _is_bad_model(model, now):
                continue

            logger.info("LLM: trying model=%s (first_token_timeout=%.1fs)", model, self._first_token_timeout)
            t0 = time.monotonic()
            deadline = t0 + self._first_token_timeout

            stream = None
            used_any = False
            timed_out = False

            try:
                stream = self._client.chat.completions.create(
                    model=model,
                    stream=True,
                    extra_headers=self._headers or None,
                    messages=[{"role": "system", "content": system_prompt}, *messages],
                    timeout=self._timeout,
                )

                for chunk in stream:
                    # If the SDK yields chunks but no content (rare), still enforce first-token deadline.
                    if not used_any and time.monotonic() > deadline:
                        timed_out = True
                        logger.info("LLM: first token timeout on model=%s -> trying next", model)
                        break

                    content = chunk.choices[0].delta.content if chunk.choices else None
                    if content:
                        if not used_any:
                            logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - t0)
                        used_any = True
                        yield content

                if used_any:
                    logger.debug("LLM: completed with model=%s", model)
                    return

                # The last model tried decides the reported error.
                if timed_out:
                    last_error = TimeoutError(f"First token timeout on model: {model}")
                else:
                    last_error = RuntimeError(f"Model returned no content: {model}")

            except openai.OpenAIError as e:
                last_error = e

                if _is_auth_error(e):
                    raise RuntimeError(
                        "LLM authentication failed. Check your API key (AGENT_TASKS_OPENROUTER_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    _mark_bad_model(model)
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
