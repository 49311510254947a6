# tests/test_llm_client.py

from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from agent_tasks.llm.client import OpenRouterLLMClient


def _settings(models: list[str]) -> SimpleNamespace:
    return SimpleNamespace(
        openrouter_api_key="sk-test",
        openrouter_base_url="https://openrouter.invalid/api/v1",
        llm_models=models,
        extra_headers={},
        llm_first_token_timeout_seconds=5.0,
        llm_read_timeout_seconds=5.0,
        llm_connect_timeout_seconds=1.0,
    )


def _chunk(text: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class _ScriptedCompletions:
    """Stands in for client.chat.completions; one scripted response per model."""

    def __init__(self, script: dict) -> None:
        self.script = script
        self.models: list[str] = []

    def create(self, *, model: str, **kwargs):
        self.models.append(model)
        outcome = self.script[model]
        if isinstance(outcome, Exception):
            raise outcome
        return iter(outcome)


def _client_with(script: dict) -> tuple[OpenRouterLLMClient, _ScriptedCompletions]:
    client = OpenRouterLLMClient(_settings(list(script)))
    completions = _ScriptedCompletions(script)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client, completions


def _connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", "https://openrouter.invalid"))


def test_falls_back_to_next_model() -> None:
    client, completions = _client_with({"a/down": _connection_error(), "b/up": [_chunk("he"), _chunk("llo")]})

    out = "".join(client.stream_chat([{"role": "user", "content": "hi"}], "sys"))

    assert out == "hello"
    assert completions.models == ["a/down", "b/up"]


def test_last_model_without_content_is_reported() -> None:
    client, _ = _client_with({"a/down": _connection_error(), "b/empty": []})

    with pytest.raises(RuntimeError) as excinfo:
        list(client.stream_chat([{"role": "user", "content": "hi"}], "sys"))

    assert str(excinfo.value) == "All LLM models failed."
    assert str(excinfo.value.__cause__) == "Model returned no content: b/empty"


def test_connection_error_on_last_model() -> None:
    client, _ = _client_with({"a/empty": [], "b/down": _connection_error()})

    with pytest.raises(RuntimeError, match="network/timeout"):
        list(client.stream_chat([{"role": "user", "content": "hi"}], "sys"))


def test_missing_api_key_is_rejected() -> None:
    settings = _settings(["a"])
    settings.openrouter_api_key = ""

    with pytest.raises(RuntimeError, match="API key is not set"):
        OpenRouterLLMClient(settings)
