# src/agent_tasks/llm/offline.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Echoes the subagent's first system-prompt line and the last user prompt, so
    background tasks can be launched, polled and cancelled without network access.
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        role_line = (system_prompt or "").strip().splitlines()[0] if (system_prompt or "").strip() else ""

        yield "Offline demo mode: no external LLM is configured.\n"
        yield "Set AGENT_TASKS_OPENROUTER_API_KEY (and AGENT_TASKS_LLM_MODELS) to enable real responses.\n\n"
        if role_line:
            yield f"Agent: {role_line}\n"
        yield f"Task: {user_text}"
