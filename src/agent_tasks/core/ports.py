# src/agent_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the tools.

Tools depend on Protocols instead of concrete implementations.
This keeps the LLM provider and the task registry swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Callable, Iterable, Protocol

if TYPE_CHECKING:
    from ..tasks.background_task import BackgroundTask

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class TaskRepository(Protocol):
    """
    Registry of background tasks, keyed by task id.

    Implementations run submitted work on their own worker pool and must be
    safe to call from many threads without external locking.
    """

    def submit(self, task_id: str, work: Callable[[], str | None]) -> BackgroundTask: ...
    def lookup(self, task_id: str) -> BackgroundTask | None: ...
    def remove(self, task_id: str) -> None: ...
    def remove_completed(self) -> int: ...
    def clear(self) -> None: ...
    def task_ids(self) -> list[str]: ...
    def shutdown(self) -> None: ...
