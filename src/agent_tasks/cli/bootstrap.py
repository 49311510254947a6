# src/agent_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (LLM, task repository, tools).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..tasks.task_repository import DefaultTaskRepository
from ..tools.task_output_tool import TaskOutputTool
from ..tools.task_tool import TaskTool

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, llm: LLMClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    if llm is None:
        try:
            llm = OpenRouterLLMClient(settings)
        except RuntimeError as e:
            # Fallback for demos / local runs without external services.
            logger.info("Using offline LLM client: %s", e)
            llm = OfflineLLMClient()

    repository = DefaultTaskRepository(
        max_workers=settings.task_max_workers,
        shutdown_timeout_seconds=settings.task_shutdown_timeout_seconds,
    )

    return AppState(
        settings=settings,
        llm=llm,
        task_repository=repository,
        task_tool=TaskTool(repository, llm),
        task_output_tool=TaskOutputTool(
            repository,
            default_timeout_ms=settings.task_output_default_timeout_ms,
            max_timeout_ms=settings.task_output_max_timeout_ms,
        ),
    )
