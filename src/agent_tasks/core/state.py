# src/agent_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tools.task_output_tool import TaskOutputTool
from ..tools.task_tool import TaskTool
from .ports import LLMClient, TaskRepository


@dataclass(slots=True)
class AppState:
    # Settings object (real Settings or a test stand-in).
    settings: Any

    llm: LLMClient
    task_repository: TaskRepository
    task_tool: TaskTool
    task_output_tool: TaskOutputTool

    default_subagent: str = "general-purpose"
