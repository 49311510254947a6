# src/agent_tasks/tools/task_tool.py

from __future__ import annotations

"""
Task tool: hand a prompt to a specialized subagent.

A subagent is an LLM call with its own system prompt. The tool either runs it
inline and returns the answer, or submits it to the TaskRepository and returns
a task id right away; TaskOutput is then used to collect the answer.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..core.ports import LLMClient, TaskRepository
from ..tasks import interrupts

logger = logging.getLogger(__name__)

TASK_ID_PREFIX = "task_"


@dataclass(slots=True, frozen=True)
class SubagentType:
    name: str
    description: str
    system_prompt: str
    # Advertised in the tool description only; subagents run as plain completions.
    tools: tuple[str, ...] = ()
    model: str | None = None

    def to_prompt_content(self) -> str:
        tools = ", ".join(self.tools) if self.tools else "*"
        return f"- {self.name}: {self.description} (Tools: {tools})"


GENERAL_PURPOSE = SubagentType(
    name="general-purpose",
    description=(
        "General-purpose agent for researching complex questions, searching for code, "
        "and executing multi-step tasks."
    ),
    system_prompt=(
        "You are a general-purpose agent working on a task delegated by another agent.\n"
        "Complete the task fully, then reply with a concise report of what you found or did. "
        "The caller only sees your final message."
    ),
)

EXPLORE = SubagentType(
    name="Explore",
    description=(
        "Fast agent specialized for exploring codebases: finding files by pattern, "
        "searching code for keywords, answering questions about the codebase."
    ),
    system_prompt=(
        "You are a read-only exploration agent.\n"
        "Answer the question with concrete file paths and short excerpts. "
        "Do not propose or make changes."
    ),
)

BUILTIN_SUBAGENTS: tuple[SubagentType, ...] = (GENERAL_PURPOSE, EXPLORE)

TASK_DESCRIPTION_TEMPLATE = """\
Launch a new agent to handle complex, multi-step tasks autonomously.

Available agent types and the tools they have access to:
{subagents}

When using the Task tool, you must specify a subagent_type parameter to select which agent type to use.

Usage notes:
- Always include a short description (3-5 words) summarizing what the agent will do
- Launch multiple agents concurrently whenever possible
- The result returned by the agent is not visible to the user. Summarize it in your reply.
- Set run_in_background to true to run the agent in the background. The Task tool then returns a task_id \
immediately; use the TaskOutput tool with that task_id to check status and retrieve results.
- Provide clear, detailed prompts so the agent can work autonomously and return exactly the information you need."""


class TaskTool:
    """Callable tool that dispatches prompts to subagents, inline or in the background."""

    name = "Task"

    def __init__(
        self,
        repository: TaskRepository,
        llm: LLMClient,
        subagents: Iterable[SubagentType] | None = None,
        *,
        description_template: str = TASK_DESCRIPTION_TEMPLATE,
    ) -> None:
        if repository is None:
            raise ValueError("repository must not be None")
        if llm is None:
            raise ValueError("llm must not be None")
        if not description_template or not description_template.strip():
            raise ValueError("description_template must not be empty")

        agents = list(BUILTIN_SUBAGENTS if subagents is None else subagents)
        if not agents:
            raise ValueError("At least one subagent type must be configured")

        self._repository = repository
        self._llm = llm
        # Later definitions override earlier ones with the same name.
        self._subagents: dict[str, SubagentType] = {a.name: a for a in agents}
        self._description = description_template.format(
            subagents="\n".join(a.to_prompt_content() for a in self._subagents.values())
        )

    @property
    def subagents(self) -> list[SubagentType]:
        return list(self._subagents.values())

    @property
    def description(self) -> str:
        return self._description

    @property
    def spec(self) -> dict[str, Any]:
        """OpenAI function-calling schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self._description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        "description": {
                            "type": "string",
                            "description": "A short (3-5 word) description of the task",
                        },
                        "prompt": {"type": "string", "description": "The task for the agent to perform"},
                        "subagent_type": {
                            "type": "string",
                            "enum": list(self._subagents),
                            "description": "The type of specialized agent to use for this task",
                        },
                        "model": {
                            "type": "string",
                            "description": "Optional model to use for this agent. Inherits from parent if omitted.",
                        },
                        "resume": {
                            "type": "string",
                            "description": "Optional agent ID to resume from.",
                        },
                        "run_in_background": {
                            "type": "boolean",
                            "description": "Run this agent in the background. Use TaskOutput to read the output later.",
                        },
                    },
                    "required": ["description", "prompt", "subagent_type"],
                },
            },
        }

    def __call__(
        self,
        *,
        description: str,
        prompt: str,
        subagent_type: str,
        model: str | None = None,
        resume: str | None = None,
        run_in_background: bool | None = False,
    ) -> str:
        subagent = self._subagents.get(subagent_type)
        if subagent is None:
            return f"Error: Unknown subagent type: {subagent_type}"

        if model:
            logger.warning("Task model override is not supported yet. model = %s", model)
        if resume:
            logger.warning("Task resume is not supported yet. resume = %s", resume)

        if run_in_background:
            task_id = f"{TASK_ID_PREFIX}{uuid.uuid4()}"
            self._repository.submit(task_id, lambda: self.run_subagent(subagent, prompt))
            logger.info("Task %r started in background as %s (agent=%s)", description, task_id, subagent.name)
            return (
                f"task_id: {task_id}\n\n"
                f"Background task started with ID: {task_id}\n"
                f"Use TaskOutput tool with task_id='{task_id}' to retrieve results."
            )

        logger.info("Task %r running inline (agent=%s)", description, subagent.name)
        return self.run_subagent(subagent, prompt)

    def run_subagent(self, subagent: SubagentType, prompt: str) -> str:
        if subagent.model:
            logger.warning("The subagent model override is not supported yet. model = %s", subagent.model)

        pieces: list[str] = []
        for piece in self._llm.stream_chat([{"role": "user", "content": prompt}], subagent.system_prompt):
            # Background runs stop between chunks once cancelled.
            interrupts.check_interrupted()
            pieces.append(piece)
        return "".join(pieces)
