# src/agent_tasks/tools/task_output_tool.py

from __future__ import annotations

"""
TaskOutput tool: report the status and output of a background task.

The report is built only from BackgroundTask accessors:

    Task ID: <id>
    Status: <Running|Completed|Failed: <message>|Cancelled>
    Result:
    <value>
    Error:
    <message>
    Cause: <nested message>
"""

import logging
from typing import Any

from ..core.ports import TaskRepository
from ..tasks.background_task import BackgroundTask

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000
MAX_TIMEOUT_MS = 600_000

TASK_OUTPUT_DESCRIPTION = """\
Retrieves output from a running or completed background task.

- Takes a task_id parameter identifying the task
- Returns the task output along with status information
- Use block=true (default) to wait for task completion
- Use block=false for a non-blocking check of current status
- Task IDs are returned by the Task tool when run_in_background is true
- The timeout is in milliseconds (default 30000, max 600000)"""


def format_task_report(task: BackgroundTask) -> str:
    lines = [f"Task ID: {task.task_id}", f"Status: {task.get_status()}"]

    if not task.is_completed():
        lines.append("")
        lines.append("Task still running...")
        return "\n".join(lines)

    result = task.get_result()
    if result:
        lines.append("")
        lines.append("Result:")
        lines.append(result)

    error = task.get_error()
    if error is not None:
        lines.append("")
        lines.append("Error:")
        lines.append(task.get_error_message() or "")
        cause = error.__cause__
        if cause is not None:
            lines.append(f"Cause: {str(cause) or cause.__class__.__name__}")

    return "\n".join(lines)


class TaskOutputTool:
    """Callable tool that renders the TaskOutput report for a task id."""

    name = "TaskOutput"

    def __init__(
        self,
        repository: TaskRepository,
        *,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_timeout_ms: int = MAX_TIMEOUT_MS,
        description: str = TASK_OUTPUT_DESCRIPTION,
    ) -> None:
        if repository is None:
            raise ValueError("repository must not be None")
        if not description or not description.strip():
            raise ValueError("description must not be empty")

        self._repository = repository
        self._max_timeout_ms = max(0, int(max_timeout_ms))
        self._default_timeout_ms = min(max(0, int(default_timeout_ms)), self._max_timeout_ms)
        self._description = description

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
                        "task_id": {"type": "string", "description": "The task ID to get output from"},
                        "block": {"type": "boolean", "description": "Whether to wait for completion"},
                        "timeout": {"type": "integer", "description": "Max wait time in ms"},
                    },
                    "required": ["task_id"],
                },
            },
        }

    def __call__(self, task_id: str, block: bool | None = None, timeout: int | None = None) -> str:
        task = self._repository.lookup(task_id)
        if task is None:
            return f"Error: No background task found with ID: {task_id}"

        if block is None or block:
            timeout_ms = self._default_timeout_ms if timeout is None else min(max(0, int(timeout)), self._max_timeout_ms)
            if not task.wait_for_completion(timeout_ms):
                logger.debug("TaskOutput: task_id=%s still running after %dms", task_id, timeout_ms)

        return format_task_report(task)
