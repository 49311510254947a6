# src/agent_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskState(StrEnum):
    """
    Lifecycle of a background task.

    RUNNING is the only initial state. The other three are terminal and
    mutually exclusive.
    """

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskState.RUNNING


class TaskInterrupted(Exception):
    """Raised inside running work when its task was cancelled with interruption."""


@dataclass(slots=True, frozen=True)
class Success:
    value: str | None

    @property
    def state(self) -> TaskState:
        return TaskState.SUCCEEDED


@dataclass(slots=True, frozen=True)
class Failure:
    # The exception raised by the work, stored as-is.
    error: BaseException

    @property
    def state(self) -> TaskState:
        return TaskState.FAILED


@dataclass(slots=True, frozen=True)
class Cancelled:
    @property
    def state(self) -> TaskState:
        return TaskState.CANCELLED


Outcome = Success | Failure | Cancelled
