# src/agent_tasks/tasks/interrupts.py

from __future__ import annotations

"""
Cooperative interruption for background work.

Threads cannot be interrupted from the outside, so every BackgroundTask owns an
Event that is bound to the worker thread while its work runs. Cancelling the
task with interruption sets the Event; work that wants to be stoppable calls
interrupted()/check_interrupted() or sleeps through sleep().

Work that never looks at the Event keeps running until it returns on its own.
"""

import threading
import time

from .task_models import TaskInterrupted

_local = threading.local()


def bind(event: threading.Event) -> None:
    _local.event = event


def unbind() -> None:
    _local.event = None


def current_event() -> threading.Event | None:
    """Interrupt event of the task running on this thread, if any."""
    return getattr(_local, "event", None)


def interrupted() -> bool:
    event = current_event()
    return event is not None and event.is_set()


def check_interrupted() -> None:
    if interrupted():
        raise TaskInterrupted("task was interrupted")


def sleep(seconds: float) -> None:
    """
    Sleep for up to `seconds`, waking early if the current task is interrupted.

    Raises TaskInterrupted when woken by an interrupt. Outside of a task this
    is a plain time.sleep().
    """
    event = current_event()
    if event is None:
        time.sleep(max(0.0, float(seconds)))
        return
    if event.wait(max(0.0, float(seconds))):
        raise TaskInterrupted("task was interrupted")
