# src/agent_tasks/tasks/background_task.py

from __future__ import annotations

"""
BackgroundTask: handle around one asynchronous computation.

The outcome is a settle-once cell guarded by a Condition:
- the worker settles it with Success/Failure when the work returns or raises,
- set_result() and cancel() race the worker for the same slot,
- whichever writer gets there first wins; later writers are ignored.

Readers never see a partially written outcome: settlement and notification
happen under the same lock that readers and waiters use.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future

from . import interrupts
from .task_models import Cancelled, Failure, Outcome, Success, TaskState

logger = logging.getLogger(__name__)

TaskWork = Callable[[], str | None]
DoneCallback = Callable[["BackgroundTask"], None]


class BackgroundTask:
    """
    Tracks the lifecycle and outcome of a single unit of background work.

    Use BackgroundTask.start(...) (or DefaultTaskRepository.submit(...)) to
    create a running task. The handle works on its own: it does not need to
    stay registered anywhere to be queried, waited on or cancelled.
    """

    def __init__(self, task_id: str, work: TaskWork) -> None:
        self._task_id = task_id
        self._work = work
        self._cond = threading.Condition()
        self._outcome: Outcome | None = None
        self._interrupt = threading.Event()
        self._execution: Future | None = None
        self._callbacks: list[DoneCallback] = []

    @classmethod
    def start(cls, task_id: str, work: TaskWork, executor: Executor) -> BackgroundTask:
        """
        Create a task and hand its work to `executor` right away.

        Never raises: if the executor refuses the work (e.g. it was shut down),
        the task settles as a failure carrying that error.
        """
        task = cls(task_id, work)
        try:
            task._execution = executor.submit(task._run)
        except RuntimeError as e:
            logger.warning("Executor rejected task_id=%s: %s", task_id, e)
            task._settle(Failure(e))
        return task

    # ---- identity ----

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def state(self) -> TaskState:
        outcome = self._outcome
        return TaskState.RUNNING if outcome is None else outcome.state

    @property
    def execution(self) -> Future | None:
        """Executor-side future of the work (None if it was never accepted)."""
        return self._execution

    # ---- status ----

    def is_completed(self) -> bool:
        return self._outcome is not None

    def is_cancelled(self) -> bool:
        return isinstance(self._outcome, Cancelled)

    def has_error(self) -> bool:
        return isinstance(self._outcome, Failure)

    def get_result(self) -> str | None:
        """Success value, or None while running / after failure or cancellation."""
        outcome = self._outcome
        if isinstance(outcome, Success):
            return outcome.value
        return None

    def get_error(self) -> BaseException | None:
        outcome = self._outcome
        if isinstance(outcome, Failure):
            return outcome.error
        return None

    def get_error_message(self) -> str | None:
        error = self.get_error()
        if error is None:
            return None
        return str(error) or error.__class__.__name__

    def get_status(self) -> str:
        """Running | Completed | Failed: <message> | Cancelled"""
        outcome = self._outcome
        if outcome is None:
            return "Running"
        if isinstance(outcome, Failure):
            return f"Failed: {self.get_error_message()}"
        if isinstance(outcome, Cancelled):
            return "Cancelled"
        return "Completed"

    # ---- control ----

    def set_result(self, value: str | None) -> bool:
        """
        Complete the task now with `value`.

        The work keeps running if it already started, but its eventual outcome
        is discarded. Returns False if the task had already settled.
        """
        return self._settle(Success(value))

    def cancel(self, may_interrupt_if_running: bool = True) -> bool:
        """
        Settle the task as cancelled.

        Queued work will never start. Running work gets its interrupt event set
        when may_interrupt_if_running is true; it stops only if it checks it.
        Returns False if the task had already settled.
        """
        if not self._settle(Cancelled()):
            return False

        execution = self._execution
        if execution is not None:
            execution.cancel()
        if may_interrupt_if_running:
            self._interrupt.set()

        logger.debug("Task %s cancelled (interrupt=%s)", self._task_id, may_interrupt_if_running)
        return True

    def interrupt(self) -> None:
        """Deliver the interrupt signal to the work without touching the outcome."""
        self._interrupt.set()

    def wait_for_completion(self, timeout_ms: float | None = None) -> bool:
        """
        Block until the task settles or `timeout_ms` elapses.

        Returns True if the task is settled (failures and cancellation count),
        False on timeout. None waits without a limit. KeyboardInterrupt raised
        in the waiting thread propagates to the caller.
        """
        with self._cond:
            if self._outcome is not None:
                return True
            timeout = None if timeout_ms is None else max(0.0, float(timeout_ms) / 1000.0)
            return self._cond.wait_for(lambda: self._outcome is not None, timeout=timeout)

    def add_done_callback(self, fn: DoneCallback) -> None:
        """Call fn(task) once the task settles (immediately if it already has)."""
        with self._cond:
            if self._outcome is None:
                self._callbacks.append(fn)
                return
        self._invoke_callback(fn)

    # ---- internals ----

    def _settle(self, outcome: Outcome) -> bool:
        with self._cond:
            if self._outcome is not None:
                return False
            self._outcome = outcome
            callbacks, self._callbacks = self._callbacks, []
            self._cond.notify_all()

        for fn in callbacks:
            self._invoke_callback(fn)
        return True

    def _invoke_callback(self, fn: DoneCallback) -> None:
        try:
            fn(self)
        except Exception:
            logger.exception("Done callback failed task_id=%s", self._task_id)

    def _run(self) -> None:
        # Cancelled (or given a result) before a worker picked it up.
        if self._outcome is not None:
            return

        interrupts.bind(self._interrupt)
        try:
            value = self._work()
        except Exception as e:
            if self._settle(Failure(e)):
                logger.debug("Task %s failed: %s", self._task_id, e.__class__.__name__)
        except BaseException as e:
            self._settle(Failure(e))
            raise
        else:
            self._settle(Success(value))
        finally:
            interrupts.unbind()

    def __repr__(self) -> str:
        return f"BackgroundTask(task_id={self._task_id!r}, state={self.state.value})"
