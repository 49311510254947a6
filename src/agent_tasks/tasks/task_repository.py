# src/agent_tasks/tasks/task_repository.py

from __future__ import annotations

"""
In-memory registry of background tasks.

Maps task ids to BackgroundTask handles and runs their work on a worker pool.
The pool is either created (and therefore owned) by the repository, or handed
in by the caller, in which case the repository never shuts it down.

Registry operations only touch the map. They never wait for work to finish and
never cancel it; removing or replacing an entry leaves the old handle usable by
whoever still holds it.
"""

import logging
import threading
from concurrent import futures
from concurrent.futures import Executor, Future

from .background_task import BackgroundTask, TaskWork
from .worker_pool import DaemonThreadPoolExecutor

logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_TIMEOUT_SECONDS = 60.0


class DefaultTaskRepository:
    """Thread-safe TaskRepository backed by a dict and a daemon thread pool."""

    def __init__(
        self,
        executor: Executor | None = None,
        *,
        owns_executor: bool | None = None,
        max_workers: int | None = None,
        shutdown_timeout_seconds: float = DEFAULT_SHUTDOWN_TIMEOUT_SECONDS,
    ) -> None:
        if executor is None:
            executor = DaemonThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix="background-task",
            )
            owns_executor = True if owns_executor is None else owns_executor

        self._executor = executor
        self._owns_executor = bool(owns_executor)
        self._shutdown_timeout_s = max(0.0, float(shutdown_timeout_seconds))

        self._lock = threading.Lock()
        self._submit_lock = threading.Lock()
        self._tasks: dict[str, BackgroundTask] = {}
        # Work handed to the pool and not finished yet, orphans included.
        self._running: dict[Future, BackgroundTask] = {}
        self._shut_down = False

    @property
    def owns_executor(self) -> bool:
        return self._owns_executor

    # ---- registry ----

    def submit(self, task_id: str, work: TaskWork) -> BackgroundTask:
        """
        Start `work` in the background under `task_id` and return its handle.

        An existing entry with the same id is replaced; its work is left running.
        """
        # Handing work to the pool and tracking it is atomic with respect to
        # shutdown, so nothing accepted by the pool escapes the drain.
        with self._submit_lock:
            task = BackgroundTask.start(task_id, work, self._executor)
            execution = task.execution
            if execution is not None:
                with self._lock:
                    self._running[execution] = task

        if execution is not None:
            execution.add_done_callback(self._forget_execution)

        with self._lock:
            previous = self._tasks.get(task_id)
            self._tasks[task_id] = task

        if previous is not None and not previous.is_completed():
            logger.info("Task id %s resubmitted; previous work keeps running orphaned", task_id)
        logger.debug("Submitted task_id=%s", task_id)
        return task

    def lookup(self, task_id: str) -> BackgroundTask | None:
        with self._lock:
            return self._tasks.get(task_id)

    def remove(self, task_id: str) -> None:
        with self._lock:
            self._tasks.pop(task_id, None)

    def remove_completed(self) -> int:
        """Drop every settled task, keep running ones. Returns how many were dropped."""
        with self._lock:
            done = [tid for tid, task in self._tasks.items() if task.is_completed()]
            for tid in done:
                del self._tasks[tid]

        if done:
            logger.debug("Removed %d completed task(s)", len(done))
        return len(done)

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()

    def task_ids(self) -> list[str]:
        with self._lock:
            return list(self._tasks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._tasks

    # ---- lifecycle ----

    def shutdown(self) -> None:
        """
        Stop the owned worker pool.

        - stop accepting work,
        - wait up to shutdown_timeout_seconds for in-flight work,
        - then cancel queued work and interrupt running work.

        A KeyboardInterrupt while waiting forces the last step immediately and
        is re-raised. Does nothing for an executor the repository does not own.
        """
        if not self._owns_executor:
            return

        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True

        with self._submit_lock:
            self._executor.shutdown(wait=False)
        with self._lock:
            pending = list(self._running)

        try:
            _, not_done = futures.wait(pending, timeout=self._shutdown_timeout_s)
        except KeyboardInterrupt:
            logger.warning("Interrupted while draining background tasks; forcing shutdown")
            self._force_shutdown()
            raise

        if not_done:
            logger.warning(
                "%d background task(s) still running after %.1fs; forcing shutdown",
                len(not_done),
                self._shutdown_timeout_s,
            )
            self._force_shutdown()
        else:
            logger.debug("Background task pool drained")

    def _force_shutdown(self) -> None:
        with self._lock:
            running = list(self._running.values())

        self._executor.shutdown(wait=False, cancel_futures=True)

        for task in running:
            # A task settled early by set_result() may still have live work.
            if not task.cancel(True):
                task.interrupt()

    def _forget_execution(self, execution: Future) -> None:
        with self._lock:
            self._running.pop(execution, None)

    def __enter__(self) -> DefaultTaskRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
