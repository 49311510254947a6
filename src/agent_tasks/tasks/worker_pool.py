# src/agent_tasks/tasks/worker_pool.py

from __future__ import annotations

"""
Thread pool whose workers are daemon threads.

concurrent.futures.ThreadPoolExecutor joins its workers at interpreter exit,
so one piece of work that ignores its interrupt keeps the process alive.
Background tasks run here instead: once the repository has shut the pool down,
whatever is still running is abandoned when the process exits.
"""

import itertools
import logging
import os
import queue
import threading
from concurrent.futures import Executor, Future

logger = logging.getLogger(__name__)

_WorkItem = tuple[Future, object, tuple, dict]

_pool_counter = itertools.count()


class DaemonThreadPoolExecutor(Executor):
    """Executor with the ThreadPoolExecutor submit/shutdown contract and daemon workers."""

    def __init__(self, max_workers: int | None = None, thread_name_prefix: str = "") -> None:
        if max_workers is None:
            max_workers = min(32, (os.cpu_count() or 1) + 4)
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than 0")

        self._max_workers = max_workers
        self._thread_name_prefix = thread_name_prefix or f"DaemonThreadPoolExecutor-{next(_pool_counter)}"
        self._work_queue: queue.SimpleQueue[_WorkItem | None] = queue.SimpleQueue()
        self._idle = threading.Semaphore(0)
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._shutdown = False

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def submit(self, fn, /, *args, **kwargs) -> Future:
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new futures after shutdown")

            future: Future = Future()
            self._work_queue.put((future, fn, args, kwargs))
            self._adjust_thread_count()
            return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        with self._lock:
            self._shutdown = True
            if cancel_futures:
                while True:
                    try:
                        item = self._work_queue.get_nowait()
                    except queue.Empty:
                        break
                    if item is not None:
                        item[0].cancel()
            # Wakes one idle worker; each worker passes it on before exiting.
            self._work_queue.put(None)
            threads = list(self._threads)

        if wait:
            for t in threads:
                t.join()

    def _adjust_thread_count(self) -> None:
        # Reuse an idle worker when there is one.
        if self._idle.acquire(timeout=0):
            return
        if len(self._threads) >= self._max_workers:
            return

        t = threading.Thread(
            target=self._worker,
            name=f"{self._thread_name_prefix}_{len(self._threads)}",
            daemon=True,
        )
        t.start()
        self._threads.append(t)

    def _worker(self) -> None:
        while True:
            item = self._work_queue.get()
            if item is None:
                self._work_queue.put(None)
                return

            future, fn, args, kwargs = item
            if future.set_running_or_notify_cancel():
                try:
                    result = fn(*args, **kwargs)
                except BaseException as e:
                    future.set_exception(e)
                else:
                    future.set_result(result)
            del item, future, fn, args, kwargs

            self._idle.release()
