# tests/conftest.py

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import SimpleNamespace

import pytest

from agent_tasks.cli.bootstrap import create_initial_state
from agent_tasks.core.state import AppState
from agent_tasks.tasks.task_repository import DefaultTaskRepository

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the tools.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="agent-tasks-test",
        data_dir=tmp_path / "data",
        llm_models=["fake/model"],
        task_max_workers=8,
        task_shutdown_timeout_seconds=0.5,
        task_output_default_timeout_ms=2_000,
        task_output_max_timeout_ms=5_000,
    )


@pytest.fixture()
def release() -> threading.Event:
    """Gate that blocked test work waits on; set during teardown so nothing is left hanging."""
    return threading.Event()


@pytest.fixture()
def executor(release: threading.Event):
    pool = ThreadPoolExecutor(max_workers=8, thread_name_prefix="test-task")
    yield pool
    release.set()
    pool.shutdown(wait=True, cancel_futures=True)


@pytest.fixture()
def repository(release: threading.Event):
    """
    Owned-pool repository with a short grace period.

    Shutdown interrupts anything still running, so tests may leave
    interruptible work behind.
    """
    repo = DefaultTaskRepository(shutdown_timeout_seconds=0.5)
    yield repo
    release.set()
    repo.shutdown()


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient("subagent answer")


@pytest.fixture()
def state(settings: SimpleNamespace, llm: FakeLLMClient):
    """AppState wired through the real bootstrap with a fake LLM."""
    app_state: AppState = create_initial_state(settings=settings, llm=llm)
    yield app_state
    app_state.task_repository.shutdown()
