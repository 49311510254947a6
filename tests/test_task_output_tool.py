# tests/test_task_output_tool.py

from __future__ import annotations

import time

import pytest

from agent_tasks.tasks import interrupts
from agent_tasks.tools.task_output_tool import TaskOutputTool, format_task_report


def _long_sleep() -> str:
    interrupts.sleep(10)
    return "slept"


def test_unknown_task_id(repository) -> None:
    tool = TaskOutputTool(repository)

    assert tool("missing-task") == "Error: No background task found with ID: missing-task"


def test_completed_task_report(repository) -> None:
    repository.submit("task-123", lambda: "Task completed successfully")
    tool = TaskOutputTool(repository)

    out = tool("task-123", block=True, timeout=2000)

    assert out == (
        "Task ID: task-123\n"
        "Status: Completed\n"
        "\n"
        "Result:\n"
        "Task completed successfully"
    )


def test_empty_result_has_no_result_section(repository) -> None:
    task = repository.submit("quiet", lambda: None)
    task.wait_for_completion(2000)

    out = TaskOutputTool(repository)("quiet", block=False)

    assert out == "Task ID: quiet\nStatus: Completed"
    assert "Result:" not in out


def test_non_blocking_check_on_running_task(repository) -> None:
    repository.submit("slow", _long_sleep)
    tool = TaskOutputTool(repository)

    t0 = time.monotonic()
    out = tool("slow", block=False)

    assert time.monotonic() - t0 < 1
    assert out == "Task ID: slow\nStatus: Running\n\nTask still running..."


def test_blocking_waits_for_completion(repository) -> None:
    repository.submit("sleepy", lambda: time.sleep(0.2) or "woke up")
    tool = TaskOutputTool(repository)

    out = tool("sleepy", block=True, timeout=3000)

    assert "Status: Completed" in out
    assert out.endswith("Result:\nwoke up")


def test_block_defaults_to_true(repository) -> None:
    repository.submit("implicit", lambda: time.sleep(0.1) or "done")
    tool = TaskOutputTool(repository, default_timeout_ms=3000)

    out = tool("implicit")

    assert "Status: Completed" in out
    assert "Result:\ndone" in out


def test_timeout_is_capped(repository) -> None:
    repository.submit("capped", _long_sleep)
    tool = TaskOutputTool(repository, default_timeout_ms=50, max_timeout_ms=100)

    t0 = time.monotonic()
    out = tool("capped", block=True, timeout=999_999)
    elapsed = time.monotonic() - t0

    assert elapsed < 2
    assert "Status: Running" in out
    assert "Task still running..." in out


def test_failed_task_report_includes_cause(repository) -> None:
    def work() -> str:
        raise RuntimeError("Wrapper exception") from ValueError("Root cause message")

    repository.submit("broken", work)
    out = TaskOutputTool(repository)("broken", timeout=2000)

    assert out == (
        "Task ID: broken\n"
        "Status: Failed: Wrapper exception\n"
        "\n"
        "Error:\n"
        "Wrapper exception\n"
        "Cause: Root cause message"
    )


def test_failed_task_without_cause(repository) -> None:
    def work() -> str:
        raise ValueError("bad input")

    repository.submit("plain-failure", work)
    out = TaskOutputTool(repository)("plain-failure", timeout=2000)

    assert out.endswith("Error:\nbad input")
    assert "Cause:" not in out


def test_cancelled_task_report(repository) -> None:
    task = repository.submit("stopped", _long_sleep)
    task.cancel(True)

    out = TaskOutputTool(repository)("stopped", block=False)

    assert out == "Task ID: stopped\nStatus: Cancelled"


def test_format_report_reads_handle_state(repository) -> None:
    task = repository.submit("direct", _long_sleep)
    task.set_result("early")

    assert format_task_report(task) == "Task ID: direct\nStatus: Completed\n\nResult:\nearly"


def test_requires_repository() -> None:
    with pytest.raises(ValueError):
        TaskOutputTool(None)  # type: ignore[arg-type]


def test_requires_description(repository) -> None:
    with pytest.raises(ValueError):
        TaskOutputTool(repository, description="  ")


def test_function_schema(repository) -> None:
    tool = TaskOutputTool(repository)
    spec = tool.spec

    assert tool.name == "TaskOutput"
    assert spec["function"]["name"] == "TaskOutput"
    assert spec["function"]["parameters"]["required"] == ["task_id"]
    assert set(spec["function"]["parameters"]["properties"]) == {"task_id", "block", "timeout"}
