# tests/test_commands.py

from __future__ import annotations

import re

from agent_tasks.cli.commands import CommandRegistry, registry


def _task_id(reply: str) -> str:
    m = re.search(r"task_id: (task_\S+)", reply)
    assert m, reply
    return m.group(1)


def test_command_registry_routes_args_and_aliases(state) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def handler(state, args):
        seen.append(args)
        return "ok"

    reg.register("Echo", handler, "echo args", aliases=["e"])

    assert reg.handle(state, "/echo a b") == "ok"
    assert reg.handle(state, "/E c") == "ok"
    assert seen == [["a", "b"], ["c"]]
    assert reg.build_help() == "Available commands:\n  /echo - echo args"


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_help_lists_commands(state) -> None:
    out = registry.handle(state, "/help") or ""

    for name in ("task", "output", "peek", "cancel", "tasks", "clean"):
        assert f"/{name} - " in out
    assert registry.handle(state, "/?") == out


def test_agents_lists_subagents(state) -> None:
    out = registry.handle(state, "/agents") or ""

    assert out.startswith("Subagents:")
    assert "  general-purpose: " in out
    assert "  Explore: " in out


def test_task_then_output(state, llm) -> None:
    reply = registry.handle(state, "/task Explore where is main") or ""
    task_id = _task_id(reply)

    out = registry.handle(state, f"/output {task_id} 2000") or ""

    assert out == f"Task ID: {task_id}\nStatus: Completed\n\nResult:\nsubagent answer"
    assert llm.calls[0][0] == [{"role": "user", "content": "where is main"}]


def test_task_usage_and_unknown_subagent(state) -> None:
    assert registry.handle(state, "/task Explore") == "Usage: /task <subagent> <prompt...>"
    assert registry.handle(state, "/task Nobody do it") == "Error: Unknown subagent type: Nobody"


def test_output_rejects_bad_timeout(state) -> None:
    out = registry.handle(state, "/output task_x soon") or ""
    assert out.startswith("Invalid timeout: 'soon'")


def test_output_and_peek_unknown_task(state) -> None:
    assert registry.handle(state, "/output missing") == "Error: No background task found with ID: missing"
    assert registry.handle(state, "/peek missing") == "Error: No background task found with ID: missing"


def test_cancel_running_and_finished(state, release) -> None:
    repo = state.task_repository
    running = repo.submit("running", lambda: release.wait(5) and "late")
    done = repo.submit("done", lambda: "ok")
    assert done.wait_for_completion(2000)

    assert registry.handle(state, "/cancel running") == "Task running cancelled."
    assert running.is_cancelled()
    assert registry.handle(state, "/cancel done") == "Task done already finished (Completed)."
    assert registry.handle(state, "/cancel nope") == "Error: No background task found with ID: nope"

    release.set()


def test_tasks_forget_and_clean(state, release) -> None:
    repo = state.task_repository
    assert registry.handle(state, "/tasks") == "No background tasks."

    repo.submit("b-slow", lambda: release.wait(5) and "late")
    fast = repo.submit("a-fast", lambda: "ok")
    assert fast.wait_for_completion(2000)

    assert registry.handle(state, "/ls") == (
        "Background tasks:\n"
        "  a-fast: Completed\n"
        "  b-slow: Running"
    )

    assert registry.handle(state, "/clean") == "Removed 1 finished task(s)."
    assert registry.handle(state, "/forget b-slow") == "Task b-slow removed."
    assert registry.handle(state, "/tasks") == "No background tasks."

    release.set()


def test_status_reports_pool(state) -> None:
    out = registry.handle(state, "/status") or ""

    assert "LLM: FakeLLMClient" in out
    assert "Models (priority -> fallback): fake/model" in out
    assert "Workers: 8" in out
    assert "Tasks: 0 tracked, 0 running" in out
