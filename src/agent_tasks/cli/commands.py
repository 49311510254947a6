# src/agent_tasks/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /task, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    repo = state.task_repository
    tasks = [t for t in (repo.lookup(tid) for tid in repo.task_ids()) if t is not None]
    running = sum(1 for t in tasks if not t.is_completed())
    models = ", ".join(list(getattr(state.settings, "llm_models", []) or []))
    workers = getattr(state.settings, "task_max_workers", None) or "auto"
    return (
        "Status:\n"
        f"  LLM: {state.llm.__class__.__name__}\n"
        f"  Models (priority -> fallback): {models}\n"
        f"  Workers: {workers}\n"
        f"  Tasks: {len(tasks)} tracked, {running} running"
    )


def cmd_agents(state: AppState, args: list[str]) -> str:
    lines = ["Subagents:"]
    for agent in state.task_tool.subagents:
        lines.append(f"  {agent.to_prompt_content()[2:]}")
    return "\n".join(lines)


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task <subagent> <prompt...>  -> run the prompt in the background
    """
    if len(args) < 2:
        return "Usage: /task <subagent> <prompt...>"

    prompt = " ".join(args[1:])
    return state.task_tool(
        description=prompt[:40],
        prompt=prompt,
        subagent_type=args[0],
        run_in_background=True,
    )


def cmd_output(state: AppState, args: list[str]) -> str:
    """
    /output <task_id>             -> wait (default timeout) and show output
    /output <task_id> <timeout>   -> wait up to <timeout> ms
    """
    if not args:
        return "Usage: /output <task_id> [timeout_ms]"

    timeout: int | None = None
    if len(args) > 1:
        try:
            timeout = int(args[1])
        except ValueError:
            return f"Invalid timeout: {args[1]!r} (expected milliseconds)."

    return state.task_output_tool(args[0], block=True, timeout=timeout)


def cmd_peek(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /peek <task_id>"
    return state.task_output_tool(args[0], block=False)


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /cancel <task_id>"

    task = state.task_repository.lookup(args[0])
    if task is None:
        return f"Error: No background task found with ID: {args[0]}"
    if task.cancel(True):
        logger.info("Task %s cancelled from console", task.task_id)
        return f"Task {task.task_id} cancelled."
    return f"Task {task.task_id} already finished ({task.get_status()})."


def cmd_forget(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /forget <task_id>"
    state.task_repository.remove(args[0])
    return f"Task {args[0]} removed."


def cmd_tasks(state: AppState, args: list[str]) -> str:
    repo = state.task_repository
    lines: list[str] = []
    for tid in sorted(repo.task_ids()):
        task = repo.lookup(tid)
        if task is not None:
            lines.append(f"  {tid}: {task.get_status()}")
    if not lines:
        return "No background tasks."
    return "Background tasks:\n" + "\n".join(lines)


def cmd_clean(state: AppState, args: list[str]) -> str:
    removed = state.task_repository.remove_completed()
    return f"Removed {removed} finished task(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show LLM and task pool status.")
registry.register("agents", cmd_agents, help_text="List subagent types.")
registry.register("task", cmd_task, help_text="Run a prompt in the background: /task <subagent> <prompt...>.")
registry.register("output", cmd_output, help_text="Wait for a task and show it: /output <task_id> [timeout_ms].")
registry.register("peek", cmd_peek, help_text="Show a task without waiting: /peek <task_id>.")
registry.register("cancel", cmd_cancel, help_text="Cancel a task: /cancel <task_id>.")
registry.register("forget", cmd_forget, help_text="Remove a task from the list: /forget <task_id>.")
registry.register("tasks", cmd_tasks, help_text="List background tasks.", aliases=["ls"])
registry.register("clean", cmd_clean, help_text="Remove finished tasks from the list.")
