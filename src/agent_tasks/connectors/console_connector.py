# src/agent_tasks/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..llm.client import friendly_llm_error_message

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    - "/..." lines are slash commands (/task, /output, /cancel, ...)
    - anything else runs the default subagent inline and prints its answer
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a prompt, or /help for commands. Use /exit to quit.\n")

    app_name = str(getattr(state.settings, "app_name", "agent-tasks"))

    while True:
        try:
            user_input = input(">>> You: ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = command_registry.handle(state, user_input)
        except KeyboardInterrupt:
            # Ctrl+C during a blocking /output only stops the wait, not the task.
            _print_ts("[CONSOLE] Wait interrupted.")
            continue
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        try:
            reply = state.task_tool(
                description=user_input[:40],
                prompt=user_input,
                subagent_type=state.default_subagent,
            )
        except KeyboardInterrupt:
            _print_ts("[CONSOLE] Interrupted.")
            continue
        except RuntimeError as e:
            msg = friendly_llm_error_message(e)
            logger.info("LLM runtime error: %s", msg)
            _print_ts(f"[LLM] {msg}")
            continue
        except Exception:
            logger.exception("Console task handler crashed.")
            _print_ts("Internal error while generating a reply.")
            continue

        if not reply:
            _print_ts("[LLM] No output (model produced no content).")
            continue

        _print_ts(f"<<< {app_name}: {reply}\n")

    logger.info("Console connector finished.")
