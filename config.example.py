# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "AGENT_TASKS_APP_NAME": "App display name (default: agent-tasks).",
    "AGENT_TASKS_LOG_LEVEL": "Console logging level (default: INFO).",
    "AGENT_TASKS_DATA_DIR": "Local data directory for logs (default: .local/agent-tasks).",
    # LLM / OpenRouter
    "AGENT_TASKS_OPENROUTER_API_KEY": "OpenRouter API key (offline demo client is used when unset).",
    "AGENT_TASKS_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "AGENT_TASKS_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "AGENT_TASKS_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "AGENT_TASKS_APP_TITLE": "Optional OpenRouter metadata header title.",
    "AGENT_TASKS_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "AGENT_TASKS_LLM_READ_TIMEOUT_SECONDS": "Read timeout, never below the first-token timeout (default: 60).",
    "AGENT_TASKS_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Give up on a model after this long without output (default: 20).",
    # Background tasks
    "AGENT_TASKS_TASK_MAX_WORKERS": "Worker threads for background tasks (default: 0 = min(32, CPUs + 4)).",
    "AGENT_TASKS_TASK_SHUTDOWN_TIMEOUT_SECONDS": "Grace period for running tasks on exit (default: 60).",
    "AGENT_TASKS_TASK_OUTPUT_DEFAULT_TIMEOUT_MS": "TaskOutput wait when no timeout is given (default: 30000).",
    "AGENT_TASKS_TASK_OUTPUT_MAX_TIMEOUT_MS": "Upper bound for any TaskOutput wait (default: 600000).",
}
