# src/agent_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Malformed values fall back to defaults instead of failing at start-up.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "AGENT_TASKS"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- LLM / OpenRouter ----
    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    llm_models: List[str]
    extra_headers: Dict[str, str]
    llm_connect_timeout_seconds: float
    llm_read_timeout_seconds: float
    llm_first_token_timeout_seconds: float

    # ---- Background tasks ----
    task_max_workers: Optional[int]
    task_shutdown_timeout_seconds: float
    task_output_default_timeout_ms: int
    task_output_max_timeout_ms: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="agent-tasks") or "agent-tasks"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/agent-tasks"))

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        http_referer = _env(_k("HTTP_REFERER"), "https://example.com")
        title = _env(_k("APP_TITLE"), app_name)
        extra_headers = {
            "HTTP-Referer": http_referer,
            "X-Title": title,
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "qwen/qwen-2.5-72b-instruct:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ],
        )

        first_token = _env_float(_k("LLM_FIRST_TOKEN_TIMEOUT_SECONDS"), 20.0)
        read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)
        connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        # keep read >= first_token as a sane baseline
        read_timeout = max(read_timeout, first_token)

        # 0 or negative -> let the worker pool pick its default size
        max_workers_raw = _env_int(_k("TASK_MAX_WORKERS"), 0)
        task_max_workers = max_workers_raw if max_workers_raw > 0 else None

        task_shutdown_timeout_seconds = max(0.0, _env_float(_k("TASK_SHUTDOWN_TIMEOUT_SECONDS"), 60.0))

        task_output_max_timeout_ms = max(0, _env_int(_k("TASK_OUTPUT_MAX_TIMEOUT_MS"), 600_000))
        task_output_default_timeout_ms = min(
            max(0, _env_int(_k("TASK_OUTPUT_DEFAULT_TIMEOUT_MS"), 30_000)),
            task_output_max_timeout_ms,
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            llm_connect_timeout_seconds=connect_timeout,
            llm_read_timeout_seconds=read_timeout,
            llm_first_token_timeout_seconds=first_token,
            task_max_workers=task_max_workers,
            task_shutdown_timeout_seconds=task_shutdown_timeout_seconds,
            task_output_default_timeout_ms=task_output_default_timeout_ms,
            task_output_max_timeout_ms=task_output_max_timeout_ms,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
