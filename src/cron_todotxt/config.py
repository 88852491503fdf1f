# src/cron_todotxt/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Works as a todo.sh add-on: TODO_DIR / TODO_FILE / TODO_FULL_SH are the
  variables todo.sh exports to its actions.
- Everything else uses the CRON_TODOTXT_ prefix.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "CRON_TODOTXT"

SCHEDULED_FILE_NAME = "scheduled.txt"

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


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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
    log_dir: Path
    log_to_file: bool

    # ---- todo.txt ----
    todo_dir: Path
    todo_file: Path
    scheduled_file: Path
    todo_sh: str

    # ---- Interactive ----
    editor: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "cron-todotxt")
        log_level = _env(_k("LOG_LEVEL"), "INFO").upper()
        log_dir = _env_path(_k("LOG_DIR"), Path("~/.local/state/cron-todotxt").expanduser())
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        todo_dir = _env_path("TODO_DIR", Path("~/.todo").expanduser())
        todo_file = _env_path("TODO_FILE", todo_dir / "todo.txt")
        scheduled_file = _env_path(_k("SCHEDULED_FILE"), todo_dir / SCHEDULED_FILE_NAME)
        todo_sh = _first_env("TODO_FULL_SH", _k("TODO_SH"), default="/usr/bin/todo-txt") or "/usr/bin/todo-txt"

        editor = _first_env(_k("EDITOR"), "VISUAL", "EDITOR", default="editor") or "editor"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            log_to_file=log_to_file,
            todo_dir=todo_dir,
            todo_file=todo_file,
            scheduled_file=scheduled_file,
            todo_sh=todo_sh,
            editor=editor,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
