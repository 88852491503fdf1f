# src/cron_todotxt/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .ports import TaskAdder


@dataclass(slots=True)
class AppState:
    # Settings object (cron_todotxt.config.Settings, or a stand-in in tests).
    settings: object

    todo_file: Path
    scheduled_file: Path
    adder: TaskAdder
