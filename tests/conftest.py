# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from cron_todotxt.core.state import AppState

from .fakes import FakeTaskAdder


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    todo_dir = tmp_path / "todo"
    todo_dir.mkdir()
    return SimpleNamespace(
        app_name="cron-todotxt",
        log_level="DEBUG",
        log_dir=None,
        log_to_file=False,
        todo_dir=todo_dir,
        todo_file=todo_dir / "todo.txt",
        scheduled_file=todo_dir / "scheduled.txt",
        todo_sh="/bin/false",
        editor="true",
    )


@pytest.fixture()
def adder() -> FakeTaskAdder:
    return FakeTaskAdder()


@pytest.fixture()
def state(settings: SimpleNamespace, adder: FakeTaskAdder) -> AppState:
    """AppState wired with a recording task adder instead of todo.sh."""
    return AppState(
        settings=settings,
        todo_file=settings.todo_file,
        scheduled_file=settings.scheduled_file,
        adder=adder,
    )


def write_lines(path: Path, *lines: str) -> None:
    path.write_text("".join(f"{line}\n" for line in lines), "utf-8")


def read_lines(path: Path) -> list[str]:
    return path.read_text("utf-8").splitlines()
