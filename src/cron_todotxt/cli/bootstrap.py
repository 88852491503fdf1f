# src/cron_todotxt/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root": it loads settings once and wires the
concrete todo.sh adapter into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.todotxt_connector import TodoTxtCli
from ..core.ports import TaskAdder
from ..core.state import AppState

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, adder: TaskAdder | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the adder injectable makes the CLI testable without
    todo.sh. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.scheduled_file.parent.mkdir(parents=True, exist_ok=True)

    state = AppState(
        settings=settings,
        todo_file=settings.todo_file,
        scheduled_file=settings.scheduled_file,
        adder=adder if adder is not None else TodoTxtCli(settings.todo_sh),
    )
    logger.debug(
        "State ready todo_file=%s scheduled_file=%s todo_sh=%s",
        state.todo_file,
        state.scheduled_file,
        settings.todo_sh,
    )
    return state
