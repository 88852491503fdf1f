# src/cron_todotxt/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and the pull/add operations depend on these Protocols instead of
on todo.sh or the terminal, so tests can pass fakes.
"""

from typing import Protocol


class TaskAdder(Protocol):
    """
    Inserts a task into the live list through the todo.txt tool.

    Returns whatever the tool printed. Raises TaskAdderError on failure.
    """

    def add(self, text: str) -> str: ...


class Confirmer(Protocol):
    """Asks the user a yes/no question (CLI only; the core never prompts)."""

    def __call__(self, prompt: str) -> bool: ...
