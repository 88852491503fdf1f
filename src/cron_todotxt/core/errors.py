# src/cron_todotxt/core/errors.py

from __future__ import annotations

"""
Error taxonomy.

Live-file errors (TaskParseError, TodoFileError, OutOfRangeIndex) abort the
operation. ScheduleError subclasses are per-line problems in the sidecar file:
the processor disables the offending line and keeps going.
"""


class CronTodoTxtError(Exception):
    """Base class for everything this package raises on purpose."""


class TaskParseError(CronTodoTxtError):
    """A line cannot be decoded as a todo.txt task at all."""


class TodoFileError(CronTodoTxtError):
    """The live todo.txt file is missing or not usable."""


class OutOfRangeIndex(CronTodoTxtError):
    """Requested task line number does not exist (or was deleted)."""

    def __init__(self, index: int, total: int) -> None:
        super().__init__(f"no such line {index} (file has {total} lines)")
        self.index = index
        self.total = total


class ScheduleError(CronTodoTxtError):
    """Semantic problem with an otherwise well-formed scheduled line."""


class MissingThresholdTag(ScheduleError):
    pass


class BadThresholdDate(ScheduleError):
    pass


class BadIntervalSpec(ScheduleError):
    pass


class ScheduleLineError(ScheduleError):
    """Sidecar line does not have the `<threshold> <task>` shape."""


class TaskAdderError(CronTodoTxtError):
    """The external task adder (todo.sh) failed."""
