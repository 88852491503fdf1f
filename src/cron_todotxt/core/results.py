# src/cron_todotxt/core/results.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tasks.task_models import ScheduledTask, TodoTask


class RunOutcome(StrEnum):
    """What an operation did to the files on disk."""

    NO_CHANGES = "no_changes"
    DRY_RUN = "dry_run"  # changes computed, nothing written or added
    COMMITTED = "committed"


@dataclass(slots=True, frozen=True)
class LineError:
    """A recoverable per-line problem (sidecar line number or todo.txt line number)."""

    line_no: int
    text: str
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.reason} ({self.text})"


@dataclass(slots=True)
class RunResult:
    """
    Result of one core operation (process / pull / add).

    - activated: tasks handed (or, in a dry run, to be handed) to the task adder
    - scheduled: records that were added to the scheduled file
    - errors:    recoverable problems, one per offending line
    - outputs:   text returned by the task adder, in call order
    """

    outcome: RunOutcome = RunOutcome.NO_CHANGES
    activated: list[TodoTask] = field(default_factory=list)
    scheduled: list[ScheduledTask] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
