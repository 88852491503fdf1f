# src/cron_todotxt/tasks/task_scheduler.py

from __future__ import annotations

"""
Schedule processor.

One pass over the scheduled file:
- records whose threshold is still in the future are kept as they are,
- due records are activated (handed to the task adder),
- due one-shot records are dropped,
- due repeating records get a new threshold = old threshold + interval,
- lines that fail to decode or evaluate are commented out.

plan_schedule() is the pure part (now + old file -> new file + activations).
process_schedule() loads, plans, calls the task adder and writes back.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from ..core.errors import ScheduleError, TaskAdderError
from ..core.results import LineError, RunOutcome, RunResult
from ..core.state import AppState
from .task_models import (
    InvalidLine,
    PassthroughLine,
    ScheduledEntry,
    ScheduledTask,
    TodoTask,
    ensure_aware,
)
from .task_store import ScheduledFile

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LineStep:
    """
    What the pass does to one line of the scheduled file.

    after is None when the line is dropped; activation is the task to add to
    the live list, if any.
    """

    line_no: int
    before: ScheduledEntry
    after: ScheduledEntry | None
    activation: TodoTask | None = None
    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.after != self.before


@dataclass(slots=True, frozen=True)
class SchedulePlan:
    steps: tuple[LineStep, ...]

    @property
    def new_file(self) -> ScheduledFile:
        return ScheduledFile(entries=tuple(s.after for s in self.steps if s.after is not None))

    @property
    def activations(self) -> list[TodoTask]:
        return [s.activation for s in self.steps if s.activation is not None]

    @property
    def errors(self) -> list[LineError]:
        return [
            LineError(line_no=s.line_no, text=_line_text(s.before), reason=s.error)
            for s in self.steps
            if s.error is not None
        ]

    @property
    def changed(self) -> bool:
        return any(s.changed for s in self.steps)


def _line_text(entry: ScheduledEntry) -> str:
    if isinstance(entry, ScheduledTask):
        try:
            return entry.to_line()
        except ScheduleError:
            return entry.task.to_string()
    return entry.to_line()


def _disable(line_no: int, entry: ScheduledEntry, reason: str) -> LineStep:
    text = _line_text(entry)
    logger.warning("Commenting out scheduled line=%s: %s", line_no, reason)
    return LineStep(
        line_no=line_no,
        before=entry,
        after=PassthroughLine(f"# {text}"),
        error=reason,
    )


def plan_step(line_no: int, entry: ScheduledEntry, now: datetime) -> LineStep:
    """Decide the fate of a single scheduled-file line."""
    if isinstance(entry, PassthroughLine):
        return LineStep(line_no=line_no, before=entry, after=entry)

    if isinstance(entry, InvalidLine):
        return _disable(line_no, entry, entry.reason)

    try:
        threshold = entry.get_threshold()
        entry.get_repeat()
        entry.check()
    except ScheduleError as e:
        return _disable(line_no, entry, str(e))

    if threshold > now:
        logger.debug("Line %s is in the future (%s), skipping", line_no, threshold.isoformat())
        return LineStep(line_no=line_no, before=entry, after=entry)

    activation = entry.to_activatable_task()

    try:
        # Offset from the old threshold, not from now: late runs do not drift.
        next_threshold = entry.next_threshold()
    except ScheduleError as e:
        return _disable(line_no, entry, str(e))

    if next_threshold is None:
        logger.info("Dropping line %s: %s", line_no, entry.to_line())
        return LineStep(line_no=line_no, before=entry, after=None, activation=activation)

    rescheduled = entry.with_threshold(next_threshold)
    logger.info("Will change line %s to: %s", line_no, rescheduled.to_line())
    return LineStep(line_no=line_no, before=entry, after=rescheduled, activation=activation)


def plan_schedule(scheduled: ScheduledFile, now: datetime) -> SchedulePlan:
    """
    Pure pass over the scheduled file.

    Each due record yields at most one activation per call, even when the
    processor has not run for several intervals; the record then stays due
    and activates again on the next call.
    """
    now = ensure_aware(now)
    return SchedulePlan(steps=tuple(plan_step(n, entry, now) for n, entry in scheduled.items()))


def _apply_activations(
    plan: SchedulePlan, state: AppState, result: RunResult
) -> SchedulePlan:
    """
    Hand activations to the task adder.

    A record is only dropped or rescheduled once its task has been added: if
    the adder fails, the original line is kept so the next run retries it.
    """
    steps: list[LineStep] = []
    for step in plan.steps:
        if step.activation is None:
            steps.append(step)
            continue

        text = step.activation.to_string()
        try:
            logger.info("Adding %s", text)
            output = state.adder.add(text)
        except TaskAdderError as e:
            logger.error("Task adder failed for scheduled line=%s: %s", step.line_no, e)
            result.errors.append(
                LineError(line_no=step.line_no, text=_line_text(step.before), reason=str(e))
            )
            steps.append(replace(step, after=step.before, activation=None))
            continue

        result.activated.append(step.activation)
        if output:
            result.outputs.append(output)
        steps.append(step)

    return SchedulePlan(steps=tuple(steps))


def process_schedule(state: AppState, now: datetime, *, commit: bool = False) -> RunResult:
    """
    Run one scheduling pass against the scheduled file in `state`.

    Dry run (commit=False): compute and report only, no adder calls, no writes.
    Commit: add every activation through state.adder, then rewrite the
    scheduled file if any line changed.
    """
    scheduled = ScheduledFile.load(state.scheduled_file)
    plan = plan_schedule(scheduled, now)

    result = RunResult()
    result.errors.extend(plan.errors)

    if not plan.changed:
        logger.debug("No changes to scheduled file")
        return result

    if not commit:
        result.activated.extend(plan.activations)
        result.outcome = RunOutcome.DRY_RUN
        for task in plan.activations:
            logger.info("Not live, would add: %s", task)
        logger.debug("New scheduled file contents:\n---\n%s\n---", "\n".join(plan.new_file.to_lines()))
        logger.info("Not live, will not write changes")
        return result

    plan = _apply_activations(plan, state, result)
    if not plan.changed:
        return result

    logger.info("Changes made, writing new file to %s", state.scheduled_file)
    plan.new_file.save(state.scheduled_file)
    result.outcome = RunOutcome.COMMITTED
    return result
