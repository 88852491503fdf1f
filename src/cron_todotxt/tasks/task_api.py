# src/cron_todotxt/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..core.errors import ScheduleError
from ..core.results import LineError, RunOutcome, RunResult
from ..core.state import AppState
from .task_models import TAG_THRESHOLD, ScheduledTask, ensure_aware, parse_threshold
from .task_store import ScheduledFile, TodoFile

logger = logging.getLogger(__name__)


def schedule_task(
    state: AppState,
    index: int,
    threshold: datetime,
    repeat: str | None = None,
    *,
    commit: bool = True,
) -> RunResult:
    """
    Move live task `index` into the scheduled file.

    The repeat interval is validated before anything is written, so a bad
    interval (or one that pushes the next threshold past year 9999) never
    reaches the file. Done flag and dates are cleared: the task comes back
    fresh when it is activated.

    Raises OutOfRangeIndex / BadIntervalSpec / ScheduleLineError / TaskParseError /
    TodoFileError.
    """
    todo = TodoFile.load(state.todo_file)
    task = todo.get_task(index)
    if task.done:
        logger.warning("Task %s is marked done; the flag is removed when scheduling", index)

    record = ScheduledTask.from_task(task).with_threshold(threshold).with_repeat(repeat)
    record.check()
    record.next_threshold()

    result = RunResult(scheduled=[record])
    if not commit:
        logger.info("Not live, would schedule: %s", record.to_line())
        result.outcome = RunOutcome.DRY_RUN
        return result

    scheduled = ScheduledFile.load(state.scheduled_file).append(record)
    scheduled.save(state.scheduled_file)
    logger.info("Added to scheduled file: %s", record.to_line())

    todo.drop_line(index).save(state.todo_file)
    logger.info("Removed line %s from %s", index, state.todo_file)

    result.outcome = RunOutcome.COMMITTED
    return result


@dataclass(slots=True)
class PullPlan:
    todo: TodoFile
    scheduled: ScheduledFile
    pulled: list[tuple[int, ScheduledTask]] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)


def plan_pull(todo: TodoFile, scheduled: ScheduledFile, now: datetime) -> PullPlan:
    """
    Find live tasks whose `t:` threshold is in the future and move them over.

    A threshold equal to `now` is already due and stays in the live list.
    Tasks with a malformed `t:` or `repeat:` tag, or with no text besides those
    tags, are reported and left alone.
    """
    now = ensure_aware(now)
    plan = PullPlan(todo=todo, scheduled=scheduled)

    for n, task in todo.tasks():
        raw = task.get_tag(TAG_THRESHOLD)
        if raw is None:
            continue
        try:
            threshold = parse_threshold(raw)
            record = ScheduledTask.from_task(task).with_threshold(threshold)
            record.check()
            record.next_threshold()
        except ScheduleError as e:
            logger.warning("Skipping todo line=%s: %s", n, e)
            plan.errors.append(LineError(line_no=n, text=task.to_string(), reason=str(e)))
            continue

        if threshold <= now:
            continue

        logger.info("Pulling line %s into the scheduled file: %s", n, record.to_line())
        plan.todo = plan.todo.drop_line(n)
        plan.scheduled = plan.scheduled.append(record)
        plan.pulled.append((n, record))

    return plan


def pull_future_tasks(state: AppState, now: datetime, *, commit: bool = False) -> RunResult:
    """
    Move future-dated live tasks into the scheduled file.

    Both files are rewritten only when something moved, and only on commit;
    the scheduled file is written first so an interrupted run duplicates a task
    rather than losing it.
    """
    todo = TodoFile.load(state.todo_file)
    scheduled = ScheduledFile.load(state.scheduled_file)
    plan = plan_pull(todo, scheduled, now)

    result = RunResult(
        scheduled=[record for _, record in plan.pulled],
        errors=list(plan.errors),
    )
    if not plan.pulled:
        logger.debug("No future-dated tasks to pull")
        return result

    if not commit:
        logger.info("Not live, will not move %d task(s)", len(plan.pulled))
        result.outcome = RunOutcome.DRY_RUN
        return result

    plan.scheduled.save(state.scheduled_file)
    plan.todo.save(state.todo_file)
    logger.info("Moved %d task(s) from %s to %s", len(plan.pulled), state.todo_file, state.scheduled_file)
    result.outcome = RunOutcome.COMMITTED
    return result


def list_scheduled(state: AppState, search: str | None = None) -> list[str]:
    """Scheduled-file lines, optionally only those containing `search`."""
    lines = ScheduledFile.load(state.scheduled_file).to_lines()
    if search:
        lines = [line for line in lines if search in line]
    return lines
