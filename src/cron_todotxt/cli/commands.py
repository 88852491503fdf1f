# src/cron_todotxt/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from dateutil import tz
from dateutil.parser import ParserError
from dateutil.parser import parse as parse_date
from dateutil.relativedelta import relativedelta

from ..connectors.console_connector import ask_confirm, open_editor
from ..core.errors import BadIntervalSpec
from ..core.ports import Confirmer
from ..core.results import RunOutcome, RunResult
from ..core.state import AppState
from ..tasks.task_api import list_scheduled, pull_future_tasks, schedule_task
from ..tasks.task_models import add_interval, ensure_aware, parse_interval
from ..tasks.task_scheduler import process_schedule
from ..tasks.task_store import TodoFile

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter, Confirmer], int]

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Sub-command registry used by the CLI entrypoint (add, process, pull, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        argv: list[str],
        emit: CommandEmitter = print,
        confirm: Confirmer = ask_confirm,
    ) -> int:
        """Dispatch `argv` (sub-command first) and return the exit code."""
        if not argv:
            emit(self.build_help())
            return EXIT_USAGE

        name = argv[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            emit(f"Unknown command: {name}")
            emit(self.build_help())
            return EXIT_USAGE

        return handler(state, argv[1:], emit, confirm)

    def build_help(self) -> str:
        lines = ["Usage: cron-todotxt <command> [args]", "", "Commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name:<8} {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _now() -> datetime:
    return datetime.now(tz.tzlocal())


_RELATIVE_RE = re.compile(r"\+\s*(\d+)\s*(minute|hour|day|week|month|year)s?", re.IGNORECASE)
_RELATIVE_UNITS = {
    "minute": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
    "month": "months",
    "year": "years",
}


def parse_when(raw: str, now: datetime) -> datetime:
    """
    Parse the date argument of `add`.

    Besides anything dateutil understands, accepts "now", "today", "tomorrow",
    "+3 days" style offsets and "+<interval>" ("+1W", "+P1M") relative to `now`.
    """
    text = raw.strip()
    word = text.lower()
    if word == "now":
        return now
    if word in {"today", "tomorrow"}:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight + relativedelta(days=1) if word == "tomorrow" else midnight

    if text.startswith("+"):
        m = _RELATIVE_RE.fullmatch(text)
        if m is not None:
            unit = _RELATIVE_UNITS[m.group(2).lower()]
            return add_interval(now, relativedelta(**{unit: int(m.group(1))}))
        return add_interval(now, parse_interval(text[1:]))

    return ensure_aware(parse_date(text))


def _is_live(args: list[str]) -> bool:
    return bool(args) and args[0].lower() in {"live", "--live"}


def _report(result: RunResult, emit: CommandEmitter) -> None:
    for err in result.errors:
        emit(f"ERROR: {err}")
    for out in result.outputs:
        emit(out)
    if result.outcome is RunOutcome.NO_CHANGES:
        emit("No changes")
    elif result.outcome is RunOutcome.DRY_RUN:
        emit("Dry run, nothing changed. Add 'live' to apply.")


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter, confirm: Confirmer) -> int:
    emit(registry.build_help())
    return EXIT_OK


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter, confirm: Confirmer) -> int:
    yes = any(a in {"-y", "--yes"} for a in args)
    args = [a for a in args if a not in {"-y", "--yes"}]
    if len(args) < 2:
        emit("Usage: cron-todotxt add <task number> <date to schedule to> [<repeat interval>] [-y]")
        return EXIT_USAGE

    try:
        index = int(args[0])
    except ValueError:
        emit(f"ERROR: not a task number: {args[0]}")
        return EXIT_USAGE

    task = TodoFile.load(state.todo_file).get_task(index)
    emit(f"Will schedule this task:\n{task}")
    if task.done:
        emit("WARNING: this task has been marked complete - will remove this flag when scheduling.")

    try:
        threshold = parse_when(args[1], _now())
    except (ParserError, ValueError, OverflowError, BadIntervalSpec):
        emit(f"ERROR: bad schedule date {args[1]}")
        return EXIT_ERROR
    emit(f"Scheduling until: {threshold.isoformat()}")

    repeat = args[2] if len(args) > 2 else None
    if repeat:
        try:
            add_interval(threshold, parse_interval(repeat))
        except BadIntervalSpec as e:
            emit(f"ERROR: bad recurrence interval {repeat}: {e}")
            return EXIT_ERROR
        emit(f"Recurring every {repeat}")
    else:
        emit("Not recurring")

    if not yes and not confirm("Confirm?"):
        emit("Cancelled")
        return EXIT_OK

    schedule_task(state, index, threshold, repeat, commit=True)
    emit(f"Added to {state.scheduled_file}")
    emit(f"Removed from {state.todo_file}")
    return EXIT_OK


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter, confirm: Confirmer) -> int:
    search = args[0] if args else None
    for line in list_scheduled(state, search):
        emit(line)
    emit(f"---\n{state.scheduled_file}")
    return EXIT_OK


def cmd_process(state: AppState, args: list[str], emit: CommandEmitter, confirm: Confirmer) -> int:
    result = process_schedule(state, _now(), commit=_is_live(args))
    for task in result.activated:
        emit(f"Activated: {task}")
    _report(result, emit)
    return EXIT_OK if result.ok else EXIT_ERROR


def cmd_pull(state: AppState, args: list[str], emit: CommandEmitter, confirm: Confirmer) -> int:
    result = pull_future_tasks(state, _now(), commit=_is_live(args))
    for record in result.scheduled:
        emit(f"Scheduled: {record}")
    _report(result, emit)
    return EXIT_OK if result.ok else EXIT_ERROR


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter, confirm: Confirmer) -> int:
    path = Path(state.scheduled_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)
    editor = str(getattr(state.settings, "editor", "editor"))
    return open_editor(path, editor)


registry.register("help", cmd_help, "Show this help", aliases=["usage", "-h", "--help"])
registry.register(
    "add",
    cmd_add,
    "<task number> <date> [<repeat>] [-y]  Move a task into the scheduled file\n"
    "           <date>: ISO date, now, today, tomorrow, +3d, '+2 weeks'",
)
registry.register("ls", cmd_list, "[<search term>]  List scheduled tasks", aliases=["list"])
registry.register("process", cmd_process, "[live]  Activate due scheduled tasks")
registry.register("pull", cmd_pull, "[live]  Move tasks with a future t: date into the scheduled file")
registry.register("edit", cmd_edit, "Open the scheduled file in an editor")
