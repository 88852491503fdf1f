# src/cron_todotxt/tasks/task_store.py

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..core.errors import CronTodoTxtError, OutOfRangeIndex, TodoFileError
from .task_models import InvalidLine, PassthroughLine, ScheduledEntry, ScheduledTask, TodoTask

logger = logging.getLogger(__name__)


def _write_lines(path: Path, lines: Iterable[str]) -> None:
    """Rewrite the whole file through a temp file so readers never see half of it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    content = "".join(f"{line}\n" for line in lines)
    tmp.write_text(content, "utf-8")
    os.replace(tmp, path)


def _is_passthrough(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


@dataclass(slots=True, frozen=True)
class ScheduledFile:
    """
    The scheduled-tasks sidecar file, in memory.

    One entry per physical line, in file order:
    - PassthroughLine: comments and blank lines, kept verbatim
    - ScheduledTask:   a decoded scheduled record
    - InvalidLine:     a line that failed to decode (kept so it can be disabled)

    The collection is never modified in place; append() returns a new one.
    """

    entries: tuple[ScheduledEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> ScheduledFile:
        entries: list[ScheduledEntry] = []
        for n, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")
            if _is_passthrough(line):
                entries.append(PassthroughLine(line))
                continue
            try:
                entries.append(ScheduledTask.from_line(line))
            except CronTodoTxtError as e:
                logger.warning("Undecodable scheduled line=%s: %s", n, e)
                entries.append(InvalidLine(text=line.strip(), reason=str(e)))
        return cls(entries=tuple(entries))

    @classmethod
    def load(cls, path: str | Path) -> ScheduledFile:
        path = Path(path)
        if not path.exists():
            logger.info("Scheduled file %s does not exist yet; starting empty", path)
            return cls()
        with path.open("r", encoding="utf-8") as f:
            scheduled = cls.from_lines(f)
        logger.debug("Loaded %d lines from %s", len(scheduled), path)
        return scheduled

    def save(self, path: str | Path) -> None:
        _write_lines(Path(path), self.to_lines())
        logger.debug("Wrote %d lines to %s", len(self), path)

    def append(self, entry: ScheduledEntry) -> ScheduledFile:
        return ScheduledFile(entries=(*self.entries, entry))

    def items(self) -> Iterator[tuple[int, ScheduledEntry]]:
        """(line number, entry) pairs; line numbers are 1-based and match the file."""
        return enumerate(self.entries, start=1)

    def records(self) -> Iterator[ScheduledTask]:
        for entry in self.entries:
            if isinstance(entry, ScheduledTask):
                yield entry

    def to_lines(self) -> list[str]:
        return [entry.to_line() for entry in self.entries]

    def __iter__(self) -> Iterator[ScheduledEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(slots=True, frozen=True)
class TodoFile:
    """
    The live todo.txt list.

    Line numbers are 1-based, as todo.sh shows them. Deleting a line leaves an
    empty task in its place so the numbers of the other lines do not move.
    Any line that fails to parse makes load() fail.
    """

    lines: tuple[TodoTask, ...] = field(default_factory=tuple)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> TodoFile:
        return cls(lines=tuple(TodoTask.parse(line.rstrip("\r\n")) for line in lines))

    @classmethod
    def load(cls, path: str | Path) -> TodoFile:
        path = Path(path)
        if not path.is_file():
            raise TodoFileError(f"{path} does not exist")
        try:
            with path.open("r", encoding="utf-8") as f:
                todo = cls.from_lines(f)
        except OSError as e:
            raise TodoFileError(f"{path} is not readable: {e}") from e
        logger.debug("Loaded %d tasks from %s", len(todo), path)
        return todo

    def save(self, path: str | Path) -> None:
        _write_lines(Path(path), (task.to_string() for task in self.lines))
        logger.debug("Wrote %d tasks to %s", len(self), path)

    def get_task(self, n: int) -> TodoTask:
        if n <= 0 or n > len(self.lines) or self.lines[n - 1].is_empty():
            raise OutOfRangeIndex(n, len(self.lines))
        return self.lines[n - 1]

    def drop_line(self, n: int) -> TodoFile:
        self.get_task(n)
        tasks = list(self.lines)
        tasks[n - 1] = TodoTask()
        return TodoFile(lines=tuple(tasks))

    def tasks(self) -> Iterator[tuple[int, TodoTask]]:
        """(line number, task) pairs, skipping deleted and blank lines."""
        for n, task in enumerate(self.lines, start=1):
            if not task.is_empty():
                yield n, task

    def __len__(self) -> int:
        return len(self.lines)
