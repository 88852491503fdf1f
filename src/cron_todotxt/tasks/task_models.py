# src/cron_todotxt/tasks/task_models.py

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import date, datetime
from urllib.parse import urlparse

from dateutil import tz
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from ..core.errors import (
    BadIntervalSpec,
    BadThresholdDate,
    MissingThresholdTag,
    ScheduleLineError,
    TaskParseError,
)

TAG_THRESHOLD = "t"
TAG_REPEAT = "repeat"
# Older scheduled files used "rec:" for the same thing.
TAG_REPEAT_ALIASES = (TAG_REPEAT, "rec")

_TASK_RE = re.compile(
    r"(x )?"
    r"(?:\(([A-Za-z])\) )?"
    r"(\d{4}-\d{2}-\d{2} )?"
    r"(\d{4}-\d{2}-\d{2} )?"
    r"(.*)"
)
_TAG_RE = re.compile(r"(?<![^ ])([a-z]+):([^ ]+)")
_URL_SCHEMES = frozenset({"http", "https", "ftp"})

_INTERVAL_RE = re.compile(
    r"P(?!$)"
    r"(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)W)?(?:(\d+)D)?"
    r"(?:T(?=\d)(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?"
)


def _parse_date(raw: str | None, line: str) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as e:
        raise TaskParseError(f"bad date {raw.strip()!r} in: {line}") from e


def _split_line(text: str) -> tuple[str, bool, str | None, date | None, date | None]:
    """Split a stripped todo.txt line into (body, done, priority, created, completed)."""
    m = _TASK_RE.fullmatch(text)
    if m is None:
        raise TaskParseError(f"could not parse: {text!r}")

    done_raw, prio_raw, date1_raw, date2_raw, body = m.groups()
    date1 = _parse_date(date1_raw, text)
    date2 = _parse_date(date2_raw, text)
    done = done_raw is not None

    created: date | None = None
    completed: date | None = None
    if date2 is not None:
        completed, created = date1, date2
    elif date1 is not None:
        created = date1

    # "2024-01-02 2024-01-01 foo" on an open task: the first date is not a
    # completion date, keep it as text.
    if completed is not None and not done:
        created = date1
        completed = None
        body = f"{date2_raw}{body}"

    return body, done, prio_raw.upper() if prio_raw else None, created, completed


@dataclass(slots=True, frozen=True)
class TodoTask:
    """
    One todo.txt line.

    Tags (`key:value` words) live inside `body`; find_tags() is a view over it,
    and set_tag()/delete_tag() are the only places that rewrite it.
    All "mutators" return a new TodoTask.

    An empty body is the deleted-line representation and serializes to "".
    A body the line grammar would read back differently (a leading "x ",
    "(A) " or date where nothing precedes it) is rejected with ValueError.
    """

    body: str = ""
    done: bool = False
    priority: str | None = None
    created: date | None = None
    completed: date | None = None

    def __post_init__(self) -> None:
        if self.completed is not None and self.created is None:
            raise ValueError("completed date requires a created date")
        if not self.done and self.completed is not None:
            raise ValueError("only done tasks may carry a completed date")
        if self.priority is not None and not re.fullmatch(r"[A-Z]", self.priority):
            raise ValueError(f"invalid priority {self.priority!r}")
        if self.is_empty():
            return
        fields = (self.body, self.done, self.priority, self.created, self.completed)
        try:
            reread = _split_line(self.to_string().strip())
        except TaskParseError as e:
            raise ValueError(f"body cannot be written as a todo.txt line: {self.body!r}") from e
        if reread != fields:
            raise ValueError(f"body would not read back unchanged: {self.body!r}")

    @classmethod
    def parse(cls, line: str) -> TodoTask:
        body, done, priority, created, completed = _split_line(line.strip())
        return cls(
            body=body,
            done=done,
            priority=priority,
            created=created,
            completed=completed,
        )

    def to_string(self) -> str:
        if self.is_empty():
            return ""
        parts: list[str] = []
        if self.done:
            parts.append("x")
        if self.priority:
            parts.append(f"({self.priority})")
        if self.completed is not None and self.created is not None:
            parts.append(self.completed.isoformat())
            parts.append(self.created.isoformat())
        elif self.created is not None:
            parts.append(self.created.isoformat())
        parts.append(self.body)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def is_empty(self) -> bool:
        return self.body == ""

    # ---- tags ----

    def _tag_matches(self) -> Iterator[re.Match[str]]:
        for m in _TAG_RE.finditer(self.body):
            # URLs look like tags ("https://..."), skip them.
            if urlparse(m.group(0)).scheme in _URL_SCHEMES:
                continue
            yield m

    def _tag_span(self, name: str) -> tuple[int, int] | None:
        for m in self._tag_matches():
            if m.group(1) == name:
                return m.span()
        return None

    def find_tags(self) -> dict[str, str]:
        tags: dict[str, str] = {}
        for m in self._tag_matches():
            tags.setdefault(m.group(1), m.group(2))
        return tags

    def get_tag(self, name: str) -> str | None:
        return self.find_tags().get(name)

    def set_tag(self, name: str, value: str | None) -> TodoTask:
        """Return a copy with `name:value` set (appended, or replacing the first one)."""
        if value is None:
            return self.delete_tag(name)
        span = self._tag_span(name)
        if span is None:
            body = f"{self.body} {name}:{value}" if self.body else f"{name}:{value}"
        else:
            start, end = span
            body = f"{self.body[:start]}{name}:{value}{self.body[end:]}"
        return replace(self, body=body)

    def delete_tag(self, name: str) -> TodoTask:
        span = self._tag_span(name)
        if span is None:
            return self
        start, end = span
        body = self.body[:start] + self.body[end:]
        return replace(self, body=" ".join(body.split()))

    # ---- completion ----

    def mark_done(self, at: date | datetime | None = None) -> TodoTask:
        if self.done:
            return self
        if at is None:
            at = date.today()
        completed = at.date() if isinstance(at, datetime) else at
        return replace(
            self,
            done=True,
            completed=completed,
            created=self.created or completed,
        )

    def mark_not_done(self) -> TodoTask:
        if not self.done:
            return self
        return replace(self, done=False, completed=None)


# ---- thresholds and intervals ----


def parse_threshold(raw: str) -> datetime:
    """
    Parse an ISO-8601 date or date-time.

    Values without a UTC offset are taken as local time, so every threshold
    is timezone-aware and comparable with `now`.
    """
    try:
        value = isoparse(raw)
    except (ValueError, OverflowError) as e:
        raise BadThresholdDate(f"could not parse date from {raw!r}") from e
    return ensure_aware(value)


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz.tzlocal())
    return value


def format_threshold(value: datetime) -> str:
    return ensure_aware(value).isoformat()


def parse_interval(raw: str) -> relativedelta:
    """
    Parse a repeat interval such as "1W", "P1M", "3d", "1y6m" or "PT12H".

    The leading ISO-8601 "P" is optional. Zero-length intervals are rejected.
    """
    text = (raw or "").strip().upper()
    if not text.startswith("P"):
        text = "P" + text
    m = _INTERVAL_RE.fullmatch(text)
    if m is None:
        raise BadIntervalSpec(f"could not parse repeat interval {raw!r}")

    years, months, weeks, days, hours, minutes, seconds = (int(g or 0) for g in m.groups())
    interval = relativedelta(
        years=years,
        months=months,
        weeks=weeks,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
    )
    if not interval:
        raise BadIntervalSpec(f"repeat interval {raw!r} has zero length")
    return interval


def add_interval(value: datetime, interval: relativedelta) -> datetime:
    """`value + interval`, or BadIntervalSpec when the result is not a representable date."""
    try:
        return value + interval
    except (ValueError, OverflowError) as e:
        raise BadIntervalSpec(f"{value.isoformat()} plus the repeat interval is out of range: {e}") from e


# ---- scheduled records ----


@dataclass(slots=True, frozen=True)
class ScheduledTask:
    """
    A deferred task: a TodoTask carrying a `t:` threshold tag and an optional
    `repeat:` interval tag.

    In the sidecar file the threshold is written as the leading token instead
    of a `t:` tag (see to_line / from_line).
    """

    task: TodoTask

    @classmethod
    def from_task(cls, task: TodoTask) -> ScheduledTask:
        try:
            return cls(task=replace(task, done=False, created=None, completed=None))
        except ValueError as e:
            raise ScheduleLineError(f"cannot schedule {task}: {e}") from e

    @classmethod
    def from_line(cls, line: str) -> ScheduledTask:
        text = line.strip()
        raw_threshold, sep, rest = text.partition(" ")
        if not sep or not rest.strip():
            raise ScheduleLineError(f"invalid scheduled line format: {text!r}")
        threshold = parse_threshold(raw_threshold)
        record = cls.from_task(TodoTask.parse(rest)).with_threshold(threshold)
        record.check()
        return record

    def check(self) -> None:
        """Raise ScheduleError unless the record can be written out and activated."""
        self.to_line()
        if self.to_activatable_task().is_empty():
            raise ScheduleLineError(f"no task text besides the schedule tags: {self.task}")

    def to_line(self) -> str:
        threshold = format_threshold(self.get_threshold())
        rest = _without_tags(self.task, TAG_THRESHOLD).to_string()
        return f"{threshold} {rest}" if rest else threshold

    def __str__(self) -> str:
        return self.to_line()

    def with_threshold(self, value: datetime) -> ScheduledTask:
        return ScheduledTask(task=self.task.set_tag(TAG_THRESHOLD, format_threshold(value)))

    def get_threshold(self) -> datetime:
        raw = self.task.get_tag(TAG_THRESHOLD)
        if not raw:
            raise MissingThresholdTag(f"cannot find a threshold tag in: {self.task}")
        return parse_threshold(raw)

    def with_repeat(self, interval_spec: str | None) -> ScheduledTask:
        if interval_spec is None:
            return ScheduledTask(task=_without_tags(self.task, TAG_REPEAT))
        parse_interval(interval_spec)
        return ScheduledTask(task=self.task.set_tag(TAG_REPEAT, interval_spec))

    def repeat_spec(self) -> str | None:
        tags = self.task.find_tags()
        for name in TAG_REPEAT_ALIASES:
            if name in tags:
                return tags[name]
        return None

    def get_repeat(self) -> relativedelta | None:
        raw = self.repeat_spec()
        if raw is None:
            return None
        return parse_interval(raw)

    def next_threshold(self) -> datetime | None:
        """Threshold after the next activation, None for a one-shot record."""
        repeat = self.get_repeat()
        if repeat is None:
            return None
        return add_interval(self.get_threshold(), repeat)

    def to_activatable_task(self) -> TodoTask:
        return _without_tags(self.task, TAG_THRESHOLD, *TAG_REPEAT_ALIASES)


def _without_tags(task: TodoTask, *names: str) -> TodoTask:
    try:
        for name in names:
            task = task.delete_tag(name)
    except ValueError as e:
        raise ScheduleLineError(f"task text is not usable once schedule tags are removed: {e}") from e
    return task


@dataclass(slots=True, frozen=True)
class PassthroughLine:
    """Comment or blank line, written back verbatim."""

    text: str

    def to_line(self) -> str:
        return self.text


@dataclass(slots=True, frozen=True)
class InvalidLine:
    """A sidecar line that could not be decoded when the file was loaded."""

    text: str
    reason: str

    def to_line(self) -> str:
        return self.text


ScheduledEntry = ScheduledTask | PassthroughLine | InvalidLine
