# tests/test_scheduled_task.py

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from dateutil.relativedelta import relativedelta

from cron_todotxt.core.errors import (
    BadIntervalSpec,
    BadThresholdDate,
    MissingThresholdTag,
    ScheduleLineError,
)
from cron_todotxt.tasks.task_models import (
    ScheduledTask,
    TodoTask,
    format_threshold,
    parse_interval,
    parse_threshold,
)

UTC = timezone.utc


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1W", relativedelta(weeks=1)),
        ("p1m", relativedelta(months=1)),
        ("3d", relativedelta(days=3)),
        ("1Y6M", relativedelta(years=1, months=6)),
        ("PT12H", relativedelta(hours=12)),
        ("P1DT30M", relativedelta(days=1, minutes=30)),
    ],
)
def test_parse_interval(raw: str, expected: relativedelta) -> None:
    assert parse_interval(raw) == expected


@pytest.mark.parametrize("raw", ["", "P", "PT", "1X", "W1", "T5", "1.5D", "P0D", "every week"])
def test_parse_interval_rejects(raw: str) -> None:
    with pytest.raises(BadIntervalSpec):
        parse_interval(raw)


def test_month_addition_is_calendar_aware() -> None:
    start = datetime(2024, 1, 31, tzinfo=UTC)
    assert start + parse_interval("1M") == datetime(2024, 2, 29, tzinfo=UTC)


def test_parse_threshold_naive_is_local_and_comparable() -> None:
    value = parse_threshold("2099-01-01")
    assert value.tzinfo is not None
    assert value > datetime(2098, 12, 30, tzinfo=UTC)


def test_parse_threshold_rejects_garbage() -> None:
    with pytest.raises(BadThresholdDate):
        parse_threshold("2024-99-01T00:00:00")


def test_format_threshold_is_iso() -> None:
    assert format_threshold(datetime(2024, 1, 8, tzinfo=UTC)) == "2024-01-08T00:00:00+00:00"


def test_from_task_clears_done_and_dates() -> None:
    task = TodoTask(
        body="Renew passport", done=True, priority="A", created=date(2024, 1, 1), completed=date(2024, 1, 2)
    )
    record = ScheduledTask.from_task(task)
    assert record.task == TodoTask(body="Renew passport", priority="A")


def test_threshold_accessors() -> None:
    record = ScheduledTask.from_task(TodoTask(body="Pay rent"))
    with pytest.raises(MissingThresholdTag):
        record.get_threshold()

    when = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)
    record = record.with_threshold(when)
    assert record.get_threshold() == when
    assert record.task.get_tag("t") == "2024-03-01T09:30:00+00:00"


def test_repeat_accessors() -> None:
    record = ScheduledTask.from_task(TodoTask(body="Pay rent"))
    assert record.get_repeat() is None

    record = record.with_repeat("1M")
    assert record.get_repeat() == relativedelta(months=1)
    assert record.with_repeat(None).get_repeat() is None


def test_with_repeat_validates_eagerly() -> None:
    record = ScheduledTask.from_task(TodoTask(body="Pay rent"))
    with pytest.raises(BadIntervalSpec):
        record.with_repeat("sometimes")


def test_legacy_rec_tag_is_a_repeat() -> None:
    record = ScheduledTask.from_task(TodoTask(body="Stretch rec:1d"))
    assert record.get_repeat() == relativedelta(days=1)


def test_bad_repeat_tag_raises_on_read() -> None:
    record = ScheduledTask.from_task(TodoTask(body="Stretch repeat:often"))
    with pytest.raises(BadIntervalSpec):
        record.get_repeat()


def test_to_activatable_task_strips_schedule_tags() -> None:
    record = ScheduledTask.from_line("2024-01-01T00:00:00+00:00 (B) Buy milk repeat:1W @shop")
    task = record.to_activatable_task()
    assert task == TodoTask(body="Buy milk @shop", priority="B")
    # The record itself is untouched.
    assert record.repeat_spec() == "1W"


def test_from_line_and_to_line() -> None:
    line = "2024-01-01T00:00:00+00:00 Buy milk repeat:1W"
    record = ScheduledTask.from_line(line)
    assert record.get_threshold() == datetime(2024, 1, 1, tzinfo=UTC)
    assert record.to_line() == line


def test_from_line_replaces_inline_threshold_tag() -> None:
    record = ScheduledTask.from_line("2024-02-01T00:00:00+00:00 Dentist t:2024-01-15")
    assert record.get_threshold() == datetime(2024, 2, 1, tzinfo=UTC)
    assert record.to_line() == "2024-02-01T00:00:00+00:00 Dentist"


@pytest.mark.parametrize(
    "line, error",
    [
        ("2024-01-01T00:00:00+00:00", ScheduleLineError),
        ("tomorrow Buy milk", BadThresholdDate),
        ("2024-02-30 Buy milk", BadThresholdDate),
    ],
)
def test_from_line_errors(line: str, error: type[Exception]) -> None:
    with pytest.raises(error):
        ScheduledTask.from_line(line)


def test_from_line_rejects_record_without_task_text() -> None:
    with pytest.raises(ScheduleLineError):
        ScheduledTask.from_line("2024-01-01T00:00:00+00:00 repeat:1W rec:1D")


def test_next_threshold() -> None:
    record = ScheduledTask.from_line("2024-01-31T00:00:00+00:00 Rent repeat:1M")
    assert record.next_threshold() == datetime(2024, 2, 29, tzinfo=UTC)
    assert ScheduledTask.from_line("2024-01-31T00:00:00+00:00 Once").next_threshold() is None


def test_next_threshold_out_of_range() -> None:
    record = ScheduledTask.from_line("2024-01-01T00:00:00+00:00 Huge repeat:99999Y")
    with pytest.raises(BadIntervalSpec):
        record.next_threshold()


def test_from_task_rejects_text_that_needs_its_creation_date() -> None:
    task = TodoTask.parse("2024-02-03 2024-01-01 Call mom")
    with pytest.raises(ScheduleLineError):
        ScheduledTask.from_task(task)


def test_removing_threshold_tag_must_leave_a_valid_task() -> None:
    record = ScheduledTask.from_task(TodoTask(body="t:2099-01-01 x marks the spot"))
    with pytest.raises(ScheduleLineError):
        record.to_activatable_task()
    with pytest.raises(ScheduleLineError):
        record.check()
