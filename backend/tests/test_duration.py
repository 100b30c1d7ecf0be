"""Tests for the calendar-day span calculator."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from leave_desk.services.duration import day_span, month_bucket, parse_calendar_date

# ---------------------------------------------------------------------------
# day_span
# ---------------------------------------------------------------------------


def test_single_day_counts_as_one() -> None:
    assert day_span(date(2025, 12, 1), date(2025, 12, 1)) == 1


def test_work_week_is_inclusive() -> None:
    assert day_span(date(2025, 12, 1), date(2025, 12, 5)) == 5


def test_end_before_start_is_zero() -> None:
    assert day_span(date(2025, 12, 5), date(2025, 12, 1)) == 0


def test_span_crosses_month_and_year() -> None:
    assert day_span(date(2025, 12, 30), date(2026, 1, 2)) == 4


def test_span_includes_leap_day() -> None:
    assert day_span(date(2024, 2, 28), date(2024, 3, 1)) == 3


@pytest.mark.parametrize(
    ("start", "end", "expected"),
    [
        # US spring-forward (2025-03-09) and fall-back (2025-11-02).
        (date(2025, 3, 8), date(2025, 3, 10), 3),
        (date(2025, 11, 1), date(2025, 11, 3), 3),
        # EU switch (2025-03-30).
        (date(2025, 3, 29), date(2025, 3, 31), 3),
    ],
)
def test_daylight_saving_boundaries_do_not_shift_count(start: date, end: date, expected: int) -> None:
    assert day_span(start, end) == expected


def test_span_over_a_full_year() -> None:
    assert day_span(date(2025, 1, 1), date(2025, 12, 31)) == 365


# ---------------------------------------------------------------------------
# parse_calendar_date
# ---------------------------------------------------------------------------


def test_parse_plain_date_string() -> None:
    assert parse_calendar_date("2025-12-01") == date(2025, 12, 1)


def test_parse_strips_whitespace() -> None:
    assert parse_calendar_date("  2025-12-01 ") == date(2025, 12, 1)


def test_parse_datetime_keeps_written_components() -> None:
    """Late evening with a negative offset is still the written day, not the UTC day."""
    assert parse_calendar_date("2025-03-09T23:30:00-05:00") == date(2025, 3, 9)


def test_parse_accepts_date_and_datetime_objects() -> None:
    moment = datetime(2025, 11, 2, 1, 30, tzinfo=timezone(timedelta(hours=-4)))
    assert parse_calendar_date(moment) == date(2025, 11, 2)
    assert parse_calendar_date(date(2025, 11, 2)) == date(2025, 11, 2)


def test_parse_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_calendar_date("next tuesday")


# ---------------------------------------------------------------------------
# month_bucket
# ---------------------------------------------------------------------------


def test_month_bucket_is_zero_padded() -> None:
    assert month_bucket(date(2025, 3, 9)) == "2025-03"
    assert month_bucket(date(2025, 11, 15)) == "2025-11"
