"""Calendar-day span arithmetic.

All computations work on ``date`` objects (year/month/day). Timestamps are never
subtracted, so daylight-saving changes and UTC offsets cannot shift a result by a day.
"""

from __future__ import annotations

from datetime import date, datetime


def day_span(start: date, end: date) -> int:
    """Inclusive number of calendar days from start to end, 0 if end precedes start.

    A single-day request (start == end) spans 1 day.
    """
    return max(0, end.toordinal() - start.toordinal() + 1)


def parse_calendar_date(value: str | date) -> date:
    """Parse a raw form value into a calendar date.

    Accepts ``YYYY-MM-DD`` or a full ISO datetime. For datetimes only the Y/M/D
    components as written are kept; the value is not converted to another zone,
    so ``2025-03-09T23:30:00-05:00`` is 2025-03-09.
    """
    if isinstance(value, datetime):
        return date(value.year, value.month, value.day)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        msg = f"Expected a date or ISO string, got {type(value).__name__}"
        raise TypeError(msg)
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        parsed = datetime.fromisoformat(text)
        return date(parsed.year, parsed.month, parsed.day)


def month_bucket(value: date) -> str:
    """The ``YYYY-MM`` bucket of a date."""
    return f"{value.year:04d}-{value.month:02d}"
