"""Calendar-date helpers shared by the booking engine and the schedule view.

All functions work on naive calendar dates; there is no time-of-day or
time-zone handling anywhere in the scheduler.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, NamedTuple

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, FR, MO, TH, TU, WE, rrule

ISO_FORMAT = "%Y-%m-%d"

_WORKDAYS = (MO, TU, WE, TH, FR)


class Span(NamedTuple):
    """Clipped position of a booking inside a rendered date window."""

    start_col: int
    span: int


class DateRange(NamedTuple):
    start: date
    end: date


def days_in_range(start: date, end: date) -> list[date]:
    """Return every calendar day from *start* to *end*, inclusive.

    An empty list is returned when *start* is after *end*.
    """
    if start > end:
        return []
    return [dt.date() for dt in rrule(DAILY, dtstart=start, until=end)]


def working_days(start: date, end: date) -> list[date]:
    """Return the Monday-to-Friday days from *start* to *end*, inclusive."""
    if start > end:
        return []
    return [
        dt.date() for dt in rrule(DAILY, dtstart=start, until=end, byweekday=_WORKDAYS)
    ]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_today(day: date, today: date | None = None) -> bool:
    return day == (today or date.today())


def parse_date(value: str) -> date:
    """Parse a canonical ``YYYY-MM-DD`` string."""
    return datetime.strptime(value, ISO_FORMAT).date()


def format_date(value: date | str, pattern: str = ISO_FORMAT) -> str:
    """Format *value* with a ``strftime`` pattern; ISO strings are parsed first."""
    if isinstance(value, str):
        value = parse_date(value)
    return value.strftime(pattern)


def span_in_range(
    booking_start: date,
    booking_end: date,
    range_start: date,
    range_end: date,
) -> Span | None:
    """Locate a booking inside a rendered window.

    Returns ``None`` when the booking lies entirely outside the window,
    otherwise the zero-based column of the first visible day and the number
    of visible days.
    """
    if booking_end < range_start or booking_start > range_end:
        return None

    effective_start = max(booking_start, range_start)
    effective_end = min(booking_end, range_end)
    return Span(
        start_col=(effective_start - range_start).days,
        span=(effective_end - effective_start).days + 1,
    )


# ---------------------------------------------------------------------------
# Schedule view windows
# ---------------------------------------------------------------------------


def week_range(day: date) -> DateRange:
    """Monday to Sunday of the week containing *day*."""
    start = day + relativedelta(weekday=MO(-1))
    return DateRange(start, start + relativedelta(days=6))


def month_range(day: date) -> DateRange:
    start = day.replace(day=1)
    return DateRange(start, start + relativedelta(months=1, days=-1))


def four_week_range(day: date) -> DateRange:
    start = week_range(day).start
    return DateRange(start, start + relativedelta(weeks=4))


def navigate_range(
    current_start: date,
    direction: Literal["prev", "next"],
    view: Literal["week", "month"],
) -> DateRange:
    """Step the schedule window backwards or forwards.

    Week view moves two weeks at a time and shows four weeks; month view
    moves one month and shows that month.
    """
    sign = 1 if direction == "next" else -1
    if view == "week":
        return four_week_range(current_start + relativedelta(weeks=2 * sign))
    return month_range(current_start + relativedelta(months=sign))
