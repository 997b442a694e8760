"""Daily capacity and booking load, derived on demand from stored records."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date

from teamplan.domain.models import Booking, BookingType, Resource
from teamplan.services.calendar import is_weekend


def daily_capacity(resource: Resource) -> float:
    """Hours a resource can be booked on one working day."""
    return resource.capacity_hours


def load_on(day: date, bookings: Iterable[Booking]) -> float:
    """Sum of ``hours_per_day`` over the bookings that cover *day*.

    Weekends carry no load.
    """
    if is_weekend(day):
        return 0.0
    return sum(b.hours_per_day for b in bookings if b.covers(day))


def hours_in_days(booking: Booking, days: Iterable[date]) -> float:
    """Hours a booking contributes across *days* (expected to be working days)."""
    return sum(booking.hours_per_day for day in days if booking.covers(day))


def split_hours(bookings: Iterable[Booking], days: list[date]) -> tuple[float, float]:
    """Return ``(project_hours, leave_hours)`` booked across *days*."""
    booked = 0.0
    leave = 0.0
    for booking in bookings:
        hours = hours_in_days(booking, days)
        if booking.booking_type == BookingType.PROJECT:
            booked += hours
        else:
            leave += hours
    return booked, leave


def percent(part: float, whole: float) -> int:
    """Whole-number percentage, rounding halves up."""
    return math.floor(part / whole * 100 + 0.5)
