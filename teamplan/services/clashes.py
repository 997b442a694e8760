"""Service for detecting capacity clashes between a candidate booking and
the bookings a resource already has."""

from __future__ import annotations

from datetime import date

from teamplan.domain.errors import NotFound
from teamplan.domain.models import Clash
from teamplan.repos.memory import BookingRepository, ResourceRepository
from teamplan.services.calendar import working_days
from teamplan.services.capacity import daily_capacity, load_on


def find_clashes(
    resource_id: int,
    start: date,
    end: date,
    hours_per_day: float,
    resource_repo: ResourceRepository,
    booking_repo: BookingRepository,
    exclude_booking_id: int | None = None,
) -> list[Clash]:
    """Return the working days in ``[start, end]`` that would exceed capacity.

    The candidate's own ``hours_per_day`` is added to whatever the resource
    already has booked on each day. A day is a clash only when the total is
    strictly greater than capacity; weekends are never checked. Pass
    *exclude_booking_id* when re-validating an existing booking so it is not
    counted against itself.
    """
    resource = resource_repo.get(resource_id)
    if resource is None:
        raise NotFound("Resource", resource_id)

    capacity = daily_capacity(resource)
    overlapping = booking_repo.list_overlapping(
        start, end, resource_id=resource_id, exclude_id=exclude_booking_id
    )

    clashes: list[Clash] = []
    for day in working_days(start, end):
        total = load_on(day, overlapping) + hours_per_day
        if total > capacity:
            clashes.append(Clash(day=day, total_hours=total, capacity=capacity))
    return clashes
