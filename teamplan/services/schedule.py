"""Builds the per-resource booking view rendered by the schedule timeline."""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from teamplan.domain.errors import InvalidRange
from teamplan.domain.models import BookingView, ScheduleResource
from teamplan.repos.memory import BookingRepository, ResourceRepository


def build_schedule(
    start: date,
    end: date,
    resource_repo: ResourceRepository,
    booking_repo: BookingRepository,
) -> list[ScheduleResource]:
    """Return active resources, each with the bookings that touch ``[start, end]``.

    Resources are ordered by first then last name; bookings by start date.
    """
    if start > end:
        raise InvalidRange(start, end)

    by_resource: dict[int, list[BookingView]] = defaultdict(list)
    for view in booking_repo.list_views(start, end):
        by_resource[view.resource_id].append(view)

    return [
        ScheduleResource(
            **resource_repo.view(resource).model_dump(),
            bookings=by_resource.get(resource.id, []),
        )
        for resource in resource_repo.list_all(active_only=True)
    ]
