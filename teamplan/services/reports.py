"""Utilization and project-budget reports.

Both reports are recomputed from the raw bookings on every call; only
working days inside the requested window count towards any total.
"""

from __future__ import annotations

from datetime import date

from teamplan.domain.errors import InvalidRange
from teamplan.domain.models import BookingType, ProjectReportRow, UtilizationRow
from teamplan.repos.memory import (
    BookingRepository,
    ProjectRepository,
    ResourceRepository,
)
from teamplan.services.calendar import working_days
from teamplan.services.capacity import daily_capacity, hours_in_days, percent, split_hours


def utilization_report(
    start: date,
    end: date,
    resource_repo: ResourceRepository,
    booking_repo: BookingRepository,
) -> list[UtilizationRow]:
    """Booked, leave and available hours for every active resource."""
    if start > end:
        raise InvalidRange(start, end)

    days = working_days(start, end)
    bookings = booking_repo.list_overlapping(start, end)

    rows: list[UtilizationRow] = []
    for resource in resource_repo.list_all(active_only=True):
        capacity = daily_capacity(resource) * len(days)
        booked, leave = split_hours(
            (b for b in bookings if b.resource_id == resource.id), days
        )
        rows.append(
            UtilizationRow(
                resource_id=resource.id,
                resource_name=resource.full_name,
                department_name=resource_repo.view(resource).department_name,
                capacity_hours=capacity,
                booked_hours=booked,
                leave_hours=leave,
                utilization_percent=percent(booked, capacity) if capacity > 0 else 0,
                working_days=len(days),
            )
        )
    return rows


def project_report(
    start: date,
    end: date,
    project_repo: ProjectRepository,
    booking_repo: BookingRepository,
) -> list[ProjectReportRow]:
    """Booked hours against budget for every active project."""
    if start > end:
        raise InvalidRange(start, end)

    days = working_days(start, end)
    bookings = booking_repo.list_overlapping(
        start, end, booking_type=BookingType.PROJECT
    )

    rows: list[ProjectReportRow] = []
    for project in project_repo.list_all(active_only=True):
        booked = 0.0
        resource_ids: set[int] = set()
        for booking in bookings:
            if booking.project_id != project.id:
                continue
            resource_ids.add(booking.resource_id)
            booked += hours_in_days(booking, days)

        rows.append(
            ProjectReportRow(
                project_id=project.id,
                project_name=project.name,
                client_name=project.client_name,
                color=project.color,
                budget_hours=project.budget_hours,
                booked_hours=booked,
                budget_used_percent=(
                    percent(booked, project.budget_hours) if project.budget_hours else None
                ),
                resource_count=len(resource_ids),
            )
        )
    return rows
