"""Tests for the capacity clash detector."""

from datetime import date

import pytest

from teamplan.domain.errors import NotFound
from teamplan.domain.models import Booking, BookingType, LeaveType, Project, Resource
from teamplan.repos.memory import (
    BookingRepository,
    DepartmentRepository,
    ProjectRepository,
    ResourceRepository,
)
from teamplan.services.clashes import find_clashes

_MON = date(2025, 3, 3)
_FRI = date(2025, 3, 7)
_SAT = date(2025, 3, 8)
_SUN = date(2025, 3, 9)


@pytest.fixture()
def repos():
    resource_repo = ResourceRepository(DepartmentRepository())
    project_repo = ProjectRepository()
    booking_repo = BookingRepository(resource_repo, project_repo)
    resource = resource_repo.add(
        Resource(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            capacity_hours=8,
            color="#3B82F6",
        )
    )
    project = project_repo.add(Project(name="Engine", color="#8B5CF6"))
    return resource_repo, booking_repo, resource, project


def _book(booking_repo, resource, project, start, end, hours) -> Booking:
    return booking_repo.add(
        Booking(
            resource_id=resource.id,
            project_id=project.id,
            start_date=start,
            end_date=end,
            hours_per_day=hours,
            booking_type=BookingType.PROJECT,
        )
    )


def test_no_existing_bookings(repos):
    resource_repo, booking_repo, resource, _ = repos
    assert find_clashes(resource.id, _MON, _FRI, 8, resource_repo, booking_repo) == []


def test_candidate_alone_over_capacity(repos):
    """A single booking above capacity clashes on every working day it covers."""
    resource_repo, booking_repo, resource, _ = repos
    clashes = find_clashes(resource.id, _MON, _SUN, 10, resource_repo, booking_repo)
    assert [c.day for c in clashes] == [date(2025, 3, d) for d in range(3, 8)]


def test_overlap_reports_each_day_in_order(repos):
    resource_repo, booking_repo, resource, project = repos
    _book(booking_repo, resource, project, _MON, _FRI, 6)

    clashes = find_clashes(
        resource.id, date(2025, 3, 5), date(2025, 3, 6), 3, resource_repo, booking_repo
    )
    assert [(c.day, c.total_hours, c.capacity) for c in clashes] == [
        (date(2025, 3, 5), 9, 8),
        (date(2025, 3, 6), 9, 8),
    ]


def test_equal_to_capacity_is_not_a_clash(repos):
    resource_repo, booking_repo, resource, project = repos
    _book(booking_repo, resource, project, _MON, _FRI, 6)
    assert (
        find_clashes(resource.id, _MON, _FRI, 2, resource_repo, booking_repo) == []
    )


def test_weekend_only_overflow_is_ignored(repos):
    resource_repo, booking_repo, resource, project = repos
    _book(booking_repo, resource, project, _SAT, _SUN, 8)
    assert find_clashes(resource.id, _SAT, _SUN, 8, resource_repo, booking_repo) == []


def test_leave_counts_towards_load(repos):
    resource_repo, booking_repo, resource, _ = repos
    booking_repo.add(
        Booking(
            resource_id=resource.id,
            start_date=_MON,
            end_date=_MON,
            hours_per_day=8,
            booking_type=BookingType.LEAVE,
            leave_type=LeaveType.VACATION,
        )
    )
    clashes = find_clashes(resource.id, _MON, _FRI, 1, resource_repo, booking_repo)
    assert [c.day for c in clashes] == [_MON]


def test_exclude_booking_id(repos):
    """Re-checking a booking against itself finds nothing."""
    resource_repo, booking_repo, resource, project = repos
    existing = _book(booking_repo, resource, project, _MON, _FRI, 8)

    assert find_clashes(resource.id, _MON, _FRI, 8, resource_repo, booking_repo)
    assert (
        find_clashes(
            resource.id,
            _MON,
            _FRI,
            8,
            resource_repo,
            booking_repo,
            exclude_booking_id=existing.id,
        )
        == []
    )


def test_other_resources_do_not_count(repos):
    resource_repo, booking_repo, resource, project = repos
    other = resource_repo.add(
        Resource(
            first_name="Grace",
            last_name="Hopper",
            email="grace@example.com",
            capacity_hours=8,
            color="#000000",
        )
    )
    _book(booking_repo, other, project, _MON, _FRI, 8)
    assert find_clashes(resource.id, _MON, _FRI, 8, resource_repo, booking_repo) == []


def test_unknown_resource(repos):
    resource_repo, booking_repo, _, _ = repos
    with pytest.raises(NotFound):
        find_clashes(999, _MON, _FRI, 8, resource_repo, booking_repo)
