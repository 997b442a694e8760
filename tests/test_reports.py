"""Tests for the utilization and project reports and the schedule view."""

from __future__ import annotations

from datetime import date

import pytest

from teamplan.domain.errors import InvalidRange
from teamplan.domain.models import (
    Booking,
    BookingType,
    Department,
    LeaveType,
    Project,
    Resource,
)
from teamplan.repos.memory import (
    BookingRepository,
    DepartmentRepository,
    ProjectRepository,
    ResourceRepository,
)
from teamplan.services.reports import project_report, utilization_report
from teamplan.services.schedule import build_schedule

_MON = date(2025, 3, 3)
_FRI = date(2025, 3, 7)
_SUN = date(2025, 3, 9)


@pytest.fixture()
def env():
    department_repo = DepartmentRepository()
    resource_repo = ResourceRepository(department_repo)
    project_repo = ProjectRepository()
    booking_repo = BookingRepository(resource_repo, project_repo)

    class Env:
        pass

    e = Env()
    e.department_repo = department_repo
    e.resource_repo = resource_repo
    e.project_repo = project_repo
    e.booking_repo = booking_repo
    return e


def _resource(env, first: str, last: str, **overrides) -> Resource:
    defaults = dict(
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        capacity_hours=8,
        color="#3B82F6",
    )
    defaults.update(overrides)
    return env.resource_repo.add(Resource(**defaults))


def _project(env, name: str, **overrides) -> Project:
    return env.project_repo.add(Project(name=name, color="#8B5CF6", **overrides))


def _book(env, resource, start, end, hours, project=None, leave_type=None) -> Booking:
    if project is not None:
        kind = dict(booking_type=BookingType.PROJECT, project_id=project.id)
    else:
        kind = dict(booking_type=BookingType.LEAVE, leave_type=leave_type or LeaveType.OTHER)
    return env.booking_repo.add(
        Booking(
            resource_id=resource.id,
            start_date=start,
            end_date=end,
            hours_per_day=hours,
            **kind,
        )
    )


# ---------------------------------------------------------------------------
# Utilization
# ---------------------------------------------------------------------------


def test_utilization_five_day_window(env):
    ada = _resource(env, "Ada", "Lovelace")
    _book(env, ada, _MON, _FRI, 6, project=_project(env, "X"))

    [row] = utilization_report(_MON, _FRI, env.resource_repo, env.booking_repo)

    assert row.resource_id == ada.id
    assert row.resource_name == "Ada Lovelace"
    assert row.capacity_hours == 40
    assert row.booked_hours == 30
    assert row.leave_hours == 0
    assert row.utilization_percent == 75
    assert row.working_days == 5


def test_utilization_splits_leave_and_ignores_weekends(env):
    dept = env.department_repo.add(Department(name="Engineering"))
    ada = _resource(env, "Ada", "Lovelace", department_id=dept.id)
    _book(env, ada, _MON, _SUN, 4, project=_project(env, "X"))
    _book(env, ada, date(2025, 3, 6), _SUN, 4, leave_type=LeaveType.VACATION)

    [row] = utilization_report(_MON, _SUN, env.resource_repo, env.booking_repo)

    assert row.department_name == "Engineering"
    assert row.working_days == 5
    assert row.booked_hours == 20
    assert row.leave_hours == 8
    assert row.utilization_percent == 50


def test_utilization_clips_bookings_to_window(env):
    ada = _resource(env, "Ada", "Lovelace")
    _book(env, ada, date(2025, 2, 24), date(2025, 3, 14), 8, project=_project(env, "X"))

    [row] = utilization_report(_MON, date(2025, 3, 4), env.resource_repo, env.booking_repo)
    assert row.booked_hours == 16
    assert row.utilization_percent == 100


def test_utilization_weekend_only_window_has_zero_capacity(env):
    _resource(env, "Ada", "Lovelace")
    [row] = utilization_report(
        date(2025, 3, 8), _SUN, env.resource_repo, env.booking_repo
    )
    assert row.capacity_hours == 0
    assert row.utilization_percent == 0


def test_utilization_rounds_half_up(env):
    ada = _resource(env, "Ada", "Lovelace", capacity_hours=8)
    # 1h booked on one 8h day -> 12.5%
    _book(env, ada, _MON, _MON, 1, project=_project(env, "X"))
    [row] = utilization_report(_MON, _MON, env.resource_repo, env.booking_repo)
    assert row.utilization_percent == 13


def test_utilization_skips_inactive_and_orders_by_name(env):
    _resource(env, "Zoe", "Adams")
    _resource(env, "Ada", "Zane")
    _resource(env, "Ada", "Byron")
    _resource(env, "Old", "Timer", is_active=False)

    rows = utilization_report(_MON, _FRI, env.resource_repo, env.booking_repo)
    assert [r.resource_name for r in rows] == ["Ada Byron", "Ada Zane", "Zoe Adams"]


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def test_project_report_budget_and_resources(env):
    ada = _resource(env, "Ada", "Lovelace")
    grace = _resource(env, "Grace", "Hopper")
    apollo = _project(env, "Apollo", client_name="NASA", budget_hours=100)
    _book(env, ada, _MON, _FRI, 4, project=apollo)
    _book(env, grace, _MON, date(2025, 3, 4), 5, project=apollo)
    _book(env, grace, _FRI, _FRI, 8, leave_type=LeaveType.SICK)

    [row] = project_report(_MON, _FRI, env.project_repo, env.booking_repo)

    assert row.project_name == "Apollo"
    assert row.client_name == "NASA"
    assert row.booked_hours == 30
    assert row.budget_hours == 100
    assert row.budget_used_percent == 30
    assert row.resource_count == 2


def test_project_report_without_budget(env):
    ada = _resource(env, "Ada", "Lovelace")
    _book(env, ada, _MON, _MON, 2, project=_project(env, "Internal"))

    [row] = project_report(_MON, _FRI, env.project_repo, env.booking_repo)
    assert row.budget_hours is None
    assert row.budget_used_percent is None
    assert row.booked_hours == 2


def test_project_report_lists_idle_active_projects_by_name(env):
    _project(env, "Zeta")
    _project(env, "Alpha")
    _project(env, "Retired", is_active=False)

    rows = project_report(_MON, _FRI, env.project_repo, env.booking_repo)
    assert [r.project_name for r in rows] == ["Alpha", "Zeta"]
    assert all(r.booked_hours == 0 and r.resource_count == 0 for r in rows)


def test_reports_reject_reversed_window(env):
    with pytest.raises(InvalidRange):
        utilization_report(_FRI, _MON, env.resource_repo, env.booking_repo)
    with pytest.raises(InvalidRange):
        project_report(_FRI, _MON, env.project_repo, env.booking_repo)


def test_reports_recompute_after_changes(env):
    ada = _resource(env, "Ada", "Lovelace")
    booking = _book(env, ada, _MON, _FRI, 8, project=_project(env, "X"))
    assert utilization_report(_MON, _FRI, env.resource_repo, env.booking_repo)[0].booked_hours == 40

    env.booking_repo.delete(booking.id)
    assert utilization_report(_MON, _FRI, env.resource_repo, env.booking_repo)[0].booked_hours == 0


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


def test_schedule_groups_bookings_per_resource(env):
    dept = env.department_repo.add(Department(name="Design"))
    ada = _resource(env, "Ada", "Lovelace", department_id=dept.id)
    grace = _resource(env, "Grace", "Hopper")
    _resource(env, "Old", "Timer", is_active=False)
    project = _project(env, "Apollo")
    later = _book(env, ada, date(2025, 3, 5), _FRI, 2, project=project)
    earlier = _book(env, ada, date(2025, 2, 20), _MON, 2, project=project)
    _book(env, grace, date(2025, 4, 1), date(2025, 4, 2), 2, project=project)

    schedule = build_schedule(_MON, _SUN, env.resource_repo, env.booking_repo)

    assert [r.first_name for r in schedule] == ["Ada", "Grace"]
    assert schedule[0].department_name == "Design"
    assert [b.id for b in schedule[0].bookings] == [earlier.id, later.id]
    assert schedule[0].bookings[0].project_name == "Apollo"
    assert schedule[1].bookings == []


def test_schedule_rejects_reversed_window(env):
    with pytest.raises(InvalidRange):
        build_schedule(_SUN, _MON, env.resource_repo, env.booking_repo)
