"""In-memory repositories for departments, resources, projects and bookings."""

from __future__ import annotations

import itertools
from datetime import date
from typing import Generic, TypeVar

from pydantic import BaseModel

from teamplan.domain.models import (
    Booking,
    BookingType,
    BookingView,
    Department,
    Project,
    Resource,
    ResourceView,
)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _DictRepository(Generic[RecordT]):
    """Dict-backed store keyed by an auto-incrementing integer id."""

    def __init__(self) -> None:
        self._store: dict[int, RecordT] = {}
        self._ids = itertools.count(1)

    def _insert(self, record: RecordT) -> RecordT:
        stored = record.model_copy(update={"id": next(self._ids)})
        self._store[stored.id] = stored
        return stored

    def _replace(self, record: RecordT) -> RecordT | None:
        """Overwrite a stored record; returns ``None`` if it no longer exists."""
        if record.id not in self._store:
            return None
        self._store[record.id] = record
        return record

    def delete(self, record_id: int) -> bool:
        return self._store.pop(record_id, None) is not None

    def clear(self) -> None:
        self._store.clear()
        self._ids = itertools.count(1)


class DepartmentRepository(_DictRepository[Department]):
    def add(self, department: Department) -> Department:
        return self._insert(department)

    def get(self, department_id: int) -> Department | None:
        return self._store.get(department_id)

    def list_all(self) -> list[Department]:
        return sorted(self._store.values(), key=lambda d: d.name)


class ResourceRepository(_DictRepository[Resource]):
    def __init__(self, department_repo: DepartmentRepository) -> None:
        super().__init__()
        self.department_repo = department_repo

    def add(self, resource: Resource) -> Resource:
        return self._insert(resource)

    def update(self, resource: Resource) -> Resource | None:
        return self._replace(resource)

    def get(self, resource_id: int) -> Resource | None:
        return self._store.get(resource_id)

    def list_all(self, active_only: bool = False) -> list[Resource]:
        resources = [
            r for r in self._store.values() if r.is_active or not active_only
        ]
        return sorted(resources, key=lambda r: (r.first_name, r.last_name))

    def view(self, resource: Resource) -> ResourceView:
        """Annotate a resource with its department name."""
        department = (
            self.department_repo.get(resource.department_id)
            if resource.department_id is not None
            else None
        )
        return ResourceView(
            **resource.model_dump(),
            department_name=department.name if department else None,
        )


class ProjectRepository(_DictRepository[Project]):
    def add(self, project: Project) -> Project:
        return self._insert(project)

    def update(self, project: Project) -> Project | None:
        return self._replace(project)

    def get(self, project_id: int) -> Project | None:
        return self._store.get(project_id)

    def list_all(self, active_only: bool = False) -> list[Project]:
        projects = [p for p in self._store.values() if p.is_active or not active_only]
        return sorted(projects, key=lambda p: p.name)


class BookingRepository(_DictRepository[Booking]):
    """Store for bookings.

    Reads through ``get_view``/``list_views`` come back annotated with the
    project name/color and the resource display name, joined from the
    sibling repositories.
    """

    def __init__(
        self, resource_repo: ResourceRepository, project_repo: ProjectRepository
    ) -> None:
        super().__init__()
        self.resource_repo = resource_repo
        self.project_repo = project_repo

    def add(self, booking: Booking) -> Booking:
        return self._insert(booking)

    def update(self, booking: Booking) -> Booking | None:
        return self._replace(booking)

    def get(self, booking_id: int) -> Booking | None:
        return self._store.get(booking_id)

    def list_all(self) -> list[Booking]:
        return sorted(self._store.values(), key=lambda b: (b.start_date, b.id))

    def list_overlapping(
        self,
        start: date,
        end: date,
        resource_id: int | None = None,
        exclude_id: int | None = None,
        booking_type: BookingType | None = None,
    ) -> list[Booking]:
        """Return bookings whose inclusive range intersects ``[start, end]``."""
        return [
            b
            for b in self.list_all()
            if b.start_date <= end
            and b.end_date >= start
            and (resource_id is None or b.resource_id == resource_id)
            and (exclude_id is None or b.id != exclude_id)
            and (booking_type is None or b.booking_type == booking_type)
        ]

    def count_for_resource(self, resource_id: int) -> int:
        return sum(1 for b in self._store.values() if b.resource_id == resource_id)

    def count_for_project(self, project_id: int) -> int:
        return sum(1 for b in self._store.values() if b.project_id == project_id)

    def annotate(self, booking: Booking) -> BookingView:
        project = (
            self.project_repo.get(booking.project_id)
            if booking.project_id is not None
            else None
        )
        resource = self.resource_repo.get(booking.resource_id)
        return BookingView(
            **booking.model_dump(),
            project_name=project.name if project else None,
            project_color=project.color if project else None,
            resource_name=resource.full_name if resource else None,
        )

    def get_view(self, booking_id: int) -> BookingView | None:
        booking = self.get(booking_id)
        return self.annotate(booking) if booking is not None else None

    def list_views(
        self, start: date | None = None, end: date | None = None
    ) -> list[BookingView]:
        if start is not None and end is not None:
            bookings = self.list_overlapping(start, end)
        else:
            bookings = self.list_all()
        return [self.annotate(b) for b in bookings]
