"""Administration of the people, projects and departments that bookings refer to."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from teamplan.config import settings
from teamplan.domain.errors import NotFound, StillReferenced
from teamplan.domain.models import (
    Department,
    DepartmentCreate,
    Project,
    ProjectCreate,
    ProjectUpdate,
    Resource,
    ResourceCreate,
    ResourceUpdate,
    ResourceView,
)
from teamplan.repos.memory import (
    BookingRepository,
    DepartmentRepository,
    ProjectRepository,
    ResourceRepository,
)

logger = logging.getLogger(__name__)

# Fields that cannot be cleared with an explicit null on update.
_RESOURCE_REQUIRED = (
    "first_name",
    "last_name",
    "email",
    "role",
    "capacity_hours",
    "color",
    "is_active",
)
_PROJECT_REQUIRED = ("name", "client_name", "color", "is_active")


def _apply(record, changes: dict, required: tuple[str, ...]):
    """Merge a partial update over *record* and re-validate the result."""
    for field in required:
        if field in changes and changes[field] is None:
            del changes[field]
    merged = record.model_dump()
    merged.update(changes)
    merged["updated_at"] = datetime.now(timezone.utc)
    return type(record).model_validate(merged)


class DirectoryService:
    def __init__(
        self,
        department_repo: DepartmentRepository,
        resource_repo: ResourceRepository,
        project_repo: ProjectRepository,
        booking_repo: BookingRepository,
    ) -> None:
        self.department_repo = department_repo
        self.resource_repo = resource_repo
        self.project_repo = project_repo
        self.booking_repo = booking_repo

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    def list_departments(self) -> list[Department]:
        return self.department_repo.list_all()

    def create_department(self, data: DepartmentCreate) -> Department:
        department = self.department_repo.add(Department(name=data.name))
        logger.info("Created department %s (%s)", department.id, department.name)
        return department

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def list_resources(self) -> list[ResourceView]:
        return [self.resource_repo.view(r) for r in self.resource_repo.list_all()]

    def get_resource(self, resource_id: int) -> ResourceView:
        resource = self.resource_repo.get(resource_id)
        if resource is None:
            raise NotFound("Resource", resource_id)
        return self.resource_repo.view(resource)

    def create_resource(self, data: ResourceCreate) -> ResourceView:
        self._check_department(data.department_id)
        resource = self.resource_repo.add(
            Resource(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                role=data.role or "",
                department_id=data.department_id,
                capacity_hours=data.capacity_hours or settings.DEFAULT_CAPACITY_HOURS,
                color=data.color or settings.DEFAULT_RESOURCE_COLOR,
            )
        )
        logger.info("Created resource %s (%s)", resource.id, resource.full_name)
        return self.resource_repo.view(resource)

    def update_resource(self, resource_id: int, data: ResourceUpdate) -> ResourceView:
        existing = self.resource_repo.get(resource_id)
        if existing is None:
            raise NotFound("Resource", resource_id)

        changes = data.model_dump(exclude_unset=True)
        self._check_department(changes.get("department_id"))
        resource = self.resource_repo.update(_apply(existing, changes, _RESOURCE_REQUIRED))
        if resource is None:
            raise NotFound("Resource", resource_id)
        logger.info("Updated resource %s", resource_id)
        return self.resource_repo.view(resource)

    def delete_resource(self, resource_id: int) -> None:
        if self.resource_repo.get(resource_id) is None:
            raise NotFound("Resource", resource_id)
        in_use = self.booking_repo.count_for_resource(resource_id)
        if in_use:
            raise StillReferenced("Resource", resource_id, in_use)
        self.resource_repo.delete(resource_id)
        logger.info("Deleted resource %s", resource_id)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_projects(self) -> list[Project]:
        return self.project_repo.list_all()

    def get_project(self, project_id: int) -> Project:
        project = self.project_repo.get(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        return project

    def create_project(self, data: ProjectCreate) -> Project:
        project = self.project_repo.add(
            Project(
                name=data.name,
                client_name=data.client_name or "",
                color=data.color or settings.DEFAULT_PROJECT_COLOR,
                start_date=data.start_date,
                end_date=data.end_date,
                budget_hours=data.budget_hours,
            )
        )
        logger.info("Created project %s (%s)", project.id, project.name)
        return project

    def update_project(self, project_id: int, data: ProjectUpdate) -> Project:
        existing = self.get_project(project_id)
        changes = data.model_dump(exclude_unset=True)
        project = self.project_repo.update(_apply(existing, changes, _PROJECT_REQUIRED))
        if project is None:
            raise NotFound("Project", project_id)
        logger.info("Updated project %s", project_id)
        return project

    def delete_project(self, project_id: int) -> None:
        self.get_project(project_id)
        in_use = self.booking_repo.count_for_project(project_id)
        if in_use:
            raise StillReferenced("Project", project_id, in_use)
        self.project_repo.delete(project_id)
        logger.info("Deleted project %s", project_id)

    def _check_department(self, department_id: int | None) -> None:
        if department_id is not None and self.department_repo.get(department_id) is None:
            raise NotFound("Department", department_id)
