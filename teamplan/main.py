"""FastAPI application: entry point for the resource scheduling service."""

from __future__ import annotations

import json
import logging
from datetime import date

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from teamplan.config import settings
from teamplan.domain.errors import SchedulingError
from teamplan.domain.models import (
    BookingCreate,
    BookingUpdate,
    BookingView,
    Department,
    DepartmentCreate,
    Project,
    ProjectCreate,
    ProjectReportRow,
    ProjectUpdate,
    ResourceCreate,
    ResourceUpdate,
    ResourceView,
    ScheduleResource,
    UtilizationRow,
)
from teamplan.repos.memory import (
    BookingRepository,
    DepartmentRepository,
    ProjectRepository,
    ResourceRepository,
)
from teamplan.services.bookings import BookingService
from teamplan.services.directory import DirectoryService
from teamplan.services.reports import project_report, utilization_report
from teamplan.services.schedule import build_schedule


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging() -> None:
    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
    logging.root.handlers = [handler]
    logging.root.setLevel(settings.LOG_LEVEL.upper())


configure_logging()
logger = logging.getLogger("teamplan")

app = FastAPI(title=settings.APP_NAME)

# ── Singletons (created at import time for simplicity) ────────────────
department_repo = DepartmentRepository()
resource_repo = ResourceRepository(department_repo)
project_repo = ProjectRepository()
booking_repo = BookingRepository(resource_repo, project_repo)

booking_service = BookingService(resource_repo, project_repo, booking_repo)
directory_service = DirectoryService(
    department_repo, resource_repo, project_repo, booking_repo
)


@app.exception_handler(SchedulingError)
async def handle_scheduling_error(request: Request, exc: SchedulingError) -> JSONResponse:
    logger.info(
        "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail
    )
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


# ── Departments ───────────────────────────────────────────────────────


@app.get("/api/departments", response_model=list[Department])
def list_departments() -> list[Department]:
    return directory_service.list_departments()


@app.post("/api/departments", response_model=Department, status_code=201)
def create_department(body: DepartmentCreate) -> Department:
    return directory_service.create_department(body)


# ── Resources ─────────────────────────────────────────────────────────


@app.get("/api/resources", response_model=list[ResourceView])
def list_resources() -> list[ResourceView]:
    """Return all resources, active or not, ordered by name."""
    return directory_service.list_resources()


@app.get("/api/resources/{resource_id}", response_model=ResourceView)
def get_resource(resource_id: int) -> ResourceView:
    return directory_service.get_resource(resource_id)


@app.post("/api/resources", response_model=ResourceView, status_code=201)
def create_resource(body: ResourceCreate) -> ResourceView:
    return directory_service.create_resource(body)


@app.put("/api/resources/{resource_id}", response_model=ResourceView)
def update_resource(resource_id: int, body: ResourceUpdate) -> ResourceView:
    return directory_service.update_resource(resource_id, body)


@app.delete("/api/resources/{resource_id}", status_code=204)
def delete_resource(resource_id: int) -> Response:
    directory_service.delete_resource(resource_id)
    return Response(status_code=204)


# ── Projects ──────────────────────────────────────────────────────────


@app.get("/api/projects", response_model=list[Project])
def list_projects() -> list[Project]:
    return directory_service.list_projects()


@app.get("/api/projects/{project_id}", response_model=Project)
def get_project(project_id: int) -> Project:
    return directory_service.get_project(project_id)


@app.post("/api/projects", response_model=Project, status_code=201)
def create_project(body: ProjectCreate) -> Project:
    return directory_service.create_project(body)


@app.put("/api/projects/{project_id}", response_model=Project)
def update_project(project_id: int, body: ProjectUpdate) -> Project:
    return directory_service.update_project(project_id, body)


@app.delete("/api/projects/{project_id}", status_code=204)
def delete_project(project_id: int) -> Response:
    directory_service.delete_project(project_id)
    return Response(status_code=204)


# ── Bookings ──────────────────────────────────────────────────────────


@app.get("/api/bookings", response_model=list[BookingView])
def list_bookings() -> list[BookingView]:
    return booking_service.list_all()


@app.get("/api/bookings/schedule", response_model=list[ScheduleResource])
def get_schedule(start: date, end: date) -> list[ScheduleResource]:
    """Return active resources with the bookings visible in ``[start, end]``."""
    return build_schedule(start, end, resource_repo, booking_repo)


@app.get("/api/bookings/{booking_id}", response_model=BookingView)
def get_booking(booking_id: int) -> BookingView:
    return booking_service.get(booking_id)


@app.post("/api/bookings", response_model=BookingView, status_code=201)
def create_booking(body: BookingCreate) -> BookingView:
    """Create a booking; 409 with the clashing days if it would overallocate."""
    return booking_service.create(body)


@app.put("/api/bookings/{booking_id}", response_model=BookingView)
def update_booking(booking_id: int, body: BookingUpdate) -> BookingView:
    return booking_service.update(booking_id, body)


@app.delete("/api/bookings/{booking_id}", status_code=204)
def delete_booking(booking_id: int) -> Response:
    booking_service.delete(booking_id)
    return Response(status_code=204)


# ── Reports ───────────────────────────────────────────────────────────


@app.get("/api/reports/utilization", response_model=list[UtilizationRow])
def get_utilization_report(start: date, end: date) -> list[UtilizationRow]:
    return utilization_report(start, end, resource_repo, booking_repo)


@app.get("/api/reports/projects", response_model=list[ProjectReportRow])
def get_project_report(start: date, end: date) -> list[ProjectReportRow]:
    return project_report(start, end, project_repo, booking_repo)
