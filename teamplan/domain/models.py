"""Domain models for the resource scheduling system."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class BookingType(StrEnum):
    PROJECT = "project"
    LEAVE = "leave"


class LeaveType(StrEnum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    OTHER = "other"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


class Department(BaseModel):
    id: int | None = None
    name: str
    created_at: datetime = Field(default_factory=_utcnow)


class Resource(BaseModel):
    id: int | None = None
    first_name: str
    last_name: str
    email: str
    role: str = ""
    department_id: int | None = None
    capacity_hours: float = Field(gt=0)
    color: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Project(BaseModel):
    id: int | None = None
    name: str
    client_name: str = ""
    color: str
    start_date: date | None = None
    end_date: date | None = None
    budget_hours: float | None = Field(default=None, ge=0)
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Booking(BaseModel):
    id: int | None = None
    resource_id: int
    project_id: int | None = None
    start_date: date
    end_date: date
    hours_per_day: float = Field(ge=0.5, le=24)
    booking_type: BookingType
    leave_type: LeaveType | None = None
    notes: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _check_invariants(self) -> Booking:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.booking_type == BookingType.PROJECT:
            if self.project_id is None or self.leave_type is not None:
                raise ValueError("project bookings need a project_id and no leave_type")
        elif self.leave_type is None or self.project_id is not None:
            raise ValueError("leave bookings need a leave_type and no project_id")
        return self

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


# ---------------------------------------------------------------------------
# Read projections
# ---------------------------------------------------------------------------


class ResourceView(Resource):
    department_name: str | None = None


class BookingView(Booking):
    project_name: str | None = None
    project_color: str | None = None
    resource_name: str | None = None


class ScheduleResource(ResourceView):
    bookings: list[BookingView] = Field(default_factory=list)


class Clash(BaseModel):
    """A working day on which a resource's combined hours exceed capacity."""

    day: date = Field(serialization_alias="date")
    total_hours: float = Field(serialization_alias="totalHours")
    capacity: float


class UtilizationRow(BaseModel):
    resource_id: int
    resource_name: str
    department_name: str | None = None
    capacity_hours: float
    booked_hours: float
    leave_hours: float
    utilization_percent: int
    working_days: int


class ProjectReportRow(BaseModel):
    project_id: int
    project_name: str
    client_name: str
    color: str
    budget_hours: float | None = None
    booked_hours: float
    budget_used_percent: int | None = None
    resource_count: int


# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1)


class ResourceCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: str | None = None
    department_id: int | None = None
    capacity_hours: float | None = Field(default=None, gt=0, le=24)
    color: str | None = None


class ResourceUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=3)
    role: str | None = None
    department_id: int | None = None
    capacity_hours: float | None = Field(default=None, gt=0, le=24)
    color: str | None = None
    is_active: bool | None = None


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    client_name: str | None = None
    color: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget_hours: float | None = Field(default=None, ge=0)


class ProjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    client_name: str | None = None
    color: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget_hours: float | None = Field(default=None, ge=0)
    is_active: bool | None = None


class BookingCreate(BaseModel):
    resource_id: int = Field(gt=0)
    project_id: int | None = Field(default=None, gt=0)
    start_date: date
    end_date: date
    hours_per_day: float | None = Field(default=None, ge=0.5, le=24)
    booking_type: BookingType
    leave_type: LeaveType | None = None
    notes: str | None = None


class BookingUpdate(BaseModel):
    """Partial booking update; only fields present in the request are applied."""

    resource_id: int | None = Field(default=None, gt=0)
    project_id: int | None = Field(default=None, gt=0)
    start_date: date | None = None
    end_date: date | None = None
    hours_per_day: float | None = Field(default=None, ge=0.5, le=24)
    booking_type: BookingType | None = None
    leave_type: LeaveType | None = None
    notes: str | None = None
