"""Domain errors raised by the scheduling services.

Each error carries the HTTP status it maps to and a human-readable
``detail``; the API layer renders them without further translation.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from teamplan.domain.models import Clash


class SchedulingError(Exception):
    status_code: int = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def payload(self) -> dict[str, Any]:
        return {"detail": self.detail}


class NotFound(SchedulingError):
    """A referenced department, resource, project or booking does not exist."""

    status_code = 404

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class InvalidRange(SchedulingError):
    status_code = 400

    def __init__(self, start: date, end: date) -> None:
        super().__init__(
            f"Start date {start.isoformat()} must be before or equal to "
            f"end date {end.isoformat()}"
        )
        self.start = start
        self.end = end


class InvalidBooking(SchedulingError):
    status_code = 400


class Overallocation(SchedulingError):
    """The booking would push one or more working days over capacity."""

    status_code = 409

    def __init__(self, clashes: list[Clash]) -> None:
        super().__init__("Booking would cause overallocation")
        self.clashes = clashes

    def payload(self) -> dict[str, Any]:
        return {
            "detail": self.detail,
            "clashes": [c.model_dump(mode="json", by_alias=True) for c in self.clashes],
        }


class StillReferenced(SchedulingError):
    status_code = 409

    def __init__(self, kind: str, record_id: int, booking_count: int) -> None:
        super().__init__(
            f"{kind} {record_id} is referenced by {booking_count} booking(s); "
            "deactivate it instead"
        )
        self.kind = kind
        self.record_id = record_id
        self.booking_count = booking_count
