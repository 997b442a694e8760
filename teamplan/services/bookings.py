"""Booking lifecycle: the only write path for bookings.

Every create and update re-derives clash status from the resource's
current bookings before anything is stored; nothing is written when the
check fails.
"""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack, contextmanager
from datetime import date, datetime, timezone
from typing import Iterator

from teamplan.config import settings
from teamplan.domain.errors import InvalidBooking, InvalidRange, NotFound, Overallocation
from teamplan.domain.models import (
    Booking,
    BookingCreate,
    BookingType,
    BookingUpdate,
    BookingView,
    LeaveType,
)
from teamplan.repos.memory import (
    BookingRepository,
    ProjectRepository,
    ResourceRepository,
)
from teamplan.services.clashes import find_clashes

logger = logging.getLogger(__name__)


class BookingService:
    """Creates, updates and deletes bookings while holding the capacity invariant."""

    def __init__(
        self,
        resource_repo: ResourceRepository,
        project_repo: ProjectRepository,
        booking_repo: BookingRepository,
    ) -> None:
        self.resource_repo = resource_repo
        self.project_repo = project_repo
        self.booking_repo = booking_repo
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self) -> list[BookingView]:
        return self.booking_repo.list_views()

    def get(self, booking_id: int) -> BookingView:
        view = self.booking_repo.get_view(booking_id)
        if view is None:
            raise NotFound("Booking", booking_id)
        return view

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: BookingCreate) -> BookingView:
        _check_range(data.start_date, data.end_date)
        project_id, leave_type = self._normalize_kind(
            data.booking_type, data.project_id, data.leave_type
        )
        hours = (
            data.hours_per_day
            if data.hours_per_day is not None
            else settings.DEFAULT_HOURS_PER_DAY
        )

        with self._locked(data.resource_id):
            self._check_capacity(data.resource_id, data.start_date, data.end_date, hours)
            booking = self.booking_repo.add(
                Booking(
                    resource_id=data.resource_id,
                    project_id=project_id,
                    start_date=data.start_date,
                    end_date=data.end_date,
                    hours_per_day=hours,
                    booking_type=data.booking_type,
                    leave_type=leave_type,
                    notes=data.notes or "",
                )
            )

        logger.info(
            "Created %s booking %s for resource %s (%s to %s, %sh/day)",
            booking.booking_type,
            booking.id,
            booking.resource_id,
            booking.start_date,
            booking.end_date,
            booking.hours_per_day,
        )
        return self.booking_repo.annotate(booking)

    def update(self, booking_id: int, data: BookingUpdate) -> BookingView:
        changes = data.model_dump(exclude_unset=True)
        # Explicit nulls on required fields mean "keep what is there".
        for field in ("resource_id", "start_date", "end_date", "hours_per_day", "booking_type"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if "notes" in changes and changes["notes"] is None:
            changes["notes"] = ""

        while True:
            existing = self.booking_repo.get(booking_id)
            if existing is None:
                raise NotFound("Booking", booking_id)
            target_id = changes.get("resource_id", existing.resource_id)

            with self._locked(existing.resource_id, target_id):
                # Re-read under the lock; a concurrent write may have moved or removed it.
                current = self.booking_repo.get(booking_id)
                if current is None:
                    raise NotFound("Booking", booking_id)
                if current.resource_id != existing.resource_id:
                    continue

                merged = self._merge(current, changes)
                self._check_capacity(
                    merged.resource_id,
                    merged.start_date,
                    merged.end_date,
                    merged.hours_per_day,
                    exclude_booking_id=booking_id,
                )
                booking = self.booking_repo.update(merged)
                if booking is None:
                    raise NotFound("Booking", booking_id)
                break

        logger.info(
            "Updated booking %s (fields: %s)",
            booking_id,
            ", ".join(sorted(changes)) or "none",
        )
        return self.booking_repo.annotate(booking)

    def delete(self, booking_id: int) -> None:
        """Remove a booking. Removing load can never create a clash."""
        while True:
            existing = self.booking_repo.get(booking_id)
            if existing is None:
                raise NotFound("Booking", booking_id)
            with self._locked(existing.resource_id):
                current = self.booking_repo.get(booking_id)
                if current is not None and current.resource_id != existing.resource_id:
                    continue
                if current is None or not self.booking_repo.delete(booking_id):
                    raise NotFound("Booking", booking_id)
                break
        logger.info("Deleted booking %s", booking_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _merge(self, existing: Booking, changes: dict) -> Booking:
        """Apply a partial update over *existing* and validate the result."""
        merged = existing.model_dump()
        merged.update(changes)
        _check_range(merged["start_date"], merged["end_date"])

        booking_type = BookingType(merged["booking_type"])
        project_id = merged["project_id"] if booking_type == BookingType.PROJECT else None
        leave_type = merged["leave_type"] if booking_type == BookingType.LEAVE else None
        merged["project_id"], merged["leave_type"] = self._normalize_kind(
            booking_type, project_id, leave_type
        )
        merged["updated_at"] = datetime.now(timezone.utc)
        return Booking.model_validate(merged)

    def _normalize_kind(
        self,
        booking_type: BookingType,
        project_id: int | None,
        leave_type: LeaveType | None,
    ) -> tuple[int | None, LeaveType | None]:
        """Keep only the field that matches the booking type."""
        if booking_type == BookingType.PROJECT:
            if project_id is None:
                raise InvalidBooking("Project bookings require a project_id")
            if self.project_repo.get(project_id) is None:
                raise NotFound("Project", project_id)
            return project_id, None
        return None, leave_type or LeaveType(settings.DEFAULT_LEAVE_TYPE)

    def _check_capacity(
        self,
        resource_id: int,
        start: date,
        end: date,
        hours_per_day: float,
        exclude_booking_id: int | None = None,
    ) -> None:
        clashes = find_clashes(
            resource_id,
            start,
            end,
            hours_per_day,
            resource_repo=self.resource_repo,
            booking_repo=self.booking_repo,
            exclude_booking_id=exclude_booking_id,
        )
        if clashes:
            logger.warning(
                "Rejected booking for resource %s: %d day(s) over capacity",
                resource_id,
                len(clashes),
            )
            raise Overallocation(clashes)

    @contextmanager
    def _locked(self, *resource_ids: int) -> Iterator[None]:
        """Serialize validate-then-write per resource, locking in id order."""
        with self._locks_guard:
            locks = [
                self._locks.setdefault(rid, threading.Lock())
                for rid in sorted(set(resource_ids))
            ]
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            yield


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidRange(start, end)
