"""Appointment scheduling service.

Every write runs its checks and the write itself under a per-doctor lock:
an in-process ``KeyedLock`` plus the store's own ``lock_schedule`` (a
PostgreSQL advisory lock for the SQL store). Two concurrent bookings for
the same doctor cannot both pass the overlap check, and two concurrent
status changes cannot both pass the transition check.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog

from app.config import settings
from app.core.exceptions import (
    InvalidStatusTransition,
    NoUpdatableFields,
    NotFoundException,
    SchedulingConflict,
    ValidationException,
)
from app.core.intervals import to_instant, validate_interval
from app.core.locks import KeyedLock
from app.repositories.appointments import AppointmentRepository
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentStatus,
    AppointmentUpdate,
)

logger = structlog.get_logger()

# Shared by every service instance in this process
doctor_schedule_locks = KeyedLock()


class AppointmentService:
    """Service for scheduling appointments."""

    def __init__(
        self,
        repository: AppointmentRepository,
        locks: KeyedLock | None = None,
        strict_status: bool | None = None,
    ):
        """
        Initialize service with its record store.

        Args:
            repository: Appointment store
            locks: Per-doctor lock registry, the process-wide one by default
            strict_status: Only allow scheduled -> completed/cancelled;
                defaults to the configured status policy
        """
        self.repository = repository
        self.locks = locks if locks is not None else doctor_schedule_locks
        if strict_status is None:
            strict_status = settings.appointment_status_policy == "strict"
        self.strict_status = strict_status

    async def create_appointment(self, data: AppointmentCreate) -> dict[str, Any]:
        """
        Create a new appointment.

        Args:
            data: Appointment creation data

        Returns:
            The stored appointment with status ``scheduled``

        Raises:
            InvalidInterval: If the times are invalid or end <= start
            SchedulingConflict: If the doctor already has an overlapping
                non-cancelled appointment
        """
        start = to_instant(data.start_time, "startTime")
        end = to_instant(data.end_time, "endTime")
        validate_interval(start, end)

        values = {
            "patient_id": data.patient_id,
            "doctor_id": data.doctor_id,
            "start_time": start,
            "end_time": end,
            "reason": data.reason,
            "notes": data.notes,
            "status": AppointmentStatus.SCHEDULED.value,
        }

        async with self.locks.hold(data.doctor_id):
            await self.repository.lock_schedule(data.doctor_id)
            await self._ensure_slot_free(data.doctor_id, start, end)
            appointment = await self.repository.create(values)

        logger.info(
            "appointment_created",
            appointment_id=str(appointment["id"]),
            doctor_id=str(data.doctor_id),
            patient_id=str(data.patient_id),
        )
        return appointment

    async def list_appointments(self, filters: AppointmentFilters) -> list[dict[str, Any]]:
        """
        List appointments matching all given filters.

        Args:
            filters: Optional patient, doctor, status and start time bounds

        Returns:
            Matching appointments ordered by start time (possibly empty)
        """
        bounds = {}
        if filters.from_time is not None:
            bounds["from_time"] = to_instant(filters.from_time, "from")
        if filters.to_time is not None:
            bounds["to_time"] = to_instant(filters.to_time, "to")
        if bounds:
            filters = filters.model_copy(update=bounds)

        return await self.repository.find_all(filters)

    async def get_appointment(self, appointment_id: UUID) -> dict[str, Any]:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
        """
        appointment = await self.repository.get(appointment_id)
        if not appointment:
            raise NotFoundException("Appointment not found")
        return appointment

    async def update_appointment(
        self,
        appointment_id: UUID,
        data: AppointmentUpdate,
    ) -> dict[str, Any]:
        """
        Apply a partial update to an appointment.

        When a time field changes, the merged interval is validated and
        re-checked for overlaps with the doctor's other appointments. The
        same check runs when a cancelled appointment is brought back into
        an active state.

        Args:
            appointment_id: Appointment ID
            data: Fields to change; only fields present in the request apply

        Returns:
            Updated appointment

        Raises:
            NoUpdatableFields: If the patch is empty
            InvalidInterval: If a time is invalid or the merged interval is inverted
            InvalidStatusTransition: If the status policy forbids the change
            SchedulingConflict: If the new interval overlaps another appointment
            NotFoundException: If appointment not found
        """
        patch = data.model_dump(exclude_unset=True)
        if not patch:
            raise NoUpdatableFields()

        values: dict[str, Any] = {}
        if "start_time" in patch:
            values["start_time"] = to_instant(patch["start_time"], "startTime")
        if "end_time" in patch:
            values["end_time"] = to_instant(patch["end_time"], "endTime")
        for field in ("reason", "notes"):
            if field in patch:
                values[field] = patch[field]

        new_status = None
        if "status" in patch:
            if patch["status"] is None:
                raise ValidationException("Appointment status cannot be null")
            new_status = AppointmentStatus(patch["status"])

        return await self._change(appointment_id, values, new_status)

    async def cancel_appointment(self, appointment_id: UUID) -> dict[str, Any]:
        """Mark an appointment cancelled. Cancelling twice is a no-op."""
        return await self._change(appointment_id, {}, AppointmentStatus.CANCELLED)

    async def complete_appointment(self, appointment_id: UUID) -> dict[str, Any]:
        """Mark an appointment completed. Completing twice is a no-op."""
        return await self._change(appointment_id, {}, AppointmentStatus.COMPLETED)

    async def _change(
        self,
        appointment_id: UUID,
        values: dict[str, Any],
        new_status: AppointmentStatus | None,
    ) -> dict[str, Any]:
        """
        Check and write a change while holding the doctor's schedule lock.

        The stored record is read under the lock, so the status transition
        and the merged interval are validated against the latest state.
        """
        doctor_id = (await self.get_appointment(appointment_id))["doctor_id"]

        async with self.locks.hold(doctor_id):
            await self.repository.lock_schedule(doctor_id)

            current = await self.get_appointment(appointment_id)
            current_status = AppointmentStatus(current["status"])

            if new_status is None:
                new_status = current_status
            else:
                self._check_transition(current_status, new_status)
                if new_status == current_status and not values:
                    return current
                values = {**values, "status": new_status.value}

            times_changed = "start_time" in values or "end_time" in values
            reopened = not current_status.blocks_schedule() and new_status.blocks_schedule()

            if times_changed or reopened:
                start = values.get("start_time", current["start_time"])
                end = values.get("end_time", current["end_time"])
                validate_interval(start, end)
                if new_status.blocks_schedule():
                    await self._ensure_slot_free(doctor_id, start, end, exclude_id=appointment_id)

            return await self._apply(appointment_id, values)

    async def _apply(self, appointment_id: UUID, values: dict[str, Any]) -> dict[str, Any]:
        appointment = await self.repository.update(appointment_id, values)
        if not appointment:
            raise NotFoundException("Appointment not found")

        logger.info(
            "appointment_updated",
            appointment_id=str(appointment_id),
            fields=sorted(values),
            status=appointment["status"],
        )
        return appointment

    async def _ensure_slot_free(
        self,
        doctor_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.repository.find_overlapping(doctor_id, start, end, exclude_id)
        if existing:
            logger.info(
                "appointment_conflict",
                doctor_id=str(doctor_id),
                conflicting_appointment_id=str(existing["id"]),
            )
            raise SchedulingConflict()

    def _check_transition(
        self,
        current: AppointmentStatus,
        requested: AppointmentStatus,
    ) -> None:
        if not current.can_transition_to(requested, strict=self.strict_status):
            raise InvalidStatusTransition(current.value, requested.value)

        if current.is_final() and requested != current:
            # Allowed under the permissive policy; surfaced for review
            logger.warning(
                "appointment_terminal_status_left",
                current_status=current.value,
                requested_status=requested.value,
            )
