"""Appointment record stores."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import SchedulingConflict
from app.core.intervals import intervals_overlap
from app.models.appointments import NO_OVERLAP_CONSTRAINT, appointments
from app.repositories.base import InMemoryTable, Record, SQLRepository
from app.schemas.appointments import AppointmentFilters, AppointmentStatus


class AppointmentRepository(ABC):
    """Persistence interface consumed by the appointment scheduler."""

    @abstractmethod
    async def create(self, values: Record) -> Record:
        """Insert a new appointment and return the stored record."""

    @abstractmethod
    async def get(self, appointment_id: UUID) -> Record | None:
        """Find an appointment by id."""

    @abstractmethod
    async def find_all(self, filters: AppointmentFilters) -> list[Record]:
        """Find appointments matching all filters, ordered by start time."""

    @abstractmethod
    async def find_overlapping(
        self,
        doctor_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> Record | None:
        """Find a non-cancelled appointment of the doctor intersecting [start, end)."""

    @abstractmethod
    async def update(self, appointment_id: UUID, values: Record) -> Record | None:
        """Apply field changes and return the updated record, or None if missing."""

    @abstractmethod
    async def lock_schedule(self, doctor_id: UUID) -> None:
        """Serialize schedule writes for a doctor until the next write completes."""


class SQLAppointmentRepository(SQLRepository, AppointmentRepository):
    """PostgreSQL appointment store."""

    table = appointments

    async def create(self, values: Record) -> Record:
        return await self._insert(values)

    async def get(self, appointment_id: UUID) -> Record | None:
        return await self._get(appointment_id)

    async def find_all(self, filters: AppointmentFilters) -> list[Record]:
        conditions = []

        if filters.patient_id:
            conditions.append(appointments.c.patient_id == filters.patient_id)

        if filters.doctor_id:
            conditions.append(appointments.c.doctor_id == filters.doctor_id)

        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        if filters.from_time:
            conditions.append(appointments.c.start_time >= filters.from_time)

        if filters.to_time:
            conditions.append(appointments.c.start_time <= filters.to_time)

        return await self._select(*conditions, order_by=appointments.c.start_time.asc())

    async def find_overlapping(
        self,
        doctor_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> Record | None:
        conditions = [
            appointments.c.doctor_id == doctor_id,
            appointments.c.start_time < end,
            appointments.c.end_time > start,
            appointments.c.status != AppointmentStatus.CANCELLED.value,
        ]
        if exclude_id is not None:
            conditions.append(appointments.c.id != exclude_id)

        return await self._first(*conditions)

    async def update(self, appointment_id: UUID, values: Record) -> Record | None:
        return await self._update(appointment_id, values)

    async def lock_schedule(self, doctor_id: UUID) -> None:
        # Transaction-scoped; released by the commit of the following write
        # or by the session rollback.
        await self.db.execute(select(func.pg_advisory_xact_lock(func.hashtext(str(doctor_id)))))

    def translate_integrity_error(self, exc: IntegrityError) -> Exception:
        if NO_OVERLAP_CONSTRAINT in str(exc.orig):
            return SchedulingConflict()
        return super().translate_integrity_error(exc)


class InMemoryAppointmentRepository(AppointmentRepository):
    """In-process appointment store.

    Schedule serialization is left to the caller's in-process lock.
    """

    def __init__(self) -> None:
        self.table = InMemoryTable(defaults={"reason": None, "notes": None})

    async def create(self, values: Record) -> Record:
        return await self.table.insert(values)

    async def get(self, appointment_id: UUID) -> Record | None:
        return await self.table.get(appointment_id)

    async def find_all(self, filters: AppointmentFilters) -> list[Record]:
        def matches(row: Record) -> bool:
            if filters.patient_id and row["patient_id"] != filters.patient_id:
                return False
            if filters.doctor_id and row["doctor_id"] != filters.doctor_id:
                return False
            if filters.status and row["status"] != filters.status.value:
                return False
            if filters.from_time and row["start_time"] < filters.from_time:
                return False
            if filters.to_time and row["start_time"] > filters.to_time:
                return False
            return True

        return await self.table.select(matches, key=lambda row: row["start_time"])

    async def find_overlapping(
        self,
        doctor_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> Record | None:
        return await self.table.first(
            lambda row: row["doctor_id"] == doctor_id
            and row["id"] != exclude_id
            and row["status"] != AppointmentStatus.CANCELLED.value
            and intervals_overlap(row["start_time"], row["end_time"], start, end)
        )

    async def update(self, appointment_id: UUID, values: Record) -> Record | None:
        return await self.table.update(appointment_id, values)

    async def lock_schedule(self, doctor_id: UUID) -> None:
        return None
