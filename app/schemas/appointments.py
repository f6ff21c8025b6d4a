"""Appointment schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from app.config import settings
from app.schemas.common import CamelModel


class AppointmentStatus(str, Enum):
    """Appointment status enumeration.

    State machine under the strict policy:
    - scheduled -> completed, cancelled
    - completed -> (final state)
    - cancelled -> (final state)

    Re-applying the current status is always allowed so that cancel and
    complete stay idempotent.
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def can_transition_to(self, new_status: "AppointmentStatus", strict: bool = True) -> bool:
        """Validate a status change under the strict or permissive policy."""
        if new_status == self or not strict:
            return True
        transitions: dict[str, list[str]] = {
            "scheduled": ["completed", "cancelled"],
            "completed": [],
            "cancelled": [],
        }
        return new_status.value in transitions[self.value]

    def is_final(self) -> bool:
        """Is this a terminal state?"""
        return self in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)

    def blocks_schedule(self) -> bool:
        """Does an appointment in this state occupy the doctor's time?"""
        return self != AppointmentStatus.CANCELLED


class AppointmentCreate(CamelModel):
    """Schema for creating a new appointment.

    Any client-supplied status is ignored; new appointments always start
    as scheduled.
    """

    patient_id: UUID
    doctor_id: UUID
    start_time: datetime
    end_time: datetime
    reason: str | None = Field(None, max_length=settings.appointment_reason_max_length)
    notes: str | None = Field(None, max_length=settings.appointment_notes_max_length)


class AppointmentUpdate(CamelModel):
    """Schema for partially updating an appointment.

    Only fields present in the request are applied; ``model_fields_set``
    distinguishes an omitted field from an explicit null.
    """

    start_time: datetime | None = None
    end_time: datetime | None = None
    reason: str | None = Field(None, max_length=settings.appointment_reason_max_length)
    notes: str | None = Field(None, max_length=settings.appointment_notes_max_length)
    status: AppointmentStatus | None = None


class AppointmentFilters(CamelModel):
    """Schema for appointment filtering. All filters are AND-combined."""

    patient_id: UUID | None = None
    doctor_id: UUID | None = None
    status: AppointmentStatus | None = None
    from_time: datetime | None = Field(None, alias="from")
    to_time: datetime | None = Field(None, alias="to")


class AppointmentResponse(CamelModel):
    """Schema for appointment response."""

    id: UUID
    patient_id: UUID
    doctor_id: UUID
    start_time: datetime
    end_time: datetime
    reason: str | None = None
    notes: str | None = None
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime


class AppointmentDetailResponse(CamelModel):
    """Single appointment envelope."""

    appointment: AppointmentResponse


class AppointmentMessageResponse(CamelModel):
    """Appointment envelope returned by mutating endpoints."""

    message: str
    appointment: AppointmentResponse


class AppointmentListResponse(CamelModel):
    """Schema for appointment list response."""

    count: int
    appointments: list[AppointmentResponse]
