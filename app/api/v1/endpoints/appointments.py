"""Appointment endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import AppointmentServiceDep, CurrentUser
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentDetailResponse,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentMessageResponse,
    AppointmentStatus,
    AppointmentUpdate,
)

router = APIRouter()


@router.post(
    "",
    response_model=AppointmentMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentMessageResponse:
    """
    Book an appointment for a patient with a doctor.

    Fails with 409 when the doctor already has a non-cancelled appointment
    overlapping the requested interval.
    """
    appointment = await service.create_appointment(data)
    return AppointmentMessageResponse(
        message="Appointment created successfully",
        appointment=appointment,
    )


@router.get(
    "",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    current_user: CurrentUser,
    service: AppointmentServiceDep,
    patient_id: UUID | None = Query(None, alias="patientId"),
    doctor_id: UUID | None = Query(None, alias="doctorId"),
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    from_time: datetime | None = Query(None, alias="from"),
    to_time: datetime | None = Query(None, alias="to"),
) -> AppointmentListResponse:
    """
    List appointments ordered by start time.

    Args:
        current_user: Authenticated user
        service: Appointment service
        patient_id: Filter by patient ID
        doctor_id: Filter by doctor ID
        status_filter: Filter by status
        from_time: Earliest start time (inclusive)
        to_time: Latest start time (inclusive)

    Returns:
        Matching appointments and their count
    """
    filters = AppointmentFilters(
        patient_id=patient_id,
        doctor_id=doctor_id,
        status=status_filter,
        from_time=from_time,
        to_time=to_time,
    )

    appointments = await service.list_appointments(filters)
    return AppointmentListResponse(count=len(appointments), appointments=appointments)


@router.get(
    "/{appointment_id}",
    response_model=AppointmentDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentDetailResponse:
    """Get a specific appointment by ID."""
    appointment = await service.get_appointment(appointment_id)
    return AppointmentDetailResponse(appointment=appointment)


@router.patch(
    "/{appointment_id}",
    response_model=AppointmentMessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Update appointment",
)
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentMessageResponse:
    """
    Partially update an appointment.

    Moving an appointment re-checks the doctor's schedule for overlaps.
    """
    appointment = await service.update_appointment(appointment_id, data)
    return AppointmentMessageResponse(
        message="Appointment updated successfully",
        appointment=appointment,
    )


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentMessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentMessageResponse:
    """Cancel an appointment, freeing its slot. Repeating the call is harmless."""
    appointment = await service.cancel_appointment(appointment_id)
    return AppointmentMessageResponse(
        message="Appointment cancelled successfully",
        appointment=appointment,
    )


@router.post(
    "/{appointment_id}/complete",
    response_model=AppointmentMessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Complete appointment",
)
async def complete_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentMessageResponse:
    """Mark an appointment as completed."""
    appointment = await service.complete_appointment(appointment_id)
    return AppointmentMessageResponse(
        message="Appointment completed successfully",
        appointment=appointment,
    )
