"""Doctor endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DoctorServiceDep
from app.schemas.doctors import (
    DoctorCreate,
    DoctorDetailResponse,
    DoctorListResponse,
    DoctorMessageResponse,
    DoctorUpdate,
)

router = APIRouter()


@router.post(
    "",
    response_model=DoctorMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create doctor",
)
async def create_doctor(
    data: DoctorCreate,
    current_user: CurrentUser,
    service: DoctorServiceDep,
) -> DoctorMessageResponse:
    """Create a doctor profile. Emails are unique across doctors."""
    doctor = await service.create_doctor(data)
    return DoctorMessageResponse(message="Doctor created successfully", doctor=doctor)


@router.get(
    "",
    response_model=DoctorListResponse,
    summary="List doctors",
)
async def list_doctors(
    current_user: CurrentUser,
    service: DoctorServiceDep,
    is_active: bool | None = Query(None, alias="isActive"),
    specialty: str | None = Query(None, description="Filter by specialty (case-insensitive)"),
) -> DoctorListResponse:
    """
    List doctors, newest first.

    Args:
        current_user: Authenticated user
        service: Doctor service
        is_active: Filter by active flag
        specialty: Filter by specialty

    Returns:
        Matching doctors and their count
    """
    doctors = await service.get_doctors(is_active=is_active, specialty=specialty)
    return DoctorListResponse(count=len(doctors), doctors=doctors)


@router.get(
    "/{doctor_id}",
    response_model=DoctorDetailResponse,
    summary="Get doctor by ID",
)
async def get_doctor(
    doctor_id: UUID,
    current_user: CurrentUser,
    service: DoctorServiceDep,
) -> DoctorDetailResponse:
    doctor = await service.get_doctor_by_id(doctor_id)
    return DoctorDetailResponse(doctor=doctor)


@router.patch(
    "/{doctor_id}",
    response_model=DoctorMessageResponse,
    summary="Update doctor",
)
async def update_doctor(
    doctor_id: UUID,
    data: DoctorUpdate,
    current_user: CurrentUser,
    service: DoctorServiceDep,
) -> DoctorMessageResponse:
    doctor = await service.update_doctor(doctor_id, data)
    return DoctorMessageResponse(message="Doctor updated successfully", doctor=doctor)


@router.delete(
    "/{doctor_id}",
    response_model=DoctorMessageResponse,
    summary="Deactivate doctor",
)
async def deactivate_doctor(
    doctor_id: UUID,
    current_user: CurrentUser,
    service: DoctorServiceDep,
) -> DoctorMessageResponse:
    """Soft delete: the doctor is kept with ``isActive`` set to false."""
    doctor = await service.deactivate_doctor(doctor_id)
    return DoctorMessageResponse(message="Doctor deactivated successfully", doctor=doctor)
