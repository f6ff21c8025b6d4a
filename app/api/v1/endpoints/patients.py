"""Patient endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, PatientServiceDep
from app.schemas.patients import (
    PatientCreate,
    PatientDetailResponse,
    PatientListResponse,
    PatientMessageResponse,
    PatientUpdate,
)

router = APIRouter()


@router.post(
    "",
    response_model=PatientMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create patient",
)
async def create_patient(
    data: PatientCreate,
    current_user: CurrentUser,
    service: PatientServiceDep,
) -> PatientMessageResponse:
    """Register a new patient. Emails are unique across patients."""
    patient = await service.create_patient(data)
    return PatientMessageResponse(message="Patient created successfully", patient=patient)


@router.get(
    "",
    response_model=PatientListResponse,
    summary="List patients",
)
async def list_patients(
    current_user: CurrentUser,
    service: PatientServiceDep,
    is_active: bool | None = Query(None, alias="isActive"),
) -> PatientListResponse:
    """List patients, newest first."""
    patients = await service.get_patients(is_active=is_active)
    return PatientListResponse(count=len(patients), patients=patients)


@router.get(
    "/by-email/{email}",
    response_model=PatientDetailResponse,
    summary="Get patient by email",
)
async def get_patient_by_email(
    email: str,
    current_user: CurrentUser,
    service: PatientServiceDep,
) -> PatientDetailResponse:
    """Look a patient up by email (case-insensitive)."""
    patient = await service.get_patient_by_email(email)
    return PatientDetailResponse(patient=patient)


@router.get(
    "/{patient_id}",
    response_model=PatientDetailResponse,
    summary="Get patient by ID",
)
async def get_patient(
    patient_id: UUID,
    current_user: CurrentUser,
    service: PatientServiceDep,
) -> PatientDetailResponse:
    patient = await service.get_patient_by_id(patient_id)
    return PatientDetailResponse(patient=patient)


@router.patch(
    "/{patient_id}",
    response_model=PatientMessageResponse,
    summary="Update patient",
)
async def update_patient(
    patient_id: UUID,
    data: PatientUpdate,
    current_user: CurrentUser,
    service: PatientServiceDep,
) -> PatientMessageResponse:
    patient = await service.update_patient(patient_id, data)
    return PatientMessageResponse(message="Patient updated successfully", patient=patient)


@router.delete(
    "/{patient_id}",
    response_model=PatientMessageResponse,
    summary="Deactivate patient",
)
async def deactivate_patient(
    patient_id: UUID,
    current_user: CurrentUser,
    service: PatientServiceDep,
) -> PatientMessageResponse:
    """Soft delete: the patient is kept with ``isActive`` set to false."""
    patient = await service.deactivate_patient(patient_id)
    return PatientMessageResponse(message="Patient deactivated successfully", patient=patient)
