"""Patient schemas for request/response validation."""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class PatientBase(CamelModel):
    """Base patient schema with common fields."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: str = Field(..., min_length=1, max_length=20)
    date_of_birth: date
    notes: str | None = Field(None, max_length=1000)


class PatientCreate(PatientBase):
    """Schema for creating a new patient."""


class PatientUpdate(CamelModel):
    """Schema for partially updating a patient."""

    first_name: str | None = Field(None, min_length=1)
    last_name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, min_length=1, max_length=20)
    date_of_birth: date | None = None
    notes: str | None = Field(None, max_length=1000)
    is_active: bool | None = None


class PatientResponse(PatientBase):
    """Schema for patient response."""

    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PatientDetailResponse(CamelModel):
    """Single patient envelope."""

    patient: PatientResponse


class PatientMessageResponse(CamelModel):
    """Patient envelope returned by mutating endpoints."""

    message: str
    patient: PatientResponse


class PatientListResponse(CamelModel):
    """Patient list response."""

    count: int
    patients: list[PatientResponse]
