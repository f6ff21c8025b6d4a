"""Doctor schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class DoctorBase(CamelModel):
    """Base schema for doctor."""

    user_id: UUID | None = None
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    specialty: str = Field(..., min_length=1, max_length=200)
    phone_number: str | None = Field(None, min_length=7, max_length=20)
    clinic_name: str | None = None
    notes: str | None = Field(None, max_length=1000)


class DoctorCreate(DoctorBase):
    """Schema for creating a doctor."""


class DoctorUpdate(CamelModel):
    """Schema for partially updating a doctor."""

    user_id: UUID | None = None
    first_name: str | None = Field(None, min_length=1)
    last_name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    specialty: str | None = Field(None, min_length=1, max_length=200)
    phone_number: str | None = Field(None, min_length=7, max_length=20)
    clinic_name: str | None = None
    notes: str | None = Field(None, max_length=1000)
    is_active: bool | None = None


class DoctorResponse(DoctorBase):
    """Doctor response schema."""

    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


class DoctorDetailResponse(CamelModel):
    """Single doctor envelope."""

    doctor: DoctorResponse


class DoctorMessageResponse(CamelModel):
    """Doctor envelope returned by mutating endpoints."""

    message: str
    doctor: DoctorResponse


class DoctorListResponse(CamelModel):
    """Doctor list response."""

    count: int
    doctors: list[DoctorResponse]
