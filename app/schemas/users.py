"""User and authentication schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class UserRole(str, Enum):
    """User role enumeration."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class UserRegister(CamelModel):
    """Registration request."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    role: UserRole | None = None


class UserLogin(CamelModel):
    """Login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Schema for updating a user account."""

    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=72)
    role: UserRole | None = None
    is_active: bool | None = None


class UserProfileUpdate(CamelModel):
    """Fields a user may change on their own account."""

    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=72)


class UserResponse(CamelModel):
    """User schema for API responses. The password hash is never exposed."""

    id: UUID
    email: EmailStr
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserDetailResponse(CamelModel):
    """Single user envelope."""

    user: UserResponse


class AuthResponse(CamelModel):
    """Registration/login response with the issued access token."""

    message: str
    user: UserResponse
    token: str
    token_type: str = "bearer"
