"""FastAPI dependencies."""

from functools import lru_cache
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ForbiddenException
from app.core.redis_client import CacheManager, RateLimiter, get_redis_client
from app.core.security import decode_access_token
from app.database import get_db
from app.repositories import (
    AppointmentRepository,
    DoctorRepository,
    InMemoryStores,
    PatientRepository,
    SQLAppointmentRepository,
    SQLDoctorRepository,
    SQLPatientRepository,
    SQLUserRepository,
    UserRepository,
)
from app.services.appointment_service import AppointmentService
from app.services.auth_service import AuthService
from app.services.doctor_service import DoctorService
from app.services.patient_service import PatientService
from app.services.user_service import UserService

# Security
security = HTTPBearer(auto_error=False)

DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


@lru_cache
def get_memory_stores() -> InMemoryStores:
    """Process-wide in-memory stores, used when STORAGE_BACKEND=memory."""
    return InMemoryStores()


# Repositories


def get_user_repository(db: DatabaseSession) -> UserRepository:
    """User store for the configured storage backend."""
    if settings.uses_memory_store:
        return get_memory_stores().users
    return SQLUserRepository(db)


def get_patient_repository(db: DatabaseSession) -> PatientRepository:
    """Patient store for the configured storage backend."""
    if settings.uses_memory_store:
        return get_memory_stores().patients
    return SQLPatientRepository(db)


def get_doctor_repository(db: DatabaseSession) -> DoctorRepository:
    """Doctor store for the configured storage backend."""
    if settings.uses_memory_store:
        return get_memory_stores().doctors
    return SQLDoctorRepository(db)


def get_appointment_repository(db: DatabaseSession) -> AppointmentRepository:
    """Appointment store for the configured storage backend."""
    if settings.uses_memory_store:
        return get_memory_stores().appointments
    return SQLAppointmentRepository(db)


# Redis


def get_cache_manager() -> CacheManager | None:
    """Redis read cache, or None when caching is disabled."""
    if not settings.cache_enabled:
        return None
    return CacheManager(get_redis_client())


def get_rate_limiter() -> RateLimiter:
    """Redis-backed rate limiter."""
    return RateLimiter(get_redis_client())


# Services


def get_user_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserService:
    return UserService(repository)


def get_auth_service(
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> AuthService:
    return AuthService(user_service)


def get_patient_service(
    repository: Annotated[PatientRepository, Depends(get_patient_repository)],
    cache: Annotated[CacheManager | None, Depends(get_cache_manager)],
) -> PatientService:
    return PatientService(repository, cache)


def get_doctor_service(
    repository: Annotated[DoctorRepository, Depends(get_doctor_repository)],
    cache: Annotated[CacheManager | None, Depends(get_cache_manager)],
) -> DoctorService:
    return DoctorService(repository, cache)


def get_appointment_service(
    repository: Annotated[AppointmentRepository, Depends(get_appointment_repository)],
) -> AppointmentService:
    return AppointmentService(repository)


# Authentication


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """
    Extract and validate user ID from JWT token.

    Args:
        credentials: Bearer token credentials

    Returns:
        User ID from token

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id_str = payload.get("sub")
    if user_id_str is None or not isinstance(user_id_str, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return UUID(user_id_str)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID format",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


async def get_current_user(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """
    Get current user from the user store.

    Raises:
        HTTPException: If user not found or inactive
    """
    user = await user_service.get_user_by_id(user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user["is_active"]:
        raise ForbiddenException("User account is deactivated")

    return user


# Type aliases for dependency injection
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
CurrentUser = Annotated[dict[str, Any], Depends(get_current_user)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PatientServiceDep = Annotated[PatientService, Depends(get_patient_service)]
DoctorServiceDep = Annotated[DoctorService, Depends(get_doctor_service)]
AppointmentServiceDep = Annotated[AppointmentService, Depends(get_appointment_service)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
