"""Doctor service for business logic."""

from typing import Any
from uuid import UUID

import structlog

from app.core.exceptions import ConflictException, NoUpdatableFields, NotFoundException
from app.core.redis_client import CacheManager
from app.repositories.doctors import DUPLICATE_EMAIL, DoctorRepository
from app.schemas.doctors import DoctorCreate, DoctorUpdate
from app.services.user_service import normalize_email

logger = structlog.get_logger()

# Optional columns a patch may set to null
NULLABLE_FIELDS = {"user_id", "phone_number", "clinic_name", "notes"}


class DoctorService:
    """Service for doctor operations."""

    # Cache TTL in seconds
    DOCTOR_CACHE_TTL = 900  # 15 minutes for individual doctors

    def __init__(self, repository: DoctorRepository, cache_manager: CacheManager | None = None):
        """Initialize service with its record store and optional cache manager."""
        self.repository = repository
        self.cache = cache_manager

    @staticmethod
    def _get_doctor_cache_key(doctor_id: UUID) -> str:
        """Generate cache key for doctor."""
        return f"doctor:{doctor_id}"

    async def create_doctor(self, doctor_data: DoctorCreate) -> dict[str, Any]:
        """Create a new doctor profile."""
        values = doctor_data.model_dump()
        values["email"] = normalize_email(values["email"])
        values["specialty"] = values["specialty"].lower()

        if await self.repository.get_by_email(values["email"]):
            raise ConflictException(DUPLICATE_EMAIL)

        doctor = await self.repository.create(values)
        logger.info("doctor_created", doctor_id=str(doctor["id"]), specialty=doctor["specialty"])
        return doctor

    async def get_doctors(
        self,
        is_active: bool | None = None,
        specialty: str | None = None,
    ) -> list[dict[str, Any]]:
        """List doctors, newest first, optionally filtered by specialty."""
        if specialty:
            specialty = specialty.strip().lower()
        return await self.repository.find_all(is_active=is_active, specialty=specialty)

    async def get_doctor_by_id(self, doctor_id: UUID) -> dict[str, Any]:
        """Get doctor by ID with caching."""
        # Try cache first
        if self.cache:
            cached = self.cache.get_json(self._get_doctor_cache_key(doctor_id))
            if cached:
                return cached

        doctor = await self.repository.get(doctor_id)
        if not doctor:
            raise NotFoundException("Doctor not found")

        # Cache result
        if self.cache:
            self.cache.set_json(
                self._get_doctor_cache_key(doctor_id), doctor, ttl=self.DOCTOR_CACHE_TTL
            )

        return doctor

    async def update_doctor(self, doctor_id: UUID, doctor_data: DoctorUpdate) -> dict[str, Any]:
        """Partially update a doctor profile."""
        update_data = doctor_data.model_dump(exclude_unset=True)
        if not update_data:
            raise NoUpdatableFields()

        values = {
            key: value
            for key, value in update_data.items()
            if value is not None or key in NULLABLE_FIELDS
        }
        if not values:
            raise NoUpdatableFields()

        if "email" in values:
            values["email"] = normalize_email(values["email"])
            existing = await self.repository.get_by_email(values["email"])
            if existing and existing["id"] != doctor_id:
                raise ConflictException(DUPLICATE_EMAIL)

        if "specialty" in values:
            values["specialty"] = values["specialty"].lower()

        return await self._apply(doctor_id, values)

    async def deactivate_doctor(self, doctor_id: UUID) -> dict[str, Any]:
        """Soft delete a doctor."""
        doctor = await self._apply(doctor_id, {"is_active": False})
        logger.info("doctor_deactivated", doctor_id=str(doctor_id))
        return doctor

    async def _apply(self, doctor_id: UUID, values: dict[str, Any]) -> dict[str, Any]:
        doctor = await self.repository.update(doctor_id, values)
        if not doctor:
            raise NotFoundException("Doctor not found")

        # Invalidate cache
        if self.cache:
            self.cache.delete(self._get_doctor_cache_key(doctor_id))

        return doctor
