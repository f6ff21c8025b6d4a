"""Patient service for business logic."""

from typing import Any
from uuid import UUID

import structlog

from app.core.exceptions import ConflictException, NoUpdatableFields, NotFoundException
from app.core.redis_client import CacheManager
from app.repositories.patients import DUPLICATE_EMAIL, PatientRepository
from app.schemas.patients import PatientCreate, PatientUpdate
from app.services.user_service import normalize_email

logger = structlog.get_logger()


class PatientService:
    """Service for patient operations."""

    # Cache TTL in seconds (15 minutes for individual patients)
    PATIENT_CACHE_TTL = 900

    def __init__(self, repository: PatientRepository, cache_manager: CacheManager | None = None):
        """Initialize service with its record store and optional cache manager."""
        self.repository = repository
        self.cache = cache_manager

    @staticmethod
    def _get_patient_cache_key(patient_id: UUID) -> str:
        """Generate cache key for patient."""
        return f"patient:{patient_id}"

    async def create_patient(self, patient_data: PatientCreate) -> dict[str, Any]:
        """
        Create a new patient.

        Raises:
            ConflictException: If a patient with the email already exists
        """
        values = patient_data.model_dump()
        values["email"] = normalize_email(values["email"])

        if await self.repository.get_by_email(values["email"]):
            raise ConflictException(DUPLICATE_EMAIL)

        patient = await self.repository.create(values)
        logger.info("patient_created", patient_id=str(patient["id"]))
        return patient

    async def get_patients(self, is_active: bool | None = None) -> list[dict[str, Any]]:
        """List patients, newest first."""
        return await self.repository.find_all(is_active=is_active)

    async def get_patient_by_id(self, patient_id: UUID) -> dict[str, Any]:
        """
        Get patient by ID with caching.

        Raises:
            NotFoundException: If patient not found
        """
        # Try cache first
        if self.cache:
            cached = self.cache.get_json(self._get_patient_cache_key(patient_id))
            if cached:
                return cached

        patient = await self.repository.get(patient_id)
        if not patient:
            raise NotFoundException("Patient not found")

        if self.cache:
            self.cache.set_json(
                self._get_patient_cache_key(patient_id), patient, ttl=self.PATIENT_CACHE_TTL
            )

        return patient

    async def get_patient_by_email(self, email: str) -> dict[str, Any]:
        """
        Get patient by email.

        Raises:
            NotFoundException: If patient not found
        """
        patient = await self.repository.get_by_email(normalize_email(email))
        if not patient:
            raise NotFoundException("Patient not found")
        return patient

    async def update_patient(
        self,
        patient_id: UUID,
        patient_data: PatientUpdate,
    ) -> dict[str, Any]:
        """
        Partially update a patient.

        Raises:
            NoUpdatableFields: If the patch is empty
            ConflictException: If the new email belongs to another patient
            NotFoundException: If patient not found
        """
        update_data = patient_data.model_dump(exclude_unset=True)
        if not update_data:
            raise NoUpdatableFields()

        if update_data.get("email") is not None:
            update_data["email"] = normalize_email(update_data["email"])
            existing = await self.repository.get_by_email(update_data["email"])
            if existing and existing["id"] != patient_id:
                raise ConflictException(DUPLICATE_EMAIL)

        # Required columns cannot be cleared
        values = {
            key: value
            for key, value in update_data.items()
            if value is not None or key == "notes"
        }
        if not values:
            raise NoUpdatableFields()

        return await self._apply(patient_id, values)

    async def deactivate_patient(self, patient_id: UUID) -> dict[str, Any]:
        """Soft delete a patient."""
        patient = await self._apply(patient_id, {"is_active": False})
        logger.info("patient_deactivated", patient_id=str(patient_id))
        return patient

    async def _apply(self, patient_id: UUID, values: dict[str, Any]) -> dict[str, Any]:
        patient = await self.repository.update(patient_id, values)
        if not patient:
            raise NotFoundException("Patient not found")

        # Invalidate cache
        if self.cache:
            self.cache.delete(self._get_patient_cache_key(patient_id))

        return patient
