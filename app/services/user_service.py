"""User service for business logic."""

from typing import Any
from uuid import UUID

import structlog

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.core.security import get_password_hash, verify_password
from app.repositories.users import DUPLICATE_EMAIL, UserRepository
from app.schemas.users import UserRegister, UserRole, UserUpdate

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    """Emails are stored and looked up trimmed and lower-cased."""
    return email.strip().lower()


class UserService:
    """Service for user account operations."""

    def __init__(self, repository: UserRepository):
        """Initialize service with its record store."""
        self.repository = repository

    async def create_user(self, user_data: UserRegister) -> dict[str, Any]:
        """
        Create a new user account.

        Raises:
            ConflictException: If the email is already registered
        """
        email = normalize_email(user_data.email)
        if await self.repository.get_by_email(email):
            raise ConflictException(DUPLICATE_EMAIL)

        user = await self.repository.create(
            {
                "email": email,
                "password_hash": get_password_hash(user_data.password),
                "role": (user_data.role or UserRole.PATIENT).value,
            }
        )

        logger.info("user_created", user_id=str(user["id"]), role=user["role"])
        return user

    async def get_user_by_id(self, user_id: UUID) -> dict[str, Any] | None:
        """Get user by internal ID."""
        return await self.repository.get(user_id)

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Get user by email."""
        return await self.repository.get_by_email(normalize_email(email))

    async def update_user(self, user_id: UUID, user_data: UserUpdate) -> dict[str, Any]:
        """
        Update a user account.

        Raises:
            ValidationException: If nothing to update was given
            ConflictException: If the new email belongs to another user
            NotFoundException: If the user does not exist
        """
        update_data = user_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise ValidationException("No updatable fields provided")

        values: dict[str, Any] = {}
        if "role" in update_data:
            values["role"] = UserRole(update_data["role"]).value
        if "is_active" in update_data:
            values["is_active"] = update_data["is_active"]

        if "email" in update_data:
            email = normalize_email(update_data["email"])
            existing = await self.repository.get_by_email(email)
            if existing and existing["id"] != user_id:
                raise ConflictException(DUPLICATE_EMAIL)
            values["email"] = email

        if "password" in update_data:
            values["password_hash"] = get_password_hash(update_data["password"])

        return await self._apply(user_id, values)

    async def deactivate_user(self, user_id: UUID) -> dict[str, Any]:
        """Deactivate a user account."""
        user = await self._apply(user_id, {"is_active": False})
        logger.info("user_deactivated", user_id=str(user_id))
        return user

    async def authenticate(self, email: str, password: str) -> dict[str, Any] | None:
        """Return the user when the password matches, None otherwise."""
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user["password_hash"]):
            return None
        return user

    async def _apply(self, user_id: UUID, values: dict[str, Any]) -> dict[str, Any]:
        user = await self.repository.update(user_id, values)
        if not user:
            raise NotFoundException("User not found")
        return user
