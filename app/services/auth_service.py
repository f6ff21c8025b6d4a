"""Authentication service for registration, login and JWT issuance."""

from typing import Any

import structlog

from app.core.exceptions import UnauthorizedException, ValidationException
from app.core.security import create_user_token
from app.schemas.users import UserLogin, UserRegister
from app.services.user_service import UserService

logger = structlog.get_logger()


class AuthService:
    """Authentication service for password login and JWT operations."""

    def __init__(self, user_service: UserService):
        """Initialize auth service with the user service it authenticates against."""
        self.users = user_service

    async def register(self, data: UserRegister) -> tuple[dict[str, Any], str]:
        """
        Register a new account and issue an access token for it.

        Args:
            data: Email, password and optional role

        Returns:
            Tuple of (user dict, access token)

        Raises:
            ConflictException: If the email is already registered
        """
        user = await self.users.create_user(data)
        return user, create_user_token(user)

    async def login(self, data: UserLogin) -> tuple[dict[str, Any], str]:
        """
        Verify credentials and issue an access token.

        Args:
            data: Email and password

        Returns:
            Tuple of (user dict, access token)

        Raises:
            UnauthorizedException: If the email or password is wrong
            ValidationException: If the account is deactivated
        """
        user = await self.users.authenticate(data.email, data.password)
        if not user:
            logger.info("login_failed", email=data.email.lower())
            raise UnauthorizedException("Invalid email or password")

        if not user["is_active"]:
            raise ValidationException("User account is deactivated")

        logger.info("user_logged_in", user_id=str(user["id"]))
        return user, create_user_token(user)
