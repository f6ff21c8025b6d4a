"""Authentication endpoints."""

from fastapi import APIRouter, Request, status

from app.config import settings
from app.core.exceptions import RateLimitException
from app.dependencies import AuthServiceDep, RateLimiterDep
from app.schemas.users import AuthResponse, UserLogin, UserRegister

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(data: UserRegister, auth_service: AuthServiceDep) -> AuthResponse:
    """
    Create an account and return an access token for it.

    Raises:
        ConflictException: If the email is already registered
    """
    user, token = await auth_service.register(data)
    return AuthResponse(message="User registered successfully", user=user, token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in with email and password",
)
async def login(
    data: UserLogin,
    request: Request,
    auth_service: AuthServiceDep,
    rate_limiter: RateLimiterDep,
) -> AuthResponse:
    """
    Verify credentials and return an access token.

    Attempts are rate limited per client address.

    Raises:
        RateLimitException: If too many attempts were made in the last minute
        UnauthorizedException: If the credentials are wrong
        ValidationException: If the account is deactivated
    """
    client = request.client.host if request.client else "unknown"
    if not rate_limiter.check_rate_limit(f"login:{client}", settings.rate_limit_per_minute):
        raise RateLimitException("Too many login attempts, try again later")

    user, token = await auth_service.login(data)
    return AuthResponse(message="Login successful", user=user, token=token)
