"""User endpoints."""

from fastapi import APIRouter

from app.dependencies import CurrentUser, UserServiceDep
from app.schemas.users import UserDetailResponse, UserProfileUpdate, UserUpdate

router = APIRouter()


@router.get("/me", response_model=UserDetailResponse)
async def get_current_user_profile(current_user: CurrentUser) -> UserDetailResponse:
    """
    Get current user's account.

    Returns:
        Current user data
    """
    return UserDetailResponse(user=current_user)


@router.patch("/me", response_model=UserDetailResponse)
async def update_current_user_profile(
    data: UserProfileUpdate,
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> UserDetailResponse:
    """
    Change the current user's email or password.

    Raises:
        ValidationException: If nothing to update was given
        ConflictException: If the email belongs to another account
    """
    update = UserUpdate(**data.model_dump(exclude_unset=True))
    user = await user_service.update_user(current_user["id"], update)
    return UserDetailResponse(user=user)


@router.delete("/me", response_model=UserDetailResponse)
async def deactivate_current_user(
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> UserDetailResponse:
    """
    Deactivate the current user's account.

    The account is kept but can no longer log in or call protected endpoints.
    """
    user = await user_service.deactivate_user(current_user["id"])
    return UserDetailResponse(user=user)
