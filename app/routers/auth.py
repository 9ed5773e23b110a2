"""Authentication routes using fastapi-users."""
from fastapi import APIRouter, Depends

from app.dependencies import (
    auth_backend,
    current_active_user,
    fastapi_users,
    limit_password_reset_requests,
)
from app.models.user import User
from app.schemas.user import UserRead, UserCreate, UserUpdate


# Create router for authentication endpoints
router = APIRouter()

# Include auth router for JWT login/logout
router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/jwt",
    tags=["auth"],
)

# Include register router
router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    tags=["auth"],
)

# Include reset password router (forgot-password emails the reset link)
router.include_router(
    fastapi_users.get_reset_password_router(),
    tags=["auth"],
    dependencies=[Depends(limit_password_reset_requests)],
)

# Include users router (for /users/me endpoint)
router.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/users",
    tags=["users"],
)


@router.get("/me", response_model=UserRead, tags=["auth"])
async def get_current_user(
    user: User = Depends(current_active_user),
) -> User:
    """
    Get the authenticated user's account, including role.

    Returns:
        User: Current authenticated user
    """
    return user
