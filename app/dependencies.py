"""FastAPI dependencies for authentication, services and database access."""
import uuid
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi_users import FastAPIUsers
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_async_session
from app.middleware.rate_limiter import rate_limiter, get_client_ip
from app.models.user import User
from app.services.adoption_service import AdoptionService
from app.services.email_service import EmailService
from app.services.file_service import FileService
from app.services.user_manager import UserManager


# Initialize settings
settings = Settings()


def get_email_service() -> EmailService:
    """Dependency to get the email notification gateway."""
    return EmailService(settings)


def get_file_service() -> FileService:
    """Dependency to get FileService instance."""
    return FileService(settings)


def get_adoption_service(
    email_service: EmailService = Depends(get_email_service),
) -> AdoptionService:
    """Dependency to get the adoption lifecycle service."""
    return AdoptionService(email_service)


async def get_user_db(
    session: AsyncSession = Depends(get_async_session)
) -> AsyncGenerator[SQLAlchemyUserDatabase, None]:
    """
    Dependency to get the user database adapter.

    Args:
        session: Async database session

    Yields:
        SQLAlchemyUserDatabase: Database adapter for user operations
    """
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(
    user_db: SQLAlchemyUserDatabase = Depends(get_user_db),
    email_service: EmailService = Depends(get_email_service),
) -> AsyncGenerator[UserManager, None]:
    """
    Dependency to get the user manager.

    Args:
        user_db: User database adapter
        email_service: Gateway for password reset emails

    Yields:
        UserManager: User manager instance
    """
    yield UserManager(user_db, settings, email_service)


def get_jwt_strategy() -> JWTStrategy:
    """
    Get JWT authentication strategy.

    Returns:
        JWTStrategy: JWT strategy configured with secret and lifetime
    """
    return JWTStrategy(
        secret=settings.secret_key,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        algorithm="HS256",
    )


# Configure Bearer token transport
bearer_transport = BearerTransport(tokenUrl="api/auth/jwt/login")


# Configure authentication backend with JWT
auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)


# Create FastAPIUsers instance
fastapi_users = FastAPIUsers[User, uuid.UUID](
    get_user_manager,
    [auth_backend],
)


# Export commonly used dependencies
current_active_user = fastapi_users.current_user(active=True)


def require_admin(user: User = Depends(current_active_user)) -> User:
    """
    Dependency that ensures the current user is an admin.

    Args:
        user: Current authenticated user

    Returns:
        User: The authenticated admin user

    Raises:
        HTTPException: 403 Forbidden if user is not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


async def limit_password_reset_requests(request: Request) -> None:
    """Rate limit forgot/reset password calls: 5 per client IP per 5 minutes."""
    client_ip = await get_client_ip(request)
    await rate_limiter.check_rate_limit(
        key=f"password-reset:{client_ip}",
        max_requests=5,
        window_seconds=300
    )
