"""User manager for fastapi-users authentication system."""
import logging
import uuid
from typing import Optional

from fastapi import Request
from fastapi_users import BaseUserManager, InvalidPasswordException, UUIDIDMixin

from app.models.user import User
from app.config import Settings
from app.services.email_service import EmailService


logger = logging.getLogger(__name__)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    """
    Custom user manager for handling user lifecycle events.

    Extends fastapi-users BaseUserManager with custom hooks for:
    - User registration
    - Password reset requests (emails the reset link)
    - Password policy
    """

    def __init__(self, user_db, settings: Settings, email_service: Optional[EmailService] = None):
        """
        Initialize UserManager with user database and settings.

        Args:
            user_db: Database adapter for user operations
            settings: Application settings containing secrets
            email_service: Gateway used to deliver password reset links
        """
        super().__init__(user_db)
        self.reset_password_token_secret = settings.secret_key
        self.verification_token_secret = settings.secret_key
        self.reset_password_token_lifetime_seconds = settings.reset_password_token_lifetime_seconds
        self.verification_token_lifetime_seconds = settings.jwt_lifetime_seconds
        self.email_service = email_service or EmailService(settings)

    async def on_after_register(
        self,
        user: User,
        request: Optional[Request] = None
    ) -> None:
        """
        Hook called after successful user registration.

        Args:
            user: The newly registered user
            request: Optional request object
        """
        logger.info(f"User {user.id} has registered with email {user.email}")

    async def on_after_forgot_password(
        self,
        user: User,
        token: str,
        request: Optional[Request] = None
    ) -> None:
        """
        Hook called after password reset is requested.

        Delivery failures propagate so the caller learns the link was not sent.

        Args:
            user: The user requesting password reset
            token: The signed, expiring reset token
            request: Optional request object
        """
        logger.info(f"User {user.id} has requested password reset")
        await self.email_service.send_password_reset_email(user.email, token, user.name)

    async def on_after_reset_password(
        self,
        user: User,
        request: Optional[Request] = None
    ) -> None:
        logger.info(f"User {user.id} has reset their password")

    async def validate_password(
        self,
        password: str,
        user=None
    ) -> None:
        """
        Validate password meets security requirements.

        Args:
            password: The password to validate
            user: Optional user object or create schema for context

        Raises:
            InvalidPasswordException: If password doesn't meet requirements
        """
        if len(password) < 6:
            raise InvalidPasswordException(
                reason="Password must be at least 6 characters long"
            )

        if len(password) > 50:
            raise InvalidPasswordException(
                reason="Password must be less than 50 characters long"
            )

        if user is not None and password.lower() == user.email.lower():
            raise InvalidPasswordException(
                reason="Password cannot be the same as email"
            )
