"""Application configuration using Pydantic Settings."""

import os
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_DATABASE_SCHEMES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = Field(
        ...,
        description="Database URL using an async driver (asyncpg or aiosqlite)"
    )

    # Authentication Configuration
    secret_key: str = Field(
        ...,
        min_length=32,
        description="Secret key for JWT and password reset token generation"
    )
    jwt_lifetime_seconds: int = Field(
        default=3600,
        ge=300,
        le=86400,
        description="JWT token lifetime in seconds (5 min to 24 hours)"
    )
    reset_password_token_lifetime_seconds: int = Field(
        default=3600,
        ge=300,
        le=86400,
        description="Password reset link lifetime in seconds"
    )

    # Storage Configuration
    storage_path: str = Field(
        default="storage/app",
        description="Path to storage directory for uploaded files"
    )
    storage_url: str = Field(
        default="/storage",
        description="URL prefix for serving static files"
    )

    # Application Configuration
    app_name: str = Field(
        default="Pet Shelter Pro API",
        description="Application name"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    allowed_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Server host"
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port"
    )

    # Image Upload Configuration
    max_image_size_mb: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum image size in megabytes"
    )
    allowed_image_types: str = Field(
        default="image/jpeg,image/png,image/webp,image/gif",
        description="Comma-separated list of allowed image MIME types"
    )
    image_max_width: int = Field(
        default=1920,
        ge=100,
        le=4096,
        description="Maximum image width in pixels"
    )
    image_max_height: int = Field(
        default=1920,
        ge=100,
        le=4096,
        description="Maximum image height in pixels"
    )
    image_quality: int = Field(
        default=85,
        ge=1,
        le=100,
        description="Image compression quality (1-100)"
    )

    # Email Configuration
    email_host: str = Field(
        default="smtp.gmail.com",
        description="SMTP server host"
    )
    email_port: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port (STARTTLS)"
    )
    email_user: str = Field(
        default="",
        description="SMTP username, also used as the sender address"
    )
    email_password: str = Field(
        default="",
        description="SMTP password"
    )
    email_from_name: str = Field(
        default="Pet Shelter Pro",
        description="Display name used in the From header"
    )
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Frontend URL used in email links"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("TESTING") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate that database URL uses an async driver."""
        if not v.startswith(SUPPORTED_DATABASE_SCHEMES):
            raise ValueError(
                "DATABASE_URL must use an async driver "
                "(postgresql+asyncpg:// or sqlite+aiosqlite://)"
            )
        return v

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate that secret key is sufficiently long."""
        if len(v) < 32:
            raise ValueError(
                "SECRET_KEY must be at least 32 characters long for security"
            )
        return v

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    def get_allowed_image_types_list(self) -> List[str]:
        """Parse allowed image types from comma-separated string."""
        return [mime_type.strip() for mime_type in self.allowed_image_types.split(",")]

    @property
    def max_image_size_bytes(self) -> int:
        """Get maximum image size in bytes."""
        return self.max_image_size_mb * 1024 * 1024

    @property
    def email_enabled(self) -> bool:
        """Email delivery requires SMTP credentials."""
        return bool(self.email_user)
