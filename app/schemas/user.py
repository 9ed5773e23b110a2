"""User schemas for API request/response validation."""
import uuid
from datetime import datetime
from typing import Optional

from fastapi_users import schemas
from pydantic import Field, field_validator

from app.models.enums import UserRole


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters long")
    return v


class UserRead(schemas.BaseUser[uuid.UUID]):
    """Schema for reading user data."""
    id: uuid.UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    is_superuser: bool
    is_verified: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserCreate(schemas.BaseUserCreate):
    """Schema for registering a new user. Role is always 'user'."""
    name: str = Field(..., max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trim and require at least two characters."""
        return _clean_name(v)


class UserUpdate(schemas.BaseUserUpdate):
    """Schema for updating the current user's profile."""
    name: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        """Trim and require at least two characters when provided."""
        return _clean_name(v)
