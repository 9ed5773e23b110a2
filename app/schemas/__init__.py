"""Pydantic schemas for request/response validation."""
from app.schemas.user import UserRead, UserCreate, UserUpdate
from app.schemas.pet import (
    PetBase,
    PetCreate,
    PetUpdate,
    PetRead,
    PetSummary,
    PetListResponse,
    PetResponse,
    PetDeleteResponse,
)
from app.schemas.application import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    ApplicationRead,
    ApplicationListResponse,
    ApplicationResponse,
    MessageResponse,
)
from app.schemas.upload import ImageUploadResponse, ImageDeleteRequest

__all__ = [
    # User schemas
    "UserRead",
    "UserCreate",
    "UserUpdate",
    # Pet schemas
    "PetBase",
    "PetCreate",
    "PetUpdate",
    "PetRead",
    "PetSummary",
    "PetListResponse",
    "PetResponse",
    "PetDeleteResponse",
    # Application schemas
    "ApplicationCreate",
    "ApplicationStatusUpdate",
    "ApplicationRead",
    "ApplicationListResponse",
    "ApplicationResponse",
    "MessageResponse",
    # Upload schemas
    "ImageUploadResponse",
    "ImageDeleteRequest",
]
