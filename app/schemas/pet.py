"""Pet schemas for API request/response validation."""
import uuid
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import Settings
from app.models.enums import PetStatus


MAX_PET_AGE = 50


def _required_text(v: str, label: str, min_length: int = 1) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} cannot be empty")
    if len(v) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters long")
    return v


def _image_reference(v: str) -> str:
    """Accept absolute http(s) URLs and paths served from local storage."""
    v = v.strip()
    if not v:
        raise ValueError("Image URL cannot be empty")
    storage_url = Settings().storage_url.rstrip("/") + "/"
    if v.startswith(storage_url):
        return v
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Please enter a valid image URL")
    return v


class PetBase(BaseModel):
    """Base schema for pet data."""
    name: str = Field(..., max_length=255)
    species: str = Field(..., max_length=100)
    breed: str = Field(..., max_length=255)
    age: float = Field(..., ge=0, le=MAX_PET_AGE)
    description: str
    image: str = Field(..., max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, "Pet name", min_length=2)

    @field_validator("species")
    @classmethod
    def validate_species(cls, v: str) -> str:
        return _required_text(v, "Species")

    @field_validator("breed")
    @classmethod
    def validate_breed(cls, v: str) -> str:
        return _required_text(v, "Breed")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _required_text(v, "Description", min_length=10)

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: str) -> str:
        return _image_reference(v)


class PetCreate(PetBase):
    """Schema for creating a new pet. New pets are always Available."""
    pass


class PetUpdate(BaseModel):
    """
    Schema for updating a pet.

    Status is deliberately absent: it follows the pet's applications.
    """
    name: Optional[str] = Field(None, max_length=255)
    species: Optional[str] = Field(None, max_length=100)
    breed: Optional[str] = Field(None, max_length=255)
    age: Optional[float] = Field(None, ge=0, le=MAX_PET_AGE)
    description: Optional[str] = None
    image: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Pet name", min_length=2)

    @field_validator("species")
    @classmethod
    def validate_species(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Species")

    @field_validator("breed")
    @classmethod
    def validate_breed(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Breed")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Description", min_length=10)

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _image_reference(v)


class PetRead(BaseModel):
    """Schema for reading pet data."""
    id: uuid.UUID
    name: str
    species: str
    breed: str
    age: float
    description: str
    image: str
    status: PetStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PetSummary(BaseModel):
    """Compact pet data embedded in application responses."""
    id: uuid.UUID
    name: str
    species: str
    breed: str
    image: str
    status: PetStatus

    model_config = ConfigDict(from_attributes=True)


class PetListResponse(BaseModel):
    """Schema for pet list response."""
    pets: List[PetRead]
    total: int


class PetResponse(BaseModel):
    """Schema for create/update responses."""
    message: str
    pet: PetRead


class PetDeleteResponse(BaseModel):
    """Schema for delete response."""
    message: str
    deleted_applications: int
