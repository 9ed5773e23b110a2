"""Application schemas for API request/response validation."""
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import ApplicationStatus
from app.schemas.pet import PetSummary


class ApplicationCreate(BaseModel):
    """Schema for submitting an adoption application."""
    pet_id: uuid.UUID = Field(..., description="ID of the pet to adopt")
    message: str = Field(
        ...,
        max_length=5000,
        description="Why the applicant wants to adopt this pet"
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Validate message is not empty or just whitespace."""
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class ApplicationStatusUpdate(BaseModel):
    """
    Schema for an admin review decision.

    Pending parses but is refused by the review workflow, which only
    accepts Approved or Rejected.
    """
    status: ApplicationStatus


class ApplicationRead(BaseModel):
    """Schema for reading application data."""
    id: uuid.UUID
    pet_id: uuid.UUID
    user_id: uuid.UUID
    user_name: str
    user_email: str
    pet_name: str
    message: str
    status: ApplicationStatus
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_by_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    pet: Optional[PetSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationListResponse(BaseModel):
    """Schema for application list response."""
    applications: List[ApplicationRead]
    total: int


class ApplicationResponse(BaseModel):
    """Schema for submit/review responses."""
    message: str
    application: ApplicationRead


class MessageResponse(BaseModel):
    """Schema for responses that only carry a message."""
    message: str
