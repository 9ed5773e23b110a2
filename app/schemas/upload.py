"""Schemas for image upload endpoints."""
from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """Schema for a stored image."""
    message: str = "Image uploaded successfully"
    url: str
    public_id: str


class ImageDeleteRequest(BaseModel):
    """Schema for deleting a stored image."""
    public_id: str = Field(..., min_length=1)
