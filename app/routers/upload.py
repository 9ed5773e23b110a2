"""Image upload routes for pet photos (admin only)."""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.dependencies import get_file_service, require_admin
from app.models.user import User
from app.schemas.application import MessageResponse
from app.schemas.upload import ImageDeleteRequest, ImageUploadResponse
from app.services.file_service import FileService


logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/upload",
    tags=["upload"],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
    }
)


@router.post("/image", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    image: UploadFile = File(...),
    admin: User = Depends(require_admin),
    file_service: FileService = Depends(get_file_service),
) -> ImageUploadResponse:
    """
    Upload a pet image and return its URL.

    The URL can be used as the `image` field when creating or updating a pet.
    """
    try:
        stored = await file_service.save_image(image)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"Image {stored.public_id} uploaded by admin {admin.id}")
    return ImageUploadResponse(url=stored.url, public_id=stored.public_id)


@router.delete("/image", response_model=MessageResponse)
async def delete_image(
    data: ImageDeleteRequest,
    admin: User = Depends(require_admin),
    file_service: FileService = Depends(get_file_service),
) -> MessageResponse:
    """Delete a previously uploaded image by its public id."""
    try:
        await file_service.delete_image(data.public_id)
    except FileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found"
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"Image {data.public_id} deleted by admin {admin.id}")
    return MessageResponse(message="Image deleted successfully")
