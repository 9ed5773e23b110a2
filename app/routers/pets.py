"""
Pets router for the adoption catalog.

This module provides:
- Public listing and lookup of pets
- Admin-only create, update and delete
- Admin-only image upload for a pet

Pet status is never written here except through deletion; it follows the
pet's applications (see app.services.adoption_service).
"""
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_async_session
from app.dependencies import get_file_service, require_admin
from app.models.application import Application
from app.models.enums import PetStatus
from app.models.pet import Pet
from app.models.user import User
from app.schemas.pet import (
    PetCreate,
    PetDeleteResponse,
    PetListResponse,
    PetRead,
    PetResponse,
    PetUpdate,
)
from app.services.file_service import FileService


logger = logging.getLogger(__name__)

settings = Settings()


router = APIRouter(
    prefix="/api/pets",
    tags=["pets"],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
        404: {"description": "Pet not found"},
    }
)


async def _get_pet_or_404(session: AsyncSession, pet_id: uuid.UUID) -> Pet:
    pet = await session.get(Pet, pet_id)
    if pet is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pet not found"
        )
    return pet


@router.get("/", response_model=PetListResponse)
async def list_pets(
    session: AsyncSession = Depends(get_async_session),
    status_filter: Optional[PetStatus] = Query(
        None,
        description="Filter by status: Available, Pending or Adopted",
        alias="status"
    ),
    species: Optional[str] = Query(None, description="Filter by species (case-insensitive)"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of records to return"),
) -> PetListResponse:
    """
    List pets, newest first.

    This endpoint is public and does not require authentication.

    **Query Parameters:**
    - status: Filter by adoption status
    - species: Filter by species
    - skip / limit: Pagination
    """
    query = select(Pet)

    if status_filter is not None:
        query = query.where(Pet.status == status_filter.value)
    if species:
        query = query.where(func.lower(Pet.species) == species.strip().lower())

    count_query = select(func.count()).select_from(query.subquery())
    total = (await session.execute(count_query)).scalar()

    query = query.order_by(Pet.created_at.desc()).offset(skip).limit(limit)
    result = await session.execute(query)
    pets = result.scalars().all()

    return PetListResponse(
        pets=[PetRead.model_validate(pet) for pet in pets],
        total=total,
    )


@router.get("/{pet_id}", response_model=PetRead)
async def get_pet(
    pet_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),
) -> Pet:
    """Get a single pet by ID. Public."""
    return await _get_pet_or_404(session, pet_id)


@router.post("/", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
async def create_pet(
    pet_data: PetCreate,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
) -> PetResponse:
    """
    Create a new pet record (admin only).

    **Example:**
    ```json
    {
        "name": "Buddy",
        "species": "Dog",
        "breed": "Golden Retriever",
        "age": 3,
        "description": "Friendly and loves long walks.",
        "image": "https://images.example.com/buddy.jpg"
    }
    ```

    **Returns:** The created pet, always starting as Available
    """
    pet = Pet(
        **pet_data.model_dump(),
        status=PetStatus.AVAILABLE.value,
    )

    session.add(pet)
    await session.commit()
    await session.refresh(pet)

    logger.info(f"Pet {pet.id} created by admin {admin.id}")

    return PetResponse(
        message="Pet created successfully",
        pet=PetRead.model_validate(pet),
    )


@router.put("/{pet_id}", response_model=PetResponse)
async def update_pet(
    pet_id: uuid.UUID,
    pet_update: PetUpdate,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
) -> PetResponse:
    """
    Update a pet record (admin only).

    Only provided fields will be updated. Existing applications keep the pet
    name they were submitted with.
    """
    pet = await _get_pet_or_404(session, pet_id)

    update_data = pet_update.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(pet, field, value)

    await session.commit()
    await session.refresh(pet)

    logger.info(f"Pet {pet_id} updated by admin {admin.id}: {sorted(update_data)}")

    return PetResponse(
        message="Pet updated successfully",
        pet=PetRead.model_validate(pet),
    )


@router.delete("/{pet_id}", response_model=PetDeleteResponse)
async def delete_pet(
    pet_id: uuid.UUID,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
) -> PetDeleteResponse:
    """
    Delete a pet and every application submitted for it (admin only).
    """
    pet = await _get_pet_or_404(session, pet_id)
    pet_name = pet.name

    result = await session.execute(
        delete(Application).where(Application.pet_id == pet_id)
    )
    deleted_count = result.rowcount or 0

    await session.delete(pet)
    await session.commit()

    logger.info(
        f"Pet {pet_id} deleted by admin {admin.id} with {deleted_count} application(s)"
    )

    message = f'Pet "{pet_name}" deleted successfully'
    if deleted_count > 0:
        message += f" along with {deleted_count} related application(s)"

    return PetDeleteResponse(message=message, deleted_applications=deleted_count)


@router.post("/{pet_id}/image", response_model=PetRead)
async def upload_pet_image(
    pet_id: uuid.UUID,
    file: UploadFile = File(...),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    file_service: FileService = Depends(get_file_service),
) -> Pet:
    """
    Upload an image for a pet (admin only).

    The image will be processed, resized if needed, and stored locally.
    A previously uploaded image for the pet is removed.
    """
    pet = await _get_pet_or_404(session, pet_id)

    try:
        stored = await file_service.save_image(file, prefix=str(pet_id))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    previous = pet.image
    pet.image = stored.url
    await session.commit()
    await session.refresh(pet)

    storage_prefix = settings.storage_url.rstrip("/") + "/"
    if previous and previous.startswith(storage_prefix):
        try:
            await file_service.delete_image(previous[len(storage_prefix):])
        except (FileNotFoundError, ValueError):
            logger.warning(f"Previous image for pet {pet_id} was already gone: {previous}")

    logger.info(f"Image {stored.public_id} attached to pet {pet_id} by admin {admin.id}")

    return pet
