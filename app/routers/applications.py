"""
Applications router for adoption requests.

Users submit and withdraw their own applications; admins list every
application and review them. Workflow rules live in AdoptionService and
surface here as AdoptionError subclasses, which the app-level exception
handler turns into JSON responses.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import current_active_user, get_adoption_service, require_admin
from app.exceptions import PetNotFound
from app.models.application import Application
from app.models.pet import Pet
from app.models.user import User
from app.schemas.application import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationRead,
    ApplicationResponse,
    ApplicationStatusUpdate,
    MessageResponse,
)
from app.services.adoption_service import AdoptionService


logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/applications",
    tags=["applications"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Not found"},
    }
)


async def _list_applications(session: AsyncSession, *criteria) -> ApplicationListResponse:
    query = select(Application).where(*criteria).order_by(Application.created_at.desc())
    result = await session.execute(query)
    applications = result.scalars().all()
    return ApplicationListResponse(
        applications=[ApplicationRead.model_validate(a) for a in applications],
        total=len(applications),
    )


@router.get("/", response_model=ApplicationListResponse)
async def list_applications(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
) -> ApplicationListResponse:
    """List every application, newest first (admin only)."""
    return await _list_applications(session)


@router.get("/my", response_model=ApplicationListResponse)
async def list_my_applications(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> ApplicationListResponse:
    """List the authenticated user's applications, newest first."""
    return await _list_applications(session, Application.user_id == user.id)


@router.get("/pet/{pet_id}", response_model=ApplicationListResponse)
async def list_pet_applications(
    pet_id: uuid.UUID,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
) -> ApplicationListResponse:
    """List the applications submitted for one pet (admin only)."""
    pet_exists = await session.scalar(
        select(func.count()).select_from(Pet).where(Pet.id == pet_id)
    )
    if not pet_exists:
        raise PetNotFound()
    return await _list_applications(session, Application.pet_id == pet_id)


@router.post("/", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    data: ApplicationCreate,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApplicationResponse:
    """
    Apply to adopt a pet.

    **Example:**
    ```json
    {
        "pet_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
        "message": "We have a fenced garden and lots of time for walks."
    }
    ```

    **Errors:**
    - 404: Pet not found
    - 409: Pet already adopted, or the user already applied for this pet
    """
    application = await service.submit(session, user.id, data.pet_id, data.message)
    return ApplicationResponse(
        message="Application submitted successfully",
        application=ApplicationRead.model_validate(application),
    )


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: uuid.UUID,
    data: ApplicationStatusUpdate,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApplicationResponse:
    """
    Approve or reject an application (admin only).

    Approving adopts the pet and rejects the other pending applications for
    it. Applicants are emailed after the decision is saved.
    """
    application = await service.review(session, application_id, admin.id, data.status)
    return ApplicationResponse(
        message="Application status updated successfully",
        application=ApplicationRead.model_validate(application),
    )


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: uuid.UUID,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
    service: AdoptionService = Depends(get_adoption_service),
) -> MessageResponse:
    """Withdraw an application. Owners may delete their own; admins any."""
    await service.delete(session, application_id, user.id, user.role)
    return MessageResponse(message="Application deleted successfully")
