"""Adoption application lifecycle: submit, review and delete."""
import logging
import uuid
from typing import Any, Awaitable, Dict, Protocol, Union

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.exceptions import (
    AlreadyPending,
    ApplicationNotFound,
    InvalidStatusValue,
    NotAuthorized,
    PetAlreadyAdopted,
    PetNotFound,
    UserNotFound,
)
from app.models.application import Application
from app.models.enums import ApplicationStatus, PetStatus, REVIEW_OUTCOMES, UserRole
from app.models.pet import Pet
from app.models.user import User
from app.services.application_rules import (
    classify_prior_applications,
    ensure_can_apply,
    recompute_pet_status,
)


logger = logging.getLogger(__name__)


class DecisionNotifier(Protocol):
    """Subset of EmailService used to announce review decisions."""

    async def send_approval_email(
        self, to: str, applicant_name: str, pet_name: str, reviewer_name: str
    ) -> None: ...

    async def send_rejection_email(
        self, to: str, applicant_name: str, pet_name: str, reviewer_name: str
    ) -> None: ...


class AdoptionService:
    """
    Service enforcing the adoption application workflow.

    Keeps three things consistent across the pets and applications tables:
    - a user holds at most one application per pet, and a rejection is final
    - a pet is Adopted iff one of its applications is Approved, Pending iff
      one is Pending, and Available otherwise
    - approving an application rejects every other pending one for the pet

    State changes are committed before any email goes out. Email failures
    are logged and never undo a committed change.
    """

    def __init__(self, notifier: DecisionNotifier):
        """
        Initialize AdoptionService.

        Args:
            notifier: Gateway used to email applicants about review decisions
        """
        self.notifier = notifier

    async def submit(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        pet_id: uuid.UUID,
        message: str,
    ) -> Application:
        """
        Submit a new adoption application.

        Args:
            session: Database session
            user_id: Applicant's user id
            pet_id: Pet being applied for
            message: Applicant's free-text motivation

        Returns:
            Application: The created application, in Pending state

        Raises:
            PetNotFound: Pet does not exist
            PetAlreadyAdopted: Pet is already adopted
            DuplicateRejected, AlreadyApproved, AlreadyPending: User already applied
            UserNotFound: Applicant does not exist
        """
        pet = await session.get(Pet, pet_id)
        if pet is None:
            raise PetNotFound()

        if pet.status == PetStatus.ADOPTED.value:
            raise PetAlreadyAdopted()

        # Always read prior applications from the store, never from a cache
        result = await session.execute(
            select(Application.status).where(
                Application.pet_id == pet_id,
                Application.user_id == user_id,
            )
        )
        ensure_can_apply(classify_prior_applications(result.scalars().all()))

        user = await session.get(User, user_id)
        if user is None:
            raise UserNotFound()

        application = Application(
            pet_id=pet.id,
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            pet_name=pet.name,
            message=message,
            status=ApplicationStatus.PENDING.value,
        )
        session.add(application)

        if pet.status == PetStatus.AVAILABLE.value:
            pet.status = PetStatus.PENDING.value

        try:
            await session.commit()
        except IntegrityError:
            # A concurrent submission for the same (pet, user) won the race
            await session.rollback()
            logger.warning(
                f"Duplicate application rejected by store for user {user_id} and pet {pet_id}"
            )
            raise AlreadyPending()

        await session.refresh(application)

        logger.info(
            f"Application {application.id} submitted by user {user_id} for pet {pet_id}"
        )
        return application

    async def review(
        self,
        session: AsyncSession,
        application_id: uuid.UUID,
        reviewer_id: uuid.UUID,
        new_status: Union[ApplicationStatus, str],
    ) -> Application:
        """
        Approve or reject an application.

        Approving marks the pet Adopted and rejects every other pending
        application for it in the same transaction. Rejecting recomputes the
        pet's status from the applications that remain.

        Args:
            session: Database session
            application_id: Application under review
            reviewer_id: Admin performing the review
            new_status: Approved or Rejected

        Returns:
            Application: The reviewed application with reviewer fields set

        Raises:
            InvalidStatusValue: new_status is not a review outcome
            ApplicationNotFound: Application does not exist
            UserNotFound: Reviewer does not exist
            PetAlreadyAdopted: Another application for the pet is already approved
        """
        try:
            status = ApplicationStatus(new_status)
        except ValueError:
            raise InvalidStatusValue()
        if status not in REVIEW_OUTCOMES:
            raise InvalidStatusValue()

        application = await session.get(Application, application_id)
        if application is None:
            raise ApplicationNotFound()

        reviewer = await session.get(User, reviewer_id)
        if reviewer is None:
            raise UserNotFound("Admin user not found")

        # Repair any drift left by an earlier interrupted operation
        await self.reconcile_pet_status(session, application.pet_id)

        if status is ApplicationStatus.APPROVED:
            return await self._approve(session, application, reviewer)
        return await self._reject(session, application, reviewer)

    async def delete(
        self,
        session: AsyncSession,
        application_id: uuid.UUID,
        acting_user_id: uuid.UUID,
        acting_role: Union[UserRole, str],
    ) -> None:
        """
        Delete an application and recompute its pet's status.

        Raises:
            ApplicationNotFound: Application does not exist
            NotAuthorized: Actor is neither the applicant nor an admin
        """
        application = await session.get(Application, application_id)
        if application is None:
            raise ApplicationNotFound()

        is_admin = acting_role == UserRole.ADMIN
        if not is_admin and application.user_id != acting_user_id:
            raise NotAuthorized("Not authorized to delete this application")

        pet_id = application.pet_id
        await self.reconcile_pet_status(session, pet_id)
        await session.delete(application)
        await session.flush()

        await self.reconcile_pet_status(session, pet_id)
        await session.commit()

        logger.info(f"Application {application_id} deleted by user {acting_user_id}")

    async def reconcile_pet_status(
        self,
        session: AsyncSession,
        pet_id: uuid.UUID,
    ) -> PetStatus:
        """
        Recompute a pet's status from its stored applications.

        Pending changes must be flushed first. The caller commits.

        Returns:
            PetStatus: The status the pet now has
        """
        result = await session.execute(
            select(Application.status).where(Application.pet_id == pet_id)
        )
        status = recompute_pet_status(result.scalars().all())

        pet = await session.get(Pet, pet_id)
        if pet is not None and pet.status != status.value:
            logger.info(f"Pet {pet_id} status {pet.status} -> {status.value}")
            pet.status = status.value
        return status

    async def _approve(
        self,
        session: AsyncSession,
        application: Application,
        reviewer: User,
    ) -> Application:
        # Row lock on the pet serializes approvals for it where the backend supports one
        pet = (
            await session.execute(
                select(Pet).where(Pet.id == application.pet_id).with_for_update()
            )
        ).scalar_one_or_none()

        if not await self._claim_approval(session, application, reviewer):
            raise PetAlreadyAdopted("Another application for this pet is already approved")

        if pet is not None:
            pet.status = PetStatus.ADOPTED.value

        result = await session.execute(
            update(Application)
            .where(
                Application.pet_id == application.pet_id,
                Application.id != application.id,
                Application.status == ApplicationStatus.PENDING.value,
            )
            .values(self._review_values(ApplicationStatus.REJECTED, reviewer))
            .returning(
                Application.id,
                Application.user_email,
                Application.user_name,
                Application.pet_name,
            )
        )
        siblings = result.all()

        await session.commit()
        await session.refresh(application)

        logger.info(
            f"Application {application.id} approved by {reviewer.id}; "
            f"{len(siblings)} other pending application(s) rejected"
        )

        await self._notify(
            self.notifier.send_approval_email(
                application.user_email,
                application.user_name,
                application.pet_name,
                reviewer.name,
            ),
            "approval",
            application.id,
        )
        for sibling in siblings:
            await self._notify(
                self.notifier.send_rejection_email(
                    sibling.user_email,
                    sibling.user_name,
                    sibling.pet_name,
                    reviewer.name,
                ),
                "rejection",
                sibling.id,
            )

        return application

    async def _claim_approval(
        self,
        session: AsyncSession,
        application: Application,
        reviewer: User,
    ) -> bool:
        """
        Mark the application Approved unless another one for the pet already is.

        The check and the write are a single conditional UPDATE, so an approval
        committed by a concurrent request after this one started is still seen.

        Returns:
            bool: False when another application for the pet is Approved
        """
        other = aliased(Application)
        other_approved = (
            select(other.id)
            .where(
                other.pet_id == application.pet_id,
                other.id != application.id,
                other.status == ApplicationStatus.APPROVED.value,
            )
            .exists()
        )
        result = await session.execute(
            update(Application)
            .where(Application.id == application.id, ~other_approved)
            .values(self._review_values(ApplicationStatus.APPROVED, reviewer))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _reject(
        self,
        session: AsyncSession,
        application: Application,
        reviewer: User,
    ) -> Application:
        for key, value in self._review_values(ApplicationStatus.REJECTED, reviewer).items():
            setattr(application, key, value)
        await session.flush()

        await self.reconcile_pet_status(session, application.pet_id)
        await session.commit()
        await session.refresh(application)

        logger.info(f"Application {application.id} rejected by {reviewer.id}")

        await self._notify(
            self.notifier.send_rejection_email(
                application.user_email,
                application.user_name,
                application.pet_name,
                reviewer.name,
            ),
            "rejection",
            application.id,
        )
        return application

    @staticmethod
    def _review_values(status: ApplicationStatus, reviewer: User) -> Dict[str, Any]:
        return {
            "status": status.value,
            "reviewed_by": reviewer.id,
            "reviewed_by_name": reviewer.name,
        }

    @staticmethod
    async def _notify(send: Awaitable[None], kind: str, application_id: uuid.UUID) -> None:
        try:
            await send
        except Exception:
            logger.error(
                f"Failed to send {kind} email for application {application_id}",
                exc_info=True,
            )
