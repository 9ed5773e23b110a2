"""Pure rules behind the adoption application lifecycle.

Nothing in this module touches the database; callers pass in statuses read
from the store in the same request.
"""
from enum import Enum
from typing import Iterable, Union

from app.exceptions import AlreadyApproved, AlreadyPending, DuplicateRejected
from app.models.enums import ApplicationStatus, PetStatus


StatusLike = Union[ApplicationStatus, str]


class PriorApplication(str, Enum):
    """What a user's earlier applications for a pet say about a new one."""
    NONE = "none"
    REJECTED = "rejected"
    PENDING = "pending"
    APPROVED = "approved"


def classify_prior_applications(statuses: Iterable[StatusLike]) -> PriorApplication:
    """
    Classify a user's application history for one pet.

    Only one row per (user, pet) is expected, but if several exist the most
    restrictive one wins: a rejection blocks for good, then an approval,
    then a pending request.

    Args:
        statuses: Statuses of every application by the user for the pet

    Returns:
        PriorApplication: Classification used to decide whether to accept a new one
    """
    seen = {ApplicationStatus(status) for status in statuses}
    if ApplicationStatus.REJECTED in seen:
        return PriorApplication.REJECTED
    if ApplicationStatus.APPROVED in seen:
        return PriorApplication.APPROVED
    if ApplicationStatus.PENDING in seen:
        return PriorApplication.PENDING
    return PriorApplication.NONE


def ensure_can_apply(prior: PriorApplication) -> None:
    """
    Raise the conflict matching an existing application, if any.

    Raises:
        DuplicateRejected: The user was already rejected for this pet
        AlreadyApproved: The user was already approved for this pet
        AlreadyPending: The user's application is still awaiting review
    """
    if prior is PriorApplication.REJECTED:
        raise DuplicateRejected()
    if prior is PriorApplication.APPROVED:
        raise AlreadyApproved()
    if prior is PriorApplication.PENDING:
        raise AlreadyPending()


def recompute_pet_status(statuses: Iterable[StatusLike]) -> PetStatus:
    """
    Derive a pet's status from all of its current applications.

    Adopted takes precedence over Pending, which takes precedence over
    Available. An empty collection means the pet is Available.
    """
    seen = {ApplicationStatus(status) for status in statuses}
    if ApplicationStatus.APPROVED in seen:
        return PetStatus.ADOPTED
    if ApplicationStatus.PENDING in seen:
        return PetStatus.PENDING
    return PetStatus.AVAILABLE
