"""Enumerations shared by models, schemas and services."""
import enum


class UserRole(str, enum.Enum):
    """Roles a user account can hold."""
    VISITOR = "visitor"
    USER = "user"
    ADMIN = "admin"


class PetStatus(str, enum.Enum):
    """
    Adoption status of a pet.

    Owned by the application lifecycle: Adopted while an application is
    approved, Pending while any application awaits review, Available otherwise.
    """
    AVAILABLE = "Available"
    PENDING = "Pending"
    ADOPTED = "Adopted"


class ApplicationStatus(str, enum.Enum):
    """
    Status of an adoption application.

    Flow:
        Pending -> Approved (admin review)
        Pending -> Rejected (admin review, or cascade when a sibling is approved)
    """
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


ACTIVE_APPLICATION_STATUSES = (ApplicationStatus.PENDING, ApplicationStatus.APPROVED)
REVIEW_OUTCOMES = (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED)
