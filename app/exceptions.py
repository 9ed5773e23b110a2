"""Domain exceptions raised by the adoption services.

Each exception carries the HTTP status and machine-readable error code the
API boundary renders it with (see the handler registered in app.main).
"""
from typing import Optional


class AdoptionError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    error_code: str = "ADOPTION_ERROR"
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# Not found

class NotFoundError(AdoptionError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_detail = "Resource not found"


class PetNotFound(NotFoundError):
    error_code = "PET_NOT_FOUND"
    default_detail = "Pet not found"


class ApplicationNotFound(NotFoundError):
    error_code = "APPLICATION_NOT_FOUND"
    default_detail = "Application not found"


class UserNotFound(NotFoundError):
    error_code = "USER_NOT_FOUND"
    default_detail = "User not found"


# Conflicts

class ConflictError(AdoptionError):
    status_code = 409
    error_code = "CONFLICT"
    default_detail = "Request conflicts with the current state"


class DuplicateRejected(ConflictError):
    error_code = "DUPLICATE_REJECTED"
    default_detail = (
        "Your previous application for this pet was rejected. "
        "You cannot apply again for the same pet."
    )


class AlreadyApproved(ConflictError):
    error_code = "ALREADY_APPROVED"
    default_detail = "You have already been approved to adopt this pet."


class AlreadyPending(ConflictError):
    error_code = "ALREADY_PENDING"
    default_detail = (
        "You have already applied for this pet. "
        "Please wait for the admin decision."
    )


class PetAlreadyAdopted(ConflictError):
    error_code = "PET_ALREADY_ADOPTED"
    default_detail = "Pet has already been adopted"


class InvalidStatusValue(ConflictError):
    error_code = "INVALID_STATUS"
    default_detail = "Status must be Approved or Rejected"


# Authorization

class NotAuthorized(AdoptionError):
    status_code = 403
    error_code = "NOT_AUTHORIZED"
    default_detail = "Not authorized to perform this action"


# External collaborators

class DependencyFailure(AdoptionError):
    status_code = 503
    error_code = "DEPENDENCY_FAILURE"
    default_detail = "A required external service is unavailable"


class NotificationError(DependencyFailure):
    error_code = "NOTIFICATION_FAILED"
    default_detail = "Failed to send email notification"
