"""Custom exceptions for the application."""

from fastapi import HTTPException, status


class WorkflowError(Exception):
    """Base exception for application workflow errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class PostingNotFoundError(WorkflowError):
    """Raised when a job posting does not exist."""

    def __init__(self, job_posting_id: str):
        self.job_posting_id = job_posting_id
        super().__init__(f"Job posting {job_posting_id} not found")


class ApplicationNotFoundError(WorkflowError):
    """Raised when an application does not exist or is not visible to the actor."""

    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Application {application_id} not found")


class ProfileNotFoundError(WorkflowError):
    """Raised when the profile store has no profile for a physician."""

    def __init__(self, physician_id: str):
        self.physician_id = physician_id
        super().__init__(f"No profile found for physician {physician_id}")


def not_found_exception(detail: str = "Resource not found") -> HTTPException:
    """Return a 404 Not Found exception."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def conflict_exception(detail: str) -> HTTPException:
    """Return a 409 Conflict exception."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


def retryable_exception(
    detail: str = "Something went wrong. Please try again.",
) -> HTTPException:
    """Return a 503 exception for transient storage failures."""
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=detail,
    )
