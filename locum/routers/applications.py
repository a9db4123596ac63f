"""API routes for physicians applying to postings."""

import logging

from fastapi import APIRouter, Depends, Header, Query, Response, status
from redis.exceptions import LockError
from sqlalchemy.exc import SQLAlchemyError

from locum.core.exceptions import (
    ApplicationNotFoundError,
    PostingNotFoundError,
    conflict_exception,
    not_found_exception,
    retryable_exception,
)
from locum.matching.eligibility import EligibilityResult
from locum.routers.dependencies import get_physician_id
from locum.schemas.applications import (
    ApplicationListResponse,
    SubmissionResponse,
    SubmissionStatus,
    SubmitApplicationRequest,
    TransitionResponse,
)
from locum.schemas.workflow import ApplicationStatus
from locum.services.application_service import (
    ApplicationService,
    get_application_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])

SUBMISSION_STATUS_CODES = {
    SubmissionStatus.SUBMITTED: status.HTTP_201_CREATED,
    SubmissionStatus.INELIGIBLE: status.HTTP_400_BAD_REQUEST,
    SubmissionStatus.CONFLICT: status.HTTP_409_CONFLICT,
    SubmissionStatus.UNAVAILABLE: status.HTTP_409_CONFLICT,
}


@router.get("/eligibility", response_model=EligibilityResult)
async def get_eligibility(
    physician_id: str = Depends(get_physician_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Check whether the caller's profile is complete enough to apply."""
    try:
        return await service.check_eligibility(physician_id)
    except SQLAlchemyError as e:
        logger.error(f"Database error checking eligibility: {e}")
        raise retryable_exception()


@router.post("", response_model=SubmissionResponse)
async def submit_application(
    request: SubmitApplicationRequest,
    response: Response,
    physician_id: str = Depends(get_physician_id),
    user_agent: str | None = Header(None),
    x_forwarded_for: str | None = Header(None),
    service: ApplicationService = Depends(get_application_service),
):
    """Apply to a posting."""
    try:
        result = await service.submit_application(
            physician_id,
            request.job_posting_id,
            device_info=user_agent or "",
            forwarded_for=x_forwarded_for,
        )
    except PostingNotFoundError as e:
        raise not_found_exception(e.message)
    except SQLAlchemyError as e:
        logger.error(f"Database error submitting application: {e}")
        raise retryable_exception("Could not save your application. Please try again.")
    except LockError as e:
        logger.error(f"Could not acquire submission lock for {physician_id}: {e}")
        raise retryable_exception()

    response.status_code = SUBMISSION_STATUS_CODES[result.status]
    return result


@router.get("/mine", response_model=ApplicationListResponse)
async def list_my_applications(
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    physician_id: str = Depends(get_physician_id),
    service: ApplicationService = Depends(get_application_service),
):
    """List the caller's applications, newest first."""
    try:
        return await service.list_physician_applications(
            physician_id, status=status_filter
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error listing applications: {e}")
        raise retryable_exception()


@router.post("/{application_id}/withdraw", response_model=TransitionResponse)
async def withdraw_application(
    application_id: str,
    physician_id: str = Depends(get_physician_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Withdraw a pending application and release its dates."""
    try:
        result = await service.withdraw(application_id, physician_id)
    except ApplicationNotFoundError as e:
        raise not_found_exception(e.message)
    except SQLAlchemyError as e:
        logger.error(f"Database error withdrawing application {application_id}: {e}")
        raise retryable_exception()

    if not result.ok:
        raise conflict_exception(result.error)
    return TransitionResponse(
        application=result.application,
        calendar_block=result.block,
        message="Application withdrawn. Your dates are available again.",
    )
