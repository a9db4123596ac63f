"""API routes for facilities reviewing applications."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from locum.core.exceptions import (
    ApplicationNotFoundError,
    conflict_exception,
    not_found_exception,
    retryable_exception,
)
from locum.routers.dependencies import get_facility_id
from locum.schemas.applications import (
    ApplicationListResponse,
    DecisionRequest,
    FacilitySummary,
    TransitionResponse,
)
from locum.schemas.workflow import ApplicationStatus
from locum.services.application_service import (
    ApplicationService,
    get_application_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facility/applications", tags=["facility"])


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    facility_id: str = Depends(get_facility_id),
    service: ApplicationService = Depends(get_application_service),
):
    """List applications to the caller's postings."""
    try:
        return await service.list_facility_applications(facility_id, status=status_filter)
    except SQLAlchemyError as e:
        logger.error(f"Database error listing facility applications: {e}")
        raise retryable_exception()


@router.get("/summary", response_model=FacilitySummary)
async def get_summary(
    facility_id: str = Depends(get_facility_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Application counts per status."""
    try:
        return await service.facility_summary(facility_id)
    except SQLAlchemyError as e:
        logger.error(f"Database error building facility summary: {e}")
        raise retryable_exception()


@router.post("/{application_id}/decision", response_model=TransitionResponse)
async def decide_application(
    application_id: str,
    request: DecisionRequest,
    facility_id: str = Depends(get_facility_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Approve or reject an application before its review deadline."""
    try:
        result = await service.decide(
            application_id, facility_id, request.decision, request.reason
        )
    except ApplicationNotFoundError as e:
        raise not_found_exception(e.message)
    except SQLAlchemyError as e:
        logger.error(f"Database error deciding application {application_id}: {e}")
        raise retryable_exception()

    if not result.ok:
        raise conflict_exception(result.error)

    message = (
        "Application approved. The dates are now booked."
        if request.decision == "approve"
        else "Application rejected. The physician's dates have been released."
    )
    return TransitionResponse(
        application=result.application, calendar_block=result.block, message=message
    )
