"""API routes for job postings."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from locum.core.exceptions import (
    PostingNotFoundError,
    not_found_exception,
    retryable_exception,
)
from locum.routers.dependencies import get_facility_id, get_physician_id
from locum.schemas.postings import BrowseResponse, JobPosting, JobPostingCreate
from locum.services.application_service import (
    ApplicationService,
    get_application_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/postings", tags=["postings"])


@router.get("", response_model=BrowseResponse)
async def browse_postings(
    specialty: str | None = Query(None, description="Specialty filter, or 'all'"),
    sort_by: Literal["date", "pay"] = Query("date"),
    physician_id: str = Depends(get_physician_id),
    service: ApplicationService = Depends(get_application_service),
):
    """List open postings for the calling physician."""
    try:
        return await service.browse_postings(
            physician_id, specialty=specialty, sort_by=sort_by
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error browsing postings: {e}")
        raise retryable_exception()


@router.post("", response_model=JobPosting, status_code=status.HTTP_201_CREATED)
async def create_posting(
    request: JobPostingCreate,
    facility_id: str = Depends(get_facility_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Publish a posting on behalf of the calling facility."""
    if request.facility_id != facility_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Postings can only be created for your own facility",
        )
    try:
        return await service.create_posting(request)
    except SQLAlchemyError as e:
        logger.error(f"Database error creating posting: {e}")
        raise retryable_exception()


@router.get("/{posting_id}", response_model=JobPosting)
async def get_posting(
    posting_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Get a single posting."""
    try:
        return await service.get_posting(posting_id)
    except PostingNotFoundError as e:
        raise not_found_exception(e.message)
    except SQLAlchemyError as e:
        logger.error(f"Database error getting posting {posting_id}: {e}")
        raise retryable_exception()
