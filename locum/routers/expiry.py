"""API routes for the application expiration sweep."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from locum.core.exceptions import retryable_exception
from locum.schemas.expiry import ExpiryStatusResponse, SweepResult
from locum.services.expiry_service import ExpiryService, get_expiry_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expiry", tags=["expiry"])


@router.get("/status", response_model=ExpiryStatusResponse)
async def get_expiry_status(
    expiry: ExpiryService = Depends(get_expiry_service),
):
    """Get the sweep scheduler status and the last sweep result."""
    return expiry.get_status()


@router.post("/run", response_model=SweepResult)
async def run_expiry_sweep(
    expiry: ExpiryService = Depends(get_expiry_service),
):
    """Run an expiration sweep immediately."""
    try:
        return await expiry.run_sweep()
    except SQLAlchemyError as e:
        logger.error(f"Database error running expiry sweep: {e}")
        raise retryable_exception()
