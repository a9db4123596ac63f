"""API routes for the canonical physician profile."""

import logging

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from locum.core.exceptions import (
    ProfileNotFoundError,
    not_found_exception,
    retryable_exception,
)
from locum.core.storage import async_session
from locum.schemas.profile import PhysicianProfile, ProfileUpsertRequest
from locum.services.profile_store import SqlProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.put("/{physician_id}", response_model=PhysicianProfile)
async def upsert_profile(physician_id: str, request: ProfileUpsertRequest):
    """Create or replace a physician's profile."""
    try:
        async with async_session() as session:
            profile = await SqlProfileStore(session).upsert_profile(
                physician_id, request
            )
            await session.commit()
        logger.info(f"Stored profile for physician {physician_id}")
        return profile
    except SQLAlchemyError as e:
        logger.error(f"Database error storing profile for {physician_id}: {e}")
        raise retryable_exception()


@router.get("/{physician_id}", response_model=PhysicianProfile)
async def get_profile(physician_id: str):
    """Get a physician's profile."""
    try:
        async with async_session() as session:
            return await SqlProfileStore(session).require_profile(physician_id)
    except ProfileNotFoundError as e:
        raise not_found_exception(e.message)
    except SQLAlchemyError as e:
        logger.error(f"Database error loading profile for {physician_id}: {e}")
        raise retryable_exception()
