"""Locum - application and matching workflow for locum physician assignments."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from locum.core.config import settings
from locum.core.redis_client import close_redis
from locum.core.storage import engine, init_models
from locum.routers import (
    applications_router,
    expiry_router,
    facility_router,
    postings_router,
    profiles_router,
)
from locum.services.expiry_service import expiry_service

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Initializing application...")
    await init_models()

    if settings.expiry_sweep_enabled:
        logger.info("Starting expiry scheduler...")
        await expiry_service.start()

    logger.info("Application initialized")

    yield

    logger.info("Shutting down...")
    await expiry_service.stop()
    await close_redis()
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Locum",
    description="Application and matching workflow for locum physician assignments",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(postings_router)
app.include_router(applications_router)
app.include_router(facility_router)
app.include_router(profiles_router)
app.include_router(expiry_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "locum",
        "review_window_hours": settings.review_window_hours,
        "expiry": expiry_service.get_status(),
    }
