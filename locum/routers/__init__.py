"""API routers."""

from locum.routers.applications import router as applications_router
from locum.routers.expiry import router as expiry_router
from locum.routers.facility import router as facility_router
from locum.routers.postings import router as postings_router
from locum.routers.profiles import router as profiles_router

__all__ = [
    "applications_router",
    "expiry_router",
    "facility_router",
    "postings_router",
    "profiles_router",
]
