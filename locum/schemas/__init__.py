"""Pydantic schemas."""

from locum.schemas.applications import (
    ApplicationListResponse,
    ApplicationView,
    DecisionRequest,
    FacilitySummary,
    SubmissionResponse,
    SubmissionStatus,
    SubmitApplicationRequest,
    TransitionResponse,
)
from locum.schemas.postings import BrowseResponse, JobPosting, JobPostingCreate
from locum.schemas.profile import PhysicianProfile, ProfileUpsertRequest
from locum.schemas.workflow import Application, ApplicationStatus, CalendarBlock

__all__ = [
    "Application",
    "ApplicationListResponse",
    "ApplicationStatus",
    "ApplicationView",
    "BrowseResponse",
    "CalendarBlock",
    "DecisionRequest",
    "FacilitySummary",
    "JobPosting",
    "JobPostingCreate",
    "PhysicianProfile",
    "ProfileUpsertRequest",
    "SubmissionResponse",
    "SubmissionStatus",
    "SubmitApplicationRequest",
    "TransitionResponse",
]
