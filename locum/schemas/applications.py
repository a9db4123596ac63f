"""Schemas for application requests and responses."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from locum.matching.eligibility import EligibilityResult
from locum.matching.requirements import RequirementCheck
from locum.schemas.workflow import Application, CalendarBlock


class SubmissionStatus(StrEnum):
    SUBMITTED = "submitted"
    INELIGIBLE = "ineligible"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


class SubmitApplicationRequest(BaseModel):
    """Request to apply to a job posting."""

    job_posting_id: str = Field(..., min_length=1)


class SubmissionResponse(BaseModel):
    """Outcome of an application submission."""

    status: SubmissionStatus
    message: str
    application: Application | None = None
    calendar_block: CalendarBlock | None = None
    eligibility: EligibilityResult | None = None
    requirements: RequirementCheck | None = None
    conflicting_application_ids: list[str] = Field(default_factory=list)
    conflicting_block_ids: list[str] = Field(default_factory=list)


class DecisionRequest(BaseModel):
    """Facility decision on a pending application."""

    decision: Literal["approve", "reject"]
    reason: str | None = Field(default=None, max_length=2000)


class TransitionResponse(BaseModel):
    """Application state after a lifecycle transition."""

    application: Application
    calendar_block: CalendarBlock | None = None
    message: str


class ApplicationView(BaseModel):
    """An application with its deadline rendered for display."""

    application: Application
    time_remaining: str | None = None
    urgency: str | None = None
    requirements: RequirementCheck | None = None


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationView]
    total_count: int


class FacilitySummary(BaseModel):
    """Counts shown on the facility review screen."""

    pending: int = 0
    under_review: int = 0
    approved: int = 0
    rejected: int = 0
    expired: int = 0
    withdrawn: int = 0
