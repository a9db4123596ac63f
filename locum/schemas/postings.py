"""Schemas for job postings."""

from datetime import date, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from locum.matching.eligibility import EligibilityResult


class PostingStatus(StrEnum):
    DRAFT = "draft"
    OPEN = "open"
    FILLED = "filled"
    CANCELLED = "cancelled"


class AssignmentType(StrEnum):
    FIXED_BLOCK = "fixed_block"
    ROLLING_AVAILABILITY = "rolling_availability"


class JobPostingBase(BaseModel):
    """Fields a facility sets when posting an assignment."""

    facility_id: str
    facility_name: str
    specialty: str
    subspecialty: str | None = None
    required_licenses: list[str] = Field(
        default_factory=list, description="State codes the physician must hold"
    )
    start_date: date
    end_date: date
    assignment_type: AssignmentType = AssignmentType.FIXED_BLOCK
    block_duration: Literal[3, 5, 7] | None = Field(
        default=None, description="Block length in days"
    )
    pay_amount: float = Field(..., ge=0)
    requirements: str = ""
    malpractice_included: bool = False
    travel_included: bool = False
    lodging_included: bool = False
    flight_budget_cap: float | None = Field(default=None, ge=0)
    hotel_budget_cap: float | None = Field(default=None, ge=0)

    @field_validator("required_licenses")
    @classmethod
    def _normalize_states(cls, value: list[str]) -> list[str]:
        normalized: list[str] = []
        for state in value:
            code = state.strip().upper()
            if code and code not in normalized:
                normalized.append(code)
        return normalized

    @model_validator(mode="after")
    def _check_date_range(self):
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class JobPostingCreate(JobPostingBase):
    """Request to create a job posting."""

    status: PostingStatus = PostingStatus.OPEN

    @field_validator("status")
    @classmethod
    def _check_initial_status(cls, value: PostingStatus) -> PostingStatus:
        if value not in (PostingStatus.DRAFT, PostingStatus.OPEN):
            raise ValueError("New postings must be draft or open")
        return value


class JobPosting(JobPostingBase):
    """A facility's posted locum assignment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    status: PostingStatus = PostingStatus.OPEN
    created_at: datetime
    updated_at: datetime


class BrowsePosting(BaseModel):
    """A posting as listed to a physician, with the apply gate applied."""

    posting: JobPosting
    can_apply: bool


class BrowseResponse(BaseModel):
    """Open postings available to a physician."""

    postings: list[BrowsePosting]
    specialties: list[str]
    eligibility: EligibilityResult
