"""Domain models for applications and calendar blocks."""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from locum.schemas.profile import PhysicianProfileSnapshot


class ApplicationStatus(StrEnum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"
    WITHDRAWN = "withdrawn"


TERMINAL_STATUSES = frozenset(
    {
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.EXPIRED,
        ApplicationStatus.WITHDRAWN,
    }
)

# Statuses that no longer hold the physician's dates.
RELEASED_STATUSES = frozenset(
    {
        ApplicationStatus.REJECTED,
        ApplicationStatus.EXPIRED,
        ApplicationStatus.WITHDRAWN,
    }
)


class BlockStatus(StrEnum):
    ACTIVE = "active"
    EXPIRED = "expired"
    RELEASED = "released"


class BlockReason(StrEnum):
    PENDING_APPLICATION = "pending_application"
    APPROVED_ASSIGNMENT = "approved_assignment"
    SCHEDULED_ASSIGNMENT = "scheduled_assignment"


class BlockedDates(BaseModel):
    """Date range copied from the posting at apply time."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    start_date: date
    end_date: date


class NotificationFlags(BaseModel):
    """Which notifications have gone out for an application."""

    model_config = ConfigDict(from_attributes=True)

    application_received: bool = False
    reminder_sent: bool = False
    deadline_warning: bool = False
    decision: bool = False


class Application(BaseModel):
    """One physician's bid for one job posting."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    job_posting_id: str
    physician_id: str
    physician_name: str
    physician_specialty: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    applied_at: datetime
    review_deadline: datetime
    facility_decision_at: datetime | None = None
    decision_reason: str | None = None
    calendar_blocked: bool = True
    blocked_dates: BlockedDates
    profile_snapshot: PhysicianProfileSnapshot
    notifications_sent: NotificationFlags = Field(default_factory=NotificationFlags)

    @model_validator(mode="after")
    def _check_deadline(self):
        if self.review_deadline <= self.applied_at:
            raise ValueError("review_deadline must be after applied_at")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class CalendarBlock(BaseModel):
    """A reservation against a physician's availability."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    physician_id: str
    application_id: str
    job_posting_id: str
    start_date: date
    end_date: date
    status: BlockStatus = BlockStatus.ACTIVE
    reason: BlockReason = BlockReason.PENDING_APPLICATION
    created_at: datetime
    expires_at: datetime | None = None
    released_at: datetime | None = None
