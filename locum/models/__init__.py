"""Database models."""

from locum.models.application import ApplicationRecord
from locum.models.calendar_block import CalendarBlockRecord
from locum.models.job_posting import JobPostingRecord
from locum.models.profile import PhysicianProfileRecord

__all__ = [
    "ApplicationRecord",
    "CalendarBlockRecord",
    "JobPostingRecord",
    "PhysicianProfileRecord",
]
