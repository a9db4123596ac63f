"""Application model."""

from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from locum.core.storage import Base


class ApplicationRecord(Base):
    """A physician's application to a job posting.

    Rows are never deleted; terminal applications stay for audit.
    """

    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    job_posting_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("job_postings.id"), nullable=False, index=True
    )
    physician_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    physician_name: Mapped[str] = mapped_column(String(255), nullable=False)
    physician_specialty: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )
    applied_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    review_deadline: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, index=True
    )
    facility_decision_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    decision_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    calendar_blocked: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    blocked_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    blocked_end_date: Mapped[date] = mapped_column(Date, nullable=False)

    profile_snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)
    notifications_sent: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    @property
    def blocked_dates(self) -> dict:
        return {"start_date": self.blocked_start_date, "end_date": self.blocked_end_date}
