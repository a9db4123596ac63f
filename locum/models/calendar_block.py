"""Calendar block model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from locum.core.storage import Base


class CalendarBlockRecord(Base):
    """A date range reserved against a physician's availability."""

    __tablename__ = "calendar_blocks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    physician_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    application_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("applications.id"), nullable=False, unique=True
    )
    job_posting_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("job_postings.id"), nullable=False
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", index=True
    )
    reason: Mapped[str] = mapped_column(
        String(30), nullable=False, default="pending_application"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    released_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
