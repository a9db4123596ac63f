"""Job posting model."""

from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from locum.core.storage import Base
from locum.core.timeutils import utc_now


class JobPostingRecord(Base):
    """A facility's posted locum assignment."""

    __tablename__ = "job_postings"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    facility_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    facility_name: Mapped[str] = mapped_column(String(255), nullable=False)
    specialty: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    subspecialty: Mapped[str | None] = mapped_column(String(100), nullable=True)
    required_licenses: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    assignment_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default="fixed_block"
    )
    block_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    pay_amount: Mapped[float] = mapped_column(Float, nullable=False)
    requirements: Mapped[str] = mapped_column(Text, nullable=False, default="")
    malpractice_included: Mapped[bool] = mapped_column(Boolean, default=False)
    travel_included: Mapped[bool] = mapped_column(Boolean, default=False)
    lodging_included: Mapped[bool] = mapped_column(Boolean, default=False)
    flight_budget_cap: Mapped[float | None] = mapped_column(Float, nullable=True)
    hotel_budget_cap: Mapped[float | None] = mapped_column(Float, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="open", index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
