"""Physician profile model backing the default profile store."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from locum.core.storage import Base
from locum.core.timeutils import utc_now


class PhysicianProfileRecord(Base):
    """Canonical profile document for one physician."""

    __tablename__ = "physician_profiles"

    physician_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
    completion_percentage: Mapped[int] = mapped_column(Integer, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
