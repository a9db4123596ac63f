"""Schemas for the expiration sweep API."""

from datetime import datetime

from pydantic import BaseModel


class SweepResult(BaseModel):
    """Outcome of one expiration sweep."""

    started_at: datetime
    expired_count: int = 0
    warnings_sent: int = 0
    expired_application_ids: list[str] = []


class ExpiryStatusResponse(BaseModel):
    """Expiration sweep scheduler status."""

    scheduler_running: bool
    interval_minutes: int
    next_scheduled_run: datetime | None
    last_result: SweepResult | None
