"""Calendar block ledger: constructors and status changes for blocks."""

import uuid
from datetime import date, datetime

from locum.core.timeutils import utc_now
from locum.schemas.workflow import BlockReason, BlockStatus, CalendarBlock


def new_id() -> str:
    return uuid.uuid4().hex


def create_calendar_block(
    physician_id: str,
    application_id: str,
    job_posting_id: str,
    start_date: date,
    end_date: date,
    review_deadline: datetime,
    now: datetime | None = None,
) -> CalendarBlock:
    """Reserve a date range for a pending application.

    Does not check for conflicts; run the overlap detector first.
    """
    return CalendarBlock(
        id=new_id(),
        physician_id=physician_id,
        application_id=application_id,
        job_posting_id=job_posting_id,
        start_date=start_date,
        end_date=end_date,
        status=BlockStatus.ACTIVE,
        reason=BlockReason.PENDING_APPLICATION,
        created_at=now or utc_now(),
        expires_at=review_deadline,
    )


def release_calendar_block(
    block: CalendarBlock, now: datetime | None = None
) -> CalendarBlock:
    """Return a released copy of the block (withdrawal or rejection)."""
    return block.model_copy(
        update={"status": BlockStatus.RELEASED, "released_at": now or utc_now()}
    )


def expire_calendar_block(block: CalendarBlock) -> CalendarBlock:
    """Return an expired copy of the block (review deadline passed)."""
    return block.model_copy(update={"status": BlockStatus.EXPIRED})


def convert_to_assignment_block(block: CalendarBlock) -> CalendarBlock:
    """Keep the dates reserved for an approved assignment."""
    return block.model_copy(
        update={"reason": BlockReason.APPROVED_ASSIGNMENT, "expires_at": None}
    )
