"""Persistence for postings, applications and calendar blocks."""

from collections.abc import Iterable
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from locum.matching.calendar import new_id
from locum.models.application import ApplicationRecord
from locum.models.calendar_block import CalendarBlockRecord
from locum.models.job_posting import JobPostingRecord
from locum.schemas.postings import JobPosting, JobPostingCreate, PostingStatus
from locum.schemas.workflow import (
    Application,
    ApplicationStatus,
    BlockStatus,
    CalendarBlock,
)


class WorkflowRepository:
    """Reads and writes workflow entities within one session.

    The repository never commits; the caller owns the transaction so that
    an application and its calendar block are committed together.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # Postings

    async def get_posting(self, job_posting_id: str) -> JobPosting | None:
        record = await self.session.get(JobPostingRecord, job_posting_id)
        return JobPosting.model_validate(record) if record else None

    async def list_postings(
        self,
        status: PostingStatus | None = None,
        facility_id: str | None = None,
    ) -> list[JobPosting]:
        query = select(JobPostingRecord).order_by(JobPostingRecord.start_date)
        if status is not None:
            query = query.where(JobPostingRecord.status == status.value)
        if facility_id is not None:
            query = query.where(JobPostingRecord.facility_id == facility_id)
        result = await self.session.execute(query)
        return [JobPosting.model_validate(r) for r in result.scalars().all()]

    async def add_posting(self, request: JobPostingCreate) -> JobPosting:
        record = JobPostingRecord(id=new_id(), **request.model_dump())
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return JobPosting.model_validate(record)

    # Applications

    async def get_application(
        self, application_id: str, refresh: bool = False
    ) -> Application | None:
        record = await self.session.get(
            ApplicationRecord, application_id, populate_existing=refresh
        )
        return Application.model_validate(record) if record else None

    async def list_applications(
        self,
        physician_id: str | None = None,
        facility_id: str | None = None,
        statuses: Iterable[ApplicationStatus] | None = None,
    ) -> list[Application]:
        query = select(ApplicationRecord).order_by(ApplicationRecord.applied_at.desc())
        if physician_id is not None:
            query = query.where(ApplicationRecord.physician_id == physician_id)
        if facility_id is not None:
            query = query.join(
                JobPostingRecord, JobPostingRecord.id == ApplicationRecord.job_posting_id
            ).where(JobPostingRecord.facility_id == facility_id)
        if statuses is not None:
            query = query.where(
                ApplicationRecord.status.in_([s.value for s in statuses])
            )
        result = await self.session.execute(query)
        return [Application.model_validate(r) for r in result.scalars().all()]

    async def list_overdue_applications(self, now: datetime) -> list[Application]:
        """Pending applications whose review deadline has passed."""
        query = select(ApplicationRecord).where(
            ApplicationRecord.status == ApplicationStatus.PENDING.value,
            ApplicationRecord.review_deadline < now,
        )
        result = await self.session.execute(query)
        return [Application.model_validate(r) for r in result.scalars().all()]

    async def list_applications_nearing_deadline(
        self, now: datetime, within: timedelta
    ) -> list[Application]:
        """Pending applications due within ``within`` that are not yet overdue."""
        query = select(ApplicationRecord).where(
            ApplicationRecord.status == ApplicationStatus.PENDING.value,
            ApplicationRecord.review_deadline >= now,
            ApplicationRecord.review_deadline <= now + within,
        )
        result = await self.session.execute(query)
        return [Application.model_validate(r) for r in result.scalars().all()]

    async def add_application_with_block(
        self, application: Application, block: CalendarBlock
    ) -> None:
        """Stage an application and its calendar block in the same transaction."""
        self.session.add(
            ApplicationRecord(
                id=application.id,
                job_posting_id=application.job_posting_id,
                physician_id=application.physician_id,
                physician_name=application.physician_name,
                physician_specialty=application.physician_specialty,
                status=application.status.value,
                applied_at=application.applied_at,
                review_deadline=application.review_deadline,
                calendar_blocked=application.calendar_blocked,
                blocked_start_date=application.blocked_dates.start_date,
                blocked_end_date=application.blocked_dates.end_date,
                profile_snapshot=application.profile_snapshot.model_dump(mode="json"),
                notifications_sent=application.notifications_sent.model_dump(),
            )
        )
        # Flush the parent row first so the block's foreign key resolves.
        await self.session.flush()
        self.session.add(
            CalendarBlockRecord(
                id=block.id,
                physician_id=block.physician_id,
                application_id=block.application_id,
                job_posting_id=block.job_posting_id,
                start_date=block.start_date,
                end_date=block.end_date,
                status=block.status.value,
                reason=block.reason.value,
                created_at=block.created_at,
                expires_at=block.expires_at,
            )
        )
        await self.session.flush()

    async def save_application(
        self,
        application: Application,
        expected_status: ApplicationStatus | None = None,
    ) -> bool:
        """Persist the mutable fields of an application.

        With ``expected_status`` the row is only written while it still has
        that status. Returns False when another transaction changed it first.
        """
        query = update(ApplicationRecord).where(ApplicationRecord.id == application.id)
        if expected_status is not None:
            query = query.where(ApplicationRecord.status == expected_status.value)
        result = await self.session.execute(
            query.values(
                status=application.status.value,
                facility_decision_at=application.facility_decision_at,
                decision_reason=application.decision_reason,
                calendar_blocked=application.calendar_blocked,
                notifications_sent=application.notifications_sent.model_dump(),
            )
        )
        return result.rowcount > 0

    # Calendar blocks

    async def list_blocks(
        self, physician_id: str, status: BlockStatus | None = None
    ) -> list[CalendarBlock]:
        query = select(CalendarBlockRecord).where(
            CalendarBlockRecord.physician_id == physician_id
        )
        if status is not None:
            query = query.where(CalendarBlockRecord.status == status.value)
        result = await self.session.execute(query)
        return [CalendarBlock.model_validate(r) for r in result.scalars().all()]

    async def get_block_for_application(
        self, application_id: str
    ) -> CalendarBlock | None:
        result = await self.session.execute(
            select(CalendarBlockRecord).where(
                CalendarBlockRecord.application_id == application_id
            )
        )
        record = result.scalar_one_or_none()
        return CalendarBlock.model_validate(record) if record else None

    async def save_block(self, block: CalendarBlock) -> None:
        """Persist the mutable fields of a calendar block."""
        await self.session.execute(
            update(CalendarBlockRecord)
            .where(CalendarBlockRecord.id == block.id)
            .values(
                status=block.status.value,
                reason=block.reason.value,
                expires_at=block.expires_at,
                released_at=block.released_at,
            )
        )
