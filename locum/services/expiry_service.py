"""Scheduled sweep that expires overdue applications and sends deadline warnings."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from locum.core.config import settings
from locum.core.storage import async_session
from locum.core.timeutils import to_utc_naive, utc_now
from locum.schemas.expiry import ExpiryStatusResponse, SweepResult
from locum.services.application_service import expire_overdue
from locum.services.events import (
    EventType,
    WorkflowEvent,
    WorkflowEventDispatcher,
    event_dispatcher,
)
from locum.services.repository import WorkflowRepository

logger = logging.getLogger(__name__)

JOB_ID = "application_expiry_sweep"


class ExpiryService:
    """Runs the expiration sweep on an interval.

    Reads expire overdue applications lazily as well, so the sweep only
    bounds how long a stale pending application can sit unread.
    """

    _instance: "ExpiryService | None" = None
    _scheduler: AsyncIOScheduler | None = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = async_session,
        dispatcher: WorkflowEventDispatcher = event_dispatcher,
    ):
        if self._initialized:
            return
        self._initialized = True
        self._scheduler = None
        self._running = False
        self._last_result: SweepResult | None = None
        self.session_factory = session_factory
        self.dispatcher = dispatcher

    @property
    def scheduler(self) -> AsyncIOScheduler | None:
        return self._scheduler

    @property
    def last_result(self) -> SweepResult | None:
        return self._last_result

    async def start(self):
        """Start the scheduler and register the sweep job."""
        if self._scheduler is not None and self._scheduler.running:
            logger.info("Expiry scheduler already running")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.add_job(
            self._scheduled_sweep,
            trigger=IntervalTrigger(minutes=settings.expiry_sweep_interval_minutes),
            id=JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.start()
        logger.info(
            f"Expiry scheduler started, sweeping every "
            f"{settings.expiry_sweep_interval_minutes} minute(s)"
        )

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Expiry scheduler stopped")

    async def _scheduled_sweep(self):
        try:
            await self.run_sweep()
        except SQLAlchemyError as e:
            logger.error(f"Expiry sweep failed: {e}")

    async def run_sweep(self, now: datetime | None = None) -> SweepResult:
        """Expire overdue applications and warn facilities about close deadlines."""
        now = to_utc_naive(now) if now else utc_now()
        if self._running:
            logger.warning("Expiry sweep already running, skipping")
            return SweepResult(started_at=now)

        self._running = True
        try:
            async with self.session_factory() as session:
                repo = WorkflowRepository(session)

                overdue = await repo.list_overdue_applications(now)
                _, events = await expire_overdue(repo, overdue, now)
                expired_ids = [event.application_id for event in events]

                warnings = 0
                nearing = await repo.list_applications_nearing_deadline(
                    now, timedelta(hours=settings.deadline_warning_hours)
                )
                for app in nearing:
                    if app.notifications_sent.deadline_warning:
                        continue
                    warned = app.model_copy(
                        update={
                            "notifications_sent": app.notifications_sent.model_copy(
                                update={"deadline_warning": True}
                            )
                        }
                    )
                    if not await repo.save_application(
                        warned, expected_status=app.status
                    ):
                        continue
                    posting = await repo.get_posting(app.job_posting_id)
                    events.append(
                        WorkflowEvent.for_application(
                            EventType.DEADLINE_WARNING,
                            warned,
                            facility_id=posting.facility_id if posting else None,
                            review_deadline=app.review_deadline.isoformat(),
                        )
                    )
                    warnings += 1

                await session.commit()
        finally:
            self._running = False

        await self.dispatcher.dispatch_all(events)
        result = SweepResult(
            started_at=now,
            expired_count=len(expired_ids),
            warnings_sent=warnings,
            expired_application_ids=expired_ids,
        )
        self._last_result = result
        if result.expired_count or result.warnings_sent:
            logger.info(
                f"Expiry sweep expired {result.expired_count} application(s), "
                f"sent {result.warnings_sent} deadline warning(s)"
            )
        return result

    def get_status(self) -> ExpiryStatusResponse:
        """Get sweep scheduler status."""
        next_run = None
        running = False
        if self._scheduler is not None:
            running = self._scheduler.running
            job = self._scheduler.get_job(JOB_ID)
            next_run = job.next_run_time if job else None

        return ExpiryStatusResponse(
            scheduler_running=running,
            interval_minutes=settings.expiry_sweep_interval_minutes,
            next_scheduled_run=next_run,
            last_result=self._last_result,
        )


# Global expiry service instance
expiry_service = ExpiryService()


async def get_expiry_service() -> ExpiryService:
    """Dependency to get expiry service."""
    return expiry_service
