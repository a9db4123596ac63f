"""Application service for locum job applications."""

import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from locum.core.exceptions import ApplicationNotFoundError, PostingNotFoundError
from locum.core.locks import PhysicianLockRegistry, physician_locks
from locum.core.storage import async_session
from locum.core.timeutils import utc_now
from locum.matching.browse import SortKey, filter_open_postings, list_specialties
from locum.matching.calendar import create_calendar_block, new_id
from locum.matching.eligibility import EligibilityResult, check_profile_eligibility
from locum.matching.lifecycle import (
    TransitionResult,
    approve_application,
    calculate_review_deadline,
    deadline_urgency,
    expire_application,
    is_application_expired,
    reject_application,
    time_remaining,
    withdraw_application,
)
from locum.matching.overlap import check_date_overlap, describe_conflict
from locum.matching.requirements import validate_job_requirements
from locum.matching.snapshot import create_profile_snapshot
from locum.schemas.applications import (
    ApplicationListResponse,
    ApplicationView,
    FacilitySummary,
    SubmissionResponse,
    SubmissionStatus,
)
from locum.schemas.postings import (
    BrowsePosting,
    BrowseResponse,
    JobPosting,
    JobPostingCreate,
    PostingStatus,
)
from locum.schemas.profile import PhysicianProfile
from locum.schemas.workflow import (
    Application,
    ApplicationStatus,
    BlockedDates,
    NotificationFlags,
)
from locum.services.events import (
    EventType,
    WorkflowEvent,
    WorkflowEventDispatcher,
    event_dispatcher,
)
from locum.services.ip_lookup import IpLookupClient, ip_lookup_client
from locum.services.profile_store import ProfileStore, SqlProfileStore
from locum.services.repository import WorkflowRepository

logger = logging.getLogger(__name__)


async def apply_transition(
    repo: WorkflowRepository, expected: ApplicationStatus, result: TransitionResult
) -> TransitionResult:
    """Stage a successful transition unless the application moved on meanwhile.

    The write only lands while the stored status is still ``expected``. When
    a concurrent request got there first the transition is refused and the
    current application is returned.
    """
    if not result.ok:
        return result
    if not await repo.save_application(result.application, expected_status=expected):
        current = await repo.get_application(result.application.id, refresh=True)
        logger.info(
            f"Application {current.id} changed to {current.status.value} "
            f"by a concurrent request"
        )
        return TransitionResult(
            ok=False,
            application=current,
            error=f"This application has already been {current.status.value}.",
        )
    if result.block is not None:
        await repo.save_block(result.block)
    return result


async def expire_overdue(
    repo: WorkflowRepository, applications: list[Application], now: datetime
) -> tuple[list[Application], list[WorkflowEvent]]:
    """Expire pending applications past their deadline and stage the writes.

    Returns the applications with expirations applied and the events to
    dispatch once the caller has committed.
    """
    updated: list[Application] = []
    events: list[WorkflowEvent] = []
    for app in applications:
        if app.status != ApplicationStatus.PENDING or not is_application_expired(
            app.review_deadline, now
        ):
            updated.append(app)
            continue

        block = await repo.get_block_for_application(app.id)
        result = await apply_transition(
            repo, app.status, expire_application(app, block, now)
        )
        if not result.ok:
            updated.append(result.application)
            continue

        posting = await repo.get_posting(app.job_posting_id)
        events.append(
            WorkflowEvent.for_application(
                EventType.APPLICATION_EXPIRED,
                result.application,
                facility_id=posting.facility_id if posting else None,
                review_deadline=app.review_deadline.isoformat(),
            )
        )
        logger.info(
            f"Application {app.id} expired (deadline {app.review_deadline.isoformat()})"
        )
        updated.append(result.application)
    return updated, events


class ApplicationService:
    """Core service for browsing, submitting and deciding applications."""

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = async_session,
        profile_store_factory: Callable[[AsyncSession], ProfileStore] = SqlProfileStore,
        ip_lookup: IpLookupClient = ip_lookup_client,
        dispatcher: WorkflowEventDispatcher = event_dispatcher,
        locks: PhysicianLockRegistry = physician_locks,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.profile_store_factory = profile_store_factory
        self.ip_lookup = ip_lookup
        self.dispatcher = dispatcher
        self.locks = locks
        self.clock = clock

    async def _load_profile(
        self, session: AsyncSession, physician_id: str
    ) -> PhysicianProfile:
        profile = await self.profile_store_factory(session).get_profile(physician_id)
        # A physician without a stored profile is treated as an empty one.
        return profile or PhysicianProfile(physician_id=physician_id)

    # Postings

    async def create_posting(self, request: JobPostingCreate) -> JobPosting:
        async with self.session_factory() as session:
            posting = await WorkflowRepository(session).add_posting(request)
            await session.commit()
        logger.info(
            f"Created posting {posting.id} for facility {posting.facility_id} "
            f"({posting.specialty}, {posting.start_date} to {posting.end_date})"
        )
        return posting

    async def get_posting(self, job_posting_id: str) -> JobPosting:
        async with self.session_factory() as session:
            posting = await WorkflowRepository(session).get_posting(job_posting_id)
        if posting is None:
            raise PostingNotFoundError(job_posting_id)
        return posting

    async def browse_postings(
        self,
        physician_id: str,
        specialty: str | None = None,
        sort_by: SortKey = "date",
    ) -> BrowseResponse:
        """List open postings with the physician's apply gate."""
        async with self.session_factory() as session:
            profile = await self._load_profile(session, physician_id)
            postings = await WorkflowRepository(session).list_postings(
                status=PostingStatus.OPEN
            )

        eligibility = check_profile_eligibility(profile)
        visible = filter_open_postings(postings, specialty=specialty, sort_by=sort_by)
        return BrowseResponse(
            postings=[
                BrowsePosting(posting=p, can_apply=eligibility.eligible) for p in visible
            ],
            specialties=list_specialties(postings),
            eligibility=eligibility,
        )

    async def check_eligibility(self, physician_id: str) -> EligibilityResult:
        async with self.session_factory() as session:
            profile = await self._load_profile(session, physician_id)
        return check_profile_eligibility(profile)

    # Submission

    async def submit_application(
        self,
        physician_id: str,
        job_posting_id: str,
        device_info: str = "",
        forwarded_for: str | None = None,
    ) -> SubmissionResponse:
        """Apply to a posting.

        The overlap check and the inserts run under the physician's lock
        and inside one transaction, so two concurrent submissions for
        overlapping dates cannot both succeed. The application and its
        calendar block are committed together or not at all.
        """
        events: list[WorkflowEvent] = []
        async with self.locks.hold(physician_id):
            async with self.session_factory() as session:
                repo = WorkflowRepository(session)
                now = self.clock()

                posting = await repo.get_posting(job_posting_id)
                if posting is None:
                    raise PostingNotFoundError(job_posting_id)
                if posting.status != PostingStatus.OPEN:
                    return SubmissionResponse(
                        status=SubmissionStatus.UNAVAILABLE,
                        message="This posting is no longer accepting applications.",
                    )

                profile = await self._load_profile(session, physician_id)
                eligibility = check_profile_eligibility(profile)
                if not eligibility.eligible:
                    logger.info(
                        f"Physician {physician_id} ineligible for posting {job_posting_id}: "
                        f"missing {', '.join(eligibility.missing_fields)}"
                    )
                    return SubmissionResponse(
                        status=SubmissionStatus.INELIGIBLE,
                        message=eligibility.message,
                        eligibility=eligibility,
                    )

                applications, events = await expire_overdue(
                    repo, await repo.list_applications(physician_id=physician_id), now
                )
                blocks = await repo.list_blocks(physician_id)
                overlap = check_date_overlap(
                    physician_id,
                    posting.start_date,
                    posting.end_date,
                    applications,
                    blocks,
                )
                conflict = None
                if overlap.has_overlap:
                    # Persist any expirations found along the way; nothing else is written.
                    await session.commit()
                    logger.info(
                        f"Physician {physician_id} has overlapping dates for posting "
                        f"{job_posting_id}"
                    )
                    conflict = SubmissionResponse(
                        status=SubmissionStatus.CONFLICT,
                        message=describe_conflict(overlap),
                        eligibility=eligibility,
                        conflicting_application_ids=[
                            a.id for a in overlap.overlapping_applications
                        ],
                        conflicting_block_ids=[b.id for b in overlap.blocked_dates],
                    )

                if conflict is None:
                    ip_address = await self.ip_lookup.resolve(forwarded_for)
                    snapshot = create_profile_snapshot(
                        profile, ip_address, device_info, now
                    )
                    review_deadline = calculate_review_deadline(now)
                    application_id = new_id()
                    block = create_calendar_block(
                        physician_id,
                        application_id,
                        posting.id,
                        posting.start_date,
                        posting.end_date,
                        review_deadline,
                        now,
                    )
                    application = Application(
                        id=application_id,
                        job_posting_id=posting.id,
                        physician_id=physician_id,
                        physician_name=snapshot.personal_info.legal_name,
                        physician_specialty=snapshot.professional_info.specialty,
                        status=ApplicationStatus.PENDING,
                        applied_at=now,
                        review_deadline=review_deadline,
                        calendar_blocked=True,
                        blocked_dates=BlockedDates(
                            start_date=posting.start_date, end_date=posting.end_date
                        ),
                        profile_snapshot=snapshot,
                        notifications_sent=NotificationFlags(application_received=True),
                    )
                    requirements = validate_job_requirements(posting, snapshot, now)

                    await repo.add_application_with_block(application, block)
                    await session.commit()

        await self.dispatcher.dispatch_all(events)
        if conflict is not None:
            return conflict

        logger.info(
            f"Application {application.id} submitted by {physician_id} for posting "
            f"{posting.id}, review deadline {review_deadline.isoformat()}"
        )
        await self.dispatcher.dispatch(
            WorkflowEvent.for_application(
                EventType.APPLICATION_SUBMITTED,
                application,
                facility_id=posting.facility_id,
                review_deadline=review_deadline.isoformat(),
            )
        )
        return SubmissionResponse(
            status=SubmissionStatus.SUBMITTED,
            message=(
                "Application submitted. The facility will respond within "
                f"{time_remaining(review_deadline, now)}."
            ),
            application=application,
            calendar_block=block,
            eligibility=eligibility,
            requirements=requirements,
        )

    # Transitions

    async def decide(
        self,
        application_id: str,
        facility_id: str,
        decision: str,
        reason: str | None = None,
    ) -> TransitionResult:
        """Approve or reject an application on behalf of the posting facility."""
        async with self.session_factory() as session:
            repo = WorkflowRepository(session)
            now = self.clock()

            app = await repo.get_application(application_id)
            posting = await repo.get_posting(app.job_posting_id) if app else None
            if app is None or posting is None or posting.facility_id != facility_id:
                raise ApplicationNotFoundError(application_id)

            (app,), events = await expire_overdue(repo, [app], now)
            block = await repo.get_block_for_application(app.id)

            if decision == "approve":
                result = approve_application(app, block, now, reason)
            else:
                result = reject_application(app, block, reason, now)

            if result.ok:
                result.application = result.application.model_copy(
                    update={
                        "notifications_sent": result.application.notifications_sent.model_copy(
                            update={"decision": True}
                        )
                    }
                )
            result = await apply_transition(repo, app.status, result)
            await session.commit()

        await self.dispatcher.dispatch_all(events)
        if not result.ok:
            logger.info(f"Decision on application {application_id} refused: {result.error}")
            return result

        logger.info(
            f"Application {application_id} {result.application.status.value} "
            f"by facility {facility_id}"
        )
        if result.application.status == ApplicationStatus.APPROVED:
            await self.dispatcher.dispatch(
                WorkflowEvent.for_application(
                    EventType.APPLICATION_APPROVED, result.application, facility_id
                )
            )
            await self.dispatcher.dispatch(
                WorkflowEvent.for_application(
                    EventType.CONTRACT_WORKFLOW_REQUESTED,
                    result.application,
                    facility_id,
                    start_date=posting.start_date.isoformat(),
                    end_date=posting.end_date.isoformat(),
                    pay_amount=posting.pay_amount,
                )
            )
        else:
            await self.dispatcher.dispatch(
                WorkflowEvent.for_application(
                    EventType.APPLICATION_REJECTED,
                    result.application,
                    facility_id,
                    reason=result.application.decision_reason,
                )
            )
        return result

    async def withdraw(self, application_id: str, physician_id: str) -> TransitionResult:
        """Withdraw a physician's own pending application."""
        async with self.session_factory() as session:
            repo = WorkflowRepository(session)
            now = self.clock()

            app = await repo.get_application(application_id)
            if app is None or app.physician_id != physician_id:
                raise ApplicationNotFoundError(application_id)

            (app,), events = await expire_overdue(repo, [app], now)
            block = await repo.get_block_for_application(app.id)
            result = await apply_transition(
                repo, app.status, withdraw_application(app, block, now)
            )
            posting = await repo.get_posting(app.job_posting_id)
            await session.commit()

        await self.dispatcher.dispatch_all(events)
        if not result.ok:
            return result

        logger.info(f"Application {application_id} withdrawn by {physician_id}")
        await self.dispatcher.dispatch(
            WorkflowEvent.for_application(
                EventType.APPLICATION_WITHDRAWN,
                result.application,
                facility_id=posting.facility_id if posting else None,
            )
        )
        return result

    # Listings

    def _view(
        self, app: Application, now: datetime, posting: JobPosting | None = None
    ) -> ApplicationView:
        pending = app.status in (ApplicationStatus.PENDING, ApplicationStatus.UNDER_REVIEW)
        return ApplicationView(
            application=app,
            time_remaining=time_remaining(app.review_deadline, now) if pending else None,
            urgency=deadline_urgency(app.review_deadline, now) if pending else None,
            requirements=(
                validate_job_requirements(posting, app.profile_snapshot, now)
                if posting
                else None
            ),
        )

    async def list_physician_applications(
        self, physician_id: str, status: ApplicationStatus | None = None
    ) -> ApplicationListResponse:
        async with self.session_factory() as session:
            repo = WorkflowRepository(session)
            now = self.clock()
            applications, events = await expire_overdue(
                repo, await repo.list_applications(physician_id=physician_id), now
            )
            await session.commit()

        await self.dispatcher.dispatch_all(events)
        views = [
            self._view(app, now)
            for app in applications
            if status is None or app.status == status
        ]
        return ApplicationListResponse(applications=views, total_count=len(views))

    async def _facility_applications(
        self, facility_id: str
    ) -> tuple[list[Application], dict[str, JobPosting], datetime]:
        async with self.session_factory() as session:
            repo = WorkflowRepository(session)
            now = self.clock()
            applications, events = await expire_overdue(
                repo, await repo.list_applications(facility_id=facility_id), now
            )
            postings = {
                p.id: p for p in await repo.list_postings(facility_id=facility_id)
            }
            await session.commit()

        await self.dispatcher.dispatch_all(events)
        return applications, postings, now

    async def list_facility_applications(
        self, facility_id: str, status: ApplicationStatus | None = None
    ) -> ApplicationListResponse:
        """Applications to a facility's postings, with requirement checks."""
        applications, postings, now = await self._facility_applications(facility_id)
        views = [
            self._view(app, now, postings.get(app.job_posting_id))
            for app in applications
            if status is None or app.status == status
        ]
        return ApplicationListResponse(applications=views, total_count=len(views))

    async def facility_summary(self, facility_id: str) -> FacilitySummary:
        applications, _, _ = await self._facility_applications(facility_id)
        counts = Counter(app.status.value for app in applications)
        return FacilitySummary(**counts)


application_service = ApplicationService()


async def get_application_service() -> ApplicationService:
    """Dependency to get the application service."""
    return application_service
