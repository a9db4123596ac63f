"""Tests for the expiration sweep service."""

from datetime import timedelta

import pytest
import pytest_asyncio

from locum.core.locks import PhysicianLockRegistry
from locum.core.storage import async_session
from locum.schemas.postings import JobPostingCreate
from locum.schemas.workflow import ApplicationStatus, BlockStatus
from locum.services.application_service import ApplicationService, expire_overdue
from locum.services.events import EventType
from locum.services.expiry_service import ExpiryService
from locum.services.profile_store import SqlProfileStore
from locum.services.repository import WorkflowRepository


@pytest.fixture
def expiry(db, mock_dispatcher):
    ExpiryService._instance = None
    service = ExpiryService(dispatcher=mock_dispatcher)
    yield service
    ExpiryService._instance = None


@pytest_asyncio.fixture
async def submitted(
    db,
    clock,
    mock_ip_lookup,
    complete_profile,
    posting_payload_factory,
    profile_request_factory,
):
    async with async_session() as session:
        await SqlProfileStore(session).upsert_profile(
            "phys-1", profile_request_factory(complete_profile)
        )
        await session.commit()

    service = ApplicationService(
        ip_lookup=mock_ip_lookup,
        locks=PhysicianLockRegistry(use_redis=False),
        clock=clock,
    )
    posting = await service.create_posting(JobPostingCreate(**posting_payload_factory()))
    result = await service.submit_application("phys-1", posting.id)
    return result.application


class TestRunSweep:
    """Tests for ExpiryService.run_sweep."""

    @pytest.mark.asyncio
    async def test_expires_overdue(self, expiry, submitted, now, mock_dispatcher):
        result = await expiry.run_sweep(now=now + timedelta(hours=73))

        assert result.expired_count == 1
        assert result.expired_application_ids == [submitted.id]
        async with async_session() as session:
            repo = WorkflowRepository(session)
            app = await repo.get_application(submitted.id)
            block = await repo.get_block_for_application(submitted.id)
        assert app.status == ApplicationStatus.EXPIRED
        assert block.status == BlockStatus.EXPIRED
        events = mock_dispatcher.dispatch_all.await_args.args[0]
        assert [e.type for e in events] == [EventType.APPLICATION_EXPIRED]
        assert events[0].facility_id == "fac-1"

    @pytest.mark.asyncio
    async def test_stale_read_does_not_expire_withdrawn(self, submitted, now):
        withdrawn = submitted.model_copy(update={"status": ApplicationStatus.WITHDRAWN})
        async with async_session() as session:
            repo = WorkflowRepository(session)
            await repo.save_application(withdrawn)
            await session.commit()

        async with async_session() as session:
            repo = WorkflowRepository(session)
            updated, events = await expire_overdue(
                repo, [submitted], now + timedelta(hours=73)
            )
            await session.commit()
            block = await repo.get_block_for_application(submitted.id)

        assert events == []
        assert updated[0].status == ApplicationStatus.WITHDRAWN
        assert block.status == BlockStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_is_idempotent(self, expiry, submitted, now):
        await expiry.run_sweep(now=now + timedelta(hours=73))

        second = await expiry.run_sweep(now=now + timedelta(hours=74))

        assert second.expired_count == 0

    @pytest.mark.asyncio
    async def test_leaves_fresh_applications(self, expiry, submitted, now):
        result = await expiry.run_sweep(now=now + timedelta(hours=1))

        assert result.expired_count == 0
        assert result.warnings_sent == 0

    @pytest.mark.asyncio
    async def test_deadline_warning_sent_once(self, expiry, submitted, now, mock_dispatcher):
        first = await expiry.run_sweep(now=now + timedelta(hours=50))
        second = await expiry.run_sweep(now=now + timedelta(hours=60))

        assert first.warnings_sent == 1
        assert second.warnings_sent == 0
        events = mock_dispatcher.dispatch_all.await_args_list[0].args[0]
        assert [e.type for e in events] == [EventType.DEADLINE_WARNING]
        async with async_session() as session:
            app = await WorkflowRepository(session).get_application(submitted.id)
        assert app.notifications_sent.deadline_warning is True
        assert app.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_records_last_result(self, expiry, submitted, now):
        result = await expiry.run_sweep(now=now + timedelta(hours=73))

        assert expiry.last_result == result
        assert expiry.get_status().last_result == result


class TestSchedulerLifecycle:
    """Tests for starting and stopping the sweep scheduler."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, expiry):
        await expiry.start()
        try:
            status = expiry.get_status()
            assert status.scheduler_running is True
            assert status.interval_minutes == 5
            assert status.next_scheduled_run is not None
        finally:
            await expiry.stop()

        assert expiry.get_status().scheduler_running is False

    @pytest.mark.asyncio
    async def test_singleton(self, expiry):
        assert ExpiryService() is expiry
