"""Pytest configuration and fixtures."""

import asyncio
import os
import sys
from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing locum modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_locum.db"
os.environ["EXPIRY_SWEEP_ENABLED"] = "false"
os.environ["IP_LOOKUP_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

from locum.schemas.postings import JobPosting  # noqa: E402
from locum.schemas.profile import (  # noqa: E402
    Attestation,
    License,
    PersonalIdentifiers,
    PhysicianProfile,
    ProfessionalInfo,
    ProfileDocuments,
    ProfileUpsertRequest,
    Questionnaires,
)

NOW = datetime(2026, 3, 2, 12, 0, 0)


def make_profile(physician_id: str = "phys-1", **overrides) -> PhysicianProfile:
    """A profile that passes the eligibility gate."""
    data = {
        "physician_id": physician_id,
        "personal_identifiers": PersonalIdentifiers(
            legal_name="Dana Reyes",
            email="dana.reyes@example.com",
            phone="555-0100",
        ),
        "professional_info": ProfessionalInfo(
            specialty="Emergency Medicine",
            board_status="Board Certified",
            years_experience=8,
        ),
        "licensure": [
            License(state="CA", license_number="A12345", expiration_date=date(2028, 1, 31)),
            License(state="NV", license_number="NV-778", expiration_date=date(2027, 6, 30)),
        ],
        "documents": ProfileDocuments(cv="cv.pdf", npdb="npdb.pdf"),
        "questionnaires": Questionnaires(facility_completed=True, insurance_completed=True),
        "attestation": Attestation(signature="Dana Reyes", signed_at=datetime(2026, 2, 1)),
        "completion_status": "complete",
        "completion_percentage": 100,
    }
    data.update(overrides)
    return PhysicianProfile(**data)


def make_posting(**overrides) -> JobPosting:
    data = {
        "id": "posting-1",
        "facility_id": "fac-1",
        "facility_name": "Mercy General",
        "specialty": "Emergency Medicine",
        "required_licenses": ["CA"],
        "start_date": date(2026, 4, 1),
        "end_date": date(2026, 4, 7),
        "pay_amount": 2200.0,
        "status": "open",
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return JobPosting(**data)


def posting_payload(**overrides) -> dict:
    """JSON body for creating a posting."""
    data = {
        "facility_id": "fac-1",
        "facility_name": "Mercy General",
        "specialty": "Emergency Medicine",
        "required_licenses": ["CA"],
        "start_date": "2026-04-01",
        "end_date": "2026-04-07",
        "pay_amount": 2200.0,
    }
    data.update(overrides)
    return data


def profile_request(profile: PhysicianProfile) -> ProfileUpsertRequest:
    return ProfileUpsertRequest(**profile.model_dump(exclude={"physician_id"}))


class FixedClock:
    """Controllable clock for services under test."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def complete_profile():
    """Complete physician profile."""
    return make_profile()


@pytest.fixture
def sample_posting():
    """Open Emergency Medicine posting requiring a CA license."""
    return make_posting()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def mock_dispatcher():
    """Event dispatcher that records events instead of sending them."""
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock()
    dispatcher.dispatch_all = AsyncMock()
    return dispatcher


@pytest.fixture
def mock_ip_lookup():
    client = MagicMock()
    client.resolve = AsyncMock(return_value="203.0.113.7")
    return client


async def _drop_all():
    from locum.core.storage import Base, engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db():
    """Fresh schema in the test database."""
    from locum.core.storage import init_models

    await init_models()
    yield
    await _drop_all()


@pytest.fixture
def test_client():
    """FastAPI test client; the lifespan creates the schema."""
    from fastapi.testclient import TestClient

    from locum.main import app

    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    asyncio.run(_drop_all())


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def posting_factory():
    return make_posting


@pytest.fixture
def posting_payload_factory():
    return posting_payload


@pytest.fixture
def profile_request_factory():
    return profile_request


def make_application(
    application_id: str = "app-1",
    physician_id: str = "phys-1",
    start_date: date = date(2026, 4, 1),
    end_date: date = date(2026, 4, 7),
    status: str = "pending",
    applied_at: datetime = NOW,
    window_hours: int = 72,
    **overrides,
):
    from locum.matching.snapshot import create_profile_snapshot
    from locum.schemas.workflow import Application, BlockedDates

    data = {
        "id": application_id,
        "job_posting_id": "posting-1",
        "physician_id": physician_id,
        "physician_name": "Dana Reyes",
        "physician_specialty": "Emergency Medicine",
        "status": status,
        "applied_at": applied_at,
        "review_deadline": applied_at + timedelta(hours=window_hours),
        "blocked_dates": BlockedDates(start_date=start_date, end_date=end_date),
        "profile_snapshot": create_profile_snapshot(
            make_profile(physician_id), "203.0.113.7", "pytest", applied_at
        ),
    }
    data.update(overrides)
    return Application(**data)


def make_block(application, status: str = "active", **overrides):
    from locum.schemas.workflow import CalendarBlock

    data = {
        "id": f"block-{application.id}",
        "physician_id": application.physician_id,
        "application_id": application.id,
        "job_posting_id": application.job_posting_id,
        "start_date": application.blocked_dates.start_date,
        "end_date": application.blocked_dates.end_date,
        "status": status,
        "created_at": application.applied_at,
        "expires_at": application.review_deadline,
    }
    data.update(overrides)
    return CalendarBlock(**data)


@pytest.fixture
def application_factory():
    return make_application


@pytest.fixture
def block_factory():
    return make_block
