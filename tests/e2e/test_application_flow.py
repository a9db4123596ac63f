"""End-to-end tests for the application workflow over HTTP."""

import pytest

from locum.core.locks import PhysicianLockRegistry
from locum.main import app
from locum.services.application_service import (
    ApplicationService,
    get_application_service,
)

PHYSICIAN = {"X-Physician-Id": "phys-1"}
FACILITY = {"X-Facility-Id": "fac-1"}


@pytest.fixture
def client(test_client, clock):
    service = ApplicationService(locks=PhysicianLockRegistry(use_redis=False), clock=clock)
    app.dependency_overrides[get_application_service] = lambda: service
    return test_client


@pytest.fixture
def post_job(client, posting_payload_factory):
    def _post(**overrides):
        response = client.post(
            "/postings", json=posting_payload_factory(**overrides), headers=FACILITY
        )
        assert response.status_code == 201
        return response.json()["id"]

    return _post


@pytest.fixture
def store_profile(client, profile_request_factory):
    def _store(profile):
        body = profile_request_factory(profile).model_dump(mode="json")
        assert client.put(f"/profiles/{profile.physician_id}", json=body).status_code == 200

    return _store


def _apply(client, posting_id):
    return client.post(
        "/applications", json={"job_posting_id": posting_id}, headers=PHYSICIAN
    )


class TestE2EApplicationFlow:
    """Complete physician and facility journeys."""

    def test_happy_path_to_approval(self, client, post_job, store_profile, complete_profile):
        store_profile(complete_profile)
        posting_id = post_job()

        browse = client.get("/postings", headers=PHYSICIAN).json()
        assert browse["postings"][0]["can_apply"] is True

        submitted = _apply(client, posting_id)
        assert submitted.status_code == 201
        application_id = submitted.json()["application"]["id"]

        queue = client.get("/facility/applications?status=pending", headers=FACILITY).json()
        assert [v["application"]["id"] for v in queue["applications"]] == [application_id]

        decision = client.post(
            f"/facility/applications/{application_id}/decision",
            json={"decision": "approve"},
            headers=FACILITY,
        )
        assert decision.status_code == 200

        mine = client.get("/applications/mine", headers=PHYSICIAN).json()
        assert mine["applications"][0]["application"]["status"] == "approved"
        assert mine["applications"][0]["application"]["calendar_blocked"] is True

    def test_incomplete_profile_blocks_apply(
        self, client, post_job, store_profile, profile_factory
    ):
        store_profile(profile_factory(licensure=[]))
        posting_id = post_job()

        browse = client.get("/postings", headers=PHYSICIAN).json()
        response = _apply(client, posting_id)

        assert browse["postings"][0]["can_apply"] is False
        assert response.status_code == 400
        assert response.json()["eligibility"]["missing_fields"] == ["State License"]
        assert client.get("/applications/mine", headers=PHYSICIAN).json()["total_count"] == 0

    def test_overlap_then_expiry_frees_dates(
        self, client, post_job, store_profile, complete_profile, clock
    ):
        store_profile(complete_profile)
        first = post_job(start_date="2026-03-01", end_date="2026-03-05")
        second = post_job(start_date="2026-03-05", end_date="2026-03-09")

        assert _apply(client, first).status_code == 201
        assert _apply(client, second).status_code == 409

        clock.advance(hours=73)
        mine = client.get("/applications/mine", headers=PHYSICIAN).json()
        assert mine["applications"][0]["application"]["status"] == "expired"

        assert _apply(client, second).status_code == 201

    def test_rejection_releases_dates(
        self, client, post_job, store_profile, complete_profile
    ):
        store_profile(complete_profile)
        first = post_job()
        overlapping = post_job(start_date="2026-04-05", end_date="2026-04-10")
        application_id = _apply(client, first).json()["application"]["id"]

        rejected = client.post(
            f"/facility/applications/{application_id}/decision",
            json={"decision": "reject", "reason": "Position filled internally"},
            headers=FACILITY,
        )

        assert rejected.status_code == 200
        assert rejected.json()["calendar_block"]["status"] == "released"
        assert _apply(client, overlapping).status_code == 201
