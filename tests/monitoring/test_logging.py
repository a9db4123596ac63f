"""Test logging functionality."""

import logging
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from locum.core.locks import PhysicianLockRegistry
from locum.main import app
from locum.services.application_service import (
    ApplicationService,
    get_application_service,
)


class TestLogging:
    """Test logging functionality."""

    def test_submission_is_audited(
        self,
        test_client,
        clock,
        caplog,
        complete_profile,
        profile_request_factory,
        posting_payload_factory,
    ):
        """Test that a submission writes an audit record."""
        service = ApplicationService(
            locks=PhysicianLockRegistry(use_redis=False), clock=clock
        )
        app.dependency_overrides[get_application_service] = lambda: service
        test_client.put(
            "/profiles/phys-1",
            json=profile_request_factory(complete_profile).model_dump(mode="json"),
        )
        posting_id = test_client.post(
            "/postings", json=posting_payload_factory(), headers={"X-Facility-Id": "fac-1"}
        ).json()["id"]

        with caplog.at_level(logging.INFO):
            test_client.post(
                "/applications",
                json={"job_posting_id": posting_id},
                headers={"X-Physician-Id": "phys-1"},
            )

        audit = [r for r in caplog.records if r.name == "locum.audit"]
        assert len(audit) == 1
        assert audit[0].getMessage().startswith("application_submitted")

    def test_storage_error_logging(self, test_client, caplog):
        """Test that storage errors are logged before the 503 is returned."""
        service = MagicMock()
        service.browse_postings = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("database is locked"))
        )
        app.dependency_overrides[get_application_service] = lambda: service

        with caplog.at_level(logging.ERROR):
            response = test_client.get("/postings", headers={"X-Physician-Id": "phys-1"})

        assert response.status_code == 503
        assert any("database is locked" in r.getMessage() for r in caplog.records)
