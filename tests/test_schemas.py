"""Tests for Pydantic schemas."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from locum.schemas.applications import DecisionRequest, SubmitApplicationRequest
from locum.schemas.postings import JobPostingCreate
from locum.schemas.profile import License


class TestJobPostingCreate:
    """Tests for JobPostingCreate validation."""

    def test_licenses_normalized(self, posting_payload_factory):
        posting = JobPostingCreate(
            **posting_payload_factory(required_licenses=[" ca", "CA", "tx", ""])
        )

        assert posting.required_licenses == ["CA", "TX"]

    def test_start_must_precede_end(self, posting_payload_factory):
        with pytest.raises(ValidationError):
            JobPostingCreate(
                **posting_payload_factory(start_date="2026-04-07", end_date="2026-04-07")
            )

    @pytest.mark.parametrize("status", ["draft", "open"])
    def test_initial_status_allowed(self, posting_payload_factory, status):
        assert JobPostingCreate(**posting_payload_factory(status=status)).status == status

    @pytest.mark.parametrize("status", ["filled", "cancelled"])
    def test_initial_status_rejected(self, posting_payload_factory, status):
        with pytest.raises(ValidationError):
            JobPostingCreate(**posting_payload_factory(status=status))

    def test_block_duration_choices(self, posting_payload_factory):
        with pytest.raises(ValidationError):
            JobPostingCreate(**posting_payload_factory(block_duration=4))

    def test_negative_pay_rejected(self, posting_payload_factory):
        with pytest.raises(ValidationError):
            JobPostingCreate(**posting_payload_factory(pay_amount=-1))


class TestApplicationSchemas:
    """Tests for application request and domain schemas."""

    def test_deadline_must_follow_applied_at(self, application_factory, now):
        with pytest.raises(ValidationError):
            application_factory(review_deadline=now - timedelta(minutes=1))

    def test_terminal_flag(self, application_factory):
        assert application_factory(status="approved").is_terminal is True
        assert application_factory(status="under_review").is_terminal is False

    def test_decision_values(self):
        assert DecisionRequest(decision="reject", reason="Filled").decision == "reject"
        with pytest.raises(ValidationError):
            DecisionRequest(decision="maybe")

    def test_submit_requires_posting_id(self):
        with pytest.raises(ValidationError):
            SubmitApplicationRequest(job_posting_id="")

    def test_license_state_is_two_letters(self):
        with pytest.raises(ValidationError):
            License(state="CAL", license_number="1", expiration_date="2027-01-01")
