"""Tests for custom exceptions."""

from fastapi import HTTPException

from locum.core.exceptions import (
    ApplicationNotFoundError,
    PostingNotFoundError,
    ProfileNotFoundError,
    WorkflowError,
    conflict_exception,
    not_found_exception,
    retryable_exception,
)


class TestWorkflowErrors:
    """Tests for the workflow exception hierarchy."""

    def test_posting_not_found(self):
        error = PostingNotFoundError("p-1")

        assert isinstance(error, WorkflowError)
        assert error.job_posting_id == "p-1"
        assert error.message == "Job posting p-1 not found"
        assert str(error) == error.message

    def test_application_not_found(self):
        error = ApplicationNotFoundError("a-1")

        assert error.application_id == "a-1"
        assert "a-1" in error.message

    def test_profile_not_found(self):
        error = ProfileNotFoundError("phys-1")

        assert isinstance(error, WorkflowError)
        assert "phys-1" in error.message


class TestHTTPExceptionHelpers:
    """Tests for HTTP exception helpers."""

    def test_not_found_exception(self):
        exc = not_found_exception("Missing")

        assert isinstance(exc, HTTPException)
        assert exc.status_code == 404
        assert exc.detail == "Missing"

    def test_conflict_exception(self):
        exc = conflict_exception("Already decided")

        assert exc.status_code == 409
        assert exc.detail == "Already decided"

    def test_retryable_exception_default(self):
        exc = retryable_exception()

        assert exc.status_code == 503
        assert exc.detail == "Something went wrong. Please try again."
