"""Application state machine, review deadlines and auto-expiration."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from locum.core.config import settings
from locum.core.timeutils import to_utc_naive, utc_now
from locum.matching.calendar import (
    convert_to_assignment_block,
    expire_calendar_block,
    release_calendar_block,
)
from locum.schemas.workflow import Application, ApplicationStatus, CalendarBlock

DECIDABLE_STATUSES = frozenset(
    {ApplicationStatus.PENDING, ApplicationStatus.UNDER_REVIEW}
)


@dataclass
class TransitionResult:
    """Outcome of a lifecycle transition.

    When ``ok`` is False, ``application`` and ``block`` are returned unchanged
    and ``error`` explains why the transition was refused.
    """

    ok: bool
    application: Application
    block: CalendarBlock | None = None
    error: str | None = None


def _resolve_now(now: datetime | None) -> datetime:
    return to_utc_naive(now) if now else utc_now()


def calculate_review_deadline(applied_at: datetime, hours: int | None = None) -> datetime:
    """Return the facility decision deadline, ``hours`` after ``applied_at``.

    Uses absolute time: aware datetimes are moved to UTC before adding, so a
    DST change in the caller's zone never adds or removes an hour. The result
    keeps the input's awareness (aware input -> aware UTC result).
    """
    if hours is None:
        hours = settings.review_window_hours
    window = timedelta(hours=hours)
    if applied_at.tzinfo is None:
        return applied_at + window
    return applied_at.astimezone(UTC) + window


def is_application_expired(review_deadline: datetime, now: datetime | None = None) -> bool:
    now = _resolve_now(now)
    return now > to_utc_naive(review_deadline)


def auto_expire_applications(
    applications: list[Application], now: datetime | None = None
) -> list[Application]:
    """Mark pending applications past their deadline as expired.

    Pure and idempotent; other applications are returned untouched.
    """
    now = _resolve_now(now)
    return [
        app.model_copy(
            update={"status": ApplicationStatus.EXPIRED, "calendar_blocked": False}
        )
        if app.status == ApplicationStatus.PENDING
        and is_application_expired(app.review_deadline, now)
        else app
        for app in applications
    ]


def _format_deadline(deadline: datetime) -> str:
    return f"{deadline:%b %d, %Y %H:%M} UTC"


def _check_decidable(app: Application, now: datetime) -> str | None:
    if app.status not in DECIDABLE_STATUSES:
        return f"This application is already {app.status.value} and can no longer be decided."
    if now >= app.review_deadline:
        return (
            f"The review deadline passed on {_format_deadline(app.review_deadline)}. "
            "The application has expired and can no longer be decided."
        )
    return None


def approve_application(
    app: Application,
    block: CalendarBlock | None,
    now: datetime | None = None,
    reason: str | None = None,
) -> TransitionResult:
    """Facility approves: the dates stay blocked for the assignment."""
    now = _resolve_now(now)
    error = _check_decidable(app, now)
    if error:
        return TransitionResult(ok=False, application=app, block=block, error=error)

    approved = app.model_copy(
        update={
            "status": ApplicationStatus.APPROVED,
            "facility_decision_at": now,
            "decision_reason": reason.strip() if reason and reason.strip() else None,
            "calendar_blocked": True,
        }
    )
    return TransitionResult(
        ok=True,
        application=approved,
        block=convert_to_assignment_block(block) if block else None,
    )


def reject_application(
    app: Application,
    block: CalendarBlock | None,
    reason: str | None,
    now: datetime | None = None,
) -> TransitionResult:
    """Facility rejects with a reason; the physician's dates are released."""
    now = _resolve_now(now)
    if not reason or not reason.strip():
        return TransitionResult(
            ok=False,
            application=app,
            block=block,
            error="Please provide a reason for rejection.",
        )
    error = _check_decidable(app, now)
    if error:
        return TransitionResult(ok=False, application=app, block=block, error=error)

    rejected = app.model_copy(
        update={
            "status": ApplicationStatus.REJECTED,
            "facility_decision_at": now,
            "decision_reason": reason.strip(),
            "calendar_blocked": False,
        }
    )
    return TransitionResult(
        ok=True,
        application=rejected,
        block=release_calendar_block(block, now) if block else None,
    )


def withdraw_application(
    app: Application, block: CalendarBlock | None, now: datetime | None = None
) -> TransitionResult:
    """Physician withdraws a pending application."""
    now = _resolve_now(now)
    if app.status != ApplicationStatus.PENDING:
        return TransitionResult(
            ok=False,
            application=app,
            block=block,
            error=f"Only pending applications can be withdrawn; this one is {app.status.value}.",
        )

    withdrawn = app.model_copy(
        update={"status": ApplicationStatus.WITHDRAWN, "calendar_blocked": False}
    )
    return TransitionResult(
        ok=True,
        application=withdrawn,
        block=release_calendar_block(block, now) if block else None,
    )


def expire_application(
    app: Application, block: CalendarBlock | None, now: datetime | None = None
) -> TransitionResult:
    """Expire a pending application whose deadline has passed."""
    now = _resolve_now(now)
    if app.status != ApplicationStatus.PENDING:
        return TransitionResult(
            ok=False,
            application=app,
            block=block,
            error=f"Only pending applications can expire; this one is {app.status.value}.",
        )
    if now < app.review_deadline:
        return TransitionResult(
            ok=False,
            application=app,
            block=block,
            error="The review deadline has not passed yet.",
        )

    expired = app.model_copy(
        update={"status": ApplicationStatus.EXPIRED, "calendar_blocked": False}
    )
    return TransitionResult(
        ok=True,
        application=expired,
        block=expire_calendar_block(block) if block else None,
    )


def time_remaining(review_deadline: datetime, now: datetime | None = None) -> str:
    """Human-readable time left before the review deadline."""
    now = _resolve_now(now)
    seconds = (to_utc_naive(review_deadline) - now).total_seconds()
    if seconds <= 0:
        return "Expired"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours < 24:
        return f"{hours}h {minutes}m"

    days = hours // 24
    return f"{days} day{'s' if days > 1 else ''}"


def deadline_urgency(review_deadline: datetime, now: datetime | None = None) -> str:
    """Bucket the time left: expired, critical (<=24h), warning (<=48h), normal."""
    now = _resolve_now(now)
    hours_left = (to_utc_naive(review_deadline) - now).total_seconds() / 3600
    if hours_left <= 0:
        return "expired"
    if hours_left <= 24:
        return "critical"
    if hours_left <= 48:
        return "warning"
    return "normal"
