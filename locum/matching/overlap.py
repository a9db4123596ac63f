"""Date-range conflict detection against applications and calendar blocks."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from locum.schemas.workflow import (
    RELEASED_STATUSES,
    Application,
    BlockStatus,
    CalendarBlock,
)


@dataclass
class OverlapCheck:
    """Conflicts found for a candidate date range."""

    has_overlap: bool
    overlapping_applications: list[Application] = field(default_factory=list)
    overlapping_assignments: list[Any] = field(default_factory=list)
    blocked_dates: list[CalendarBlock] = field(default_factory=list)


def ranges_overlap(
    a_start: date, a_end: date, b_start: date, b_end: date
) -> bool:
    """Inclusive overlap test: touching endpoints count as overlapping.

    An assignment occupies whole calendar days, so a range ending on the
    day another one starts is a conflict.
    """
    return a_start <= b_end and a_end >= b_start


def check_date_overlap(
    physician_id: str,
    start_date: date,
    end_date: date,
    existing_applications: list[Application],
    existing_blocks: list[CalendarBlock],
) -> OverlapCheck:
    """Find the physician's applications and active blocks overlapping a range.

    Applications that are rejected, expired or withdrawn no longer hold
    their dates; pending, under-review and approved ones do. Only active
    calendar blocks count.
    """
    if start_date > end_date:
        raise ValueError("start_date must not be after end_date")

    overlapping_applications = [
        app
        for app in existing_applications
        if app.physician_id == physician_id
        and app.status not in RELEASED_STATUSES
        and ranges_overlap(
            start_date,
            end_date,
            app.blocked_dates.start_date,
            app.blocked_dates.end_date,
        )
    ]

    blocked_dates = [
        block
        for block in existing_blocks
        if block.physician_id == physician_id
        and block.status == BlockStatus.ACTIVE
        and ranges_overlap(start_date, end_date, block.start_date, block.end_date)
    ]

    return OverlapCheck(
        has_overlap=bool(overlapping_applications or blocked_dates),
        overlapping_applications=overlapping_applications,
        overlapping_assignments=[],
        blocked_dates=blocked_dates,
    )


def describe_conflict(check: OverlapCheck) -> str:
    """User-facing explanation of an overlap result."""
    if not check.has_overlap:
        return "These dates are available."

    ranges = sorted(
        {
            (app.blocked_dates.start_date, app.blocked_dates.end_date)
            for app in check.overlapping_applications
        }
        | {(block.start_date, block.end_date) for block in check.blocked_dates}
    )
    spans = ", ".join(f"{start.isoformat()} to {end.isoformat()}" for start, end in ranges)
    return (
        "Cannot apply. You have overlapping applications or assignments "
        f"for these dates ({spans})."
    )
