"""Filtering and ordering of postings shown to physicians."""

from typing import Literal

from locum.schemas.postings import JobPosting, PostingStatus

SortKey = Literal["date", "pay"]


def filter_open_postings(
    postings: list[JobPosting],
    specialty: str | None = None,
    sort_by: SortKey = "date",
) -> list[JobPosting]:
    """Open postings, optionally for one specialty.

    ``date`` sorts by start date (earliest first), ``pay`` by pay amount
    (highest first).
    """
    open_postings = [
        posting
        for posting in postings
        if posting.status == PostingStatus.OPEN
        and (not specialty or specialty == "all" or posting.specialty == specialty)
    ]
    if sort_by == "pay":
        return sorted(open_postings, key=lambda p: p.pay_amount, reverse=True)
    return sorted(open_postings, key=lambda p: p.start_date)


def list_specialties(postings: list[JobPosting]) -> list[str]:
    """Distinct specialties in first-seen order."""
    return list(dict.fromkeys(posting.specialty for posting in postings))
