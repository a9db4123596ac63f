"""Hard requirements of a posting checked against a profile snapshot."""

from dataclasses import dataclass, field
from datetime import datetime, time

from locum.core.timeutils import to_utc_naive, utc_now
from locum.schemas.postings import JobPosting
from locum.schemas.profile import PhysicianProfileSnapshot


@dataclass
class RequirementCheck:
    """Result of checking a posting's requirements."""

    meets: bool
    missing_requirements: list[str] = field(default_factory=list)


def validate_job_requirements(
    job_posting: JobPosting,
    profile: PhysicianProfileSnapshot,
    now: datetime | None = None,
) -> RequirementCheck:
    """Check specialty, required state licenses and license expiry.

    All failures are accumulated. Any expired license is reported, whether
    or not the posting requires that state.
    """
    now = to_utc_naive(now) if now else utc_now()
    missing_requirements: list[str] = []

    if job_posting.specialty != profile.professional_info.specialty:
        missing_requirements.append(
            f"Specialty mismatch: requires {job_posting.specialty}"
        )

    held_states = {lic.state.upper() for lic in profile.licensure}
    missing_licenses = [
        state for state in job_posting.required_licenses if state not in held_states
    ]
    if missing_licenses:
        missing_requirements.append(f"Missing licenses: {', '.join(missing_licenses)}")

    # A license lapses at the start of its expiration day.
    expired_licenses = [
        lic.state
        for lic in profile.licensure
        if datetime.combine(lic.expiration_date, time.min) < now
    ]
    if expired_licenses:
        missing_requirements.append(f"Expired licenses: {', '.join(expired_licenses)}")

    return RequirementCheck(
        meets=not missing_requirements,
        missing_requirements=missing_requirements,
    )
