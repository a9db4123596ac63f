"""Profile completeness gate for submitting applications."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from locum.schemas.profile import PhysicianProfile


@dataclass
class EligibilityResult:
    """Result of the eligibility check."""

    eligible: bool
    missing_fields: list[str] = field(default_factory=list)
    message: str = ""


# Checked in this order; every check runs so all gaps are reported at once.
REQUIRED_PROFILE_FIELDS: list[tuple[str, Callable[[PhysicianProfile], Any]]] = [
    ("Legal Name", lambda p: p.personal_identifiers.legal_name),
    ("Email", lambda p: p.personal_identifiers.email),
    ("Phone", lambda p: p.personal_identifiers.phone),
    ("Specialty", lambda p: p.professional_info.specialty),
    ("Board Status", lambda p: p.professional_info.board_status),
    ("Years of Experience", lambda p: p.professional_info.years_experience),
    ("State License", lambda p: p.licensure),
    ("CV/Resume", lambda p: p.documents.cv),
    ("NPDB Report", lambda p: p.documents.npdb),
    ("Facility Questionnaire", lambda p: p.questionnaires.facility_completed),
    ("Insurance Questionnaire", lambda p: p.questionnaires.insurance_completed),
    ("Digital Attestation", lambda p: p.attestation.signature),
]


def _is_missing(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return not value


def check_profile_eligibility(profile: PhysicianProfile) -> EligibilityResult:
    """Check whether a profile is complete enough to apply to postings."""
    missing_fields = [
        label for label, getter in REQUIRED_PROFILE_FIELDS if _is_missing(getter(profile))
    ]

    if not missing_fields:
        return EligibilityResult(
            eligible=True, message="Your profile is complete. You can apply."
        )

    return EligibilityResult(
        eligible=False,
        missing_fields=missing_fields,
        message=(
            "Your profile is incomplete. Complete the following before applying: "
            + ", ".join(missing_fields)
        ),
    )
