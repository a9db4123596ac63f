"""Build the immutable profile snapshot embedded in an application."""

from datetime import datetime

from locum.core.timeutils import utc_now
from locum.schemas.profile import (
    PhysicianProfile,
    PhysicianProfileSnapshot,
    SnapshotAttestation,
    SnapshotDocuments,
    SnapshotPersonalInfo,
    SnapshotProfessionalInfo,
    SnapshotQuestionnaires,
    VerificationStatus,
)


def create_profile_snapshot(
    profile: PhysicianProfile,
    ip_address: str,
    device_info: str,
    now: datetime | None = None,
) -> PhysicianProfileSnapshot:
    """Copy the profile fields a facility evaluates, plus the audit context."""
    now = now or utc_now()
    personal = profile.personal_identifiers
    professional = profile.professional_info

    return PhysicianProfileSnapshot(
        personal_info=SnapshotPersonalInfo(
            legal_name=personal.legal_name or "",
            dba=personal.dba,
            email=personal.email or "",
            phone=personal.phone or "",
        ),
        professional_info=SnapshotProfessionalInfo(
            specialty=professional.specialty or "",
            subspecialty=professional.subspecialty,
            board_status=professional.board_status or "",
            years_experience=professional.years_experience or 0,
        ),
        licensure=tuple(profile.licensure),
        documents=SnapshotDocuments(
            cv=profile.documents.cv or "",
            npdb=profile.documents.npdb or "",
            credentials=tuple(profile.documents.credentials),
        ),
        questionnaires=SnapshotQuestionnaires(
            facility_answers=dict(profile.questionnaires.facility_answers),
            insurance_answers=dict(profile.questionnaires.insurance_answers),
        ),
        attestation=SnapshotAttestation(
            signature=profile.attestation.signature or "",
            signed_at=profile.attestation.signed_at or now,
            ip_address=ip_address,
            device_info=device_info,
        ),
        verification_status=(
            VerificationStatus.VERIFIED
            if profile.completion_status == "complete"
            else VerificationStatus.INCOMPLETE
        ),
        captured_at=now,
    )
