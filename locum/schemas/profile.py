"""Schemas for physician profiles and the snapshot frozen into applications."""

from datetime import date, datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class VerificationStatus(StrEnum):
    VERIFIED = "verified"
    PENDING = "pending"
    INCOMPLETE = "incomplete"


class PersonalIdentifiers(BaseModel):
    """Identity and contact fields."""

    legal_name: str | None = None
    dba: str | None = Field(default=None, description="Doing-business-as name")
    email: str | None = None
    phone: str | None = None


class ProfessionalInfo(BaseModel):
    """Specialty, board status and experience."""

    specialty: str | None = None
    subspecialty: str | None = None
    board_status: str | None = None
    years_experience: int | None = Field(default=None, ge=0)


class License(BaseModel):
    """A state medical license."""

    model_config = ConfigDict(frozen=True)

    state: str = Field(..., min_length=2, max_length=2, description="State code")
    license_number: str
    expiration_date: date


class ProfileDocuments(BaseModel):
    """References to uploaded documents."""

    cv: str | None = None
    npdb: str | None = Field(default=None, description="NPDB report reference")
    credentials: list[str] = Field(default_factory=list)


class Questionnaires(BaseModel):
    """Standard facility and insurance questionnaires."""

    facility_completed: bool = False
    insurance_completed: bool = False
    facility_answers: dict[str, Any] = Field(default_factory=dict)
    insurance_answers: dict[str, Any] = Field(default_factory=dict)


class Attestation(BaseModel):
    """Digital attestation signature."""

    signature: str | None = None
    signed_at: datetime | None = None


class PhysicianProfile(BaseModel):
    """Canonical physician profile as supplied by the profile store."""

    physician_id: str
    personal_identifiers: PersonalIdentifiers = Field(
        default_factory=PersonalIdentifiers
    )
    professional_info: ProfessionalInfo = Field(default_factory=ProfessionalInfo)
    licensure: list[License] = Field(default_factory=list)
    documents: ProfileDocuments = Field(default_factory=ProfileDocuments)
    questionnaires: Questionnaires = Field(default_factory=Questionnaires)
    attestation: Attestation = Field(default_factory=Attestation)
    completion_status: Literal["complete", "incomplete"] = "incomplete"
    completion_percentage: int = Field(default=0, ge=0, le=100)


class ProfileUpsertRequest(BaseModel):
    """Request body for storing a physician profile."""

    personal_identifiers: PersonalIdentifiers = Field(
        default_factory=PersonalIdentifiers
    )
    professional_info: ProfessionalInfo = Field(default_factory=ProfessionalInfo)
    licensure: list[License] = Field(default_factory=list)
    documents: ProfileDocuments = Field(default_factory=ProfileDocuments)
    questionnaires: Questionnaires = Field(default_factory=Questionnaires)
    attestation: Attestation = Field(default_factory=Attestation)
    completion_status: Literal["complete", "incomplete"] = "incomplete"
    completion_percentage: int = Field(default=0, ge=0, le=100)


# Snapshot models are frozen: the snapshot records what the facility
# evaluated and is never edited after the application is created.


class SnapshotPersonalInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    legal_name: str
    dba: str | None = None
    email: str
    phone: str


class SnapshotProfessionalInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    specialty: str
    subspecialty: str | None = None
    board_status: str
    years_experience: int


class SnapshotDocuments(BaseModel):
    model_config = ConfigDict(frozen=True)

    cv: str
    npdb: str
    credentials: tuple[str, ...] = ()


class SnapshotQuestionnaires(BaseModel):
    model_config = ConfigDict(frozen=True)

    facility_answers: dict[str, Any] = Field(default_factory=dict)
    insurance_answers: dict[str, Any] = Field(default_factory=dict)


class SnapshotAttestation(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str
    signed_at: datetime
    ip_address: str = "unknown"
    device_info: str = ""


class PhysicianProfileSnapshot(BaseModel):
    """Immutable copy of a profile taken when an application is submitted."""

    model_config = ConfigDict(frozen=True)

    personal_info: SnapshotPersonalInfo
    professional_info: SnapshotProfessionalInfo
    licensure: tuple[License, ...] = ()
    documents: SnapshotDocuments
    questionnaires: SnapshotQuestionnaires = Field(
        default_factory=SnapshotQuestionnaires
    )
    attestation: SnapshotAttestation
    verification_status: VerificationStatus = VerificationStatus.INCOMPLETE
    captured_at: datetime
