"""
pipelines/schemas.py

Pydantic models for the MySurgeon workflow objects:
- Identities and role-tagged profiles (patient / surgeon / admin)
- Patient details (personal / physical / lifestyle)
- Vital signs, surgical history, surgical cases
- Surgeon directory details
- Editor drafts (one shape per record kind)

Table rows are snake_case, matching the `profiles` / `patient_details` /
`vital_signs` / `surgical_history` / `surgical_cases` tables.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


Role = Literal["patient", "surgeon", "admin"]
ROLES: tuple[str, ...] = ("patient", "surgeon", "admin")
SIGNUP_ROLES: tuple[str, ...] = ("patient", "surgeon")

CaseStatus = Literal["Proposed", "Scheduled", "Completed", "Cancelled"]
CASE_STATUSES: tuple[str, ...] = ("Proposed", "Scheduled", "Completed", "Cancelled")

RecordKind = Literal["vitals", "surgery", "personal"]


class Identity(BaseModel):
    """What the identity provider reports for a signed-in user."""
    id: str
    email: str = ""


class Profile(BaseModel):
    id: str
    email: str = ""
    full_name: str = ""
    role: str  # not narrowed to Role: unknown roles must still load
    profile_picture_url: Optional[str] = None

    @property
    def first_name(self) -> str:
        parts = self.full_name.split()
        return parts[0] if parts else ""

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "User"


# ---------------------------------------------------------------------------
# Patient details (one row per patient, keyed by user_id)
# ---------------------------------------------------------------------------


class PersonalInfo(BaseModel):
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None


class PhysicalInfo(BaseModel):
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    blood_type: Optional[str] = None


class LifestyleInfo(BaseModel):
    smoking_status: Optional[str] = None
    alcohol_consumption: Optional[str] = None


class PatientDetails(BaseModel):
    user_id: str
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    physical_info: PhysicalInfo = Field(default_factory=PhysicalInfo)
    lifestyle_info: LifestyleInfo = Field(default_factory=LifestyleInfo)


# ---------------------------------------------------------------------------
# Per-patient lists
# ---------------------------------------------------------------------------


class VitalSignsEntry(BaseModel):
    id: str
    patient_id: str
    created_at: str = ""  # ISO-8601 UTC
    heart_rate: int
    systolic_bp: int
    diastolic_bp: int
    body_temperature_celsius: float
    respiratory_rate: int
    notes: Optional[str] = None


class SurgicalHistoryEntry(BaseModel):
    id: str
    patient_id: str
    procedure_name: str
    surgery_date: str  # YYYY-MM-DD
    surgeon_name: Optional[str] = None
    hospital_name: Optional[str] = None
    notes: Optional[str] = None


class SurgicalCase(BaseModel):
    """Status transitions happen outside this app; it only reads them."""
    id: str
    patient_id: str
    surgeon_id: str
    procedure_name: str
    proposed_surgery_date: str
    status: CaseStatus = "Proposed"
    surgeon_name: Optional[str] = None  # filled in from profiles for display


class SurgeonDetails(BaseModel):
    user_id: str
    specialty: str = ""
    hospital_affiliation: str = ""
    credentials: str = ""
    bio: str = ""


class SurgeonListing(BaseModel):
    profile: Profile
    details: SurgeonDetails


# ---------------------------------------------------------------------------
# Editor drafts: raw (string) form values, coerced only on save
# ---------------------------------------------------------------------------


class VitalsDraft(BaseModel):
    kind: Literal["vitals"] = "vitals"
    heart_rate: str = ""
    systolic_bp: str = ""
    diastolic_bp: str = ""
    body_temperature_celsius: str = ""
    respiratory_rate: str = ""
    notes: str = ""


class SurgeryDraft(BaseModel):
    kind: Literal["surgery"] = "surgery"
    procedure_name: str = ""
    surgery_date: str = ""
    surgeon_name: str = ""
    hospital_name: str = ""
    notes: str = ""


class PersonalDraft(BaseModel):
    kind: Literal["personal"] = "personal"
    date_of_birth: str = ""
    gender: str = ""
    address: str = ""
    phone_number: str = ""
    height_cm: str = ""
    weight_kg: str = ""
    blood_type: str = ""
    smoking_status: str = ""
    alcohol_consumption: str = ""


Draft = Annotated[Union[VitalsDraft, SurgeryDraft, PersonalDraft], Field(discriminator="kind")]

DRAFT_TYPES: dict[str, type[BaseModel]] = {
    "vitals": VitalsDraft,
    "surgery": SurgeryDraft,
    "personal": PersonalDraft,
}
