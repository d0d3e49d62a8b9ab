"""
pipelines/surgeons.py

Surgeon directory for the patient "Find Surgeon" view.
"""

from __future__ import annotations

from pipelines.schemas import Profile, SurgeonDetails, SurgeonListing
from storage.records import RecordStore


def list_surgeons(store: RecordStore) -> list[SurgeonListing]:
    """Profiles with role surgeon joined with their surgeon_details row."""
    details = {row["user_id"]: row for row in store.select("surgeon_details")}
    out: list[SurgeonListing] = []
    for row in store.select("profiles", {"role": "surgeon"}, order=("full_name", False)):
        profile = Profile(**row)
        extra = details.get(profile.id) or {"user_id": profile.id}
        out.append(SurgeonListing(profile=profile, details=SurgeonDetails(**extra)))
    return out


def filter_surgeons(surgeons: list[SurgeonListing], term: str) -> list[SurgeonListing]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(surgeons)
    return [
        s for s in surgeons
        if needle in s.profile.full_name.lower()
        or needle in s.details.specialty.lower()
        or needle in s.details.hospital_affiliation.lower()
    ]
