"""
pipelines/health.py

Read-side queries for the patient views (health profile + appointments).
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from pipelines.schemas import (
    CASE_STATUSES,
    PatientDetails,
    Profile,
    SurgicalCase,
    SurgicalHistoryEntry,
    VitalSignsEntry,
)
from storage.records import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class HealthData:
    details: Optional[PatientDetails] = None
    vitals: list[VitalSignsEntry] = field(default_factory=list)
    surgeries: list[SurgicalHistoryEntry] = field(default_factory=list)


def load_health_data(store: RecordStore, patient_id: str) -> HealthData:
    """Patient details, vitals (newest first) and surgeries (latest first)."""
    details_rows = store.select("patient_details", {"user_id": patient_id})
    vitals_rows = store.select("vital_signs", {"patient_id": patient_id}, order=("created_at", True))
    surgery_rows = store.select("surgical_history", {"patient_id": patient_id}, order=("surgery_date", True))

    return HealthData(
        details=PatientDetails(**details_rows[0]) if details_rows else None,
        vitals=[VitalSignsEntry(**r) for r in vitals_rows],
        surgeries=[SurgicalHistoryEntry(**r) for r in surgery_rows],
    )


def load_surgical_cases(store: RecordStore, patient_id: str) -> list[SurgicalCase]:
    """The patient's cases by proposed date, with the surgeon's name filled in."""
    rows = store.select("surgical_cases", {"patient_id": patient_id}, order=("proposed_surgery_date", False))
    names: dict[str, str] = {}
    cases: list[SurgicalCase] = []
    for row in rows:
        surgeon_id = row.get("surgeon_id")
        if surgeon_id and surgeon_id not in names:
            found = store.select("profiles", {"id": surgeon_id})
            names[surgeon_id] = Profile(**found[0]).full_name if found else ""
        cases.append(SurgicalCase(**{**row, "surgeon_name": names.get(surgeon_id or "") or None}))
    return cases


def case_counts(cases: list[SurgicalCase]) -> dict[str, int]:
    counts = Counter(c.status for c in cases)
    return {status: counts.get(status, 0) for status in CASE_STATUSES}
