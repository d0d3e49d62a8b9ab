"""Tests for the patient read-side queries and the surgeon directory."""

from pipelines.health import case_counts, load_health_data, load_surgical_cases
from pipelines.surgeons import filter_surgeons, list_surgeons
from storage.auth import LocalSessionStore

VITALS = {
    "heart_rate": 70,
    "systolic_bp": 120,
    "diastolic_bp": 80,
    "body_temperature_celsius": 36.8,
    "respiratory_rate": 14,
}


def _profile_id(store, email):
    return store.select("profiles", {"email": email})[0]["id"]


def test_health_data_ordering(store):
    store.insert("vital_signs", {**VITALS, "patient_id": "p1", "created_at": "2025-01-01T00:00:00+00:00"})
    store.insert("vital_signs", {**VITALS, "patient_id": "p1", "created_at": "2025-03-01T00:00:00+00:00", "heart_rate": 90})
    store.insert("vital_signs", {**VITALS, "patient_id": "p2"})
    store.insert("surgical_history", {"patient_id": "p1", "procedure_name": "A", "surgery_date": "2010-01-01"})
    store.insert("surgical_history", {"patient_id": "p1", "procedure_name": "B", "surgery_date": "2018-05-05"})

    data = load_health_data(store, "p1")

    assert data.details is None
    assert [v.heart_rate for v in data.vitals] == [90, 70]
    assert [s.procedure_name for s in data.surgeries] == ["B", "A"]


def test_health_data_details(store):
    store.insert(
        "patient_details",
        {"user_id": "p1", "personal_info": {"gender": "F"}, "physical_info": {"height_cm": 165}},
    )
    details = load_health_data(store, "p1").details
    assert details.personal_info.gender == "F"
    assert details.physical_info.height_cm == 165.0
    assert details.lifestyle_info.smoking_status is None


def test_demo_cases_carry_surgeon_name(sessions, store):
    patient_id = _profile_id(store, "patient@demo.com")
    cases = load_surgical_cases(store, patient_id)

    assert [c.status for c in cases] == ["Scheduled", "Proposed"]
    assert {c.surgeon_name for c in cases} == {"Dr. Demo Surgeon"}
    counts = case_counts(cases)
    assert counts == {"Proposed": 1, "Scheduled": 1, "Completed": 0, "Cancelled": 0}


def test_no_cases(store):
    assert load_surgical_cases(store, "nobody") == []
    assert set(case_counts([]).values()) == {0}


def test_surgeon_directory(store):
    sessions = LocalSessionStore(store)
    sessions.create("zed@x.org", "secret1", "Zed Adams", "surgeon")

    surgeons = list_surgeons(store)

    assert [s.profile.full_name for s in surgeons] == ["Dr. Demo Surgeon", "Zed Adams"]
    assert surgeons[0].details.specialty == "Orthopedic Surgery"
    assert surgeons[1].details.specialty == ""


def test_surgeon_filter(sessions, store):
    surgeons = list_surgeons(store)
    assert filter_surgeons(surgeons, "ORTHO") == surgeons
    assert filter_surgeons(surgeons, "general hospital") == surgeons
    assert filter_surgeons(surgeons, "cardio") == []
    assert filter_surgeons(surgeons, "  ") == surgeons
