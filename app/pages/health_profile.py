"""
app/pages/health_profile.py

Patient portal: Health Profile
- Tabs: Personal Info / Vital Signs / Surgical History
- One add/edit form at a time, driven by pipelines.editor.RecordEditor
  (kept in st.session_state so a half-filled form survives reruns)
"""

from __future__ import annotations

from datetime import datetime

import streamlit as st

from app.ui import card_close, card_open
from pipelines.health import HealthData, load_health_data
from storage.records import RecordStoreError

FORM_FIELDS = {
    "vitals": [
        ("heart_rate", "Heart Rate (bpm)"),
        ("respiratory_rate", "Respiratory Rate (/min)"),
        ("systolic_bp", "Systolic BP"),
        ("diastolic_bp", "Diastolic BP"),
        ("body_temperature_celsius", "Body Temperature (°C)"),
        ("notes", "Notes"),
    ],
    "surgery": [
        ("procedure_name", "Procedure Name"),
        ("surgery_date", "Surgery Date (YYYY-MM-DD)"),
        ("surgeon_name", "Surgeon Name"),
        ("hospital_name", "Hospital Name"),
        ("notes", "Notes"),
    ],
    "personal": [
        ("date_of_birth", "Date of Birth (YYYY-MM-DD)"),
        ("gender", "Gender"),
        ("phone_number", "Phone Number"),
        ("address", "Address"),
        ("height_cm", "Height (cm)"),
        ("weight_kg", "Weight (kg)"),
        ("blood_type", "Blood Type"),
        ("smoking_status", "Smoking Status"),
        ("alcohol_consumption", "Alcohol Consumption"),
    ],
}


def _editor(ctx):
    editor = st.session_state.get("editor")
    if editor is None or editor.owner_id != ctx.profile.id:
        editor = ctx.editor()
        st.session_state["editor"] = editor
    return editor


def _fmt_date(iso_str: str) -> str:
    try:
        return datetime.fromisoformat(iso_str).strftime("%d %b %Y")
    except ValueError:
        return iso_str


def _render_editor(editor) -> None:
    draft = editor.draft
    card_open(editor.title)
    with st.form(f"editor_{draft.kind}"):
        values = {}
        for name, label in FORM_FIELDS[draft.kind]:
            current = getattr(draft, name)
            if name == "notes":
                values[name] = st.text_area(label, value=current, height=80)
            else:
                values[name] = st.text_input(label, value=current)
        c1, c2 = st.columns(2)
        save = c1.form_submit_button("Save", type="primary", use_container_width=True)
        cancel = c2.form_submit_button("Cancel", use_container_width=True)
    card_close()

    if cancel:
        editor.close()
        st.rerun()
    if save:
        for name, raw in values.items():
            editor.update_field(name, raw)
        if editor.save():
            st.success("Saved.")
            st.rerun()
        else:
            st.error("Could not save. Check the values and try again.")


def _personal_tab(editor, data: HealthData) -> None:
    d = data.details
    if d is None:
        st.caption("No personal information on file")
        if st.button("Add Personal Information", type="primary"):
            editor.open("personal")
            st.rerun()
        return

    if st.button("Edit", key="edit_personal"):
        editor.open("personal", d)
        st.rerun()
    c1, c2 = st.columns(2)
    with c1:
        st.markdown(f"**Date of Birth**  \n{d.personal_info.date_of_birth or '—'}")
        st.markdown(f"**Phone**  \n{d.personal_info.phone_number or '—'}")
        st.markdown(f"**Height / Weight**  \n{d.physical_info.height_cm or '—'} cm / {d.physical_info.weight_kg or '—'} kg")
    with c2:
        st.markdown(f"**Gender**  \n{d.personal_info.gender or '—'}")
        st.markdown(f"**Blood Type**  \n{d.physical_info.blood_type or '—'}")
        st.markdown(
            f"**Lifestyle**  \nSmoking: {d.lifestyle_info.smoking_status or '—'} · "
            f"Alcohol: {d.lifestyle_info.alcohol_consumption or '—'}"
        )
    st.markdown(f"**Address**  \n{d.personal_info.address or '—'}")


def _vitals_tab(editor, data: HealthData) -> None:
    if st.button("Add Entry", key="add_vitals", type="primary"):
        editor.open("vitals")
        st.rerun()
    if not data.vitals:
        st.caption("No vital signs recorded")
        return
    for v in data.vitals:
        c1, c2 = st.columns([5, 1])
        with c1:
            st.markdown(
                f"**{_fmt_date(v.created_at)}** · HR {v.heart_rate} bpm · "
                f"BP {v.systolic_bp}/{v.diastolic_bp} · {v.body_temperature_celsius}°C · "
                f"RR {v.respiratory_rate}/min"
            )
            if v.notes:
                st.caption(v.notes)
        with c2:
            if st.button("Edit", key=f"edit_vitals_{v.id}"):
                editor.open("vitals", v)
                st.rerun()


def _surgery_tab(editor, data: HealthData) -> None:
    if st.button("Add Entry", key="add_surgery", type="primary"):
        editor.open("surgery")
        st.rerun()
    if not data.surgeries:
        st.caption("No surgical history recorded")
        return
    for s in data.surgeries:
        c1, c2 = st.columns([5, 1])
        with c1:
            extra = " · ".join(x for x in (s.surgeon_name, s.hospital_name) if x)
            st.markdown(f"**{s.procedure_name}** · {_fmt_date(s.surgery_date)}" + (f" · {extra}" if extra else ""))
            if s.notes:
                st.caption(s.notes)
        with c2:
            if st.button("Edit", key=f"edit_surgery_{s.id}"):
                editor.open("surgery", s)
                st.rerun()


def render(ctx) -> None:
    st.title("Health Profile")
    st.caption("Manage your personal health information")

    editor = _editor(ctx)
    if editor.is_open:
        _render_editor(editor)

    try:
        data = load_health_data(ctx.records, ctx.profile.id)
    except RecordStoreError as exc:
        st.warning(f"Could not load your health data: {exc}")
        return

    personal, vitals, surgery = st.tabs(["Personal Info", "Vital Signs", "Surgical History"])
    with personal:
        _personal_tab(editor, data)
    with vitals:
        _vitals_tab(editor, data)
    with surgery:
        _surgery_tab(editor, data)
