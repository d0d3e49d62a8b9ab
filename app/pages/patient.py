"""
app/pages/patient.py

Patient portal: Dashboard
- Welcome + scheduled / proposed case counts
- Upcoming surgical cases
"""

from __future__ import annotations

from datetime import datetime

import streamlit as st

from app.ui import card_close, card_open, esc, metric_card, status_pill
from pipelines.health import case_counts, load_surgical_cases
from storage.records import RecordStoreError


def _fmt_date(iso_str: str) -> str:
    try:
        return datetime.fromisoformat(iso_str).strftime("%a %b %d, %Y")
    except ValueError:
        return iso_str


def render(ctx) -> None:
    profile = ctx.profile
    st.title(f"Welcome, {profile.first_name or profile.display_name}!")
    st.caption("Manage your health journey with confidence")

    try:
        cases = load_surgical_cases(ctx.records, profile.id)
    except RecordStoreError as exc:
        st.warning(f"Could not load your surgical cases: {exc}")
        cases = []

    counts = case_counts(cases)

    c1, c2, c3 = st.columns(3, gap="large")
    with c1:
        metric_card("Scheduled", str(counts["Scheduled"]), foot="Surgeries")
    with c2:
        metric_card("Proposed", str(counts["Proposed"]), foot="Awaiting confirmation")
    with c3:
        metric_card("Completed", str(counts["Completed"]), foot="Procedures")

    st.markdown("<br>", unsafe_allow_html=True)

    upcoming = [c for c in cases if c.status in ("Proposed", "Scheduled")]
    card_open("Upcoming", "Your proposed and scheduled surgical cases.")
    if not upcoming:
        st.caption("No upcoming surgical cases.")
    else:
        for case in upcoming[:6]:
            st.markdown(
                f"""
<div style="display:flex; justify-content:space-between; gap:10px; padding:12px 0; border-top:1px solid rgba(15,23,42,0.06);">
  <div>
    <div style="font-weight:800;">{esc(case.procedure_name)}</div>
    <div class="mc-sub">{esc(_fmt_date(case.proposed_surgery_date))} · {esc(case.surgeon_name or "Surgeon TBD")}</div>
  </div>
  <div>{status_pill(case.status)}</div>
</div>
                """,
                unsafe_allow_html=True,
            )
    card_close()

    st.markdown("<br>", unsafe_allow_html=True)
    cols = st.columns([1, 1], gap="small")
    with cols[0]:
        if st.button("Find a surgeon →", type="primary", use_container_width=True):
            ctx.router.select_tab("find-surgeon")
            st.rerun()
    with cols[1]:
        if st.button("Health profile →", use_container_width=True):
            ctx.router.select_tab("health-profile")
            st.rerun()
