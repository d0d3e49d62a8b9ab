"""
app/pages/appointments.py

Patient portal: Appointments: every surgical case, grouped by status.
"""

from __future__ import annotations

import streamlit as st

from app.ui import card_close, card_open, esc, status_pill
from pipelines.health import load_surgical_cases
from pipelines.schemas import CASE_STATUSES
from storage.records import RecordStoreError


def render(ctx) -> None:
    st.title("Appointments")
    st.caption("Status changes are made by your surgeon's office.")

    try:
        cases = load_surgical_cases(ctx.records, ctx.profile.id)
    except RecordStoreError as exc:
        st.warning(f"Could not load appointments: {exc}")
        return

    if not cases:
        st.info("No surgical cases yet. Use Find Surgeon to connect with a surgeon.")
        return

    for status in CASE_STATUSES:
        group = [c for c in cases if c.status == status]
        if not group:
            continue
        card_open(status, f"{len(group)} case(s)")
        for case in group:
            st.markdown(
                f"""
<div style="display:flex; justify-content:space-between; gap:10px; padding:10px 0; border-top:1px solid rgba(15,23,42,0.06);">
  <div>
    <div style="font-weight:800;">{esc(case.procedure_name)}</div>
    <div class="mc-sub">{esc(case.proposed_surgery_date)} · {esc(case.surgeon_name or "Surgeon TBD")}</div>
  </div>
  <div>{status_pill(case.status)}</div>
</div>
                """,
                unsafe_allow_html=True,
            )
        card_close()
