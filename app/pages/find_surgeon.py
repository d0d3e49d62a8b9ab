"""
app/pages/find_surgeon.py

Patient portal: Find Surgeon
- Search by name, specialty or hospital
- Expandable profile per surgeon
"""

from __future__ import annotations

import streamlit as st

from pipelines.surgeons import filter_surgeons, list_surgeons
from storage.records import RecordStoreError


def render(ctx) -> None:
    st.title("Find a Surgeon")
    st.caption("Connect with experienced surgeons in your area")

    try:
        surgeons = list_surgeons(ctx.records)
    except RecordStoreError as exc:
        st.warning(f"Could not load surgeons: {exc}")
        return

    term = st.text_input("Search", placeholder="Search by name, specialty, or hospital...")
    matches = filter_surgeons(surgeons, term)

    if not matches:
        st.caption("No surgeons found matching your search.")
        return

    cols = st.columns(2, gap="large")
    for i, s in enumerate(matches):
        with cols[i % 2]:
            with st.expander(f"{s.profile.full_name} · {s.details.specialty or 'General'}"):
                st.markdown(f"**Hospital:** {s.details.hospital_affiliation or '—'}")
                st.markdown(f"**Credentials:** {s.details.credentials or '—'}")
                if s.details.bio:
                    st.write(s.details.bio)
