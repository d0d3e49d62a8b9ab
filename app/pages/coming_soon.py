"""
app/pages/coming_soon.py

Placeholder for menu entries that have no view yet (surgeon portal, admin
analytics / reports).
"""

from __future__ import annotations

import streamlit as st


def render(ctx, title: str) -> None:
    st.title(title)
    st.info(f"{title} (Coming Soon)")
