"""
app/main.py

MySurgeon — Streamlit entry point.
- Builds the AppContext once per browser session
- Sign in / sign up gate
- Role-based sidebar menu (patient / surgeon / admin) via ProfileRouter
- Global theme + notices
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ui import inject_theme, render_notices  # noqa: E402
from pipelines.config import load_settings  # noqa: E402
from pipelines.session import build_context  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="MySurgeon",
    page_icon="🩺",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ---------------------------------------------------------------------------
# Session defaults
# ---------------------------------------------------------------------------
if "ctx" not in st.session_state:
    st.session_state["ctx"] = build_context(load_settings(), st.session_state)
if "auth_mode" not in st.session_state:
    st.session_state["auth_mode"] = "sign_in"  # "sign_in" | "sign_up"

ctx = st.session_state["ctx"]

# view -> page module under app/pages
VIEW_MODULES = {
    "patient_dashboard": "patient",
    "appointments": "appointments",
    "find_surgeon": "find_surgeon",
    "health_profile": "health_profile",
    "surgicast": "admin",
}


def _import_render(module_name: str):
    mod = __import__(f"app.pages.{module_name}", fromlist=["render"])
    return mod.render


def _sign_out() -> None:
    ctx.sign_out()
    st.session_state.pop("editor", None)
    st.rerun()


inject_theme()
render_notices(ctx)

# ---------------------------------------------------------------------------
# Gate: loading / signed out
# ---------------------------------------------------------------------------
if ctx.session.loading:
    with st.spinner("Loading your profile..."):
        st.stop()

if not ctx.session.signed_in:
    st.sidebar.title("🩺 MySurgeon")
    if ctx.demo_mode:
        st.sidebar.info("Demo mode: local store, demo accounts only.")
    else:
        st.sidebar.info("Not signed in")
    _import_render("auth")(ctx)
    st.stop()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
profile = ctx.profile
st.sidebar.title("🩺 MySurgeon")
st.sidebar.success(f"**{profile.display_name}**\n\nRole: **{profile.role}**")
if st.sidebar.button("↩️ Sign out"):
    _sign_out()
st.sidebar.divider()

menu = ctx.router.menu.menu()
if menu:
    ids = [item.id for item in menu]
    labels = {item.id: item.label for item in menu}
    try:
        current_idx = ids.index(ctx.router.active_tab)
    except ValueError:
        current_idx = 0
    picked = st.sidebar.radio(
        "Navigate",
        options=ids,
        index=current_idx,
        format_func=lambda tab_id: labels[tab_id],
    )
    ctx.router.select_tab(picked)

# ---------------------------------------------------------------------------
# Page routing
# ---------------------------------------------------------------------------
view = ctx.router.current_view()

if view.view in VIEW_MODULES:
    _import_render(VIEW_MODULES[view.view])(ctx)
elif view.view == "unknown_role":
    st.error(f"Unknown role '{profile.role}'. Please contact an administrator.")
else:
    _import_render("coming_soon")(ctx, view.title)
