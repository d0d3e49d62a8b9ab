"""
app/pages/auth.py

Sign in / sign up landing page.
- Left: hero panel
- Right: sign-in or sign-up form (toggle)
"""

from __future__ import annotations

import streamlit as st

from app.ui import card_close, card_open
from storage.auth import DEMO_ACCOUNTS, DEMO_PASSWORD, AuthError, SessionUnavailableError


def _sign_in_form(ctx) -> None:
    with st.form("sign_in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)

    if submitted:
        try:
            ctx.sign_in(email, password)
        except (AuthError, SessionUnavailableError):
            pass  # reported through ctx.notices
        st.rerun()

    if st.button("Don't have an account? Sign up", type="tertiary"):
        st.session_state["auth_mode"] = "sign_up"
        st.rerun()


def _sign_up_form(ctx) -> None:
    with st.form("sign_up"):
        full_name = st.text_input("Full name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        role = st.radio(
            "I am a",
            options=["patient", "surgeon"],
            format_func=str.title,
            horizontal=True,
        )
        submitted = st.form_submit_button("Create account", type="primary", use_container_width=True)

    if submitted:
        try:
            ctx.sign_up(email, password, full_name, role)
        except (AuthError, SessionUnavailableError):
            pass  # reported through ctx.notices
        st.rerun()

    if st.button("Already have an account? Sign in", type="tertiary"):
        st.session_state["auth_mode"] = "sign_in"
        st.rerun()


def render(ctx) -> None:
    colL, colR = st.columns([1.15, 1], gap="large")

    with colL:
        st.markdown(
            """
<div style="border-radius:18px; padding:32px; min-height:420px;
            background: linear-gradient(135deg, #0369A1, #0F766E); color:white;">
  <div style="font-weight:900; font-size:20px; margin-bottom:60px;">🩺 MySurgeon</div>
  <div style="font-weight:900; font-size:44px; line-height:1.05; margin-bottom:14px;">
    Your surgical care,<br>in one place.
  </div>
  <div style="opacity:0.8; font-size:15px; max-width:460px;">
    Find surgeons, track your health profile and follow your surgical cases.
    Administrators forecast surgical volume with SurgiCast.
  </div>
</div>
            """,
            unsafe_allow_html=True,
        )

    with colR:
        if st.session_state.get("auth_mode") == "sign_up":
            st.subheader("Create your account")
            _sign_up_form(ctx)
        else:
            st.subheader("Welcome back")
            _sign_in_form(ctx)

        if ctx.demo_mode:
            st.markdown("<div style='height:12px'></div>", unsafe_allow_html=True)
            card_open("Demo accounts", f"Password for all: {DEMO_PASSWORD}")
            for email, _name, role in DEMO_ACCOUNTS:
                st.caption(f"{role.title()}: {email}")
            card_close()
