# =========================
# app/ui.py
# =========================
from __future__ import annotations

import html

import streamlit as st


def inject_theme() -> None:
    st.markdown(
        """
<style>
/* ============================================================
   MySurgeon theme
   - White sidebar with teal accent
   - Light canvas + white cards
   - Case status pills (Proposed / Scheduled / Completed / Cancelled)
   ============================================================ */

/* Hide Streamlit built-in multipage nav (we route ourselves) */
[data-testid="stSidebarNav"] { display: none !important; }

:root{
  --primary: 199 89% 40%;
  --accent: 168 64% 38%;
  --canvas: #F8FAFC;
  --card: #FFFFFF;
  --border: rgba(15,23,42,0.10);
  --muted: rgba(15,23,42,0.55);
  --text: rgba(15,23,42,0.92);
}

.stApp { background: var(--canvas); }

div.block-container {
  padding-top: 2.2rem;
  padding-bottom: 2.2rem;
}

section[data-testid="stSidebar"]{
  background: #FFFFFF !important;
  border-right: 1px solid var(--border);
}
section[data-testid="stSidebar"] .stRadio div[role="radiogroup"] > label{
  border: 1px solid var(--border);
  border-radius: 10px;
  padding: 10px 12px;
  margin-bottom: 6px;
}
section[data-testid="stSidebar"] .stRadio div[role="radiogroup"] > label:hover{
  border-color: hsla(var(--primary), 0.55);
}

.stButton>button{ border-radius: 10px; }
.stButton>button[kind="primary"]{
  background: hsl(var(--primary)) !important;
  border: 1px solid hsl(var(--primary)) !important;
  color: white !important;
}

/* Cards */
.mc-card{
  background: var(--card);
  border: 1px solid var(--border);
  border-radius: 14px;
  padding: 16px;
  margin-bottom: 12px;
}
.mc-title{ font-weight: 800; font-size: 16px; margin-bottom: 2px; color: var(--text); }
.mc-sub{ color: var(--muted); font-size: 13px; }

.mc-metric-label{ color: var(--muted); font-size: 13px; margin-bottom: 6px; }
.mc-metric-value{ font-size: 30px; font-weight: 900; color: var(--text); line-height: 1.0; }
.mc-metric-foot{ margin-top: 6px; color: var(--muted); font-size: 12px; }

/* Status pills */
.status-pill{
  display:inline-block;
  padding: 4px 10px;
  border-radius: 999px;
  font-size: 12px;
  font-weight: 700;
}
.status-proposed{ background: #FEF3C7; color: #B45309; }
.status-scheduled{ background: #E0F2FE; color: #0369A1; }
.status-completed{ background: #D1FAE5; color: #047857; }
.status-cancelled{ background: #FEE2E2; color: #B91C1C; }
.status-unknown{ background: #F1F5F9; color: #334155; }

/* Forecast result */
.mc-forecast{
  border-radius: 14px;
  padding: 22px;
  text-align: center;
  background: linear-gradient(90deg, #E0F2FE, #D1FAE5);
}
.mc-forecast-value{ font-size: 40px; font-weight: 900; color: hsl(var(--primary)); }
</style>
        """,
        unsafe_allow_html=True,
    )


def esc(x: object) -> str:
    """Escape any user/DB-provided strings before injecting into HTML."""
    return html.escape("" if x is None else str(x), quote=True)


def card_open(title: str, subtitle: str = "") -> None:
    sub = f'<div class="mc-sub">{esc(subtitle)}</div>' if subtitle else ""
    st.markdown(
        f'<div class="mc-card"><div class="mc-title">{esc(title)}</div>{sub}',
        unsafe_allow_html=True,
    )


def card_close() -> None:
    st.markdown("</div>", unsafe_allow_html=True)


def status_pill(status: str) -> str:
    known = ("proposed", "scheduled", "completed", "cancelled")
    cls = (status or "").lower()
    if cls not in known:
        cls = "unknown"
    return f'<span class="status-pill status-{cls}">{esc(status or "Unknown")}</span>'


def metric_card(label: str, value: str, foot: str | None = None) -> None:
    """Plain-text metric tile (everything escaped)."""
    foot_html = f'<div class="mc-metric-foot">{esc(foot)}</div>' if foot else ""
    st.markdown(
        f"""
<div class="mc-card">
  <div class="mc-metric-label">{esc(label)}</div>
  <div class="mc-metric-value">{esc(value)}</div>
  {foot_html}
</div>
        """,
        unsafe_allow_html=True,
    )


def render_notices(ctx) -> None:
    """Show queued notices; each one is dismissible."""
    for i, notice in enumerate(ctx.notices.pending()):
        show = {"error": st.error, "warning": st.warning}.get(notice.level, st.info)
        show(f"**{notice.title}**\n\n{notice.message}")
        if st.button("Dismiss", key=f"dismiss_notice_{i}"):
            ctx.notices.dismiss(notice)
            st.rerun()
