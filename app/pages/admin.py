"""
app/pages/admin.py

Admin portal: SurgiCast
- Volume forecaster (T-3 / T-2 / T-1 bookings -> predicted cases)
- Booking velocity trends (demo series)
"""

from __future__ import annotations

import streamlit as st

from app.ui import card_close, card_open, esc
from pipelines.estimator import BOOKING_VELOCITY, HISTORICAL_ACCURACY, PredictionSource


def _forecaster(ctx) -> None:
    card_open("Volume Forecaster", "Bookings in the three trailing periods.")
    c1, c2, c3 = st.columns(3)
    t3 = c1.slider("T-3 Bookings", 0, 100, 45)
    t2 = c2.slider("T-2 Bookings", 0, 100, 52)
    t1 = c3.slider("T-1 Bookings", 0, 100, 38)

    if st.button("Generate Prediction", type="primary", use_container_width=True):
        with st.spinner("Predicting..."):
            st.session_state["prediction"] = ctx.estimator.predict(t3, t2, t1)

    prediction = st.session_state.get("prediction")
    if prediction is not None:
        source = (
            "model service"
            if prediction.source == PredictionSource.remote
            else "local estimate (service unavailable)"
        )
        st.markdown(
            f"""
<div class="mc-forecast">
  <div style="font-weight:800;">Predicted Volume</div>
  <div class="mc-forecast-value">{int(prediction.value)}</div>
  <div class="mc-sub">cases expected · {esc(source)}</div>
  <div class="mc-sub" style="margin-top:10px;">Model's Historical Accuracy: ±{HISTORICAL_ACCURACY} Cases</div>
</div>
            """,
            unsafe_allow_html=True,
        )
    card_close()


def _velocity_chart() -> None:
    card_open("Booking Velocity Trends")
    series = {
        "T-3": [row["t_minus_3"] for row in BOOKING_VELOCITY],
        "T-2": [row["t_minus_2"] for row in BOOKING_VELOCITY],
        "T-1": [row["t_minus_1"] for row in BOOKING_VELOCITY],
    }
    st.line_chart(series)
    st.caption(" · ".join(row["period"] for row in BOOKING_VELOCITY))
    card_close()


def render(ctx) -> None:
    st.title("SurgiCast")
    st.caption("Surgical volume forecasting & analytics")

    left, right = st.columns([1, 1], gap="large")
    with left:
        _forecaster(ctx)
    with right:
        _velocity_chart()
