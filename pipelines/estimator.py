"""
pipelines/estimator.py

SurgiCast volume forecaster.

Given the booking counts for the three trailing periods (T-3, T-2, T-1) it
asks the prediction service for the expected case volume. If the service
answers with anything but a 2xx JSON body carrying an integer
``predicted_volume`` (or cannot be reached at all), a local linear estimate
is returned instead. The caller can tell which path ran from
``Prediction.source``.

There is no caching, retry or explicit timeout on the remote call.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any

import requests
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Weekly T-3/T-2/T-1 bookings shown on the admin velocity chart (demo data).
BOOKING_VELOCITY: list[dict[str, Any]] = [
    {"period": "Week 1", "t_minus_3": 42, "t_minus_2": 48, "t_minus_1": 35},
    {"period": "Week 2", "t_minus_3": 45, "t_minus_2": 52, "t_minus_1": 38},
    {"period": "Week 3", "t_minus_3": 38, "t_minus_2": 45, "t_minus_1": 42},
    {"period": "Week 4", "t_minus_3": 51, "t_minus_2": 58, "t_minus_1": 45},
    {"period": "Week 5", "t_minus_3": 47, "t_minus_2": 53, "t_minus_1": 40},
    {"period": "Week 6", "t_minus_3": 49, "t_minus_2": 55, "t_minus_1": 43},
]

HISTORICAL_ACCURACY = 21  # +/- cases


class PredictionSource(str, Enum):
    remote = "remote"
    fallback = "fallback"


class Prediction(BaseModel):
    value: int
    source: PredictionSource

    class Config:
        use_enum_values = True


def _check_count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def fallback_predict(t_minus_3: int, t_minus_2: int, t_minus_1: int) -> int:
    """
    Local estimate: 0.3*T-3 + 0.4*T-2 + 0.5*T-1 + 15, rounded half up.

    The terms are summed in this fixed order so the float result (and thus
    the rounding of .5 cases) is reproducible.
    """
    raw = (t_minus_3 * 0.3) + (t_minus_2 * 0.4) + (t_minus_1 * 0.5) + 15
    return math.floor(raw + 0.5)


def _parse_remote(response: requests.Response) -> int | None:
    if not response.ok:
        logger.info("Prediction service returned HTTP %s", response.status_code)
        return None
    try:
        body = response.json()
    except ValueError:
        logger.info("Prediction service returned a non-JSON body")
        return None
    value = body.get("predicted_volume") if isinstance(body, dict) else None
    if isinstance(value, bool) or not isinstance(value, int):
        logger.info("Prediction service body has no integer predicted_volume: %r", body)
        return None
    return value


class VolumeEstimator:
    def __init__(self, endpoint_url: str, http: Any = requests):
        self.endpoint_url = endpoint_url
        self.http = http

    def predict(self, t_minus_3: int, t_minus_2: int, t_minus_1: int) -> Prediction:
        t3 = _check_count("t_minus_3", t_minus_3)
        t2 = _check_count("t_minus_2", t_minus_2)
        t1 = _check_count("t_minus_1", t_minus_1)

        try:
            response = self.http.post(
                self.endpoint_url,
                json={"t_minus_3": t3, "t_minus_2": t2, "t_minus_1": t1},
            )
            value = _parse_remote(response)
        except requests.RequestException as exc:
            logger.warning("Prediction error: %s", exc)
            value = None

        if value is not None:
            return Prediction(value=value, source=PredictionSource.remote)
        return Prediction(value=fallback_predict(t3, t2, t1), source=PredictionSource.fallback)
