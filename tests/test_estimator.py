"""Tests for the SurgiCast volume estimator."""

import math
from unittest.mock import Mock, patch

import pytest
import requests

from pipelines.estimator import PredictionSource, VolumeEstimator, fallback_predict

URL = "http://predict.test/api/predict"


def _response(status=200, body=None, json_error=False):
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


class TestFallbackPredict:
    def test_reference_value(self):
        # 13.5 + 20.8 + 19 + 15 = 68.3
        assert fallback_predict(45, 52, 38) == 68

    def test_zero_inputs(self):
        assert fallback_predict(0, 0, 0) == 15

    def test_half_rounds_up(self):
        # 0.5 * 1 + 15 = 15.5
        assert fallback_predict(0, 0, 1) == 16
        # 0.5 * 3 + 15 = 16.5
        assert fallback_predict(0, 0, 3) == 17

    @pytest.mark.parametrize("a,b,c", [(10, 20, 30), (100, 100, 100), (7, 0, 13), (1, 2, 3)])
    def test_matches_formula(self, a, b, c):
        expected = math.floor((a * 0.3) + (b * 0.4) + (c * 0.5) + 15 + 0.5)
        assert fallback_predict(a, b, c) == expected


class TestVolumeEstimator:
    @patch("pipelines.estimator.requests.post")
    def test_remote_value_returned_verbatim(self, mock_post):
        mock_post.return_value = _response(200, {"predicted_volume": 412})
        prediction = VolumeEstimator(URL).predict(45, 52, 38)

        assert prediction.value == 412
        assert prediction.source == PredictionSource.remote
        mock_post.assert_called_once_with(URL, json={"t_minus_3": 45, "t_minus_2": 52, "t_minus_1": 38})

    @patch("pipelines.estimator.requests.post")
    def test_http_error_falls_back(self, mock_post):
        mock_post.return_value = _response(500, {"detail": "boom"})
        prediction = VolumeEstimator(URL).predict(45, 52, 38)
        assert prediction.value == 68
        assert prediction.source == PredictionSource.fallback

    @patch("pipelines.estimator.requests.post")
    def test_transport_error_falls_back(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")
        prediction = VolumeEstimator(URL).predict(45, 52, 38)
        assert prediction.value == 68
        assert prediction.source == PredictionSource.fallback

    @pytest.mark.parametrize(
        "body",
        [{}, {"predicted_volume": "70"}, {"predicted_volume": None}, {"predicted_volume": True}, [1, 2]],
    )
    @patch("pipelines.estimator.requests.post")
    def test_malformed_body_falls_back(self, mock_post, body):
        mock_post.return_value = _response(200, body)
        prediction = VolumeEstimator(URL).predict(45, 52, 38)
        assert prediction.source == PredictionSource.fallback

    @patch("pipelines.estimator.requests.post")
    def test_non_json_body_falls_back(self, mock_post):
        mock_post.return_value = _response(200, json_error=True)
        assert VolumeEstimator(URL).predict(1, 2, 3).source == PredictionSource.fallback

    @patch("pipelines.estimator.requests.post")
    def test_repeated_failures_are_deterministic(self, mock_post):
        mock_post.side_effect = requests.Timeout("slow")
        estimator = VolumeEstimator(URL)
        first = estimator.predict(45, 52, 38)
        second = estimator.predict(45, 52, 38)
        assert first == second
        assert first.value == 68
        assert mock_post.call_count == 2  # no caching

    def test_injected_http_client(self):
        http = Mock()
        http.post.return_value = _response(201, {"predicted_volume": 5})
        assert VolumeEstimator(URL, http=http).predict(0, 0, 0).value == 5

    @pytest.mark.parametrize("bad", [-1, 1.5, "3", None, True])
    def test_rejects_bad_counts_before_calling(self, bad):
        http = Mock()
        with pytest.raises(ValueError):
            VolumeEstimator(URL, http=http).predict(bad, 1, 1)
        http.post.assert_not_called()
