"""
Tests for request and response model parsing and aliasing.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from api.requests import WaterLevelRequest
from api.responses import AnalysisReport, PredictionError, UserLocation


def test_water_level_request_parses_iso_date():
    req = WaterLevelRequest.model_validate({"lat": "12.5", "lon": 77, "date": "2024-06-01"})
    assert req.lat == 12.5
    assert req.as_of() == date(2024, 6, 1)


def test_water_level_request_defaults_to_today():
    assert WaterLevelRequest(lat=12.5, lon=77.0).as_of() == date.today()


def test_water_level_request_rejects_bad_input():
    with pytest.raises(ValidationError):
        WaterLevelRequest.model_validate({"lat": "north", "lon": 77})
    with pytest.raises(ValidationError):
        WaterLevelRequest.model_validate({"lat": 12.0, "lon": 77.0, "date": "June"})
    with pytest.raises(ValidationError):
        WaterLevelRequest.model_validate({"lon": 77.0})


def test_report_dumps_with_camel_case_aliases():
    report = AnalysisReport(
        user_location=UserLocation(lat=1.0, lon=2.0, date=date(2024, 1, 1)),
        predictions={"errors": [PredictionError(type="insufficient_data", message="m", affected_predictions=["futureWaterLevels"])]},
    )
    body = report.model_dump(mode="json", by_alias=True)
    assert body["userLocation"] == {"lat": 1.0, "lon": 2.0, "date": "2024-01-01"}
    assert body["predictions"]["errors"][0]["affectedPredictions"] == ["futureWaterLevels"]
    assert "stressCategoryTransition" in body["predictions"]


def test_report_round_trips_from_snake_case_payload():
    report = AnalysisReport(user_location=UserLocation(lat=1.0, lon=2.0, date=date(2024, 1, 1)))
    restored = AnalysisReport.model_validate(report.model_dump(mode="json"))
    assert restored == report
