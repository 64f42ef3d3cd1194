"""
Route-level tests for the water level and health endpoints.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from api.requests import WaterLevelRequest
from api.responses import AnalysisReport, CurrentWaterLevel, UserLocation
from api.routes import health as health_route
from api.routes import water_level as water_level_route
from engine.errors import ValidationError
from services.analysis_service import AnalysisService
from store.cache import ResultCache
from store.client import StoreClient


class FakeProvider:
    def stats(self):
        return {"observations": {"failures": 0, "open": False}}

    async def aclose(self):
        return None


class FakeService(AnalysisService):
    def __init__(self, error=None):
        super().__init__(FakeProvider(), ResultCache(StoreClient(redis_url=None)))
        self.error = error
        self.calls = []

    async def compute_analysis(self, point, as_of):
        self.calls.append((point, as_of))
        if self.error is not None:
            raise self.error
        return AnalysisReport(
            user_location=UserLocation(lat=point.lat, lon=point.lon, date=as_of),
            current_water_level=CurrentWaterLevel(level=7.25, date=date(2024, 3, 1)),
        )


@pytest.mark.asyncio
async def test_water_levels_route_passes_point_and_date():
    service = FakeService()
    req = WaterLevelRequest(lat=12.97, lon=77.59, date=date(2024, 6, 1))
    report = await water_level_route.water_levels(req, service=service)
    assert report.current_water_level.level == 7.25
    point, as_of = service.calls[0]
    assert (point.lat, point.lon, as_of) == (12.97, 77.59, date(2024, 6, 1))


@pytest.mark.asyncio
async def test_water_levels_route_maps_validation_error_to_400():
    service = FakeService(error=ValidationError("Latitude must be between -90 and 90 degrees"))
    with pytest.raises(HTTPException) as exc:
        await water_level_route.water_levels(WaterLevelRequest(lat=95.0, lon=77.0), service=service)
    assert exc.value.status_code == 400
    assert "Latitude" in exc.value.detail


@pytest.mark.asyncio
async def test_water_levels_route_maps_unexpected_error_to_500():
    service = FakeService(error=RuntimeError("boom"))
    with pytest.raises(HTTPException) as exc:
        await water_level_route.water_levels(WaterLevelRequest(lat=12.0, lon=77.0), service=service)
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_health_reports_store_mode_and_stats():
    result = await health_route.health(service=FakeService())
    assert result.status == "ok"
    assert result.store == "fallback"
    assert result.cache["hits"] == 0
    assert result.circuits["observations"]["open"] is False


def test_http_response_uses_camel_case_aliases():
    from main import app

    app.state.analysis_service = FakeService()
    client = TestClient(app)
    resp = client.post("/api/v1/water-levels", json={"lat": 12.97, "lon": 77.59, "date": "2024-06-01"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["currentWaterLevel"]["level"] == 7.25
    assert body["userLocation"]["date"] == "2024-06-01"
    assert body["predictions"]["errors"] == []
    assert body["predictions"]["futureWaterLevels"] is None
    assert body["cached"] is False


def test_http_validation_error_is_400():
    from main import app

    app.state.analysis_service = FakeService(error=ValidationError("Coordinates outside the service area"))
    client = TestClient(app)
    resp = client.post("/api/v1/water-levels", json={"lat": 51.5, "lon": -0.12})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Coordinates outside the service area"
