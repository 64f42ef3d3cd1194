"""
Tests for the HTTP and file-backed connectors and the datasource factory.
"""

from __future__ import annotations

import json
from datetime import date
from types import SimpleNamespace

import pytest

from config import OBSERVATIONS_BACKEND_HTTP, STATIONS_BACKEND_FILE, STATIONS_BACKEND_HTTP
from connectors import http as http_connectors
from connectors.http import HttpObservationSource, HttpStationDirectory
from connectors.static import FileStationDirectory
from datasources.exceptions import InvalidPayload
from datasources.factory import DataSourceFactory
from engine.models import GeoPoint, Observation, RechargeEntry

STATIONS_BODY = {
    "stations": [
        {"id": "W1", "name": "Hebbal", "lat": 13.03, "lon": 77.59, "wellType": "Bore", "wellDepth": "60.5"},
        {"id": 42, "lat": "12.9", "lon": "77.6"},
    ]
}


@pytest.mark.asyncio
async def test_http_station_directory_maps_records(monkeypatch):
    captured = {}

    async def fake_fetch_json(url, params=None, headers=None, timeout=30, **kwargs):
        captured.update(url=url, params=params, headers=headers)
        return STATIONS_BODY

    monkeypatch.setattr(http_connectors, "fetch_json", fake_fetch_json)
    directory = HttpStationDirectory("http://stations/", limit=5)
    stations = await directory.nearest_stations(GeoPoint(13.0, 77.6))

    assert captured["url"] == "http://stations/stations/nearest"
    assert captured["params"] == {"lat": 13.0, "lon": 77.6, "limit": 5}
    assert captured["headers"]["Accept"] == "application/json"
    assert stations[0].well_depth == 60.5
    assert stations[0].well_type == "Bore"
    assert stations[1].id == "42"
    assert stations[1].name == "42"
    assert stations[1].aquifer_type == "Unknown"


@pytest.mark.asyncio
async def test_http_observation_source_maps_series(monkeypatch):
    async def fake_fetch_json(url, params=None, headers=None, timeout=30, **kwargs):
        assert url == "http://obs/stations/W1/levels"
        assert params == {"asOf": "2024-06-01", "years": 10}
        return {
            "observations": [
                {"date": "2023-03-01T00:00:00Z", "depth": 5.5},
                {"date": "2023-11-01", "depth": None},
            ],
            "recharge": [{"year": 2023, "preMonsoonDepth": 5.5, "postMonsoonDepth": 3.5}],
        }

    monkeypatch.setattr(http_connectors, "fetch_json", fake_fetch_json)
    observations, recharge = await HttpObservationSource("http://obs").fetch("W1", date(2024, 6, 1))
    assert observations[0] == Observation(date(2023, 3, 1), 5.5)
    assert observations[1].depth != observations[1].depth
    assert recharge == [RechargeEntry(2023, 5.5, 3.5, 2.0)]


@pytest.mark.asyncio
async def test_http_observation_source_rejects_malformed_body(monkeypatch):
    async def fake_fetch_json(url, **kwargs):
        return {"observations": [{"depth": 1.0}]}

    monkeypatch.setattr(http_connectors, "fetch_json", fake_fetch_json)
    with pytest.raises(InvalidPayload):
        await HttpObservationSource("http://obs").fetch("W1", date(2024, 6, 1))


@pytest.mark.asyncio
async def test_file_station_directory_loads_once(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(json.dumps(STATIONS_BODY["stations"]), encoding="utf-8")
    directory = FileStationDirectory(path)
    stations = await directory.nearest_stations(GeoPoint(13.0, 77.6))
    assert [s.id for s in stations] == ["W1", "42"]
    path.unlink()
    assert len(await directory.nearest_stations(GeoPoint(0.0, 0.0))) == 2


def test_factory_builds_configured_backends(tmp_path):
    cfg = SimpleNamespace(
        stations_backend=STATIONS_BACKEND_HTTP,
        stations_url="http://stations",
        stations_file=None,
        stations_limit=7,
        observations_backend=OBSERVATIONS_BACKEND_HTTP,
        observations_url="http://obs",
        history_years=12,
        connector_timeout=42,
    )
    stations = DataSourceFactory.create_stations(cfg)
    observations = DataSourceFactory.create_observations(cfg)
    assert isinstance(stations, HttpStationDirectory)
    assert stations.limit == 7 and stations.timeout == 42
    assert isinstance(observations, HttpObservationSource)
    assert observations.history_years == 12 and observations.timeout == 42

    cfg.stations_backend = STATIONS_BACKEND_FILE
    with pytest.raises(ValueError):
        DataSourceFactory.create_stations(cfg)
    cfg.stations_file = str(tmp_path / "s.json")
    assert isinstance(DataSourceFactory.create_stations(cfg), FileStationDirectory)

    cfg.observations_backend = "ftp"
    with pytest.raises(ValueError):
        DataSourceFactory.create_observations(cfg)
