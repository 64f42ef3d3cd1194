"""
Tests for nearest-station resolution and great-circle distance.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.errors import NoStationsAvailable
from engine.geo import haversine_km, resolve_nearest
from engine.models import GeoPoint, StationRecord


def _station(sid: str, lat: float, lon: float) -> StationRecord:
    return StationRecord(id=sid, name=f"Station {sid}", lat=lat, lon=lon)


def test_haversine_zero_and_symmetric():
    a = GeoPoint(12.97, 77.59)
    b = GeoPoint(28.61, 77.21)
    assert haversine_km(a, a) == 0.0
    assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))


def test_haversine_one_degree_of_latitude():
    d = haversine_km(GeoPoint(10.0, 77.0), GeoPoint(11.0, 77.0))
    assert d == pytest.approx(111.19, abs=0.05)


def test_resolve_picks_minimum_distance():
    point = GeoPoint(12.0, 77.0)
    stations = [_station("far", 13.0, 77.0), _station("near", 12.01, 77.0), _station("mid", 12.5, 77.0)]
    resolved = resolve_nearest(point, stations, far_threshold_km=50.0)
    assert resolved.station.id == "near"
    for s in stations:
        assert resolved.distance_km <= haversine_km(point, s.point)
    assert resolved.note is None


def test_resolve_tie_keeps_first_seen():
    point = GeoPoint(12.0, 77.0)
    stations = [_station("north", 12.1, 77.0), _station("south", 11.9, 77.0)]
    assert resolve_nearest(point, stations).station.id == "north"
    assert resolve_nearest(point, list(reversed(stations))).station.id == "south"


def test_resolve_attaches_note_beyond_threshold():
    resolved = resolve_nearest(GeoPoint(12.0, 77.0), [_station("x", 13.0, 77.0)], far_threshold_km=50.0)
    assert resolved.distance_km > 100
    assert resolved.note is not None
    assert "km away" in resolved.note


def test_resolve_empty_raises():
    with pytest.raises(NoStationsAvailable):
        resolve_nearest(GeoPoint(12.0, 77.0), [])
