"""
Tests for cached station and series fetches, and the provider's upstream
error translation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
from datetime import date

import pytest

from datasources.base import ObservationSource, StationDirectory
from datasources.data_config import DataSourceSettings
from datasources.exceptions import DataSourceUnavailable, QueryTimeout
from datasources.provider import DataSourceProvider
from engine.errors import NoStationsAvailable, UpstreamTimeout, UpstreamUnavailable
from engine.fetcher import fetch_series, fetch_stations
from engine.models import GeoPoint, Observation, RechargeEntry, StationRecord

STATION = StationRecord(id="W1", name="Well 1", lat=12.97, lon=77.59, well_type="Dug", well_depth=30.0)


class DummyDirectory(StationDirectory):
    def __init__(self, empty_calls=0):
        self.calls = 0
        self.empty_calls = empty_calls

    async def nearest_stations(self, point):
        self.calls += 1
        if self.calls <= self.empty_calls:
            return []
        return [STATION]


class DummySource(ObservationSource):
    def __init__(self, error=None, delay=0.0):
        self.calls = 0
        self.error = error
        self.delay = delay

    async def fetch(self, station_id, as_of):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return (
            [Observation(date(2020, 3, 1), 5.0), Observation(date(2020, 11, 1), float("nan"))],
            [RechargeEntry(2020, 5.0, 3.0, 2.0)],
        )


def _provider(source=None, directory=None, **overrides):
    settings = DataSourceSettings(**overrides)
    return DataSourceProvider(
        settings,
        stations=directory or DummyDirectory(),
        observations=source or DummySource(),
    )


@pytest.mark.asyncio
async def test_fetch_stations_cached_on_rounded_point(cache):
    directory = DummyDirectory()
    provider = _provider(directory=directory)
    stations, stale = await fetch_stations(provider, cache, GeoPoint(12.970001, 77.590001))
    again, _ = await fetch_stations(provider, cache, GeoPoint(12.970004, 77.590004))
    assert stations == again == [STATION]
    assert not stale
    assert directory.calls == 1


@pytest.mark.asyncio
async def test_fetch_stations_does_not_cache_empty_directory(cache):
    directory = DummyDirectory(empty_calls=1)
    provider = _provider(directory=directory)
    with pytest.raises(NoStationsAvailable):
        await fetch_stations(provider, cache, GeoPoint(12.97, 77.59))
    stations, stale = await fetch_stations(provider, cache, GeoPoint(12.97, 77.59))
    assert stations == [STATION]
    assert not stale
    assert directory.calls == 2


@pytest.mark.asyncio
async def test_fetch_series_round_trips_through_cache(cache):
    source = DummySource()
    provider = _provider(source=source)
    first = await fetch_series(provider, cache, "W1", date(2024, 6, 1))
    second = await fetch_series(provider, cache, "W1", date(2024, 6, 1))
    assert source.calls == 1
    assert second.observations[0] == Observation(date(2020, 3, 1), 5.0)
    # non-finite depths survive the cache so the normalizer can report them
    assert second.observations[1].depth != second.observations[1].depth
    assert second.recharge == first.recharge == (RechargeEntry(2020, 5.0, 3.0, 2.0),)


@pytest.mark.asyncio
async def test_fetch_series_serves_stale_when_upstream_fails(cache, clock):
    provider = _provider(source=DummySource())
    await fetch_series(provider, cache, "W1", date(2024, 6, 1))
    clock.advance(7200)
    provider.observations = DummySource(error=DataSourceUnavailable("down"))
    fetched = await fetch_series(provider, cache, "W1", date(2024, 6, 1))
    assert fetched.stale
    assert len(fetched.observations) == 2


@pytest.mark.asyncio
async def test_provider_translates_connector_errors():
    provider = _provider(source=DummySource(error=DataSourceUnavailable("refused")))
    with pytest.raises(UpstreamUnavailable):
        await provider.fetch_series("W1", date(2024, 6, 1))

    provider = _provider(source=DummySource(error=QueryTimeout("slow")))
    with pytest.raises(UpstreamTimeout):
        await provider.fetch_series("W1", date(2024, 6, 1))


@pytest.mark.asyncio
async def test_provider_bounds_fetch_with_timeout():
    provider = _provider(source=DummySource(delay=1.0), upstream_timeout_seconds=0.01)
    with pytest.raises(UpstreamTimeout):
        await provider.fetch_series("W1", date(2024, 6, 1))


@pytest.mark.asyncio
async def test_provider_circuit_fails_fast_after_threshold():
    source = DummySource(error=DataSourceUnavailable("refused"))
    provider = _provider(source=source, circuit_failure_threshold=2)
    for _ in range(2):
        with pytest.raises(UpstreamUnavailable):
            await provider.fetch_series("W1", date(2024, 6, 1))
    with pytest.raises(UpstreamUnavailable) as exc:
        await provider.fetch_series("W1", date(2024, 6, 1))
    assert "temporarily unavailable" in str(exc.value)
    assert source.calls == 2
