"""
Fetcher Module for Station Candidates and Observation Series, routed through
the result cache so upstream failures can be answered from retained entries.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from datasources.provider import DataSourceProvider
from engine.errors import NoStationsAvailable
from engine.models import GeoPoint, Observation, RechargeEntry, StationRecord
from store import series as series_codec, stations as stations_codec
from store.cache import CacheTier, ResultCache
from config import settings

log = logging.getLogger(__name__)

STATIONS_OPERATION = "stations"
SERIES_OPERATION = "series"


@dataclass(frozen=True)
class FetchedSeries:
    observations: Tuple[Observation, ...]
    recharge: Tuple[RechargeEntry, ...]
    stale: bool = False


def rounded(point: GeoPoint, decimals: int | None = None) -> GeoPoint:
    if decimals is None:
        decimals = settings.coordinate_decimals
    return GeoPoint(round(point.lat, decimals), round(point.lon, decimals))


async def fetch_stations(
    provider: DataSourceProvider,
    cache: ResultCache,
    point: GeoPoint,
) -> Tuple[List[StationRecord], bool]:
    key_point = rounded(point)

    async def _load() -> list:
        candidates = await provider.nearest_stations(point)
        if not candidates:
            # raised before the write so an empty directory answer is never cached
            raise NoStationsAvailable("No monitoring stations available near the requested point")
        return stations_codec.encode(candidates)

    lookup = await cache.get_or_compute(
        STATIONS_OPERATION,
        {"lat": key_point.lat, "lon": key_point.lon},
        CacheTier.reference,
        _load,
    )
    stations = stations_codec.decode(lookup.payload)
    log.debug("fetch_stations point=%s candidates=%d hit=%s", key_point, len(stations), lookup.hit)
    return stations, lookup.stale


async def fetch_series(
    provider: DataSourceProvider,
    cache: ResultCache,
    station_id: str,
    as_of: date,
) -> FetchedSeries:
    async def _load() -> dict:
        observations, recharge = await provider.fetch_series(station_id, as_of)
        return series_codec.encode(observations, recharge)

    lookup = await cache.get_or_compute(
        SERIES_OPERATION,
        {"station": station_id, "as_of": as_of.isoformat()},
        CacheTier.upstream,
        _load,
    )
    observations, recharge = series_codec.decode(lookup.payload)
    log.debug("fetch_series station=%s points=%d stale=%s", station_id, len(observations), lookup.stale)
    return FetchedSeries(tuple(observations), tuple(recharge), stale=lookup.stale)
