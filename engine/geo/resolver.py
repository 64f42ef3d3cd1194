"""
Nearest-station resolution using great-circle (haversine) distance on a
spherical Earth, to pick the monitoring well whose history represents a
query point.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from engine.errors import NoStationsAvailable
from engine.models import GeoPoint, StationRecord
from config import settings

log = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class ResolvedStation:
    station: StationRecord
    distance_km: float
    note: Optional[str] = None


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    lat1, lon1, lat2, lon2 = map(math.radians, (a.lat, a.lon, b.lat, b.lon))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def resolve_nearest(
    point: GeoPoint,
    stations: Sequence[StationRecord],
    far_threshold_km: float | None = None,
) -> ResolvedStation:
    if far_threshold_km is None:
        far_threshold_km = settings.far_station_km
    if not stations:
        raise NoStationsAvailable("No monitoring stations available near the requested point")

    best: Optional[StationRecord] = None
    best_distance = math.inf
    for station in stations:
        d = haversine_km(point, station.point)
        # strict comparison keeps the first-seen station on ties
        if d < best_distance:
            best, best_distance = station, d

    if best is None:
        raise NoStationsAvailable("No monitoring station with usable coordinates near the requested point")
    note = None
    if best_distance > far_threshold_km:
        note = (
            f"Nearest monitoring station is {best_distance:.1f} km away; "
            "readings may not reflect local conditions"
        )
        log.info("resolve_nearest: station %s is %.1f km from query point", best.id, best_distance)
    return ResolvedStation(station=best, distance_km=best_distance, note=note)
