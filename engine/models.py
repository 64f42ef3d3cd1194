"""
Domain records shared across the engine: observations, recharge entries,
station reference data and query points.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


@dataclass(frozen=True)
class Observation:
    date: date
    depth: float


@dataclass(frozen=True)
class RechargeEntry:
    year: int
    pre_monsoon_depth: float
    post_monsoon_depth: float
    recharge_amount: float


@dataclass(frozen=True)
class StationRecord:
    id: str
    name: str
    lat: float
    lon: float
    well_type: str = "Unknown"
    well_depth: Optional[float] = None
    aquifer_type: str = "Unknown"

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lon)
