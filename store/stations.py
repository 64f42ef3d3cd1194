"""
JSON codec for cached station candidate lists.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List

from engine.models import StationRecord


def _to_dict(s: StationRecord) -> Dict[str, Any]:
    return {
        "id": s.id,
        "name": s.name,
        "lat": s.lat,
        "lon": s.lon,
        "well_type": s.well_type,
        "well_depth": s.well_depth,
        "aquifer_type": s.aquifer_type,
    }


def _from_dict(d: Dict[str, Any]) -> StationRecord:
    return StationRecord(
        id=d["id"],
        name=d["name"],
        lat=d["lat"],
        lon=d["lon"],
        well_type=d.get("well_type", "Unknown"),
        well_depth=d.get("well_depth"),
        aquifer_type=d.get("aquifer_type", "Unknown"),
    )


def encode(stations: List[StationRecord]) -> List[Dict[str, Any]]:
    return [_to_dict(s) for s in stations]


def decode(payload: List[Dict[str, Any]]) -> List[StationRecord]:
    return [_from_dict(d) for d in payload]
