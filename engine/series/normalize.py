"""
Normalization of raw groundwater-depth series: drops unusable readings,
resolves duplicate dates and orders observations chronologically before any
trend statistic is computed.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Tuple

from engine.constants import MIN_DATA_POINTS
from engine.errors import InsufficientData
from engine.models import Observation

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedSeries:
    observations: Tuple[Observation, ...]
    dropped: Tuple[str, ...] = ()
    duplicates: int = 0

    def __len__(self) -> int:
        return len(self.observations)

    @property
    def latest(self) -> Observation | None:
        return self.observations[-1] if self.observations else None


def _is_valid_depth(depth: object) -> bool:
    try:
        value = float(depth)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value >= 0


def clean(raw: Iterable[Observation]) -> NormalizedSeries:
    by_date: Dict[date, Observation] = {}
    dropped: List[str] = []
    duplicates = 0

    for obs in raw:
        if not _is_valid_depth(obs.depth):
            dropped.append(f"Dropped observation on {obs.date.isoformat()}: invalid depth {obs.depth!r}")
            continue
        if obs.date in by_date:
            duplicates += 1
        # later readings for the same date replace earlier ones
        by_date[obs.date] = Observation(date=obs.date, depth=float(obs.depth))

    ordered = tuple(by_date[d] for d in sorted(by_date))
    if dropped or duplicates:
        log.debug("clean: kept=%d dropped=%d duplicates=%d", len(ordered), len(dropped), duplicates)
    return NormalizedSeries(observations=ordered, dropped=tuple(dropped), duplicates=duplicates)


def require(series: NormalizedSeries, min_points: int = MIN_DATA_POINTS) -> NormalizedSeries:
    if len(series) < min_points:
        raise InsufficientData(
            f"Insufficient historical data: {len(series)} valid point(s), {min_points} required"
        )
    return series


def normalize(raw: Iterable[Observation], min_points: int = MIN_DATA_POINTS) -> NormalizedSeries:
    return require(clean(raw), min_points)
