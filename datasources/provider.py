"""
Provider wrapping the station directory and observation source with a bounded
timeout, a circuit breaker, and translation of connector faults into engine
upstream errors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, List, Optional, Tuple, TypeVar

from engine.errors import UpstreamTimeout, UpstreamUnavailable
from engine.models import GeoPoint, Observation, RechargeEntry, StationRecord
from .base import ObservationSource, StationDirectory
from .circuit import CircuitBreaker
from .data_config import DataSourceSettings
from .exceptions import DataSourceError, QueryTimeout
from .factory import DataSourceFactory

log = logging.getLogger(__name__)

T = TypeVar("T")

STATIONS = "stations"
OBSERVATIONS = "observations"


class DataSourceProvider:
    def __init__(
        self,
        settings: DataSourceSettings,
        stations: Optional[StationDirectory] = None,
        observations: Optional[ObservationSource] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.settings = settings
        self.stations = stations or DataSourceFactory.create_stations(settings)
        self.observations = observations or DataSourceFactory.create_observations(settings)
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=settings.circuit_failure_threshold,
            open_seconds=settings.circuit_open_seconds,
        )
        self.timeout = settings.upstream_timeout_seconds

    async def _guarded(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        async def bounded() -> T:
            try:
                return await asyncio.wait_for(fn(), timeout=self.timeout)
            except (asyncio.TimeoutError, QueryTimeout) as exc:
                log.warning("%s upstream timed out after %.1fs", name, self.timeout)
                raise UpstreamTimeout(f"{name} service timed out after {self.timeout:g}s") from exc
            except DataSourceError as exc:
                log.warning("%s upstream failed: %s", name, exc)
                raise UpstreamUnavailable(f"{name} service unavailable: {exc}") from exc

        return await self.breaker.call(name, bounded)

    async def nearest_stations(self, point: GeoPoint) -> List[StationRecord]:
        return await self._guarded(STATIONS, lambda: self.stations.nearest_stations(point))

    async def fetch_series(
        self,
        station_id: str,
        as_of: date,
    ) -> Tuple[List[Observation], List[RechargeEntry]]:
        return await self._guarded(OBSERVATIONS, lambda: self.observations.fetch(station_id, as_of))

    def stats(self) -> Any:
        return self.breaker.stats()

    async def aclose(self) -> None:
        await self.stations.aclose()
        await self.observations.aclose()
