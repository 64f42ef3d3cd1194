"""
Base connectors for the external collaborators the engine depends on: the
station directory and the observation source.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional, Tuple

from engine.models import GeoPoint, Observation, RechargeEntry, StationRecord


class BaseConnector(ABC):
    def __init__(self, base_url: str, timeout: int = 30, headers: Optional[Dict[str, str]] = None):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}

    def _headers(self) -> Dict[str, str]:
        """Basic header set applied to every outbound request."""
        return {"Accept": "application/json", **self.headers}

    async def aclose(self) -> None:
        return None


class StationDirectory(ABC):
    @abstractmethod
    async def nearest_stations(self, point: GeoPoint) -> List[StationRecord]: ...

    async def aclose(self) -> None:
        return None


class ObservationSource(ABC):
    @abstractmethod
    async def fetch(
        self,
        station_id: str,
        as_of: date,
    ) -> Tuple[List[Observation], List[RechargeEntry]]: ...

    async def aclose(self) -> None:
        return None
