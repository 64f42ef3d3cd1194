"""
Station directory backed by a JSON file, for deployments that ship the
station list alongside the service.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from connectors.http import station_from_payload
from datasources.base import StationDirectory
from datasources.exceptions import DataSourceUnavailable, InvalidPayload
from engine.models import GeoPoint, StationRecord

log = logging.getLogger(__name__)


class FileStationDirectory(StationDirectory):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._stations: Optional[List[StationRecord]] = None

    def _load(self) -> List[StationRecord]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise DataSourceUnavailable(f"Cannot read station file {self.path}") from exc
        except ValueError as exc:
            raise InvalidPayload(f"Station file {self.path} is not JSON") from exc
        items = raw.get("stations") if isinstance(raw, dict) else raw
        if not isinstance(items, list):
            raise InvalidPayload(f"Station file {self.path} holds no station list")
        stations = [station_from_payload(item) for item in items]
        log.info("Loaded %d stations from %s", len(stations), self.path)
        return stations

    async def nearest_stations(self, point: GeoPoint) -> List[StationRecord]:
        # the resolver picks the nearest; the whole list is the candidate set
        if self._stations is None:
            self._stations = self._load()
        return list(self._stations)
