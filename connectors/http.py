"""
HTTP connectors for the station directory and observation services. Both
services already deliver normalized records; these classes only map the wire
shape onto engine records.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import httpx

from datasources.base import BaseConnector, ObservationSource, StationDirectory
from datasources.exceptions import DataSourceUnavailable, InvalidPayload, QueryTimeout
from datasources.helpers import fetch_json, parse_date, parse_float
from datasources.retry import retry
from engine.models import GeoPoint, Observation, RechargeEntry, StationRecord

log = logging.getLogger(__name__)

_RETRYABLE = (httpx.RequestError, httpx.TimeoutException, DataSourceUnavailable, QueryTimeout)


def station_from_payload(item: Dict[str, Any]) -> StationRecord:
    try:
        return StationRecord(
            id=str(item["id"]),
            name=str(item.get("name") or item["id"]),
            lat=float(item["lat"]),
            lon=float(item["lon"]),
            well_type=str(item.get("wellType") or "Unknown"),
            well_depth=parse_float(item.get("wellDepth")),
            aquifer_type=str(item.get("aquiferType") or "Unknown"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidPayload(f"Malformed station record: {exc}") from exc


def observation_from_payload(item: Dict[str, Any]) -> Observation:
    try:
        depth = parse_float(item["depth"])
        return Observation(
            date=parse_date(item["date"]),
            depth=float("nan") if depth is None else depth,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidPayload(f"Malformed observation: {exc}") from exc


def recharge_from_payload(item: Dict[str, Any]) -> RechargeEntry:
    try:
        pre = float(item["preMonsoonDepth"])
        post = float(item["postMonsoonDepth"])
        amount = parse_float(item.get("rechargeAmount"))
        return RechargeEntry(
            year=int(item["year"]),
            pre_monsoon_depth=pre,
            post_monsoon_depth=post,
            recharge_amount=pre - post if amount is None else amount,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidPayload(f"Malformed recharge entry: {exc}") from exc


class HttpStationDirectory(BaseConnector, StationDirectory):
    def __init__(
        self,
        base_url: str,
        limit: int = 25,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(base_url, timeout, headers)
        self.limit = limit

    @retry(attempts=2, delay=0.5, backoff=2.0, exceptions=_RETRYABLE)
    async def nearest_stations(self, point: GeoPoint) -> List[StationRecord]:
        url = f"{self.base_url}/stations/nearest"
        params: Dict[str, Any] = {"lat": point.lat, "lon": point.lon, "limit": self.limit}
        body = await fetch_json(
            url,
            params=params,
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="Station directory query failed",
            timeout_msg="Station directory query timed out",
            unavailable_msg="Cannot reach station directory at",
        )
        items = body.get("stations") if isinstance(body, dict) else body
        if not isinstance(items, list):
            raise InvalidPayload("Station directory returned no station list")
        return [station_from_payload(item) for item in items]


class HttpObservationSource(BaseConnector, ObservationSource):
    def __init__(
        self,
        base_url: str,
        history_years: int = 10,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(base_url, timeout, headers)
        self.history_years = history_years

    @retry(attempts=2, delay=0.5, backoff=2.0, exceptions=_RETRYABLE)
    async def fetch(
        self,
        station_id: str,
        as_of: date,
    ) -> Tuple[List[Observation], List[RechargeEntry]]:
        url = f"{self.base_url}/stations/{station_id}/levels"
        params: Dict[str, Any] = {"asOf": as_of.isoformat(), "years": self.history_years}
        body = await fetch_json(
            url,
            params=params,
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="Observation query failed",
            timeout_msg="Observation query timed out",
            unavailable_msg="Cannot reach observation service at",
        )
        if not isinstance(body, dict):
            raise InvalidPayload("Observation service returned an unexpected body")
        observations = [observation_from_payload(item) for item in body.get("observations") or []]
        recharge = [recharge_from_payload(item) for item in body.get("recharge") or []]
        log.debug("Fetched %d observations for station %s", len(observations), station_id)
        return observations, recharge
