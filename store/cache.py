"""
Tiered result cache with stale fallback. Entries are JSON envelopes holding
the payload, its creation time and the TTL of its tier; the backing store
keeps them well past that TTL so an expired entry can still be served when
the upstream it was computed from is failing.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Type

from config import REFERENCE_TTL, RESULT_TTL, UPSTREAM_TTL
from engine.errors import UpstreamError
from store import keys
from store.client import StoreClient

log = logging.getLogger(__name__)


class CacheTier(str, Enum):
    result = "result"
    upstream = "upstream"
    reference = "reference"


DEFAULT_TTLS: Dict[CacheTier, int] = {
    CacheTier.result: RESULT_TTL,
    CacheTier.upstream: UPSTREAM_TTL,
    CacheTier.reference: REFERENCE_TTL,
}


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    created_at: float
    ttl: int

    def is_fresh(self, now: float) -> bool:
        return now - self.created_at < self.ttl


@dataclass(frozen=True)
class CacheLookup:
    payload: Any
    hit: bool = False
    stale: bool = False


def _to_json(entry: CacheEntry) -> str:
    return json.dumps({
        "key": entry.key,
        "payload": entry.payload,
        "created_at": entry.created_at,
        "ttl": entry.ttl,
    }, separators=(",", ":"))


def _from_json(data: str) -> CacheEntry:
    d = json.loads(data)
    return CacheEntry(
        key=d["key"],
        payload=d["payload"],
        created_at=float(d["created_at"]),
        ttl=int(d["ttl"]),
    )


class ResultCache:
    def __init__(
        self,
        store: StoreClient,
        ttls: Optional[Mapping[CacheTier, int]] = None,
        stale_retention_factor: int = 24,
        prefix: str = "aq:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.ttls: Dict[CacheTier, int] = {**DEFAULT_TTLS, **(ttls or {})}
        self.stale_retention_factor = max(1, stale_retention_factor)
        self.prefix = prefix
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._stale = 0

    def ttl_for(self, tier: CacheTier) -> int:
        return int(self.ttls[tier])

    async def _read(self, key: str) -> Optional[CacheEntry]:
        raw = await self.store.get(keys.storage(self.prefix, key))
        if not raw:
            return None
        try:
            entry = _from_json(raw)
        except (ValueError, KeyError, TypeError) as exc:
            log.debug("Discarding malformed cache entry %s: %s", key, exc)
            return None
        if entry.key != key:
            log.debug("Cache key collision for %s", key)
            return None
        return entry

    async def get(self, operation: str, params: Mapping[str, Any]) -> Optional[Any]:
        entry = await self._read(keys.make(operation, params))
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry.payload

    async def get_stale(self, operation: str, params: Mapping[str, Any]) -> Optional[Any]:
        entry = await self._read(keys.make(operation, params))
        return entry.payload if entry is not None else None

    async def set(
        self,
        operation: str,
        params: Mapping[str, Any],
        payload: Any,
        tier: CacheTier = CacheTier.result,
    ) -> None:
        key = keys.make(operation, params)
        ttl = self.ttl_for(tier)
        entry = CacheEntry(key=key, payload=payload, created_at=self._clock(), ttl=ttl)
        await self.store.set(
            keys.storage(self.prefix, key),
            _to_json(entry),
            ttl=ttl * self.stale_retention_factor,
        )

    async def get_or_compute(
        self,
        operation: str,
        params: Mapping[str, Any],
        tier: CacheTier,
        compute: Callable[[], Awaitable[Any]],
        stale_on: Tuple[Type[BaseException], ...] = (UpstreamError,),
    ) -> CacheLookup:
        key = keys.make(operation, params)
        entry = await self._read(key)
        if entry is not None and entry.is_fresh(self._clock()):
            self._hits += 1
            log.debug("Cache hit %s", key)
            return CacheLookup(payload=entry.payload, hit=True)

        self._misses += 1
        log.debug("Cache miss %s", key)
        try:
            payload = await compute()
        except stale_on as exc:
            if entry is None:
                raise
            self._stale += 1
            log.warning("Serving stale %s after upstream failure: %s", operation, exc)
            return CacheLookup(payload=entry.payload, hit=True, stale=True)

        await self.set(operation, params, payload, tier)
        return CacheLookup(payload=payload)

    def stats(self) -> Dict[str, Any]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "stale": self._stale,
            "fallback": self.store.is_using_fallback(),
        }
