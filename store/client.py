"""
Client code for Redis access, with in-memory fallback if Redis is unavailable.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

log = logging.getLogger(__name__)


class StoreClient:
    """Async key-value store. Uses Redis when reachable and an in-memory map
    otherwise; a failed connect is not retried until the cooldown elapses.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        op_timeout: float = 0.5,
        retry_cooldown: float = 10.0,
        max_fallback_items: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.redis_url = redis_url
        self.op_timeout = op_timeout
        self.retry_cooldown = retry_cooldown
        self.max_fallback_items = max_fallback_items
        self._clock = clock
        self._redis_client: Any = None
        self._fallback: Dict[str, Tuple[str, Optional[float]]] = {}
        self._using_fallback = redis_url is None
        self._init_lock = asyncio.Lock()
        self._retry_after_monotonic: float = 0.0

    async def get_redis(self) -> Any:
        if self.redis_url is None:
            return None
        if self._redis_client is not None:
            return self._redis_client
        if time.monotonic() < self._retry_after_monotonic:
            self._using_fallback = True
            return None

        async with self._init_lock:
            if self._redis_client is not None:
                return self._redis_client
            if time.monotonic() < self._retry_after_monotonic:
                self._using_fallback = True
                return None
            try:
                import redis.asyncio as aioredis

                client = aioredis.from_url(
                    self.redis_url,
                    decode_responses=True,
                    socket_connect_timeout=self.op_timeout,
                    socket_timeout=self.op_timeout,
                )
                await asyncio.wait_for(client.ping(), timeout=self.op_timeout)
                self._redis_client = client
                self._retry_after_monotonic = 0.0
                self._using_fallback = False
                log.info("Redis connected: %s", self.redis_url)
                return self._redis_client
            except Exception as exc:
                self._retry_after_monotonic = time.monotonic() + max(0.0, self.retry_cooldown)
                if not self._using_fallback:
                    log.warning("Redis unavailable (%s), using in-memory fallback", exc)
                    self._using_fallback = True
                return None

    def _fallback_get(self, key: str) -> Optional[str]:
        item = self._fallback.get(key)
        if item is None:
            return None
        value, deadline = item
        if deadline is not None and self._clock() >= deadline:
            self._fallback.pop(key, None)
            return None
        return value

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (_, deadline) in self._fallback.items() if deadline is not None and now >= deadline]:
            self._fallback.pop(key, None)

    def _fallback_set(self, key: str, value: str, ttl: Optional[int]) -> None:
        if key not in self._fallback and len(self._fallback) >= self.max_fallback_items:
            self._evict_expired()
            if len(self._fallback) >= self.max_fallback_items:
                # oldest insertion goes first
                self._fallback.pop(next(iter(self._fallback)))
        deadline = self._clock() + ttl if ttl else None
        self._fallback[key] = (value, deadline)

    async def get(self, key: str) -> Optional[str]:
        client = await self.get_redis()
        if client is None:
            return self._fallback_get(key)
        try:
            return await asyncio.wait_for(client.get(key), timeout=self.op_timeout)
        except Exception as exc:
            log.debug("Redis GET error %s: %s", key, exc)
            return self._fallback_get(key)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        client = await self.get_redis()
        if client is None:
            self._fallback_set(key, value, ttl)
            return
        try:
            if ttl:
                await asyncio.wait_for(client.setex(key, ttl, value), timeout=self.op_timeout)
            else:
                await asyncio.wait_for(client.set(key, value), timeout=self.op_timeout)
        except Exception as exc:
            log.debug("Redis SET error %s: %s", key, exc)
            self._fallback_set(key, value, ttl)

    async def delete(self, key: str) -> None:
        client = await self.get_redis()
        self._fallback.pop(key, None)
        if client is None:
            return
        try:
            await asyncio.wait_for(client.delete(key), timeout=self.op_timeout)
        except Exception as exc:
            log.debug("Redis DEL error %s: %s", key, exc)

    def is_using_fallback(self) -> bool:
        return self._using_fallback

    def fallback_size(self) -> int:
        return len(self._fallback)

    async def aclose(self) -> None:
        if self._redis_client is not None:
            try:
                await self._redis_client.aclose()
            except Exception as exc:
                log.debug("Redis close error: %s", exc)
            self._redis_client = None
