"""
Circuit breaker for upstream calls. After a run of consecutive failures the
circuit opens and calls fail fast until a cool-off has elapsed; the next call
is then let through as a trial call (half-open) and closes the circuit on success.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from engine.errors import UpstreamUnavailable

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Circuit:
    failures: int = 0
    opened_at: Optional[float] = None


class CircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 5,
        open_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.failure_threshold = max(1, failure_threshold)
        self.open_seconds = open_seconds
        self._clock = clock
        self._circuits: Dict[str, _Circuit] = {}

    def _circuit(self, name: str) -> _Circuit:
        return self._circuits.setdefault(name, _Circuit())

    def is_open(self, name: str) -> bool:
        circuit = self._circuit(name)
        if circuit.opened_at is None:
            return False
        if self._clock() - circuit.opened_at >= self.open_seconds:
            log.info("Circuit half-open for %s", name)
            return False
        return True

    def record_success(self, name: str) -> None:
        circuit = self._circuit(name)
        if circuit.opened_at is not None:
            log.info("Circuit closed for %s", name)
        circuit.failures = 0
        circuit.opened_at = None

    def record_failure(self, name: str) -> None:
        circuit = self._circuit(name)
        circuit.failures += 1
        if circuit.failures >= self.failure_threshold:
            if circuit.opened_at is None:
                log.error("Circuit opened for %s after %d failures", name, circuit.failures)
            circuit.opened_at = self._clock()

    async def call(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        if self.is_open(name):
            circuit = self._circuit(name)
            assert circuit.opened_at is not None
            remaining = max(0.0, self.open_seconds - (self._clock() - circuit.opened_at))
            raise UpstreamUnavailable(
                f"{name} temporarily unavailable; retry in {int(remaining) + 1}s"
            )
        try:
            result = await fn()
        except Exception:
            self.record_failure(name)
            raise
        self.record_success(name)
        return result

    def stats(self) -> Dict[str, Any]:
        return {
            name: {"failures": c.failures, "open": self.is_open(name)}
            for name, c in self._circuits.items()
        }
