"""
Constants and configuration for Aquifer Outlook.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Optional, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings


REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
RESULT_TTL: int = int(os.getenv("RESULT_TTL", "3600"))
UPSTREAM_TTL: int = int(os.getenv("UPSTREAM_TTL", "7200"))
REFERENCE_TTL: int = int(os.getenv("REFERENCE_TTL", "86400"))

STATIONS_BACKEND_HTTP = "http"
STATIONS_BACKEND_FILE = "file"
OBSERVATIONS_BACKEND_HTTP = "http"

SEASON_FALLBACK_NEAREST = "nearest"
SEASON_FALLBACK_PRE = "pre_monsoon"
SEASON_FALLBACK_POST = "post_monsoon"

AQUIFER_STATIONS_BACKEND = os.getenv("AQUIFER_STATIONS_BACKEND", STATIONS_BACKEND_HTTP).lower()
AQUIFER_STATIONS_URL = os.getenv("AQUIFER_STATIONS_URL", "http://stations:8080").rstrip("/")
AQUIFER_STATIONS_FILE = os.getenv("AQUIFER_STATIONS_FILE", "")
AQUIFER_OBSERVATIONS_BACKEND = os.getenv("AQUIFER_OBSERVATIONS_BACKEND", OBSERVATIONS_BACKEND_HTTP).lower()
AQUIFER_OBSERVATIONS_URL = os.getenv("AQUIFER_OBSERVATIONS_URL", "http://observations:8080").rstrip("/")

AQUIFER_CONNECTOR_TIMEOUT = int(os.getenv("AQUIFER_CONNECTOR_TIMEOUT", "90"))

# India, covering every state the station network reports for
INDIA_BOUNDS: Tuple[float, float, float, float] = (6.5, 35.5, 68.0, 97.5)


class Settings(BaseSettings):
    # cache tiers
    result_ttl: int = RESULT_TTL
    upstream_ttl: int = UPSTREAM_TTL
    reference_ttl: int = REFERENCE_TTL
    # expired envelopes are kept this many TTLs for stale fallback
    cache_stale_retention_factor: int = 24
    cache_key_prefix: str = "aq:"
    coordinate_decimals: int = 4

    store_redis_url: Optional[str] = REDIS_URL or None
    store_redis_retry_cooldown_seconds: float = 10.0
    store_redis_op_timeout_seconds: float = 0.5
    store_fallback_max_items: int = 10_000

    # geo resolution
    far_station_km: float = 50.0
    enforce_service_bounds: bool = True
    service_bounds: Tuple[float, float, float, float] = INDIA_BOUNDS

    # seasonal analysis
    season_fallback: str = SEASON_FALLBACK_NEAREST
    seasonal_average_window_years: int = 5
    seasonal_rate_min_points: int = 3

    @field_validator("season_fallback", mode="before")
    @classmethod
    def validate_season_fallback(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {SEASON_FALLBACK_NEAREST, SEASON_FALLBACK_PRE, SEASON_FALLBACK_POST}:
            raise ValueError(f"Unsupported season fallback: {value!r}")
        return value

    model_config = {
        "env_prefix": "AQUIFER_",
        "extra": "ignore",
        "validate_assignment": True,
    }


settings = Settings()
