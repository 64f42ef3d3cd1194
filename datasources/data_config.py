"""
Settings for the station directory and observation source connectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    STATIONS_BACKEND_HTTP,
    STATIONS_BACKEND_FILE,
    OBSERVATIONS_BACKEND_HTTP,
    AQUIFER_STATIONS_BACKEND,
    AQUIFER_STATIONS_URL,
    AQUIFER_STATIONS_FILE,
    AQUIFER_OBSERVATIONS_BACKEND,
    AQUIFER_OBSERVATIONS_URL,
    AQUIFER_CONNECTOR_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    stations_backend: str = AQUIFER_STATIONS_BACKEND
    stations_url: str = AQUIFER_STATIONS_URL
    stations_file: Optional[str] = AQUIFER_STATIONS_FILE or None
    stations_limit: int = 25
    observations_backend: str = AQUIFER_OBSERVATIONS_BACKEND
    observations_url: str = AQUIFER_OBSERVATIONS_URL
    history_years: int = 10
    connector_timeout: int = AQUIFER_CONNECTOR_TIMEOUT
    upstream_timeout_seconds: float = 30.0
    circuit_failure_threshold: int = 5
    circuit_open_seconds: float = 60.0

    @field_validator("stations_url", "observations_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return str(v).rstrip("/") if v is not None else v

    @field_validator("stations_backend", mode="before")
    @classmethod
    def validate_stations_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {STATIONS_BACKEND_HTTP, STATIONS_BACKEND_FILE}:
            raise ValueError(f"Unsupported stations backend: {value!r}")
        return value

    @field_validator("observations_backend", mode="before")
    @classmethod
    def validate_observations_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {OBSERVATIONS_BACKEND_HTTP}:
            raise ValueError(f"Unsupported observations backend: {value!r}")
        return value

    model_config = {"env_prefix": "AQUIFER_", "extra": "ignore"}
