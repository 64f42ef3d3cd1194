"""
Entry point for the Aquifer Outlook API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from api.routes import router
from config import settings
from datasources.data_config import DataSourceSettings
from datasources.provider import DataSourceProvider
from services.analysis_service import AnalysisService
from store.cache import CacheTier, ResultCache
from store.client import StoreClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


def build_service() -> AnalysisService:
    store = StoreClient(
        redis_url=settings.store_redis_url,
        op_timeout=settings.store_redis_op_timeout_seconds,
        retry_cooldown=settings.store_redis_retry_cooldown_seconds,
        max_fallback_items=settings.store_fallback_max_items,
    )
    cache = ResultCache(
        store,
        ttls={
            CacheTier.result: settings.result_ttl,
            CacheTier.upstream: settings.upstream_ttl,
            CacheTier.reference: settings.reference_ttl,
        },
        stale_retention_factor=settings.cache_stale_retention_factor,
        prefix=settings.cache_key_prefix,
    )
    provider = DataSourceProvider(DataSourceSettings())
    return AnalysisService(provider, cache)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    service = build_service()
    app.state.analysis_service = service
    await service.cache.store.get_redis()
    log.info(
        "Aquifer Outlook ready (store=%s)",
        "fallback" if service.cache.store.is_using_fallback() else "redis",
    )
    try:
        yield
    finally:
        await service.aclose()


app = FastAPI(
    title="Aquifer Outlook",
    description="Groundwater level analysis, stress classification and seasonal forecasts.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=4322,
        log_level="info",
        access_log=True,
    )
