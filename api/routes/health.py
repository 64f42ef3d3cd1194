"""
Health check route to verify service and store connectivity.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.responses import HealthResponse
from api.routes.common import get_service
from api.routes.exception import handle_exceptions
from services.analysis_service import AnalysisService

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
@handle_exceptions
async def health(service: AnalysisService = Depends(get_service)) -> HealthResponse:
    store = service.cache.store
    await store.get_redis()
    stats = service.stats()
    return HealthResponse(
        status="ok",
        store="fallback" if store.is_using_fallback() else "redis",
        cache=stats["cache"],
        circuits=stats["circuits"],
    )
