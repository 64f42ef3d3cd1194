"""
Water level analysis route: current level, stress classification and
forecasts for the monitoring station nearest to a point.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.requests import WaterLevelRequest
from api.responses import AnalysisReport
from api.routes.common import get_service
from api.routes.exception import handle_exceptions
from engine.models import GeoPoint
from services.analysis_service import AnalysisService

router = APIRouter(tags=["Water levels"])


@router.post(
    "/water-levels",
    response_model=AnalysisReport,
    summary="Groundwater level analysis and forecasts for a location",
)
@handle_exceptions
async def water_levels(
    req: WaterLevelRequest,
    service: AnalysisService = Depends(get_service),
) -> AnalysisReport:
    return await service.compute_analysis(GeoPoint(req.lat, req.lon), req.as_of())
