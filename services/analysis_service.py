"""
Analysis service binding the engine pipeline to the process-wide data source
provider and result cache.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict

from api.responses import AnalysisReport
from datasources.provider import DataSourceProvider
from engine.analyzer import run
from engine.models import GeoPoint
from store.cache import ResultCache


class AnalysisService:
    def __init__(self, provider: DataSourceProvider, cache: ResultCache):
        self.provider = provider
        self.cache = cache

    async def compute_analysis(self, point: GeoPoint, as_of: date) -> AnalysisReport:
        return await run(self.provider, self.cache, point, as_of)

    def stats(self) -> Dict[str, Any]:
        return {"cache": self.cache.stats(), "circuits": self.provider.stats()}

    async def aclose(self) -> None:
        await self.provider.aclose()
        await self.cache.store.aclose()
