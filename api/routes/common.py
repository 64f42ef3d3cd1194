"""
Shared utilities and dependencies for API route modules.

The analysis service is built once at startup and kept on the application
state; routes receive it through :func:`get_service` so tests can substitute
their own instance.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from services.analysis_service import AnalysisService


def get_service(request: Request) -> AnalysisService:
    service = getattr(request.app.state, "analysis_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Analysis service is not initialised")
    return service
