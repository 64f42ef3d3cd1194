"""
Error taxonomy for the analysis engine. Each error carries a stable ``code``
used as the ``type`` of the diagnostic entry it produces.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


class AnalysisError(Exception):
    code = "analysis_error"


class InsufficientData(AnalysisError):
    code = "insufficient_data"


class ComputationError(AnalysisError):
    code = "computation_error"


class ValidationError(AnalysisError):
    code = "validation_error"


class NoStationsAvailable(AnalysisError):
    code = "no_stations_available"


class UpstreamError(AnalysisError):
    code = "upstream_error"


class UpstreamTimeout(UpstreamError):
    code = "upstream_timeout"


class UpstreamUnavailable(UpstreamError):
    code = "upstream_unavailable"
