"""
Pre-/post-monsoon seasonal forecasting.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.seasonal.forecast import (
    POST_MONSOON,
    PRE_MONSOON,
    SeasonForecast,
    SeasonalOutlook,
    SeasonWindow,
    current_season,
    forecast,
    window_fit,
)

__all__ = [
    "POST_MONSOON",
    "PRE_MONSOON",
    "SeasonForecast",
    "SeasonalOutlook",
    "SeasonWindow",
    "current_season",
    "forecast",
    "window_fit",
]
