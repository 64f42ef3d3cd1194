"""
Response models for API endpoints and the assembled analysis report.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from engine.constants import LEVEL_UNIT
from engine.enums import Confidence, Season, StressCategory, Trend


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class UserLocation(NpModel):

    lat: float
    lon: float
    date: dt.date


class NearestStation(NpModel):

    station_id: str
    station_name: str
    latitude: float
    longitude: float
    distance_km: float
    well_type: str
    well_depth: Optional[float] = None
    well_aquifer_type: str
    note: Optional[str] = None


class CurrentWaterLevel(NpModel):

    level: float
    date: dt.date
    unit: str = LEVEL_UNIT


class StressAnalysis(NpModel):

    category: Optional[StressCategory] = None
    trend: Optional[Trend] = None
    annual_decline_rate: Optional[float] = None
    pre_monsoon_decline_rate: Optional[float] = None
    post_monsoon_decline_rate: Optional[float] = None
    note: Optional[str] = None


class HistoricalLevel(NpModel):

    date: dt.date
    water_level: float


class FittedLevel(NpModel):

    date: dt.date
    fitted: float


class RechargeRecord(NpModel):

    year: int
    pre_monsoon_depth: float
    post_monsoon_depth: float
    recharge_amount: float


class RechargeTrend(NpModel):

    annual_change: Optional[float] = None
    description: str


class LevelPrediction(NpModel):

    horizon_years: int
    date: dt.date
    predicted_level: float
    confidence: Confidence
    unit: str = LEVEL_UNIT


class FutureWaterLevels(NpModel):

    predictions: List[LevelPrediction]
    confidence: Confidence
    decline_rate: float
    r_squared: float
    standard_error: Optional[float] = None
    data_points: int
    span_years: float


class TransitionPrediction(NpModel):

    next_category: StressCategory
    years_until_transition: float
    estimated_transition_date: dt.date
    confidence: Confidence
    warning: Optional[str] = None


class StressCategoryTransition(NpModel):

    current_category: StressCategory
    current_decline_rate: float
    trend: Trend
    predictions: Optional[TransitionPrediction] = None
    message: Optional[str] = None


class SeasonPrediction(NpModel):

    season: Season
    period: str
    date: dt.date
    predicted_level: float
    historical_average: float
    expected_recharge: float
    confidence: Confidence
    data_points: int


class SeasonalPredictions(NpModel):

    current_season: Season
    next_season: Optional[SeasonPrediction] = None
    following_season: Optional[SeasonPrediction] = None
    confidence: Confidence


class PredictionError(NpModel):

    type: str
    message: str
    affected_predictions: List[str] = Field(default_factory=list)


class Predictions(NpModel):

    future_water_levels: Optional[FutureWaterLevels] = None
    stress_category_transition: Optional[StressCategoryTransition] = None
    seasonal_predictions: Optional[SeasonalPredictions] = None
    errors: List[PredictionError] = Field(default_factory=list)


class AnalysisReport(NpModel):

    user_location: UserLocation
    nearest_station: Optional[NearestStation] = None
    current_water_level: Optional[CurrentWaterLevel] = None
    stress_category: Optional[StressCategory] = None
    stress_analysis: StressAnalysis = Field(default_factory=StressAnalysis)
    historical_levels: List[HistoricalLevel] = Field(default_factory=list)
    fitted_levels: List[FittedLevel] = Field(default_factory=list)
    recharge_pattern: List[RechargeRecord] = Field(default_factory=list)
    recharge_trend: Optional[RechargeTrend] = None
    predictions: Predictions = Field(default_factory=Predictions)
    warnings: List[str] = Field(default_factory=list)
    cached: bool = False
    stale: bool = False


class HealthResponse(NpModel):

    status: str
    store: str
    cache: Dict[str, Any] = Field(default_factory=dict)
    circuits: Dict[str, Any] = Field(default_factory=dict)
