"""
Ordinary least squares fitting of depth against time in fractional years,
with goodness-of-fit statistics and extrapolation to the fixed forecast
horizons.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.stats import linregress

from engine.confidence import score as score_confidence
from engine.constants import LEVEL_DECIMALS, MIN_DATA_POINTS, PREDICTION_HORIZONS
from engine.dates import add_years, years_between
from engine.enums import Confidence
from engine.errors import ComputationError, InsufficientData
from engine.models import Observation


@dataclass(frozen=True)
class RegressionParams:
    slope: float
    intercept: float
    r_squared: float
    standard_error: Optional[float]
    points: int
    span_years: float
    origin: date

    def value_at(self, t: float) -> float:
        return self.slope * t + self.intercept

    def predict(self, when: date) -> float:
        return self.value_at(years_between(self.origin, when))

    @property
    def confidence(self) -> Confidence:
        return score_confidence(self.r_squared, self.span_years, self.points)


@dataclass(frozen=True)
class Prediction:
    horizon_years: int
    target_date: date
    predicted_level: float
    confidence: Confidence


def _time_axis(observations: Sequence[Observation]) -> Tuple[np.ndarray, np.ndarray]:
    origin = observations[0].date
    t = np.array([years_between(origin, o.date) for o in observations], dtype=float)
    v = np.array([o.depth for o in observations], dtype=float)
    return t, v


def _r_squared(v: np.ndarray, fitted: np.ndarray) -> float:
    ss_res = float(np.sum((v - fitted) ** 2))
    ss_tot = float(np.sum((v - np.mean(v)) ** 2))
    if ss_tot == 0:
        return 0.0
    return float(min(1.0, max(0.0, 1.0 - ss_res / ss_tot)))


def fit(observations: Sequence[Observation], min_points: int = MIN_DATA_POINTS) -> RegressionParams:
    n = len(observations)
    if n < min_points:
        raise InsufficientData(f"Regression requires at least {min_points} points, got {n}")

    t, v = _time_axis(observations)
    if float(np.ptp(t)) == 0:
        raise ComputationError("Cannot fit trend: observation dates have zero variance")

    result = linregress(t, v)
    slope, intercept = float(result.slope), float(result.intercept)
    if not (math.isfinite(slope) and math.isfinite(intercept)):
        raise ComputationError("Cannot fit trend: non-finite regression coefficients")

    fitted = slope * t + intercept
    # linregress reports a zero stderr for two points, where it is undefined
    standard_error: Optional[float] = float(result.stderr) if n > 2 else None

    return RegressionParams(
        slope=slope,
        intercept=intercept,
        r_squared=_r_squared(v, fitted),
        standard_error=standard_error,
        points=n,
        span_years=float(t[-1]),
        origin=observations[0].date,
    )


def fitted_values(params: RegressionParams, observations: Sequence[Observation]) -> List[Tuple[date, float]]:
    return [(o.date, round(params.predict(o.date), LEVEL_DECIMALS)) for o in observations]


def forecast_levels(params: RegressionParams, last_date: date) -> List[Prediction]:
    t_last = years_between(params.origin, last_date)
    confidence = params.confidence
    return [
        Prediction(
            horizon_years=h,
            target_date=add_years(last_date, h),
            predicted_level=round(params.value_at(t_last + h), LEVEL_DECIMALS),
            confidence=confidence,
        )
        for h in PREDICTION_HORIZONS
    ]
