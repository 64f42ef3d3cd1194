"""
Stress classification from the annual decline rate, and prediction of when
the classification moves to the next more severe category assuming the
current rate holds.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from engine.constants import (
    RATE_DECIMALS,
    SAFE_STABLE_FACTOR,
    STABLE_RATE,
    TRANSITION_WARNING,
    TRANSITION_WARNING_YEARS,
)
from engine.dates import add_fractional_years
from engine.enums import StressCategory, Trend
from engine.errors import ComputationError


@dataclass(frozen=True)
class TransitionForecast:
    next_category: StressCategory
    years_until_transition: float
    estimated_transition_date: date
    warning: Optional[str] = None


@dataclass(frozen=True)
class StressTransition:
    current_category: StressCategory
    current_decline_rate: float
    trend: Trend
    prediction: Optional[TransitionForecast]
    message: Optional[str] = None


def _checked(rate: float) -> float:
    if rate is None or not math.isfinite(rate):
        raise ComputationError(f"Decline rate is not a finite number: {rate!r}")
    return float(rate)


def classify(rate: float) -> StressCategory:
    return StressCategory.from_rate(_checked(rate))


def predict_transition(rate: float, as_of: date) -> StressTransition:
    rate = _checked(rate)
    category = StressCategory.from_rate(rate)

    def settled(trend: Trend, message: str) -> StressTransition:
        return StressTransition(
            current_category=category,
            current_decline_rate=round(rate, RATE_DECIMALS),
            trend=trend,
            prediction=None,
            message=message,
        )

    if category is StressCategory.over_exploited:
        return settled(Trend.worsening, "Maximum stress level reached - no further category transition possible")
    if rate < 0 and abs(rate) >= STABLE_RATE:
        return settled(Trend.improving, "Improving conditions - water levels are rising")
    if abs(rate) < STABLE_RATE:
        return settled(Trend.stable, "Stable conditions - minimal water level change")

    nxt = category.next()
    assert nxt is not None
    if category is StressCategory.safe and rate <= nxt.lower_bound * SAFE_STABLE_FACTOR:
        return settled(Trend.stable, "Stable conditions - decline rate below transition threshold")

    years = round(nxt.lower_bound / rate, 1)
    return StressTransition(
        current_category=category,
        current_decline_rate=round(rate, RATE_DECIMALS),
        trend=Trend.worsening,
        prediction=TransitionForecast(
            next_category=nxt,
            years_until_transition=years,
            estimated_transition_date=add_fractional_years(as_of, years),
            warning=TRANSITION_WARNING if years <= TRANSITION_WARNING_YEARS else None,
        ),
    )
