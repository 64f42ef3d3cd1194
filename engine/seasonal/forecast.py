"""
Seasonal (pre-/post-monsoon) forecasting. Each calendar window gets its own
linear trend over the readings that fall inside it, and the trend is
projected to the window's next occurrence; a window without enough readings
is skipped while the other still forecasts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from engine.confidence import weakest
from engine.constants import LEVEL_DECIMALS, MIN_SEASONAL_POINTS, PREDICTION_SEASONAL
from engine.dates import add_years
from engine.enums import Confidence, Season
from engine.errors import AnalysisError, InsufficientData
from engine.models import Observation
from engine.outcome import Diagnostic
from engine.regression import RegressionParams, fit
from config import SEASON_FALLBACK_NEAREST, SEASON_FALLBACK_POST, SEASON_FALLBACK_PRE, settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeasonWindow:
    season: Season
    months: FrozenSet[int]
    mid_month: int
    display_period: str

    def contains(self, month: int) -> bool:
        return month in self.months

    def next_occurrence(self, after: date) -> date:
        candidate = date(after.year, self.mid_month, 15)
        return candidate if candidate > after else date(after.year + 1, self.mid_month, 15)


PRE_MONSOON = SeasonWindow(Season.pre_monsoon, frozenset(range(1, 6)), 3, "January-May")
POST_MONSOON = SeasonWindow(Season.post_monsoon, frozenset(range(10, 13)), 11, "October-December")
WINDOWS: Dict[Season, SeasonWindow] = {w.season: w for w in (PRE_MONSOON, POST_MONSOON)}


@dataclass(frozen=True)
class SeasonForecast:
    season: Season
    period: str
    target_date: date
    predicted_level: float
    historical_average: float
    expected_recharge: float
    confidence: Confidence
    points: int


@dataclass(frozen=True)
class SeasonalOutlook:
    current_season: Season
    next_season: Optional[SeasonForecast]
    following_season: Optional[SeasonForecast]
    confidence: Confidence
    diagnostics: Tuple[Diagnostic, ...] = ()


def _month_distance(month: int, window: SeasonWindow) -> int:
    return min(abs(month - m) for m in window.months)


def current_season(month: int, fallback: str | None = None) -> Season:
    if fallback is None:
        fallback = settings.season_fallback
    for window in (PRE_MONSOON, POST_MONSOON):
        if window.contains(month):
            return window.season
    if fallback == SEASON_FALLBACK_PRE:
        return Season.pre_monsoon
    if fallback == SEASON_FALLBACK_POST:
        return Season.post_monsoon
    if fallback != SEASON_FALLBACK_NEAREST:
        raise ValueError(f"Unsupported season fallback: {fallback!r}")
    pre = _month_distance(month, PRE_MONSOON)
    post = _month_distance(month, POST_MONSOON)
    return Season.pre_monsoon if pre <= post else Season.post_monsoon


def other(season: Season) -> Season:
    return Season.post_monsoon if season is Season.pre_monsoon else Season.pre_monsoon


def window_series(observations: Sequence[Observation], window: SeasonWindow) -> List[Observation]:
    return [o for o in observations if window.contains(o.date.month)]


def window_fit(
    observations: Sequence[Observation],
    window: SeasonWindow,
    min_points: int = MIN_SEASONAL_POINTS,
) -> RegressionParams:
    sub = window_series(observations, window)
    if len(sub) < min_points:
        raise InsufficientData(
            f"Insufficient {window.season.value} data: {len(sub)} reading(s), {min_points} required"
        )
    return fit(sub, min_points=min_points)


def _historical_average(sub: Sequence[Observation], window_years: int) -> float:
    cutoff = add_years(sub[-1].date, -window_years)
    recent = [o.depth for o in sub if o.date >= cutoff]
    return round(float(np.mean(recent)), LEVEL_DECIMALS)


def forecast_window(
    observations: Sequence[Observation],
    window: SeasonWindow,
    target: date,
    average_window_years: int | None = None,
) -> SeasonForecast:
    if average_window_years is None:
        average_window_years = settings.seasonal_average_window_years
    params = window_fit(observations, window)
    sub = window_series(observations, window)
    predicted = params.predict(target)
    # positive recharge means the water table is expected to rise
    recharge = sub[-1].depth - predicted
    return SeasonForecast(
        season=window.season,
        period=f"{window.display_period} {target.year}",
        target_date=target,
        predicted_level=round(predicted, LEVEL_DECIMALS),
        historical_average=_historical_average(sub, average_window_years),
        expected_recharge=round(recharge, LEVEL_DECIMALS),
        confidence=params.confidence,
        points=params.points,
    )


def forecast(
    observations: Sequence[Observation],
    as_of: date,
    fallback: str | None = None,
) -> SeasonalOutlook:
    current = current_season(as_of.month, fallback)
    next_window = WINDOWS[other(current)]
    following_window = WINDOWS[current]

    next_target = next_window.next_occurrence(as_of)
    following_target = following_window.next_occurrence(next_target)

    results: Dict[Season, SeasonForecast] = {}
    diagnostics: List[Diagnostic] = []
    for window, target in ((next_window, next_target), (following_window, following_target)):
        try:
            results[window.season] = forecast_window(observations, window, target)
        except AnalysisError as exc:
            log.debug("seasonal forecast skipped %s: %s", window.season.value, exc)
            diagnostics.append(Diagnostic(exc.code, str(exc), (PREDICTION_SEASONAL,)))

    if not results:
        raise InsufficientData("; ".join(d.message for d in diagnostics))

    return SeasonalOutlook(
        current_season=current,
        next_season=results.get(next_window.season),
        following_season=results.get(following_window.season),
        confidence=weakest(*(r.confidence for r in results.values())),
        diagnostics=tuple(diagnostics),
    )
