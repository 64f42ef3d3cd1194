"""
Tests for pre-/post-monsoon window forecasts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date

import pytest

from config import SEASON_FALLBACK_POST, SEASON_FALLBACK_PRE
from engine.constants import PREDICTION_SEASONAL
from engine.enums import Season
from engine.errors import InsufficientData
from engine.models import Observation
from engine.seasonal import POST_MONSOON, PRE_MONSOON, current_season, forecast, window_fit


def _seasonal_history(years=range(2015, 2024), pre=True, post=True):
    obs = []
    for i, year in enumerate(years):
        if pre:
            obs.append(Observation(date(year, 3, 1), 5.0 + 0.2 * i))
        if post:
            obs.append(Observation(date(year, 11, 1), 3.0 + 0.2 * i))
    return obs


@pytest.mark.parametrize("month", [1, 2, 3, 4, 5])
def test_current_season_pre_window(month):
    assert current_season(month) is Season.pre_monsoon


@pytest.mark.parametrize("month", [10, 11, 12])
def test_current_season_post_window(month):
    assert current_season(month) is Season.post_monsoon


def test_current_season_nearest_fallback():
    assert current_season(6, "nearest") is Season.pre_monsoon
    assert current_season(7, "nearest") is Season.pre_monsoon
    assert current_season(8, "nearest") is Season.post_monsoon
    assert current_season(9, "nearest") is Season.post_monsoon


def test_current_season_fixed_fallbacks():
    assert current_season(8, SEASON_FALLBACK_PRE) is Season.pre_monsoon
    assert current_season(6, SEASON_FALLBACK_POST) is Season.post_monsoon
    with pytest.raises(ValueError):
        current_season(7, "autumn")


def test_next_occurrence_is_strictly_after():
    assert PRE_MONSOON.next_occurrence(date(2024, 3, 15)) == date(2025, 3, 15)
    assert PRE_MONSOON.next_occurrence(date(2024, 3, 14)) == date(2024, 3, 15)
    assert POST_MONSOON.next_occurrence(date(2024, 6, 1)) == date(2024, 11, 15)


def test_forecast_both_windows():
    outlook = forecast(_seasonal_history(), date(2024, 6, 1), fallback="nearest")
    assert outlook.current_season is Season.pre_monsoon
    nxt, following = outlook.next_season, outlook.following_season
    assert nxt.season is Season.post_monsoon
    assert nxt.target_date == date(2024, 11, 15)
    assert following.season is Season.pre_monsoon
    assert following.target_date == date(2025, 3, 15)
    assert nxt.predicted_level == pytest.approx(4.8, abs=0.05)
    assert nxt.historical_average == pytest.approx(4.1, abs=0.01)
    # deepening water table, so the expected recharge is negative
    assert nxt.expected_recharge < 0
    assert nxt.period == "October-December 2024"
    assert outlook.diagnostics == ()


def test_forecast_single_window_failure_is_isolated():
    obs = _seasonal_history(post=False) + [Observation(date(2023, 11, 1), 4.0)]
    outlook = forecast(obs, date(2024, 6, 1), fallback="nearest")
    assert outlook.next_season is None
    assert outlook.following_season is not None
    assert len(outlook.diagnostics) == 1
    diag = outlook.diagnostics[0]
    assert diag.type == "insufficient_data"
    assert diag.affected_predictions == (PREDICTION_SEASONAL,)
    assert outlook.confidence is outlook.following_season.confidence


def test_forecast_without_window_data_raises():
    obs = [Observation(date(2015 + i, 7, 1), 5.0 + i) for i in range(6)]
    with pytest.raises(InsufficientData):
        forecast(obs, date(2024, 6, 1))


def test_window_fit_requires_two_points():
    with pytest.raises(InsufficientData):
        window_fit([Observation(date(2020, 3, 1), 5.0)], PRE_MONSOON)
    params = window_fit(_seasonal_history(post=False), PRE_MONSOON)
    assert params.slope == pytest.approx(0.2, abs=2e-3)
