"""
Analysis pipeline: resolves the nearest station for a query point, fetches its
observation series, and assembles the level, stress and seasonal forecasts
into one report. Stages yield outcomes; failures are collected into the
report's error list once every stage has run.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import List, Optional, Tuple

from pydantic import ValidationError as ModelValidationError

from datasources.provider import DataSourceProvider
from engine import recharge, seasonal
from engine.constants import (
    ALL_PREDICTIONS,
    CURRENT_LEVEL,
    LEVEL_DECIMALS,
    PREDICTION_FUTURE,
    PREDICTION_SEASONAL,
    PREDICTION_STRESS,
    RATE_DECIMALS,
)
from engine.errors import AnalysisError, InsufficientData, UpstreamError, ValidationError
from engine.fetcher import FetchedSeries, fetch_series, fetch_stations, rounded
from engine.geo import ResolvedStation, resolve_nearest
from engine.models import GeoPoint, Observation
from engine.outcome import Failed, Ok, Outcome, collect, then, value_of
from engine.regression import Prediction, RegressionParams, fit, fitted_values, forecast_levels
from engine.seasonal import POST_MONSOON, PRE_MONSOON, SeasonForecast, SeasonalOutlook, window_fit
from engine.series import NormalizedSeries, clean, require
from engine.stress import StressTransition, predict_transition
from store.cache import ResultCache
from api.responses import (
    AnalysisReport,
    CurrentWaterLevel,
    FittedLevel,
    FutureWaterLevels,
    HistoricalLevel,
    LevelPrediction,
    NearestStation,
    PredictionError,
    Predictions,
    RechargeRecord,
    RechargeTrend,
    SeasonPrediction,
    SeasonalPredictions,
    StressAnalysis,
    StressCategoryTransition,
    TransitionPrediction,
    UserLocation,
)
from config import settings

log = logging.getLogger(__name__)

PIPELINE_OPERATION = "water-levels"

_EVERYTHING: Tuple[str, ...] = (CURRENT_LEVEL, *ALL_PREDICTIONS)


def validate_point(point: GeoPoint, enforce_bounds: Optional[bool] = None) -> None:
    if enforce_bounds is None:
        enforce_bounds = settings.enforce_service_bounds
    if not (math.isfinite(point.lat) and math.isfinite(point.lon)):
        raise ValidationError("lat and lon must be valid numbers")
    if not -90.0 <= point.lat <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90 degrees")
    if not -180.0 <= point.lon <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180 degrees")
    if enforce_bounds:
        min_lat, max_lat, min_lon, max_lon = settings.service_bounds
        if not (min_lat <= point.lat <= max_lat and min_lon <= point.lon <= max_lon):
            raise ValidationError(
                "Coordinates outside the service area; provide a location within India"
            )


async def _resolve_station(
    provider: DataSourceProvider,
    cache: ResultCache,
    point: GeoPoint,
) -> Tuple[Outcome, bool]:
    try:
        candidates, stale = await fetch_stations(provider, cache, point)
        return Ok(resolve_nearest(point, candidates, settings.far_station_km)), stale
    except AnalysisError as exc:
        log.warning("Station resolution failed for %s: %s", point, exc)
        return Failed(exc, _EVERYTHING), False


async def _fetch(
    provider: DataSourceProvider,
    cache: ResultCache,
    station: Outcome,
    as_of: date,
) -> Outcome:
    if isinstance(station, Failed):
        return station
    try:
        return Ok(await fetch_series(provider, cache, station.value.station.id, as_of))
    except AnalysisError as exc:
        log.warning("Series fetch failed for station %s: %s", station.value.station.id, exc)
        return Failed(exc, _EVERYTHING)


def _latest(series: NormalizedSeries) -> Observation:
    if series.latest is None:
        raise InsufficientData("No valid observations available for the current water level")
    return series.latest


def _window_rate(observations: Tuple[Observation, ...], window) -> Optional[float]:
    try:
        params = window_fit(observations, window, min_points=settings.seasonal_rate_min_points)
    except AnalysisError:
        return None
    return round(params.slope, RATE_DECIMALS)


def _stress_analysis(
    series: Optional[NormalizedSeries],
    transition: Optional[StressTransition],
) -> StressAnalysis:
    if series is None or transition is None:
        return StressAnalysis(note="Insufficient data for trend analysis")
    return StressAnalysis(
        category=transition.current_category,
        trend=transition.trend,
        annual_decline_rate=transition.current_decline_rate,
        pre_monsoon_decline_rate=_window_rate(series.observations, PRE_MONSOON),
        post_monsoon_decline_rate=_window_rate(series.observations, POST_MONSOON),
    )


def _nearest(resolved: ResolvedStation) -> NearestStation:
    s = resolved.station
    return NearestStation(
        station_id=s.id,
        station_name=s.name,
        latitude=s.lat,
        longitude=s.lon,
        distance_km=round(resolved.distance_km, LEVEL_DECIMALS),
        well_type=s.well_type,
        well_depth=s.well_depth,
        well_aquifer_type=s.aquifer_type,
        note=resolved.note,
    )


def _future(params: RegressionParams, predictions: List[Prediction]) -> FutureWaterLevels:
    return FutureWaterLevels(
        predictions=[
            LevelPrediction(
                horizon_years=p.horizon_years,
                date=p.target_date,
                predicted_level=p.predicted_level,
                confidence=p.confidence,
            )
            for p in predictions
        ],
        confidence=params.confidence,
        decline_rate=round(params.slope, RATE_DECIMALS),
        r_squared=round(params.r_squared, RATE_DECIMALS),
        standard_error=None if params.standard_error is None else round(params.standard_error, RATE_DECIMALS),
        data_points=params.points,
        span_years=round(params.span_years, LEVEL_DECIMALS),
    )


def _transition(t: StressTransition, params: RegressionParams) -> StressCategoryTransition:
    prediction = None
    if t.prediction is not None:
        prediction = TransitionPrediction(
            next_category=t.prediction.next_category,
            years_until_transition=t.prediction.years_until_transition,
            estimated_transition_date=t.prediction.estimated_transition_date,
            confidence=params.confidence,
            warning=t.prediction.warning,
        )
    return StressCategoryTransition(
        current_category=t.current_category,
        current_decline_rate=t.current_decline_rate,
        trend=t.trend,
        predictions=prediction,
        message=t.message,
    )


def _season(f: Optional[SeasonForecast]) -> Optional[SeasonPrediction]:
    if f is None:
        return None
    return SeasonPrediction(
        season=f.season,
        period=f.period,
        date=f.target_date,
        predicted_level=f.predicted_level,
        historical_average=f.historical_average,
        expected_recharge=f.expected_recharge,
        confidence=f.confidence,
        data_points=f.points,
    )


def _seasonal(outlook: SeasonalOutlook) -> SeasonalPredictions:
    return SeasonalPredictions(
        current_season=outlook.current_season,
        next_season=_season(outlook.next_season),
        following_season=_season(outlook.following_season),
        confidence=outlook.confidence,
    )


def _series_warnings(fetched: FetchedSeries, cleaned: NormalizedSeries) -> List[str]:
    warnings = list(cleaned.dropped)
    if cleaned.duplicates:
        warnings.append(
            f"Resolved {cleaned.duplicates} duplicate-date observation(s); the later reading was kept"
        )
    if fetched.stale:
        warnings.append("Observation service unavailable; results use previously cached observations")
    return warnings


async def _cached_report(cache: ResultCache, params: dict) -> Optional[AnalysisReport]:
    payload = await cache.get(PIPELINE_OPERATION, params)
    if payload is None:
        return None
    try:
        report = AnalysisReport.model_validate(payload)
    except ModelValidationError as exc:
        log.debug("Discarding unreadable cached report: %s", exc)
        return None
    return report.model_copy(update={"cached": True})


async def run(
    provider: DataSourceProvider,
    cache: ResultCache,
    point: GeoPoint,
    as_of: date,
) -> AnalysisReport:
    validate_point(point)

    key_point = rounded(point)
    cache_params = {"lat": key_point.lat, "lon": key_point.lon, "as_of": as_of.isoformat()}
    hit = await _cached_report(cache, cache_params)
    if hit is not None:
        log.debug("Pipeline cache hit %s", cache_params)
        return hit

    station, stations_stale = await _resolve_station(provider, cache, point)
    fetched = await _fetch(provider, cache, station, as_of)

    cleaned = then(fetched, lambda f: clean(f.observations), _EVERYTHING)
    current = then(cleaned, _latest, (CURRENT_LEVEL,))
    normalized = then(cleaned, require, ALL_PREDICTIONS)

    params = then(normalized, lambda s: fit(s.observations), (PREDICTION_FUTURE, PREDICTION_STRESS))
    future = then(
        params,
        lambda p: (p, forecast_levels(p, value_of(normalized).latest.date)),
        (PREDICTION_FUTURE,),
    )
    transition = then(params, lambda p: (p, predict_transition(p.slope, as_of)), (PREDICTION_STRESS,))
    outlook = then(normalized, lambda s: seasonal.forecast(s.observations, as_of), (PREDICTION_SEASONAL,))

    series_ok: Optional[FetchedSeries] = value_of(fetched)
    cleaned_ok: Optional[NormalizedSeries] = value_of(cleaned)
    fit_ok: Optional[RegressionParams] = value_of(params)
    future_ok = value_of(future)
    transition_ok = value_of(transition)
    outlook_ok: Optional[SeasonalOutlook] = value_of(outlook)
    latest: Optional[Observation] = value_of(current)

    warnings: List[str] = []
    resolved: Optional[ResolvedStation] = value_of(station)
    if resolved is not None and resolved.note:
        warnings.append(resolved.note)
    if stations_stale:
        warnings.append("Station directory unavailable; using previously cached station list")

    recharge_entries = []
    recharge_trend = None
    if series_ok is not None and cleaned_ok is not None:
        warnings.extend(_series_warnings(series_ok, cleaned_ok))
        recharge_entries, recharge_warnings = recharge.pattern(cleaned_ok.observations, series_ok.recharge)
        warnings.extend(recharge_warnings)
        recharge_trend = recharge.trend(recharge_entries)

    errors = collect(
        (current, future, transition, outlook),
        extra=outlook_ok.diagnostics if outlook_ok is not None else (),
    )
    stale = stations_stale or (series_ok is not None and series_ok.stale)

    report = AnalysisReport(
        user_location=UserLocation(lat=point.lat, lon=point.lon, date=as_of),
        nearest_station=_nearest(resolved) if resolved is not None else None,
        current_water_level=(
            CurrentWaterLevel(level=round(latest.depth, LEVEL_DECIMALS), date=latest.date)
            if latest is not None else None
        ),
        stress_category=transition_ok[1].current_category if transition_ok else None,
        stress_analysis=_stress_analysis(value_of(normalized), transition_ok[1] if transition_ok else None),
        historical_levels=[
            HistoricalLevel(date=o.date, water_level=round(o.depth, LEVEL_DECIMALS))
            for o in (cleaned_ok.observations if cleaned_ok is not None else ())
        ],
        fitted_levels=[
            FittedLevel(date=d, fitted=v)
            for d, v in (fitted_values(fit_ok, cleaned_ok.observations) if fit_ok and cleaned_ok else [])
        ],
        recharge_pattern=[
            RechargeRecord(
                year=e.year,
                pre_monsoon_depth=e.pre_monsoon_depth,
                post_monsoon_depth=e.post_monsoon_depth,
                recharge_amount=e.recharge_amount,
            )
            for e in recharge_entries
        ],
        recharge_trend=(
            RechargeTrend(annual_change=recharge_trend.annual_change, description=recharge_trend.description)
            if recharge_trend is not None else None
        ),
        predictions=Predictions(
            future_water_levels=_future(*future_ok) if future_ok else None,
            stress_category_transition=_transition(transition_ok[1], transition_ok[0]) if transition_ok else None,
            seasonal_predictions=_seasonal(outlook_ok) if outlook_ok is not None else None,
            errors=[
                PredictionError(type=d.type, message=d.message, affected_predictions=list(d.affected_predictions))
                for d in errors
            ],
        ),
        warnings=warnings,
        stale=stale,
    )

    degraded = stale or isinstance(station, Failed) or (
        isinstance(fetched, Failed) and isinstance(fetched.error, UpstreamError)
    )
    if degraded:
        log.info("Not caching degraded report for %s", cache_params)
    else:
        await cache.set(PIPELINE_OPERATION, cache_params, report.model_dump(mode="json"))
    log.info(
        "Analysis point=%s station=%s points=%d errors=%d",
        key_point,
        resolved.station.id if resolved else None,
        len(cleaned_ok) if cleaned_ok is not None else 0,
        len(errors),
    )
    return report
