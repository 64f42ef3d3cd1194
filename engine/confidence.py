"""
Confidence tiers shared by every forecast type, derived from fit quality and
data sufficiency.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math

from engine.constants import CONFIDENCE_HIGH, CONFIDENCE_MEDIUM
from engine.enums import Confidence


def _passes(r_squared: float, span_years: float, points: int, tier: tuple) -> bool:
    min_r2, min_span, min_points = tier
    return r_squared >= min_r2 and span_years >= min_span and points >= min_points


def score(r_squared: float, span_years: float, points: int) -> Confidence:
    if not (math.isfinite(r_squared) and math.isfinite(span_years)):
        return Confidence.low
    if _passes(r_squared, span_years, points, CONFIDENCE_HIGH):
        return Confidence.high
    if _passes(r_squared, span_years, points, CONFIDENCE_MEDIUM):
        return Confidence.medium
    return Confidence.low


def weakest(*tiers: Confidence) -> Confidence:
    return min(tiers, key=lambda c: c.weight()) if tiers else Confidence.low
