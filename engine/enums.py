"""
Enumerations for Stress Categories, Confidence Tiers, Seasons and Trends

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from engine.constants import STRESS_THRESHOLDS


class StressCategory(str, Enum):
    safe = "Safe"
    semi_critical = "Semi-critical"
    critical = "Critical"
    over_exploited = "Over-exploited"

    @classmethod
    def from_rate(cls, rate: float) -> StressCategory:
        # rate is meters/year of decline, positive when the water table deepens
        if rate >= STRESS_THRESHOLDS["Over-exploited"]:
            return cls.over_exploited
        if rate >= STRESS_THRESHOLDS["Critical"]:
            return cls.critical
        if rate >= STRESS_THRESHOLDS["Semi-critical"]:
            return cls.semi_critical
        return cls.safe

    def severity(self) -> int:
        return _ORDER.index(self)

    def next(self) -> Optional[StressCategory]:
        i = self.severity()
        return _ORDER[i + 1] if i + 1 < len(_ORDER) else None

    @property
    def lower_bound(self) -> float:
        return STRESS_THRESHOLDS[self.value]


_ORDER = (
    StressCategory.safe,
    StressCategory.semi_critical,
    StressCategory.critical,
    StressCategory.over_exploited,
)


class Confidence(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

    def weight(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class Season(str, Enum):
    pre_monsoon = "pre-monsoon"
    post_monsoon = "post-monsoon"


class Trend(str, Enum):
    worsening = "worsening"
    improving = "improving"
    stable = "stable"
