from __future__ import annotations

from typing import Dict, Tuple

# forecast horizons in years; fixed so forecast cards stay comparable
PREDICTION_HORIZONS: Tuple[int, ...] = (1, 2, 3, 5)

MIN_DATA_POINTS = 3
MIN_SEASONAL_POINTS = 2
DAYS_PER_YEAR = 365.25

# lower boundary of each category, meters/year of decline
STRESS_THRESHOLDS: Dict[str, float] = {
    "Safe": 0.0,
    "Semi-critical": 0.1,
    "Critical": 0.5,
    "Over-exploited": 1.0,
}

STABLE_RATE = 0.01
SAFE_STABLE_FACTOR = 0.5
TRANSITION_WARNING_YEARS = 5.0
TRANSITION_WARNING = "High priority - transition expected within 5 years"

# (min r_squared, min span years, min points)
CONFIDENCE_HIGH: Tuple[float, float, int] = (0.7, 5.0, 8)
CONFIDENCE_MEDIUM: Tuple[float, float, int] = (0.4, 3.0, 5)

LEVEL_DECIMALS = 2
RATE_DECIMALS = 3

RECHARGE_TOLERANCE = 1e-3

LEVEL_UNIT = "meters below ground level"

PREDICTION_FUTURE = "futureWaterLevels"
PREDICTION_STRESS = "stressCategoryTransition"
PREDICTION_SEASONAL = "seasonalPredictions"
CURRENT_LEVEL = "currentWaterLevel"
ALL_PREDICTIONS: Tuple[str, ...] = (PREDICTION_FUTURE, PREDICTION_STRESS, PREDICTION_SEASONAL)
