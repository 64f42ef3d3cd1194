"""
Linear trend fitting for groundwater-depth series.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.regression.ols import Prediction, RegressionParams, fit, fitted_values, forecast_levels

__all__ = ["Prediction", "RegressionParams", "fit", "fitted_values", "forecast_levels"]
