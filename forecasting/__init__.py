"""
Forecasting components for the ARIMA-like and VAR-like paths.
"""

from .regressor import LagNetwork, LagRegressor, recursive_forecast
from .arima import ARIMAForecaster
from .var import VARForecaster

__all__ = ['LagNetwork', 'LagRegressor', 'recursive_forecast', 'ARIMAForecaster', 'VARForecaster']
