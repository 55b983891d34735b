"""
GARCH-style price and volatility forecasting.
Two lag regressors model returns and squared returns.
"""

from .estimator import GARCHEstimator
from .forecaster import GARCHForecaster

__all__ = ['GARCHEstimator', 'GARCHForecaster']
