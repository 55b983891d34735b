"""ARIMA-style forecasting with a trained lag regressor standing in for ML estimation"""

import logging
from functools import partial
from typing import Callable, Optional, Sequence
import numpy as np

from config import ARIMA_EPOCHS
from exceptions import InsufficientData
from models import ForecastResult
from utils.series import (difference, difference_seeds, integrate, normalize,
                          denormalize, build_lagged_dataset)
from .regressor import LagRegressor, recursive_forecast

logger = logging.getLogger(__name__)

class ARIMAForecaster:
    """Difference, normalize, train, forecast recursively, then undo the transforms"""

    def __init__(self, epochs: int = ARIMA_EPOCHS,
                 random_seed: Optional[int] = None,
                 regressor_factory: Optional[Callable] = None):
        """
        Initialize forecaster

        Args:
            epochs: Training epochs for the lag regressor
            random_seed: Seed passed to the default regressor
            regressor_factory: Callable(n_lags=, epochs=, non_negative=) returning an
                object with fit/predict; defaults to LagRegressor
        """
        self.epochs = epochs
        self.random_seed = random_seed
        self.regressor_factory = regressor_factory or partial(LagRegressor, random_seed=random_seed)
        self.logger = logging.getLogger('forecasting.arima')

    def forecast(self, closes: Sequence[float], p: int, d: int, q: int,
                 steps: int) -> ForecastResult:
        """
        Forecast `steps` future closes.

        Returns:
            ForecastResult whose forecast_path is on the price scale
        """
        prices = np.asarray(closes, dtype=float)
        lag = max(p, q)
        degenerate = []

        try:
            transformed = difference(prices, d) if d > 0 else prices.copy()
            if len(transformed) <= lag:
                raise InsufficientData(
                    f"Not enough data for ARIMA model (lag: {lag}): "
                    f"{len(transformed)} points after differencing {d} times"
                )

            scaled, min_val, max_val = normalize(transformed)
            if max_val == min_val:
                degenerate.append('constant_series')
                self.logger.warning("Differenced series is constant; normalization used epsilon")

            features, targets = build_lagged_dataset(scaled, lag)
            regressor = self.regressor_factory(n_lags=lag, epochs=self.epochs, non_negative=False)
            regressor.fit(features, targets)

            predictions = recursive_forecast(regressor, scaled[-lag:], steps)
            predictions = denormalize(predictions, min_val, max_val)

            if d > 0:
                predictions = integrate(predictions, difference_seeds(prices, d))

        except Exception as e:
            self.logger.error(f"Error in ARIMA({p},{d},{q}) forecast: {str(e)}")
            raise

        self.logger.info(
            f"ARIMA({p},{d},{q}) forecast:\n"
            f"  Observations: {len(prices)}\n"
            f"  Last close:   {prices[-1]:.4f}\n"
            f"  Steps:        {steps}\n"
            f"  Range:        {np.min(predictions):.4f} to {np.max(predictions):.4f}"
        )

        return ForecastResult(
            model_type='arima',
            params={'p': p, 'd': d, 'q': q, 'forecast_steps': steps},
            forecast_path=predictions,
            degenerate=degenerate
        )
