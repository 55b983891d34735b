from typing import Callable, Optional, Sequence
import numpy as np
import logging

from config import GARCH_EPOCHS
from models import ForecastResult
from utils.series import log_returns, normalize, denormalize
from .estimator import GARCHEstimator

logger = logging.getLogger(__name__)

class GARCHForecaster:
    """Turns a close series into price and volatility forecast paths"""

    def __init__(self, epochs: int = GARCH_EPOCHS,
                 random_seed: Optional[int] = None,
                 regressor_factory: Optional[Callable] = None):
        """Initialize forecaster with GARCH estimator"""
        self.logger = logging.getLogger('garch.forecaster')
        self.estimator = GARCHEstimator(
            epochs=epochs,
            random_seed=random_seed,
            regressor_factory=regressor_factory
        )

    @staticmethod
    def realized_volatility(closes: Sequence[float]) -> np.ndarray:
        """Absolute log return per day, aligned with dates[1:]"""
        return np.abs(log_returns(closes))

    def forecast(self, closes: Sequence[float], p: int, q: int, steps: int) -> ForecastResult:
        """
        Forecast prices and volatility.

        Parameters:
        -----------
        closes : array-like
            Close prices, oldest first
        p, q : int
            GARCH and ARCH orders; the lag window is max(p, q)
        steps : int
            Forecast horizon

        Returns:
        --------
        ForecastResult
            forecast_path holds prices, volatility_path holds per-step volatility
        """
        prices = np.asarray(closes, dtype=float)
        lag = max(p, q)
        degenerate = []

        try:
            returns = log_returns(prices)
            squared = returns ** 2

            scaled_returns, r_min, r_max = normalize(returns)
            scaled_squared, s_min, s_max = normalize(squared)
            if r_max == r_min:
                degenerate.append('constant_returns')
            if s_max == s_min:
                degenerate.append('constant_squared_returns')
            if degenerate:
                self.logger.warning(f"Normalization used epsilon for: {', '.join(degenerate)}")

            self.logger.info(
                f"Prepared log returns:\n"
                f"  Mean: {np.mean(returns):.6f}\n"
                f"  Std:  {np.std(returns):.6f}"
            )

            self.estimator.fit(scaled_returns, scaled_squared, lag)
            return_preds, variance_preds = self.estimator.forecast_paths(
                scaled_returns, scaled_squared, steps
            )

            predicted_returns = denormalize(return_preds, r_min, r_max)
            predicted_variance = denormalize(variance_preds, s_min, s_max)

            price_path = prices[-1] * np.exp(np.cumsum(predicted_returns))
            volatility_path = np.sqrt(np.maximum(predicted_variance, 0.0))

            self.estimator._validate_forecast_path(price_path, 'price')
            self.estimator._validate_forecast_path(volatility_path, 'volatility')

        except Exception as e:
            self.logger.error(f"Error in GARCH({p},{q}) forecast: {str(e)}")
            raise

        self.logger.info(
            f"GARCH({p},{q}) forecast stats:\n"
            f"  Last close:      {prices[-1]:.4f}\n"
            f"  Final price:     {price_path[-1]:.4f}\n"
            f"  Volatility mean: {np.mean(volatility_path):.6f}\n"
            f"  Volatility max:  {np.max(volatility_path):.6f}"
        )

        return ForecastResult(
            model_type='garch',
            params={'p': p, 'q': q, 'forecast_steps': steps},
            forecast_path=price_path,
            volatility_path=volatility_path,
            degenerate=degenerate
        )
