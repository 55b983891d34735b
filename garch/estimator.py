from typing import Callable, Optional, Tuple
import numpy as np
import logging

from config import GARCH_EPOCHS
from exceptions import AnalysisError, InsufficientData
from forecasting.regressor import LagRegressor
from utils.series import build_lagged_dataset

logger = logging.getLogger(__name__)

class GARCHEstimator:
    """Trains the paired return / variance regressors behind the GARCH path"""

    def __init__(self, epochs: int = GARCH_EPOCHS,
                 random_seed: Optional[int] = None,
                 regressor_factory: Optional[Callable] = None):
        """
        Initialize estimator

        Args:
            epochs: Training epochs for each regressor
            random_seed: Seed for reproducibility (variance model uses seed + 1)
            regressor_factory: Callable(n_lags=, epochs=, non_negative=) returning an
                object with fit/predict; defaults to LagRegressor
        """
        self.epochs = epochs
        self.random_seed = random_seed
        self.regressor_factory = regressor_factory
        self.returns_model = None
        self.variance_model = None
        self.lag = None

        self.logger = logging.getLogger('garch.estimator')

    def _build_regressor(self, lag: int, non_negative: bool, seed_offset: int):
        if self.regressor_factory is not None:
            return self.regressor_factory(n_lags=lag, epochs=self.epochs, non_negative=non_negative)
        seed = None if self.random_seed is None else self.random_seed + seed_offset
        return LagRegressor(n_lags=lag, epochs=self.epochs, non_negative=non_negative,
                            random_seed=seed)

    def fit(self, scaled_returns: np.ndarray, scaled_squared: np.ndarray, lag: int) -> 'GARCHEstimator':
        """Train both regressors on lag windows of normalized returns and squared returns"""
        if len(scaled_returns) <= lag:
            raise InsufficientData(
                f"Not enough returns for GARCH model (lag: {lag}): got {len(scaled_returns)}"
            )
        try:
            features, targets = build_lagged_dataset(scaled_returns, lag)
            self.returns_model = self._build_regressor(lag, non_negative=False, seed_offset=0)
            self.returns_model.fit(features, targets)

            features, targets = build_lagged_dataset(scaled_squared, lag)
            self.variance_model = self._build_regressor(lag, non_negative=True, seed_offset=1)
            self.variance_model.fit(features, targets)

            self.lag = lag

        except Exception as e:
            self.logger.error(f"Error estimating GARCH regressors: {str(e)}")
            raise

        self.logger.info(
            f"Estimated GARCH regressors:\n"
            f"  Lag:      {lag}\n"
            f"  Returns:  {len(scaled_returns)}\n"
            f"  Epochs:   {self.epochs}"
        )
        return self

    def forecast_paths(self, scaled_returns: np.ndarray, scaled_squared: np.ndarray,
                       steps: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Roll two windows forward in parallel.

        The return window is fed only with predicted returns and the
        variance window only with predicted squared returns.

        Returns:
            Tuple of (scaled return predictions, scaled variance predictions)
        """
        if self.returns_model is None or self.variance_model is None:
            raise ValueError("Estimator must be fit before forecasting")

        return_window = [float(v) for v in scaled_returns[-self.lag:]]
        variance_window = [float(v) for v in scaled_squared[-self.lag:]]
        return_preds, variance_preds = [], []

        for _ in range(steps):
            next_return = float(self.returns_model.predict(np.array([return_window]))[0])
            next_variance = float(self.variance_model.predict(np.array([variance_window]))[0])
            return_preds.append(next_return)
            variance_preds.append(next_variance)
            return_window = return_window[1:] + [next_return]
            variance_window = variance_window[1:] + [next_variance]

        return np.array(return_preds), np.array(variance_preds)

    def _validate_forecast_path(self, path: np.ndarray, name: str = "forecast"):
        """Raise if a forecast path holds NaN or inf"""
        bad = ~np.isfinite(path)
        if np.any(bad):
            self.logger.error(f"Found {int(np.sum(bad))} NaN/inf values in {name} path")
            raise AnalysisError(
                f"{name} path is not finite (first at step {int(np.argmax(bad)) + 1})"
            )
