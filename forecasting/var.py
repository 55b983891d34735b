"""
Heuristic multivariate forecaster approximating a VAR without estimation.

Coefficients come from averaged lagged co-movements of step changes,
rescaled and damped, rather than from least squares. The target series
is always index 0; feature series only shape the coefficients and the
sliding window.
"""

import logging
from typing import Dict, List, Sequence, Tuple
import numpy as np

from config import (VAR_WINDOW, MAX_VAR_LAG, TREND_STRENGTH_THRESHOLD, MIN_TREND_POINTS,
                    COEFFICIENT_DAMPING, DENOMINATOR_EPSILON)
from exceptions import InsufficientData
from models import ForecastResult
from utils.series import difference, normalize_to_last

logger = logging.getLogger(__name__)

TARGET = 0

def trend_strength(values: Sequence[float]) -> Tuple[float, bool]:
    """
    |slope * n / mean| of an OLS trend line.

    Returns:
        Tuple of (strength, degenerate) where degenerate means the mean was zero
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    slope = np.polyfit(np.arange(n), y, 1)[0]
    mean = float(np.mean(y))
    if mean == 0:
        return abs(slope * n / DENOMINATOR_EPSILON), True
    return abs(slope * n / mean), False

def needs_differencing(values: Sequence[float]) -> Tuple[bool, bool]:
    """Coarse unit-root stand-in: difference once when the linear trend is strong"""
    if len(values) < MIN_TREND_POINTS:
        return False, False
    strength, degenerate = trend_strength(values)
    return strength > TREND_STRENGTH_THRESHOLD, degenerate

def estimate_coefficients(data: np.ndarray, lag: int) -> Tuple[np.ndarray, bool]:
    """
    Average lagged co-movement between the target's change and every series' change.

    Args:
        data: Array of shape (n_series, n_obs), target in row 0
        lag: Number of lags

    Returns:
        Tuple of (coefficients with shape (lag, n_series), zero_row_seen)
    """
    n_series, n_obs = data.shape
    changes = np.diff(data, axis=1)  # changes[:, t-1] = data[:, t] - data[:, t-1]
    coefficients = np.zeros((lag, n_series))
    zero_row_seen = False

    for l in range(lag):
        # t - l - 2 >= 0 so that series j has a change ending at t - l - 1
        t_values = np.arange(max(lag, l + 2), n_obs)
        if len(t_values) == 0:
            continue
        target_changes = changes[TARGET, t_values - 1]
        for j in range(n_series):
            coefficients[l, j] = np.mean(target_changes * changes[j, t_values - l - 2])

        scale = np.sum(np.abs(coefficients[l]))
        if scale > 0:
            coefficients[l] = coefficients[l] / scale * COEFFICIENT_DAMPING
        else:
            zero_row_seen = True

    return coefficients, zero_row_seen

def simple_var_forecast(data: np.ndarray, lag: int, steps: int) -> Tuple[np.ndarray, bool]:
    """
    Recursive forecast of the target row of `data`.

    Returns:
        Tuple of (target predictions, zero_row_seen)
    """
    n_series, n_obs = data.shape
    if n_obs < lag + 2:
        raise InsufficientData(f"VAR with lag {lag} needs at least {lag + 2} observations, got {n_obs}")

    coefficients, zero_row_seen = estimate_coefficients(data, lag)

    # window[0] is the most recent joint observation
    window = [data[:, n_obs - 1 - i].copy() for i in range(lag + 1)]
    predictions = []

    for _ in range(steps):
        change = 0.0
        for l in range(lag):
            change += float(np.dot(coefficients[l], window[l] - window[l + 1]))

        next_values = window[0] + (window[0] - window[1])  # linear continuation for features
        next_values[TARGET] = window[0][TARGET] + change
        predictions.append(next_values[TARGET])

        window.insert(0, next_values)
        window.pop()

    return np.array(predictions), zero_row_seen

class VARForecaster:
    """Forecasts a target from itself and feature series, on raw and last-value-normalized scales"""

    def __init__(self, window: int = VAR_WINDOW, max_lag: int = MAX_VAR_LAG):
        self.window = window
        self.max_lag = max_lag
        self.logger = logging.getLogger('forecasting.var')

    def truncate(self, series: Sequence[float]) -> np.ndarray:
        return np.asarray(series, dtype=float)[-self.window:]

    def effective_lag(self, lag: int) -> int:
        if lag > self.max_lag:
            self.logger.warning(f"VAR lag {lag} capped at {self.max_lag}")
            return self.max_lag
        return lag

    def _stack(self, processed: List[np.ndarray]) -> np.ndarray:
        """Align series on their most recent observations"""
        n_obs = min(len(s) for s in processed)
        return np.vstack([s[-n_obs:] for s in processed])

    def forecast(self, series: List[Sequence[float]], lag: int,
                 steps: int) -> Dict[str, ForecastResult]:
        """
        Forecast the first series using all of them.

        Args:
            series: Close series, target first, feature series after
            lag: Requested lag (capped at max_lag)
            steps: Forecast horizon

        Returns:
            {'raw': ForecastResult, 'normalized': ForecastResult} with forecast paths on the
            raw price scale and on the value/last_value scale
        """
        if not series:
            raise InsufficientData("VAR needs at least the target series")

        lag = self.effective_lag(lag)
        raw = [self.truncate(s) for s in series]
        for i, s in enumerate(raw):
            if len(s) < 2:
                raise InsufficientData(f"Series {i} has {len(s)} observations")
        scaled = [normalize_to_last(s) for s in raw]

        # normalize_to_last divides by epsilon when the last value is 0
        zero_last = [f'zero_last_value_series_{i}' for i, s in enumerate(raw) if s[-1] == 0]
        if zero_last:
            self.logger.warning(f"Last value is zero, normalized scale uses epsilon: {zero_last}")

        degenerate = []
        differenced = []
        processed_raw, processed_scaled = [], []
        for i, (r, s) in enumerate(zip(raw, scaled)):
            needs_diff, flagged = needs_differencing(r)
            if flagged:
                degenerate.append(f'zero_mean_series_{i}')
            differenced.append(needs_diff)
            processed_raw.append(difference(r, 1) if needs_diff else r)
            processed_scaled.append(difference(s, 1) if needs_diff else s)

        self.logger.info(
            f"VAR setup:\n"
            f"  Series: {len(series)} (target + {len(series) - 1} features)\n"
            f"  Lag: {lag}\n"
            f"  Observations used: {[len(r) for r in raw]}\n"
            f"  Differenced: {differenced}"
        )

        try:
            results = {}
            for name, processed, history in (('raw', processed_raw, raw),
                                             ('normalized', processed_scaled, scaled)):
                predictions, zero_row_seen = simple_var_forecast(self._stack(processed), lag, steps)
                flags = list(degenerate)
                if name == 'normalized':
                    flags.extend(zero_last)
                if zero_row_seen:
                    flags.append('zero_comovement')
                if differenced[TARGET]:
                    predictions = history[TARGET][-1] + np.cumsum(predictions)
                results[name] = ForecastResult(
                    model_type='var',
                    params={'lag': lag, 'forecast_steps': steps, 'n_series': len(series)},
                    forecast_path=predictions,
                    degenerate=flags
                )
        except Exception as e:
            self.logger.error(f"Error in VAR forecast: {str(e)}")
            raise

        if 'zero_comovement' in results['raw'].degenerate:
            self.logger.warning("No co-movement for at least one lag; its coefficients stay zero")

        return results
