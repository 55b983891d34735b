"""
Series transforms shared by every analysis method.

All functions take array-likes and return new numpy arrays; inputs are
never modified in place.
"""

from typing import List, Sequence, Tuple
import numpy as np

from config import NORMALIZE_EPSILON
from exceptions import InsufficientData, MalformedInput

def difference(values: Sequence[float], order: int = 1) -> np.ndarray:
    """Apply first differencing `order` times, dropping the leading element each pass"""
    arr = np.asarray(values, dtype=float)
    if order >= len(arr):
        raise InsufficientData(
            f"Cannot difference {len(arr)} observations {order} times"
        )
    for _ in range(order):
        arr = np.diff(arr)
    return arr.copy()

def difference_seeds(values: Sequence[float], order: int) -> List[float]:
    """Last observed value at each differencing level 0..order-1.

    These are the starting points needed to undo `difference(values, order)`
    on a forecast that continues past the end of the series.
    """
    arr = np.asarray(values, dtype=float)
    seeds = []
    for _ in range(order):
        seeds.append(float(arr[-1]))
        arr = np.diff(arr)
    return seeds

def integrate(diffs: Sequence[float], seeds: Sequence[float]) -> np.ndarray:
    """Invert differencing by cumulative summation.

    Args:
        diffs: Forecast values on the differenced scale
        seeds: Output of `difference_seeds` (level 0 first)

    Returns:
        Forecast values on the original scale
    """
    path = np.asarray(diffs, dtype=float)
    # innermost level first
    for seed in reversed(list(seeds)):
        path = seed + np.cumsum(path)
    return path

def _scale_denominator(min_val: float, max_val: float) -> float:
    span = max_val - min_val
    return span if span != 0 else NORMALIZE_EPSILON

def normalize(values: Sequence[float]) -> Tuple[np.ndarray, float, float]:
    """Min-max scale to [0, 1].

    A constant series uses NORMALIZE_EPSILON as denominator, so every
    output is 0 rather than NaN.
    """
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        raise InsufficientData("Cannot normalize an empty series")
    min_val = float(np.min(arr))
    max_val = float(np.max(arr))
    return (arr - min_val) / _scale_denominator(min_val, max_val), min_val, max_val

def denormalize(values: Sequence[float], min_val: float, max_val: float) -> np.ndarray:
    """Exact inverse of `normalize` for the same (min, max)"""
    arr = np.asarray(values, dtype=float)
    return arr * _scale_denominator(min_val, max_val) + min_val

def normalize_to_last(values: Sequence[float]) -> np.ndarray:
    """Scale a series so its last value is 1"""
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        raise InsufficientData("Cannot normalize an empty series")
    last = arr[-1] if arr[-1] != 0 else NORMALIZE_EPSILON
    return arr / last

def build_lagged_dataset(values: Sequence[float], lag: int) -> Tuple[np.ndarray, np.ndarray]:
    """Build (features, targets) where row i is values[i:i+lag] and target i is values[i+lag]"""
    arr = np.asarray(values, dtype=float)
    if lag < 1:
        raise ValueError(f"lag must be positive, got {lag}")
    if len(arr) <= lag:
        raise InsufficientData(
            f"Need more than {lag} observations for lag {lag}, got {len(arr)}"
        )
    n_rows = len(arr) - lag
    features = np.stack([arr[i:i + lag] for i in range(n_rows)])
    targets = arr[lag:].copy()
    return features, targets

def log_returns(prices: Sequence[float]) -> np.ndarray:
    """Daily log returns ln(P_t / P_{t-1})"""
    arr = np.asarray(prices, dtype=float)
    if len(arr) < 2:
        raise InsufficientData("Need at least two prices to compute returns")
    if np.any(arr <= 0):
        first = int(np.argmax(arr <= 0))
        raise MalformedInput(
            f"Log returns need positive prices; found {arr[first]} at index {first}"
        )
    return np.log(arr[1:] / arr[:-1])
