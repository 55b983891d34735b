"""Exponential moving averages and MACD histogram"""

import logging
from typing import Sequence, Tuple
import numpy as np

from config import MACD_DECIMALS
from exceptions import InsufficientData

logger = logging.getLogger(__name__)

def calculate_ema(values: Sequence[float], period: int) -> np.ndarray:
    """
    Exponential moving average seeded by the simple average of the first `period` points.

    Output is aligned to values[period-1:], so it has len(values) - period + 1 entries.
    """
    data = np.asarray(values, dtype=float)
    if len(data) < period:
        raise InsufficientData(f"Need at least {period} points for EMA, got {len(data)}")

    k = 2 / (period + 1)
    ema = np.empty(len(data) - period + 1)
    ema[0] = np.mean(data[:period])
    for i, price in enumerate(data[period:], start=1):
        ema[i] = price * k + ema[i - 1] * (1 - k)
    return ema

def macd_components(closes: Sequence[float], fast_period: int, slow_period: int,
                    signal_period: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute MACD line, signal line and histogram on their common suffix.

    The signal line starts at the first bar where its EMA recurrence has been
    applied, so all three arrays have len(closes) - slow - signal + 1 entries
    and end on the last close.

    Returns:
        Tuple of (macd_line, signal_line, histogram)
    """
    prices = np.asarray(closes, dtype=float)
    if len(prices) <= slow_period + signal_period:
        raise InsufficientData(
            f"Not enough data for MACD calculation: {len(prices)} points, "
            f"need more than {slow_period + signal_period}"
        )

    fast_ema = calculate_ema(prices, fast_period)
    slow_ema = calculate_ema(prices, slow_period)

    # Both EMAs end on the last close; align on the shorter one
    common = min(len(fast_ema), len(slow_ema))
    macd_line = fast_ema[-common:] - slow_ema[-common:]

    signal_line = calculate_ema(macd_line, signal_period)[1:]
    macd_line = macd_line[-len(signal_line):]
    histogram = macd_line - signal_line

    logger.debug(
        f"MACD({fast_period},{slow_period},{signal_period}): "
        f"{len(histogram)} histogram points from {len(prices)} closes"
    )
    return macd_line, signal_line, histogram

def calculate_macd(closes: Sequence[float], fast_period: int, slow_period: int,
                   signal_period: int) -> np.ndarray:
    """MACD histogram rounded to 4 decimals, aligned to the last len(histogram) closes"""
    _, _, histogram = macd_components(closes, fast_period, slow_period, signal_period)
    return np.round(histogram, MACD_DECIMALS)
