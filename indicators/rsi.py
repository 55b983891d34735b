"""Relative Strength Index with Wilder smoothing"""

import logging
from typing import List, Sequence, Tuple
import numpy as np

from config import RSI_LOSS_EPSILON, RSI_DECIMALS
from exceptions import InsufficientData

logger = logging.getLogger(__name__)

def _relative_strength(avg_gain: float, avg_loss: float) -> Tuple[float, bool]:
    if avg_loss == 0:
        return avg_gain / RSI_LOSS_EPSILON, True
    return avg_gain / avg_loss, False

def calculate_rsi(closes: Sequence[float], period: int) -> Tuple[np.ndarray, bool]:
    """
    Calculate RSI values for a close series.

    Args:
        closes: Close prices, oldest first
        period: Smoothing period

    Returns:
        Tuple of (rsi_values, zero_loss_seen). rsi_values has
        len(closes) - period entries aligned to closes[period:].
    """
    prices = np.asarray(closes, dtype=float)
    if len(prices) <= period:
        raise InsufficientData(
            f"Not enough data for RSI calculation with period {period}: {len(prices)} points"
        )

    deltas = np.diff(prices)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    values: List[float] = []
    zero_loss_seen = False

    rs, substituted = _relative_strength(avg_gain, avg_loss)
    zero_loss_seen |= substituted
    values.append(round(100 - 100 / (1 + rs), RSI_DECIMALS))

    for i in range(period, len(gains)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        rs, substituted = _relative_strength(avg_gain, avg_loss)
        zero_loss_seen |= substituted
        values.append(round(100 - 100 / (1 + rs), RSI_DECIMALS))

    if zero_loss_seen:
        logger.warning(f"Average loss reached zero; substituted {RSI_LOSS_EPSILON} in RS denominator")

    return np.array(values), zero_loss_seen
