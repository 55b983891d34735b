"""
Simplified cointegration screen.

A single hedge ratio is taken from the cumulative changes of both series,
and a Dickey-Fuller style regression is run on the spread. The p-value is
the heuristic exp(-0.5 * statistic), not a Dickey-Fuller table lookup, and
the 0.05 decision threshold is applied to that heuristic.
"""

import logging
from typing import Sequence
import numpy as np

from config import DENOMINATOR_EPSILON, SIGNIFICANCE_LEVEL
from exceptions import InsufficientData
from models import TestResult

logger = logging.getLogger(__name__)

def _safe_divide(numerator: float, denominator: float):
    if denominator == 0:
        return numerator / DENOMINATOR_EPSILON, True
    return numerator / denominator, False

def cointegration_screen(values_a: Sequence[float], values_b: Sequence[float],
                         alpha: float = SIGNIFICANCE_LEVEL) -> TestResult:
    """
    Screen two aligned series for a long-run relationship.

    Parameters:
    -----------
    values_a : array-like
        Target series
    values_b : array-like
        Feature series, same length as values_a
    alpha : float
        Significance level applied to the heuristic p-value

    Returns:
    --------
    TestResult
        statistic = |beta / standard error| of the spread's AR(1) regression
    """
    a = np.asarray(values_a, dtype=float)
    b = np.asarray(values_b, dtype=float)
    if len(a) != len(b):
        raise ValueError("Series must be of equal length")
    n = len(a)
    if n < 3:
        raise InsufficientData(f"Need at least 3 observations for cointegration screen, got {n}")

    degenerate = []

    # Hedge ratio from cumulative differences
    ratio, flagged = _safe_divide(float(np.sum(np.diff(a))), float(np.sum(np.diff(b))))
    if flagged:
        degenerate.append('zero_feature_drift')

    residuals = a - b * ratio
    lagged = residuals[:-1]
    delta = np.diff(residuals)

    sum_x2 = float(np.sum(lagged ** 2))
    beta, flagged = _safe_divide(float(np.sum(lagged * delta)), sum_x2)
    if flagged:
        degenerate.append('zero_residual_variance')

    se = np.sqrt(np.sum((delta - beta * lagged) ** 2) / (n - 2))
    standard_error = se / np.sqrt(sum_x2) if sum_x2 > 0 else 0.0
    statistic, flagged = _safe_divide(abs(beta), float(standard_error))
    if flagged:
        degenerate.append('zero_standard_error')

    statistic = float(abs(statistic))
    p_value = float(np.exp(-0.5 * statistic))

    if degenerate:
        logger.warning(f"Cointegration screen substituted epsilon for: {', '.join(degenerate)}")

    logger.info(
        f"Cointegration screen:\n"
        f"  Hedge ratio: {ratio:.6f}\n"
        f"  Beta:        {beta:.6f}\n"
        f"  Statistic:   {statistic:.4f}\n"
        f"  p-value:     {p_value:.4f}"
    )

    return TestResult(
        statistic=statistic,
        p_value=p_value,
        significant=p_value < alpha,
        degenerate=bool(degenerate)
    )
