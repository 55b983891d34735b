"""
Chi-square independence screen on categorised daily changes.

Both series' day-over-day changes are bucketed into decrease / flat /
increase and cross-tabulated on the same day. This measures co-movement
on matching days; it is not a lagged Granger causality test.
"""

import logging
from typing import Sequence
import numpy as np
from scipy import stats

from config import SIGNIFICANCE_LEVEL
from exceptions import InsufficientData
from models import TestResult

logger = logging.getLogger(__name__)

DECREASE, FLAT, INCREASE = 0, 1, 2

def categorize_changes(values: Sequence[float]) -> np.ndarray:
    """Map each step change to DECREASE, FLAT or INCREASE"""
    changes = np.diff(np.asarray(values, dtype=float))
    categories = np.full(len(changes), FLAT)
    categories[changes > 0] = INCREASE
    categories[changes < 0] = DECREASE
    return categories

def contingency_table(series_a: Sequence[float], series_b: Sequence[float]) -> np.ndarray:
    """3x3 table of joint change categories over the same time index"""
    if len(series_a) != len(series_b):
        raise ValueError("Series must be of equal length")
    if len(series_a) < 2:
        raise InsufficientData("Need at least two observations per series")

    table = np.zeros((3, 3))
    for cat_a, cat_b in zip(categorize_changes(series_a), categorize_changes(series_b)):
        table[cat_a, cat_b] += 1
    return table

def expected_frequencies(observed: np.ndarray) -> np.ndarray:
    row_sums = observed.sum(axis=1)
    col_sums = observed.sum(axis=0)
    return np.outer(row_sums, col_sums) / observed.sum()

def chi_square_statistic(observed: np.ndarray, expected: np.ndarray) -> float:
    """Sum of (obs - exp)^2 / exp over cells with non-zero expectation"""
    mask = expected != 0
    return float(np.sum((observed[mask] - expected[mask]) ** 2 / expected[mask]))

def chi_square_p_value(statistic: float, dof: int) -> float:
    """Upper-tail probability from the regularised incomplete gamma function"""
    if statistic <= 0:
        return 1.0
    return float(stats.chi2.sf(statistic, dof))

def chi_square_screen(values_a: Sequence[float], values_b: Sequence[float],
                      alpha: float = SIGNIFICANCE_LEVEL) -> TestResult:
    """Run the same-timestep chi-square screen on two aligned series"""
    observed = contingency_table(values_a, values_b)
    expected = expected_frequencies(observed)
    statistic = chi_square_statistic(observed, expected)
    dof = (observed.shape[0] - 1) * (observed.shape[1] - 1)
    p_value = chi_square_p_value(statistic, dof)

    # A series stuck in one category has no variation to test against
    degenerate = bool(
        np.count_nonzero(observed.sum(axis=1)) < 2 or np.count_nonzero(observed.sum(axis=0)) < 2
    )
    if degenerate:
        logger.warning("Chi-square screen: one series never changes category; statistic is 0")

    logger.info(
        f"Chi-square screen:\n"
        f"  Observations: {int(observed.sum())}\n"
        f"  Statistic:    {statistic:.4f}\n"
        f"  DoF:          {dof}\n"
        f"  p-value:      {p_value:.4f}"
    )

    return TestResult(
        statistic=statistic,
        p_value=p_value,
        significant=p_value < alpha,
        degenerate=degenerate
    )
