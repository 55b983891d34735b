"""
Validation of price series before they reach the analysis methods.
"""

import numpy as np
import pandas as pd
from typing import List, Sequence, Tuple

from exceptions import MalformedInput
from models import PricePoint

class DataValidator:
    """Validates that series are ordered, finite and within sane bounds."""

    def __init__(self, min_price: float = -np.inf, max_price: float = np.inf):
        self.validation_bounds = {
            'close': {'min': min_price, 'max': max_price},
        }

    def validate_series(self, series: Sequence[PricePoint], name: str = "series") -> Tuple[bool, List[str]]:
        """
        Validates a date-indexed close series.

        Args:
            series: Ordered price points
            name: Label used in issue messages

        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        issues = []
        if len(series) == 0:
            return False, [f"{name}: empty series"]

        dates = pd.to_datetime([p.date for p in series])
        closes = pd.Series([p.close for p in series], dtype=float)

        # Dates strictly increasing and unique
        steps = np.diff(dates.values).astype('timedelta64[D]').astype(int)
        if np.any(steps == 0):
            issues.append(f"{name}: {int(np.sum(steps == 0))} duplicate dates")
        if np.any(steps < 0):
            first = int(np.argmax(steps < 0)) + 1
            issues.append(f"{name}: dates out of order (first at position {first})")

        non_finite = closes[~np.isfinite(closes)]
        if not non_finite.empty:
            issues.append(
                f"{name}: {len(non_finite)} non-finite closes "
                f"(first occurrence at index {non_finite.index[0]})"
            )

        issues.extend(self._validate_bounds(
            closes[np.isfinite(closes)],
            self.validation_bounds['close']['min'],
            self.validation_bounds['close']['max'],
            f"{name} close"
        ))

        return len(issues) == 0, issues

    def _validate_bounds(self, series: pd.Series, min_val: float, max_val: float, name: str) -> List[str]:
        """Validates that values fall within expected bounds."""
        issues = []

        below_min = series[series < min_val]
        if not below_min.empty:
            issues.append(
                f"{name}: {len(below_min)} values below minimum of {min_val} "
                f"(first occurrence at index {below_min.index[0]})"
            )

        above_max = series[series > max_val]
        if not above_max.empty:
            issues.append(
                f"{name}: {len(above_max)} values above maximum of {max_val} "
                f"(first occurrence at index {above_max.index[0]})"
            )

        return issues

    def ensure_valid(self, series: Sequence[PricePoint], name: str = "series"):
        """Raise MalformedInput listing every issue found"""
        is_valid, issues = self.validate_series(series, name)
        if not is_valid:
            raise MalformedInput("; ".join(issues))
