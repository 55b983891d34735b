"""Date alignment for pairwise methods"""

from datetime import date
from typing import List, Sequence, Tuple
import numpy as np

from config import MIN_OVERLAP
from exceptions import InsufficientOverlap
from models import PricePoint

def align_series(series_a: Sequence[PricePoint], series_b: Sequence[PricePoint],
                 min_overlap: int = MIN_OVERLAP) -> Tuple[List[date], np.ndarray, np.ndarray]:
    """
    Inner-join two series on date.

    Order follows series_b, the way the dashboard walked the second
    series looking up matches in the first.

    Returns:
        Tuple of (dates, values_a, values_b)
    """
    closes_a = {p.date: p.close for p in series_a}
    dates, values_a, values_b = [], [], []
    for point in series_b:
        if point.date in closes_a:
            dates.append(point.date)
            values_a.append(closes_a[point.date])
            values_b.append(point.close)

    if len(dates) < min_overlap:
        raise InsufficientOverlap(
            f"Only {len(dates)} common dates, need at least {min_overlap}"
        )
    return dates, np.array(values_a, dtype=float), np.array(values_b, dtype=float)
