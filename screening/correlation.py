"""Pearson correlation between date-aligned price series"""

import logging
from itertools import combinations
from typing import List, Optional, Sequence, Tuple
import numpy as np

from models import CorrelationResult, Stock, find_stock
from .alignment import align_series

logger = logging.getLogger(__name__)

def pearson(values_a: Sequence[float], values_b: Sequence[float]) -> Tuple[float, bool]:
    """
    Mean-centred Pearson coefficient.

    Returns:
        Tuple of (coefficient, degenerate). A zero denominator (either
        series constant) yields 0.0 with degenerate=True.
    """
    x = np.asarray(values_a, dtype=float)
    y = np.asarray(values_b, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.sum(dx ** 2) * np.sum(dy ** 2))
    if denominator == 0:
        return 0.0, True
    coefficient = float(np.sum(dx * dy) / denominator)
    return float(np.clip(coefficient, -1.0, 1.0)), False

def correlate_stocks(stock_a: Stock, stock_b: Stock) -> CorrelationResult:
    """Align two stocks on common dates and compute their correlation"""
    dates, values_a, values_b = align_series(stock_a.data, stock_b.data)
    coefficient, degenerate = pearson(values_a, values_b)

    if degenerate:
        logger.warning(
            f"Zero variance in {stock_a.symbol}/{stock_b.symbol} over {len(dates)} common dates; "
            f"reporting correlation 0.0"
        )
    logger.info(
        f"Correlation {stock_a.symbol} vs {stock_b.symbol}: {coefficient:.4f} "
        f"({len(dates)} common dates)"
    )

    return CorrelationResult(
        symbol_a=stock_a.symbol,
        symbol_b=stock_b.symbol,
        coefficient=coefficient,
        dates=dates,
        values_a=values_a,
        values_b=values_b,
        degenerate=degenerate
    )

def correlate_many(stocks: List[Stock], symbols: Optional[List[str]] = None) -> List[CorrelationResult]:
    """Correlate every unordered pair of the selected symbols, in selection order"""
    selected = [find_stock(stocks, s) for s in symbols] if symbols is not None else list(stocks)
    return [correlate_stocks(a, b) for a, b in combinations(selected, 2)]
