"""
Pairwise statistical screens between price series.
Correlation, chi-square co-movement and cointegration heuristics.
"""

from .alignment import align_series
from .correlation import pearson, correlate_stocks, correlate_many
from .chi_square import chi_square_screen
from .cointegration import cointegration_screen
from .features import screen_features

__all__ = [
    'align_series', 'pearson', 'correlate_stocks', 'correlate_many',
    'chi_square_screen', 'cointegration_screen', 'screen_features'
]
