"""Run one pairwise screen for a target against each candidate feature"""

import logging
from typing import Dict, List

from models import Stock, TestResult, find_stock
from .alignment import align_series
from .chi_square import chi_square_screen
from .cointegration import cointegration_screen

logger = logging.getLogger(__name__)

SCREENS = {
    'chi_square': chi_square_screen,
    'cointegration': cointegration_screen,
}

def screen_features(stocks: List[Stock], target: str, features: List[str],
                    method: str = 'chi_square') -> Dict[str, TestResult]:
    """
    Screen each feature symbol against the target symbol.

    Parameters:
    -----------
    stocks : list of Stock
        Available instruments
    target : str
        Symbol of the series being explained
    features : list of str
        Candidate feature symbols
    method : str
        'chi_square' or 'cointegration'

    Returns:
    --------
    dict
        Feature symbol -> TestResult, in the order given
    """
    if method not in SCREENS:
        raise ValueError(f"Unknown screening method {method!r}; expected one of {sorted(SCREENS)}")
    screen = SCREENS[method]

    target_stock = find_stock(stocks, target)
    results = {}
    for symbol in features:
        feature_stock = find_stock(stocks, symbol)
        _, values_target, values_feature = align_series(target_stock.data, feature_stock.data)
        results[symbol] = screen(values_target, values_feature)

    significant = [s for s, r in results.items() if r.significant]
    logger.info(
        f"{method} screen for {target}: {len(significant)}/{len(results)} significant "
        f"{significant}"
    )
    return results
