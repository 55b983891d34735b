"""Series transforms, progress reporting and plotting helpers"""

from .series import (difference, difference_seeds, integrate, normalize, denormalize,
                     normalize_to_last, build_lagged_dataset, log_returns)

__all__ = [
    'difference', 'difference_seeds', 'integrate', 'normalize', 'denormalize',
    'normalize_to_last', 'build_lagged_dataset', 'log_returns'
]
