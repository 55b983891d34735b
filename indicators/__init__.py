"""
Technical indicator calculators.
"""

from .rsi import calculate_rsi
from .macd import calculate_ema, calculate_macd, macd_components

__all__ = ['calculate_rsi', 'calculate_ema', 'calculate_macd', 'macd_components']
