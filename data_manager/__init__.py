"""
Data management package for the analysis engine.
Handles CSV parsing, validation, trading calendars and timeline formatting.
"""

from .data_loader import DataLoader, parse_custom_indicator_csv, decode_upload
from .data_validator import DataValidator
from .holiday_handler import TradingCalendar
from .formatter import format_timeline, format_anchored_timeline
from .mock_data import generate_mock_stocks

__all__ = [
    'DataLoader', 'parse_custom_indicator_csv', 'decode_upload', 'DataValidator',
    'TradingCalendar', 'format_timeline', 'format_anchored_timeline', 'generate_mock_stocks'
]
