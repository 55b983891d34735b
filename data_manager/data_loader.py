"""
Loading of price files and user-supplied custom indicator CSV text.
"""

import logging
import math
import pandas as pd
from pathlib import Path
from typing import Dict, List, Optional, Union

from exceptions import MalformedInput
from models import PricePoint, Stock
from data_manager.data_validator import DataValidator

logger = logging.getLogger(__name__)

def decode_upload(raw: bytes) -> str:
    """Decode uploaded file bytes as UTF-8, dropping a byte order mark"""
    try:
        return raw.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Upload is not valid UTF-8: {e}") from e

def _parse_date(text: str, line_number: int):
    try:
        stamp = pd.Timestamp(text)
    except ValueError as e:
        raise MalformedInput(f"Line {line_number}: cannot parse date {text!r}") from e
    if pd.isna(stamp):
        raise MalformedInput(f"Line {line_number}: cannot parse date {text!r}")
    return stamp.date()

def parse_custom_indicator_csv(text: str) -> List[PricePoint]:
    """
    Parse `date,value` lines into a series.

    A first line mentioning "date" or "Date" is treated as a header. Rows
    without a comma, without a date, or whose value is not a finite
    number are skipped; input order is kept.

    Args:
        text: CSV content

    Returns:
        List of PricePoint with the indicator value in `close`

    Raises:
        MalformedInput: a non-empty date cannot be parsed, or no row is valid
    """
    lines = text.strip().splitlines()
    if not lines:
        raise MalformedInput("No valid data found in CSV")

    start = 1 if ('date' in lines[0] or 'Date' in lines[0]) else 0
    points = []
    skipped = 0

    for number, line in enumerate(lines[start:], start=start + 1):
        if ',' not in line:
            skipped += 1
            continue
        date_text, value_text = line.split(',')[:2]
        date_text = date_text.strip()
        try:
            value = float(value_text.strip())
        except ValueError:
            skipped += 1
            continue
        if not date_text or not math.isfinite(value):
            skipped += 1
            continue
        points.append(PricePoint(date=_parse_date(date_text, number), close=value))

    if not points:
        raise MalformedInput("No valid data found in CSV")

    if skipped:
        logger.warning(f"Skipped {skipped} custom indicator rows without a date or numeric value")
    logger.info(f"Parsed {len(points)} custom indicator rows")
    return points

class DataLoader:
    """Loads wide price files: a date column and one close column per symbol."""

    def __init__(self, date_column: str = 'date', names: Optional[Dict[str, str]] = None):
        """
        Initialize data loader

        Args:
            date_column: Name of the date column; the first column is used when absent
            names: Optional symbol -> display name mapping
        """
        self.date_column = date_column
        self.names = names or {}
        self.validator = DataValidator(min_price=0)

    def load_price_csv(self, file_path: Union[str, Path]) -> List[Stock]:
        """Load and validate a price file, one Stock per symbol column."""
        df = pd.read_csv(file_path)
        if df.empty:
            raise MalformedInput(f"{file_path} contains no rows")

        date_col = self.date_column if self.date_column in df.columns else df.columns[0]
        try:
            df[date_col] = pd.to_datetime(df[date_col])
        except (ValueError, TypeError) as e:
            raise MalformedInput(f"Cannot parse dates in column {date_col!r}: {e}") from e
        df = df.sort_values(date_col)

        stocks = []
        for symbol in df.columns:
            if symbol == date_col:
                continue
            closes = pd.to_numeric(df[symbol], errors='coerce')
            valid = closes.notna()
            data = [
                PricePoint(date=d.date(), close=float(c))
                for d, c in zip(df.loc[valid, date_col], closes[valid])
            ]
            self.validator.ensure_valid(data, symbol)
            stocks.append(Stock(symbol=symbol, name=self.names.get(symbol, symbol), data=data))

        if not stocks:
            raise MalformedInput(f"{file_path} has no price columns")

        self._log_data_quality_summary(stocks)
        return stocks

    def _log_data_quality_summary(self, stocks: List[Stock]):
        """Log a summary of the loaded series."""
        lines = ["Data Quality Summary:"]
        for stock in stocks:
            if stock.data:
                lines.append(
                    f"  {stock.symbol}: {len(stock):,} rows, "
                    f"{stock.data[0].date} to {stock.data[-1].date}"
                )
            else:
                lines.append(f"  {stock.symbol}: no valid rows")
        logger.info("\n".join(lines))
