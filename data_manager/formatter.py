"""
Merges historical values and forecasts into a single Timeline.

History rows carry only `value`; forecast rows carry only `prediction`
and are dated on trading days inferred from the history.
"""

from datetime import date
from typing import List, Optional, Sequence
import pandas as pd

from models import ResultRow, Timeline
from .holiday_handler import TradingCalendar

def _as_date(value) -> date:
    return pd.Timestamp(value).date()

def history_rows(dates: Sequence, values: Sequence[float]) -> List[ResultRow]:
    if len(dates) != len(values):
        raise ValueError(f"Got {len(dates)} dates for {len(values)} values")
    return [ResultRow(date=_as_date(d), value=float(v)) for d, v in zip(dates, values)]

def forecast_rows(calendar_dates: Sequence, predictions: Sequence[float]) -> List[ResultRow]:
    predictions = list(predictions)
    if not predictions:
        return []
    future = TradingCalendar.from_dates(calendar_dates).next_trading_days(len(predictions))
    return [ResultRow(date=d, prediction=float(p)) for d, p in zip(future, predictions)]

def format_timeline(dates: Sequence, values: Sequence[float],
                    predictions: Sequence[float] = (),
                    calendar_dates: Optional[Sequence] = None,
                    degenerate: Optional[List[str]] = None) -> Timeline:
    """
    History rows followed by forecast rows on future trading dates.

    Args:
        dates: Dates of the history rows
        values: History values, same length as dates
        predictions: Forecast values, one row each
        calendar_dates: Dates used to infer the trading calendar; defaults to `dates`
        degenerate: Flags to carry on the timeline

    Returns:
        Timeline
    """
    rows = history_rows(dates, values)
    rows.extend(forecast_rows(calendar_dates if calendar_dates is not None else dates, predictions))
    return Timeline(rows=rows, degenerate=list(degenerate or []))

def format_anchored_timeline(dates: Sequence, values: Sequence[float],
                             predictions: Sequence[float],
                             degenerate: Optional[List[str]] = None) -> Timeline:
    """
    Like `format_timeline`, but the first forecast row repeats the last
    actual value so a chart line joins history and forecast.

    Every model prediction follows the anchor, giving len(predictions) + 1
    forecast rows.
    """
    if len(values) == 0:
        raise ValueError("Anchored timeline needs at least one actual value")
    anchored = [float(values[-1])] + [float(p) for p in predictions]
    return format_timeline(dates, values, anchored, degenerate=degenerate)
