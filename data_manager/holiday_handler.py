"""Infers a trading calendar from observed dates and generates future trading days"""

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, List, Set
import pandas as pd
import logging

from config import CALENDAR_TAIL
from exceptions import InsufficientData, MalformedInput

logger = logging.getLogger(__name__)

class TradingCalendar:
    """Weekday pattern and usual spacing of a series' most recent dates"""

    def __init__(self, last_date: date, interval: int, weekdays: Set[int]):
        """
        Initialize calendar

        Args:
            last_date: Last observed date; future days start after it
            interval: Calendar days between consecutive trading days
            weekdays: Weekdays (Monday=0) on which trading was observed
        """
        if interval < 1:
            raise MalformedInput(f"Dates must be strictly increasing; inferred interval {interval}")
        if not weekdays:
            raise MalformedInput("At least one trading weekday is required")
        self.last_date = last_date
        self.interval = interval
        self.weekdays = set(weekdays)

    @classmethod
    def from_dates(cls, dates: Iterable, tail: int = CALENDAR_TAIL) -> 'TradingCalendar':
        """
        Build a calendar from the last `tail` dates.

        The interval is the most common gap; when gaps tie, the one that
        reached the top count first wins.
        """
        observed = [pd.Timestamp(d).date() for d in dates]
        if len(observed) < 2:
            raise InsufficientData(f"Need at least 2 dates to infer a trading calendar, got {len(observed)}")

        recent = observed[-min(tail, len(observed)):]
        counts = Counter()
        interval, best = 1, 0
        for prev, curr in zip(recent[:-1], recent[1:]):
            gap = (curr - prev).days
            counts[gap] += 1
            if counts[gap] > best:
                best = counts[gap]
                interval = gap

        weekdays = {d.weekday() for d in recent}
        logger.debug(f"Inferred trading calendar: interval={interval}, weekdays={sorted(weekdays)}")
        return cls(observed[-1], interval, weekdays)

    def is_trading_day(self, day: date) -> bool:
        """Check if given date falls on an observed trading weekday"""
        return pd.Timestamp(day).weekday() in self.weekdays

    def next_trading_days(self, n: int) -> List[date]:
        """Step forward by the interval, keeping only observed weekdays"""
        days = []
        current = self.last_date
        while len(days) < n:
            current = current + timedelta(days=self.interval)
            if self.is_trading_day(current):
                days.append(current)
        return days
