"""Synthetic demo stocks with trend, volatility and seasonality"""

from datetime import date
from typing import List, Optional
import numpy as np
import pandas as pd

from models import PricePoint, Stock

# symbol, name, start price, volatility %, trend %, seasonality %, seasonality period
MOCK_SPECS = [
    ('AAPL', 'Apple Inc.', 150, 1.5, 0.02, 0.5, 60),
    ('MSFT', 'Microsoft Corporation', 300, 1.2, 0.03, 0.3, 45),
    ('GOOGL', 'Alphabet Inc.', 2800, 1.8, 0.01, 0.7, 30),
    ('AMZN', 'Amazon.com Inc.', 3200, 2.0, 0.02, 0.8, 50),
    ('TSLA', 'Tesla, Inc.', 700, 3.5, 0.04, 1.2, 25),
]

def generate_price_data(dates: pd.DatetimeIndex, start_price: float, volatility: float,
                        trend: float, seasonality: float, period: int,
                        random_state: np.random.RandomState) -> List[PricePoint]:
    """Multiplicative random walk; every move is in percent and prices never go below 1"""
    n = len(dates)
    price = start_price
    data = []
    for i, day in enumerate(dates):
        days_back = n - 1 - i
        random_factor = random_state.uniform(-1, 1) * volatility
        seasonal_factor = seasonality * np.sin(2 * np.pi * days_back / period)
        price = max(price * (1 + (random_factor + trend + seasonal_factor) / 100), 1.0)
        data.append(PricePoint(date=day.date(), close=round(price, 2)))
    return data

def generate_mock_stocks(days: int = 365, seed: Optional[int] = None,
                         end: Optional[date] = None) -> List[Stock]:
    """
    Generate the demo universe.

    Args:
        days: Calendar days of history before `end` (days + 1 points per stock)
        seed: Random seed; None for fresh randomness
        end: Last date, defaults to today

    Returns:
        List of Stock
    """
    random_state = np.random.RandomState(seed)
    end = pd.Timestamp(end if end is not None else date.today()).normalize()
    dates = pd.date_range(end=end, periods=days + 1, freq='D')

    return [
        Stock(symbol=symbol, name=name,
              data=generate_price_data(dates, start, vol, trend, seas, period, random_state))
        for symbol, name, start, vol, trend, seas, period in MOCK_SPECS
    ]
