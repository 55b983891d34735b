"""Common data models used across the project."""

from dataclasses import dataclass, field
from datetime import date
import numpy as np
import pandas as pd
from typing import List, Dict, Optional, Iterator

from exceptions import InvalidParameters, NotFound

@dataclass(frozen=True)
class PricePoint:
    """Single observation of a date-indexed series"""
    date: date
    close: float

@dataclass
class Stock:
    """A selectable instrument and its ordered close series"""
    symbol: str
    name: str
    data: List[PricePoint] = field(default_factory=list)

    def closes(self) -> np.ndarray:
        return np.array([p.close for p in self.data], dtype=float)

    def dates(self) -> List[date]:
        return [p.date for p in self.data]

    def __len__(self) -> int:
        return len(self.data)

@dataclass(frozen=True)
class ResultRow:
    """One row of an analysis timeline"""
    date: date
    value: Optional[float] = None
    prediction: Optional[float] = None

@dataclass
class Timeline:
    """Ordered result rows plus flags for epsilon-substituted numeric cases"""
    rows: List[ResultRow] = field(default_factory=list)
    degenerate: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[ResultRow]:
        return iter(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    @property
    def history(self) -> List[ResultRow]:
        return [r for r in self.rows if r.value is not None]

    @property
    def forecast(self) -> List[ResultRow]:
        return [r for r in self.rows if r.prediction is not None]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert rows to a DataFrame with date, value and prediction columns"""
        df = pd.DataFrame(
            [{'date': r.date, 'value': r.value, 'prediction': r.prediction} for r in self.rows],
            columns=['date', 'value', 'prediction']
        )
        df['date'] = pd.to_datetime(df['date'])
        df.attrs['degenerate'] = list(self.degenerate)
        return df

@dataclass(frozen=True)
class CorrelationResult:
    """Pearson correlation of two date-aligned series"""
    symbol_a: str
    symbol_b: str
    coefficient: float
    dates: List[date]
    values_a: np.ndarray
    values_b: np.ndarray
    degenerate: bool = False

@dataclass(frozen=True)
class TestResult:
    """Outcome of a pairwise screening test"""
    __test__ = False  # not a pytest test class

    statistic: float
    p_value: float
    significant: bool
    degenerate: bool = False

@dataclass
class ForecastResult:
    """Container for a model forecast in price (or variance) units"""
    model_type: str  # One of: 'arima', 'garch', 'var'
    params: Dict[str, int]
    forecast_path: np.ndarray
    volatility_path: Optional[np.ndarray] = None  # GARCH only
    degenerate: List[str] = field(default_factory=list)

def _require_positive(name: str, value: int, allow_zero: bool = False):
    if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
        raise InvalidParameters(f"{name} must be an integer, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise InvalidParameters(f"{name} must be {bound}, got {value}")

@dataclass
class RSIParams:
    period: int = 14

    def validate(self):
        _require_positive('period', self.period)

@dataclass
class MACDParams:
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9

    def validate(self):
        _require_positive('fast_period', self.fast_period)
        _require_positive('slow_period', self.slow_period)
        _require_positive('signal_period', self.signal_period)

@dataclass
class ARIMAParams:
    p: int = 1  # AR order
    d: int = 1  # Differencing order
    q: int = 1  # MA order
    forecast_steps: int = 30

    def validate(self):
        _require_positive('p', self.p)
        _require_positive('d', self.d, allow_zero=True)
        _require_positive('q', self.q)
        _require_positive('forecast_steps', self.forecast_steps)

@dataclass
class GARCHParams:
    p: int = 1  # GARCH order
    q: int = 1  # ARCH order
    forecast_steps: int = 30

    def validate(self):
        _require_positive('p', self.p)
        _require_positive('q', self.q)
        _require_positive('forecast_steps', self.forecast_steps)

@dataclass
class VARParams:
    lag: int = 2
    forecast_steps: int = 30

    def validate(self):
        _require_positive('lag', self.lag)
        _require_positive('forecast_steps', self.forecast_steps)

def find_stock(stocks: List[Stock], symbol: str) -> Stock:
    """Look up a stock by symbol"""
    for stock in stocks:
        if stock.symbol == symbol:
            return stock
    raise NotFound(f"Symbol {symbol!r} not found among {[s.symbol for s in stocks]}")
