"""
Function-call API of the analysis engine.

Every function takes a series (a Stock or a sequence of PricePoint) plus
method parameters and returns either a fully formed result or raises an
AnalysisError. Numeric degenerate cases are reported through the
`degenerate` metadata of the result; pass strict=True to raise
DegenerateInput instead.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Union

from config import ARIMA_EPOCHS, GARCH_EPOCHS, SIGNIFICANCE_LEVEL, VAR_WINDOW
from exceptions import DegenerateInput, InsufficientData
from models import (PricePoint, Stock, Timeline, CorrelationResult, TestResult,
                    RSIParams, MACDParams, ARIMAParams, GARCHParams, VARParams, find_stock)
from indicators import calculate_rsi, calculate_macd
from screening import align_series, correlate_stocks, correlate_many, screen_features
from screening import chi_square_screen as _chi_square
from screening import cointegration_screen as _cointegration
from forecasting import ARIMAForecaster, VARForecaster
from garch import GARCHForecaster
from data_manager import (DataValidator, format_timeline, format_anchored_timeline,
                          parse_custom_indicator_csv)
from utils.series import normalize_to_last

logger = logging.getLogger(__name__)

SeriesLike = Union[Stock, Sequence[PricePoint]]

__all__ = [
    'compute_rsi', 'compute_macd', 'forecast_arima', 'forecast_garch', 'forecast_var',
    'correlate', 'chi_square_screen', 'cointegration_screen', 'parse_custom_indicator_csv',
    'find_stock', 'run_method', 'METHODS'
]

_validator = DataValidator()

def _as_points(series: SeriesLike, name: str = "series") -> List[PricePoint]:
    points = list(series.data if isinstance(series, Stock) else series)
    if not points:
        raise InsufficientData(f"{name} is empty")
    _validator.ensure_valid(points, name)
    return points

def _as_stock(series: SeriesLike, default_symbol: str) -> Stock:
    if isinstance(series, Stock):
        _as_points(series, series.symbol)
        return series
    return Stock(symbol=default_symbol, name=default_symbol, data=_as_points(series, default_symbol))

def _check_strict(flags, strict: bool, method: str):
    if strict and flags:
        raise DegenerateInput(f"{method}: degenerate input ({flags})")

def compute_rsi(series: SeriesLike, period: int = 14, strict: bool = False) -> Timeline:
    """RSI rows dated from series[period] onward"""
    RSIParams(period=period).validate()
    points = _as_points(series)
    values, zero_loss_seen = calculate_rsi([p.close for p in points], period)
    flags = ['zero_average_loss'] if zero_loss_seen else []
    _check_strict(flags, strict, 'RSI')
    return format_timeline([p.date for p in points[period:]], values, degenerate=flags)

def compute_macd(series: SeriesLike, fast: int = 12, slow: int = 26, signal: int = 9) -> Timeline:
    """MACD histogram rows dated by the last len(histogram) input dates"""
    MACDParams(fast_period=fast, slow_period=slow, signal_period=signal).validate()
    points = _as_points(series)
    histogram = calculate_macd([p.close for p in points], fast, slow, signal)
    return format_timeline([p.date for p in points[-len(histogram):]], histogram)

def forecast_arima(series: SeriesLike, p: int = 1, d: int = 1, q: int = 1, steps: int = 30,
                   epochs: int = ARIMA_EPOCHS, random_seed: Optional[int] = None,
                   regressor_factory: Optional[Callable] = None,
                   strict: bool = False) -> Timeline:
    """History closes followed by `steps` forecast rows on future trading dates"""
    ARIMAParams(p=p, d=d, q=q, forecast_steps=steps).validate()
    points = _as_points(series)
    closes = [pt.close for pt in points]
    forecaster = ARIMAForecaster(epochs=epochs, random_seed=random_seed,
                                 regressor_factory=regressor_factory)
    result = forecaster.forecast(closes, p, d, q, steps)
    _check_strict(result.degenerate, strict, 'ARIMA')
    return format_timeline([pt.date for pt in points], closes, result.forecast_path,
                           degenerate=result.degenerate)

def forecast_garch(series: SeriesLike, p: int = 1, q: int = 1, steps: int = 30,
                   epochs: int = GARCH_EPOCHS, random_seed: Optional[int] = None,
                   regressor_factory: Optional[Callable] = None,
                   strict: bool = False) -> Dict[str, Timeline]:
    """
    Price and volatility timelines.

    Volatility history rows hold the realised absolute log return and are
    dated from the second observation.
    """
    GARCHParams(p=p, q=q, forecast_steps=steps).validate()
    points = _as_points(series)
    closes = [pt.close for pt in points]
    dates = [pt.date for pt in points]

    forecaster = GARCHForecaster(epochs=epochs, random_seed=random_seed,
                                 regressor_factory=regressor_factory)
    result = forecaster.forecast(closes, p, q, steps)
    _check_strict(result.degenerate, strict, 'GARCH')

    return {
        'price': format_timeline(dates, closes, result.forecast_path,
                                 degenerate=result.degenerate),
        'volatility': format_timeline(dates[1:], forecaster.realized_volatility(closes),
                                      result.volatility_path, calendar_dates=dates,
                                      degenerate=result.degenerate),
    }

def forecast_var(target: SeriesLike, features: Sequence[SeriesLike] = (), lag: int = 2,
                 steps: int = 30, strict: bool = False) -> Dict[str, Timeline]:
    """
    Raw and last-value-normalized VAR timelines for the target.

    History covers the most recent VAR_WINDOW target points; the first
    forecast row repeats the last actual value.
    """
    VARParams(lag=lag, forecast_steps=steps).validate()
    target_points = _as_points(target, 'target')
    feature_points = [_as_points(f, f'feature {i}') for i, f in enumerate(features)]

    forecaster = VARForecaster(window=VAR_WINDOW)
    results = forecaster.forecast(
        [[p.close for p in target_points]] + [[p.close for p in f] for f in feature_points],
        lag, steps
    )

    recent = target_points[-forecaster.window:]
    dates = [p.date for p in recent]
    raw_values = [p.close for p in recent]
    history = {'raw': raw_values, 'normalized': normalize_to_last(raw_values)}

    timelines = {}
    for key in ('raw', 'normalized'):
        _check_strict(results[key].degenerate, strict, 'VAR')
        timelines[key] = format_anchored_timeline(dates, history[key], results[key].forecast_path,
                                                  degenerate=results[key].degenerate)
    return timelines

def correlate(stock_a: SeriesLike, stock_b: SeriesLike, strict: bool = False) -> CorrelationResult:
    """Pearson correlation over the common dates of two stocks"""
    result = correlate_stocks(_as_stock(stock_a, 'A'), _as_stock(stock_b, 'B'))
    _check_strict(result.degenerate, strict, 'correlation')
    return result

def chi_square_screen(series_a: SeriesLike, series_b: SeriesLike,
                      alpha: float = SIGNIFICANCE_LEVEL, strict: bool = False) -> TestResult:
    """Same-day co-movement screen on aligned daily change categories"""
    _, values_a, values_b = align_series(_as_points(series_a, 'series_a'),
                                         _as_points(series_b, 'series_b'))
    result = _chi_square(values_a, values_b, alpha)
    _check_strict(result.degenerate, strict, 'chi-square screen')
    return result

def cointegration_screen(series_a: SeriesLike, series_b: SeriesLike,
                         alpha: float = SIGNIFICANCE_LEVEL, strict: bool = False) -> TestResult:
    """Spread-stationarity heuristic on aligned closes"""
    _, values_a, values_b = align_series(_as_points(series_a, 'series_a'),
                                         _as_points(series_b, 'series_b'))
    result = _cointegration(values_a, values_b, alpha)
    _check_strict(result.degenerate, strict, 'cointegration screen')
    return result

def _pick(options: dict, *keys) -> dict:
    return {k: options[k] for k in keys if k in options}

def _run_rsi(stocks, symbols, params: RSIParams, **options):
    return compute_rsi(find_stock(stocks, symbols[0]), params.period, **_pick(options, 'strict'))

def _run_macd(stocks, symbols, params: MACDParams, **options):
    return compute_macd(find_stock(stocks, symbols[0]), params.fast_period,
                        params.slow_period, params.signal_period)

def _run_arima(stocks, symbols, params: ARIMAParams, **options):
    return forecast_arima(find_stock(stocks, symbols[0]), params.p, params.d, params.q,
                          params.forecast_steps,
                          **_pick(options, 'epochs', 'random_seed', 'regressor_factory', 'strict'))

def _run_garch(stocks, symbols, params: GARCHParams, **options):
    return forecast_garch(find_stock(stocks, symbols[0]), params.p, params.q,
                          params.forecast_steps,
                          **_pick(options, 'epochs', 'random_seed', 'regressor_factory', 'strict'))

def _run_var(stocks, symbols, params: VARParams, **options):
    features = [find_stock(stocks, s) for s in symbols[1:]]
    return forecast_var(find_stock(stocks, symbols[0]), features, params.lag,
                        params.forecast_steps, **_pick(options, 'strict'))

def _run_correlation(stocks, symbols, params, **options):
    return correlate_many(stocks, symbols)

def _run_chi_square(stocks, symbols, params, **options):
    return screen_features(stocks, symbols[0], list(symbols[1:]), 'chi_square')

def _run_cointegration(stocks, symbols, params, **options):
    return screen_features(stocks, symbols[0], list(symbols[1:]), 'cointegration')

# method name -> (params class or None, runner, minimum number of symbols)
METHODS = {
    'rsi': (RSIParams, _run_rsi, 1),
    'macd': (MACDParams, _run_macd, 1),
    'arima': (ARIMAParams, _run_arima, 1),
    'garch': (GARCHParams, _run_garch, 1),
    'var': (VARParams, _run_var, 1),
    'correlation': (None, _run_correlation, 2),
    'chi_square': (None, _run_chi_square, 2),
    'cointegration': (None, _run_cointegration, 2),
}

def run_method(method: str, stocks: List[Stock], symbols: Sequence[str], params=None, **options):
    """
    Dispatch an analysis by name.

    Args:
        method: One of METHODS
        stocks: Available instruments
        symbols: Selected symbols; the first is the target where a method has one
        params: Parameter dataclass for the method; defaults when None
        **options: Passed through to forecasting methods (epochs, random_seed, strict)

    Returns:
        Whatever the underlying engine function returns
    """
    if method not in METHODS:
        raise ValueError(f"Unknown method {method!r}; expected one of {sorted(METHODS)}")
    params_cls, runner, min_symbols = METHODS[method]
    if len(symbols) < min_symbols:
        raise ValueError(f"{method} needs at least {min_symbols} symbols, got {len(symbols)}")

    if params_cls is not None:
        params = params if params is not None else params_cls()
        params.validate()

    logger.info(f"Running {method} for {', '.join(symbols)}")
    return runner(stocks, list(symbols), params, **options)
