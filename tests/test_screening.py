import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import numpy as np
import pandas as pd
from models import PricePoint, Stock
from screening import (align_series, pearson, correlate_stocks, correlate_many,
                       chi_square_screen, cointegration_screen, screen_features)
from screening.chi_square import (categorize_changes, contingency_table, chi_square_p_value,
                                  DECREASE, FLAT, INCREASE)
from exceptions import InsufficientData, InsufficientOverlap, NotFound

def make_stock(symbol, closes, start='2024-01-01'):
    dates = pd.bdate_range(start, periods=len(closes))
    return Stock(symbol=symbol, name=symbol,
                 data=[PricePoint(d.date(), float(c)) for d, c in zip(dates, closes)])

def random_walk(seed, n=200, drift=0.0):
    rng = np.random.RandomState(seed)
    return 100 + np.cumsum(rng.normal(drift, 1, n))

@pytest.fixture
def sample_prices():
    """Random walk close prices"""
    np.random.seed(42)
    return 100 + np.cumsum(np.random.normal(0, 1, 200))

@pytest.fixture
def sample_stocks(sample_prices):
    np.random.seed(7)
    return [
        make_stock('AAA', sample_prices),
        make_stock('BBB', sample_prices * 2),
        make_stock('CCC', 100 + np.cumsum(np.random.normal(0, 1, 200))),
    ]

def test_align_series_inner_join():
    a = make_stock('A', np.arange(50) + 1.0)
    b = make_stock('B', np.arange(50) + 100.0, start=a.data[10].date)
    dates, values_a, values_b = align_series(a.data, b.data)
    assert len(dates) == 40
    assert dates == [p.date for p in b.data[:40]]
    np.testing.assert_allclose(values_a, np.arange(10, 50) + 1.0)
    np.testing.assert_allclose(values_b, np.arange(40) + 100.0)

def test_align_series_insufficient_overlap():
    a = make_stock('A', np.arange(50) + 1.0)
    b = make_stock('B', np.arange(50) + 1.0, start=a.data[21].date)
    with pytest.raises(InsufficientOverlap):
        align_series(a.data, b.data)

def test_pearson_self(sample_prices):
    coefficient, degenerate = pearson(sample_prices, sample_prices)
    assert coefficient == pytest.approx(1.0)
    assert not degenerate

def test_pearson_negated(sample_prices):
    coefficient, _ = pearson(sample_prices, -sample_prices)
    assert coefficient == pytest.approx(-1.0)

def test_pearson_scaled(sample_prices):
    coefficient, _ = pearson(sample_prices, 2 * sample_prices)
    assert coefficient == pytest.approx(1.0)

def test_pearson_constant_is_degenerate(sample_prices):
    coefficient, degenerate = pearson(sample_prices, np.full(len(sample_prices), 3.0))
    assert coefficient == 0.0
    assert degenerate

def test_correlate_stocks(sample_stocks):
    result = correlate_stocks(sample_stocks[0], sample_stocks[1])
    assert result.symbol_a == 'AAA'
    assert result.symbol_b == 'BBB'
    assert result.coefficient == pytest.approx(1.0)
    assert len(result.dates) == 200
    assert -1.0 <= correlate_stocks(sample_stocks[0], sample_stocks[2]).coefficient <= 1.0

def test_correlate_stocks_short_overlap():
    a = make_stock('A', np.arange(29) + 1.0)
    with pytest.raises(InsufficientOverlap):
        correlate_stocks(a, a)

def test_correlate_many_pairs(sample_stocks):
    results = correlate_many(sample_stocks, ['AAA', 'BBB', 'CCC'])
    assert [(r.symbol_a, r.symbol_b) for r in results] == [
        ('AAA', 'BBB'), ('AAA', 'CCC'), ('BBB', 'CCC')
    ]

def test_correlate_many_missing_symbol(sample_stocks):
    with pytest.raises(NotFound):
        correlate_many(sample_stocks, ['AAA', 'ZZZ'])

def test_categorize_changes():
    np.testing.assert_array_equal(categorize_changes([1, 2, 2, 1]), [INCREASE, FLAT, DECREASE])

def test_contingency_table_counts():
    table = contingency_table([1, 2, 2, 1], [5, 6, 4, 4])
    assert table.sum() == 3
    assert table[INCREASE, INCREASE] == 1
    assert table[FLAT, DECREASE] == 1
    assert table[DECREASE, FLAT] == 1

def test_contingency_table_length_mismatch():
    with pytest.raises(ValueError):
        contingency_table([1, 2, 3], [1, 2])

def test_contingency_table_too_short():
    with pytest.raises(InsufficientData):
        contingency_table([1], [1])

def test_chi_square_p_value():
    assert chi_square_p_value(0.0, 4) == 1.0
    assert chi_square_p_value(9.4877, 4) == pytest.approx(0.05, abs=1e-4)
    assert chi_square_p_value(50.0, 4) < 1e-6

def test_chi_square_identical_series(sample_prices):
    result = chi_square_screen(sample_prices, sample_prices)
    assert result.significant
    assert result.statistic > 0
    assert 0.0 <= result.p_value < 0.05
    assert not result.degenerate

def test_chi_square_independent_noise():
    p_values = []
    for seed in range(10):
        rng = np.random.RandomState(seed)
        result = chi_square_screen(rng.normal(size=300), rng.normal(size=300))
        assert result.statistic >= 0
        assert 0.0 <= result.p_value <= 1.0
        p_values.append(result.p_value)
    assert np.mean(p_values) > 0.2

def test_chi_square_constant_series_degenerate(sample_prices):
    result = chi_square_screen(sample_prices, np.full(len(sample_prices), 10.0))
    assert result.degenerate
    assert result.statistic == pytest.approx(0.0)
    assert not result.significant

def test_cointegration_linked_series():
    for seed in range(5):
        rng = np.random.RandomState(seed)
        a = 100 + np.cumsum(rng.normal(0.5, 1, 200))
        noise = rng.normal(0, 1, 200)
        noise[0] = noise[-1] = 0.0
        result = cointegration_screen(a, a + noise)
        assert result.significant
        assert result.statistic >= 0
        assert 0.0 <= result.p_value <= 1.0

def test_cointegration_independent_random_walks():
    significant = [
        cointegration_screen(random_walk(seed), random_walk(seed + 1000)).significant
        for seed in range(20)
    ]
    assert np.mean(significant) <= 0.25

def test_cointegration_p_value_formula(sample_prices):
    result = cointegration_screen(sample_prices, random_walk(3))
    assert result.p_value == pytest.approx(np.exp(-0.5 * result.statistic))

def test_cointegration_constant_feature_degenerate(sample_prices):
    result = cointegration_screen(sample_prices, np.full(len(sample_prices), 100.0))
    assert result.degenerate
    assert np.isfinite(result.statistic)

def test_cointegration_length_mismatch():
    with pytest.raises(ValueError):
        cointegration_screen([1.0, 2.0, 3.0], [1.0, 2.0])

def test_screen_features(sample_stocks):
    results = screen_features(sample_stocks, 'AAA', ['BBB', 'CCC'], 'chi_square')
    assert list(results) == ['BBB', 'CCC']
    assert results['BBB'].significant

def test_screen_features_unknown_method(sample_stocks):
    with pytest.raises(ValueError):
        screen_features(sample_stocks, 'AAA', ['BBB'], 'granger')

if __name__ == '__main__':
    pytest.main([__file__])
