import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import numpy as np
from forecasting.arima import ARIMAForecaster
from exceptions import InsufficientData

class PersistenceRegressor:
    """Stub regressor: the next value equals the last value in the window"""
    instances = []

    def __init__(self, n_lags, epochs, non_negative):
        self.n_lags = n_lags
        self.epochs = epochs
        self.non_negative = non_negative
        self.fitted_rows = None
        PersistenceRegressor.instances.append(self)

    def fit(self, features, targets):
        assert features.shape[1] == self.n_lags
        self.fitted_rows = len(features)
        return self

    def predict(self, features):
        return np.asarray(features, dtype=float)[:, -1]

@pytest.fixture
def forecaster():
    PersistenceRegressor.instances = []
    return ARIMAForecaster(epochs=5, regressor_factory=PersistenceRegressor)

@pytest.fixture
def squares():
    return np.arange(1, 7, dtype=float) ** 2  # 1, 4, 9, 16, 25, 36

def test_first_difference_continues_level(forecaster, squares):
    result = forecaster.forecast(squares, p=1, d=1, q=1, steps=3)
    # last difference 11 persists from the last price 36
    np.testing.assert_allclose(result.forecast_path, [47, 58, 69])
    assert result.model_type == 'arima'
    assert result.degenerate == []

def test_second_difference_integrates_twice(forecaster, squares):
    result = forecaster.forecast(squares, p=1, d=2, q=1, steps=3)
    np.testing.assert_allclose(result.forecast_path, [49, 64, 81])
    assert 'constant_series' in result.degenerate

def test_no_differencing(forecaster, squares):
    result = forecaster.forecast(squares, p=2, d=0, q=1, steps=4)
    np.testing.assert_allclose(result.forecast_path, [36, 36, 36, 36])

def test_regressor_configuration(forecaster, squares):
    forecaster.forecast(squares, p=2, d=1, q=3, steps=2)
    regressor = PersistenceRegressor.instances[-1]
    assert regressor.n_lags == 3
    assert regressor.epochs == 5
    assert not regressor.non_negative
    # 5 differences, lag 3 -> 2 training rows
    assert regressor.fitted_rows == 2

def test_forecast_length(forecaster):
    np.random.seed(42)
    prices = 100 + np.cumsum(np.random.normal(0, 1, 100))
    result = forecaster.forecast(prices, p=1, d=1, q=1, steps=30)
    assert len(result.forecast_path) == 30

def test_insufficient_data(forecaster):
    with pytest.raises(InsufficientData):
        forecaster.forecast([1.0, 2.0, 3.0], p=2, d=1, q=1, steps=3)

def test_trained_regressor_small():
    np.random.seed(42)
    prices = 100 + np.cumsum(np.random.normal(0, 1, 120))
    result = ARIMAForecaster(epochs=2, random_seed=0).forecast(prices, p=2, d=1, q=1, steps=5)
    assert len(result.forecast_path) == 5
    assert np.all(np.isfinite(result.forecast_path))

if __name__ == '__main__':
    pytest.main([__file__])
