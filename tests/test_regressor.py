import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import numpy as np
from forecasting.regressor import LagRegressor, recursive_forecast
from utils.series import build_lagged_dataset, normalize
from exceptions import InsufficientData

class LastValueModel:
    """Predicts the most recent value of each window"""
    def predict(self, features):
        return np.asarray(features, dtype=float)[:, -1]

class StepModel:
    """Predicts the most recent value plus one"""
    def predict(self, features):
        return np.asarray(features, dtype=float)[:, -1] + 1

@pytest.fixture
def training_data():
    """Lag windows of a normalized sine wave"""
    series, _, _ = normalize(np.sin(np.linspace(0, 12 * np.pi, 300)))
    return build_lagged_dataset(series, 3)

def test_fit_records_losses(training_data):
    features, targets = training_data
    regressor = LagRegressor(n_lags=3, epochs=30, random_seed=0)
    assert regressor.fit(features, targets) is regressor
    assert len(regressor.losses) == 30
    assert regressor.losses[-1] < regressor.losses[0]

def test_predict_shape(training_data):
    features, targets = training_data
    regressor = LagRegressor(n_lags=3, epochs=2, random_seed=0).fit(features, targets)
    predictions = regressor.predict(features[:5])
    assert predictions.shape == (5,)
    assert np.all(np.isfinite(predictions))

def test_seed_reproducible(training_data):
    features, targets = training_data
    first = LagRegressor(n_lags=3, epochs=3, random_seed=11).fit(features, targets)
    second = LagRegressor(n_lags=3, epochs=3, random_seed=11).fit(features, targets)
    np.testing.assert_allclose(first.predict(features), second.predict(features), rtol=1e-5)
    np.testing.assert_allclose(first.losses, second.losses, rtol=1e-5)

def test_non_negative_output(training_data):
    features, targets = training_data
    regressor = LagRegressor(n_lags=3, epochs=2, non_negative=True, random_seed=0)
    regressor.fit(features, -targets)
    assert np.all(regressor.predict(features) >= 0)

def test_fit_without_rows():
    with pytest.raises(InsufficientData):
        LagRegressor(n_lags=2, epochs=1).fit(np.zeros((0, 2)), np.zeros(0))

def test_recursive_forecast_feeds_back():
    np.testing.assert_allclose(recursive_forecast(LastValueModel(), [1.0, 2.0, 3.0], 4), [3, 3, 3, 3])
    np.testing.assert_allclose(recursive_forecast(StepModel(), [1.0, 2.0, 3.0], 4), [4, 5, 6, 7])

def test_recursive_forecast_window_width():
    seen = []

    class Recorder:
        def predict(self, features):
            seen.append(np.asarray(features).shape)
            return np.zeros(1)

    recursive_forecast(Recorder(), [1.0, 2.0], 3)
    assert seen == [(1, 2)] * 3

if __name__ == '__main__':
    pytest.main([__file__])
