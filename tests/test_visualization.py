import sys
import os
import pytest
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

from utils.visualization import TimelineVisualizer
from data_manager.formatter import format_timeline, format_anchored_timeline
from models import CorrelationResult, Timeline

@pytest.fixture
def visualizer():
    """Create visualizer instance"""
    viz = TimelineVisualizer()
    yield viz
    viz.close_all()

@pytest.fixture
def sample_timeline():
    np.random.seed(42)
    dates = pd.bdate_range('2024-01-01', periods=60)
    values = 100 + np.cumsum(np.random.normal(0, 1, 60))
    return format_timeline(dates, values, values[-1] + np.arange(1, 11), degenerate=['constant_series'])

@pytest.fixture
def sample_correlations():
    np.random.seed(42)
    dates = list(pd.bdate_range('2024-01-01', periods=40).date)
    a, b, c = np.random.normal(0, 1, (3, 40))
    return [
        CorrelationResult('AAA', 'BBB', float(np.corrcoef(a, b)[0, 1]), dates, a, b),
        CorrelationResult('AAA', 'CCC', float(np.corrcoef(a, c)[0, 1]), dates, a, c),
        CorrelationResult('BBB', 'CCC', float(np.corrcoef(b, c)[0, 1]), dates, b, c),
    ]

def test_plot_timeline(visualizer, sample_timeline, tmp_path):
    save_path = tmp_path / "timeline.png"
    fig = visualizer.plot_timeline(sample_timeline, title='RSI', save_path=save_path)
    assert isinstance(fig, plt.Figure)
    assert save_path.exists()
    ax = fig.axes[0]
    assert len(ax.lines) == 2
    assert ax.get_title() == 'RSI'

def test_plot_history_only(visualizer):
    dates = pd.bdate_range('2024-01-01', periods=20)
    fig = visualizer.plot_timeline(format_timeline(dates, np.arange(20.0)))
    assert len(fig.axes[0].lines) == 1

def test_plot_empty_timeline(visualizer):
    with pytest.raises(ValueError):
        visualizer.plot_timeline(Timeline())

def test_plot_garch(visualizer, tmp_path):
    dates = pd.bdate_range('2024-01-01', periods=50)
    prices = np.linspace(100, 110, 50)
    volatility = np.abs(np.diff(np.log(prices)))
    timelines = {
        'price': format_timeline(dates, prices, [111.0, 112.0]),
        'volatility': format_timeline(dates[1:], volatility, [0.01, 0.01], calendar_dates=dates),
    }
    save_path = tmp_path / "garch.png"
    fig = visualizer.plot_garch(timelines, title='GARCH', save_path=save_path)
    assert len(fig.axes) == 2
    assert save_path.exists()

def test_plot_anchored_forecast(visualizer):
    dates = pd.bdate_range('2024-01-01', periods=30)
    timeline = format_anchored_timeline(dates, np.arange(30.0), [30.0, 31.0])
    fig = visualizer.plot_timeline(timeline)
    forecast_line = fig.axes[0].lines[1]
    assert len(forecast_line.get_ydata()) == 3

def test_plot_correlation(visualizer, sample_correlations, tmp_path):
    save_path = tmp_path / "scatter.png"
    fig = visualizer.plot_correlation(sample_correlations[0], save_path=save_path)
    assert save_path.exists()
    assert fig.axes[0].get_xlabel() == 'AAA'
    assert fig.axes[0].get_ylabel() == 'BBB'

def test_plot_correlation_matrix(visualizer, sample_correlations, tmp_path):
    save_path = tmp_path / "matrix.png"
    fig = visualizer.plot_correlation_matrix(sample_correlations, save_path=save_path)
    assert save_path.exists()
    assert fig.axes[0].get_title() == 'Correlation Matrix'

def test_plot_correlation_matrix_empty(visualizer):
    with pytest.raises(ValueError):
        visualizer.plot_correlation_matrix([])

def test_context_manager_closes_figures(sample_timeline):
    with TimelineVisualizer() as viz:
        viz.plot_timeline(sample_timeline)
        assert plt.get_fignums()
    assert not plt.get_fignums()

def test_unknown_style_falls_back():
    viz = TimelineVisualizer(style='no-such-style')
    assert viz.colors

if __name__ == '__main__':
    pytest.main([__file__])
