import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import logging
import numpy as np
import pandas as pd
from run_analysis import main, parse_args, results_to_frames
from exceptions import NotFound
from utils.progress import ProgressMonitor

@pytest.fixture(autouse=True)
def reset_root_handlers():
    """main() attaches handlers to the root logger; detach them after each test"""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()

@pytest.fixture
def price_file(tmp_path):
    """Wide price CSV with three symbols"""
    np.random.seed(42)
    dates = pd.bdate_range('2023-01-02', periods=200)
    df = pd.DataFrame({'date': dates.strftime('%Y-%m-%d')})
    for symbol in ('AAA', 'BBB', 'CCC'):
        df[symbol] = np.round(100 * np.exp(np.cumsum(np.random.normal(0, 0.01, 200))), 2)
    path = tmp_path / "prices.csv"
    df.to_csv(path, index=False)
    return path

def test_parse_args_defaults():
    args = parse_args([])
    assert args.methods == ['rsi']
    assert args.symbols is None
    assert args.steps == 30
    assert not args.strict

def test_pipeline_with_demo_data(tmp_path):
    output_dir = tmp_path / "out"
    main(['--methods', 'rsi', 'macd', 'correlation', 'var',
          '--symbols', 'AAPL', 'MSFT', 'GOOGL',
          '--seed', '42', '--quiet', '--output-dir', str(output_dir)])

    rsi = pd.read_csv(output_dir / "AAPL_rsi.csv")
    assert list(rsi.columns) == ['date', 'value', 'prediction']
    assert len(rsi) == 366 - 14
    assert rsi['value'].between(0, 100).all()

    macd = pd.read_csv(output_dir / "AAPL_macd.csv")
    assert len(macd) == 366 - 26 - 9 + 1

    correlation = pd.read_csv(output_dir / "AAPL_correlation.csv")
    assert len(correlation) == 3
    assert correlation['coefficient'].between(-1, 1).all()

    var_raw = pd.read_csv(output_dir / "AAPL_var_raw.csv")
    assert var_raw['prediction'].notna().sum() == 31
    assert (output_dir / "AAPL_var_normalized.csv").exists()
    assert list((output_dir / "logs").glob("analysis_*.log"))

def test_pipeline_with_price_file(price_file, tmp_path):
    output_dir = tmp_path / "out"
    main(['--prices', str(price_file), '--methods', 'chi_square', 'cointegration',
          '--symbols', 'BBB', 'AAA', 'CCC', '--quiet', '--output-dir', str(output_dir)])

    chi = pd.read_csv(output_dir / "BBB_chi_square.csv")
    assert list(chi['feature']) == ['AAA', 'CCC']
    assert chi['p_value'].between(0, 1).all()
    assert (output_dir / "BBB_cointegration.csv").exists()

def test_pipeline_arima_small(price_file, tmp_path):
    output_dir = tmp_path / "out"
    main(['--prices', str(price_file), '--methods', 'arima', '--symbols', 'AAA',
          '--epochs', '2', '--steps', '5', '--seed', '0', '--quiet',
          '--output-dir', str(output_dir)])

    arima = pd.read_csv(output_dir / "AAA_arima.csv")
    assert len(arima) == 205
    assert arima['prediction'].notna().sum() == 5

def test_pipeline_with_plots(price_file, tmp_path):
    output_dir = tmp_path / "out"
    main(['--prices', str(price_file), '--methods', 'rsi', 'correlation',
          '--symbols', 'AAA', 'BBB', '--plot', '--quiet', '--output-dir', str(output_dir)])

    plots = output_dir / "plots"
    assert (plots / "AAA_rsi.png").exists()
    assert (plots / "AAA_correlation.png").exists()
    assert (plots / "AAA_AAA_BBB_scatter.png").exists()

def test_pipeline_unknown_symbol(tmp_path):
    with pytest.raises(NotFound):
        main(['--methods', 'rsi', '--symbols', 'ZZZ', '--seed', '1', '--quiet',
              '--output-dir', str(tmp_path)])

def test_progress_monitor_logs_steps(caplog):
    logger = logging.getLogger('test_progress')
    with caplog.at_level(logging.INFO, logger='test_progress'):
        with ProgressMonitor(total=2, desc="Methods", logger=logger, disable=True) as monitor:
            monitor.update(1, status="rsi done")
            monitor.update(1)
    assert monitor.done == 2
    assert "Methods [1/2]: rsi done" in caplog.text
    assert "Methods finished" in caplog.text

def test_results_to_frames_empty_screen():
    assert results_to_frames('chi_square', {}) == {}

if __name__ == '__main__':
    pytest.main([__file__])
