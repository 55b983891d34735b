#!/usr/bin/env python
"""
Batch runner for the analysis engine.
Loads a price file (or demo data), runs the selected methods and writes
result CSVs and optional plots.
"""
import sys
import argparse
from pathlib import Path
import logging
from datetime import datetime
from dataclasses import asdict
import pandas as pd
from typing import Dict, List, Optional
import traceback
import matplotlib

# Add project root to path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from engine import run_method, METHODS
from models import (Stock, Timeline, RSIParams, MACDParams, ARIMAParams,
                    GARCHParams, VARParams)
from data_manager import DataLoader, generate_mock_stocks
from utils.progress import ProgressMonitor

def setup_logging(output_dir: Path, verbose: bool = False) -> logging.Logger:
    """
    Configure logging with both file and console handlers

    Parameters:
    -----------
    output_dir : Path
        Directory for log file
    verbose : bool
        Log DEBUG messages (per-epoch losses) to the file

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    log_dir = output_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"analysis_{timestamp}.log"

    # Handlers go on the root logger so every module logger reaches them
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(message)s')
    )

    root.addHandler(file_handler)
    root.addHandler(console_handler)

    return logging.getLogger("analysis_runner")

def build_params(method: str, args: argparse.Namespace):
    """Method parameters from command-line options"""
    if method == 'rsi':
        return RSIParams(period=args.period)
    if method == 'macd':
        return MACDParams(fast_period=args.fast, slow_period=args.slow, signal_period=args.signal)
    if method == 'arima':
        return ARIMAParams(p=args.p, d=args.d, q=args.q, forecast_steps=args.steps)
    if method == 'garch':
        return GARCHParams(p=args.p, q=args.q, forecast_steps=args.steps)
    if method == 'var':
        return VARParams(lag=args.lag, forecast_steps=args.steps)
    return None

def load_stocks(args: argparse.Namespace, logger: logging.Logger) -> List[Stock]:
    if args.prices:
        logger.info(f"Loading prices from {args.prices}")
        return DataLoader().load_price_csv(args.prices)
    logger.info(f"Generating demo data (seed={args.seed})")
    return generate_mock_stocks(seed=args.seed)

def results_to_frames(method: str, result) -> Dict[str, pd.DataFrame]:
    """Flatten a method result into named DataFrames"""
    if isinstance(result, Timeline):
        return {method: result.to_dataframe()}
    if isinstance(result, list):
        return {method: pd.DataFrame([
            {'symbol_a': r.symbol_a, 'symbol_b': r.symbol_b, 'coefficient': r.coefficient,
             'n_dates': len(r.dates), 'degenerate': r.degenerate}
            for r in result
        ])}
    if all(isinstance(v, Timeline) for v in result.values()):
        return {f"{method}_{key}": timeline.to_dataframe() for key, timeline in result.items()}
    return {method: pd.DataFrame([dict(feature=symbol, **asdict(r)) for symbol, r in result.items()])}

def save_results(frames: Dict[str, pd.DataFrame], output_dir: Path, prefix: str) -> List[Path]:
    paths = []
    for name, df in frames.items():
        path = output_dir / f"{prefix}_{name}.csv"
        df.to_csv(path, index=False)
        paths.append(path)
    return paths

def plot_result(visualizer, method: str, result, plot_dir: Path, prefix: str):
    """Save a plot for the result where one makes sense"""
    if isinstance(result, Timeline):
        visualizer.plot_timeline(result, title=f"{prefix} {method.upper()}",
                                 save_path=plot_dir / f"{prefix}_{method}.png")
    elif method == 'garch':
        visualizer.plot_garch(result, title=f"{prefix} GARCH",
                              save_path=plot_dir / f"{prefix}_garch.png")
    elif method == 'var':
        visualizer.plot_timeline(result['raw'], title=f"{prefix} VAR",
                                 save_path=plot_dir / f"{prefix}_var.png")
    elif method == 'correlation' and result:
        visualizer.plot_correlation_matrix(result, save_path=plot_dir / f"{prefix}_correlation.png")
        for r in result:
            visualizer.plot_correlation(
                r, save_path=plot_dir / f"{prefix}_{r.symbol_a}_{r.symbol_b}_scatter.png"
            )
    visualizer.close_all()

def run_analysis(stocks: List[Stock], args: argparse.Namespace, output_dir: Path,
                 logger: logging.Logger) -> Dict[str, object]:
    """Run every requested method and write its results"""
    logger.info("Starting analysis pipeline...")
    symbols = args.symbols or [s.symbol for s in stocks]
    prefix = symbols[0]
    visualizer = None
    if args.plot:
        matplotlib.use('Agg')
        from utils.visualization import TimelineVisualizer
        visualizer = TimelineVisualizer()
        plot_dir = output_dir / "plots"
        plot_dir.mkdir(parents=True, exist_ok=True)

    options = {'random_seed': args.seed, 'strict': args.strict}
    if args.epochs is not None:
        options['epochs'] = args.epochs

    results = {}
    with ProgressMonitor(total=len(args.methods), desc="Analysis", logger=logger,
                         disable=args.quiet) as monitor:
        for method in args.methods:
            try:
                result = run_method(method, stocks, symbols, build_params(method, args), **options)
                results[method] = result
                paths = save_results(results_to_frames(method, result), output_dir, prefix)
                logger.info(f"{method}: wrote {', '.join(str(p) for p in paths)}")
                if visualizer is not None:
                    plot_result(visualizer, method, result, plot_dir, prefix)
                monitor.update(1, status=f"{method} done")
            except Exception as e:
                logger.error(f"Error running {method}: {str(e)}")
                logger.error(f"Traceback: {traceback.format_exc()}")
                raise

    logger.info("Pipeline completed successfully")
    return results

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Run indicators, screens and forecasts over price series',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_analysis.py --methods rsi macd --symbols AAPL
  python run_analysis.py --prices prices.csv --methods var --symbols AAPL MSFT --lag 3
  python run_analysis.py --methods correlation chi_square --symbols AAPL MSFT GOOGL --plot
        """
    )
    parser.add_argument('--prices', type=Path,
                        help='Wide CSV with a date column and one close column per symbol '
                             '(default: generated demo data)')
    parser.add_argument('--methods', nargs='+', default=['rsi'], choices=sorted(METHODS),
                        help='Methods to run')
    parser.add_argument('--symbols', nargs='+',
                        help='Selected symbols; the first is the target (default: all)')
    parser.add_argument('--output-dir', type=Path, default=Path('results'),
                        help='Directory for result CSVs, plots and logs (default: results)')
    parser.add_argument('--period', type=int, default=14, help='RSI period')
    parser.add_argument('--fast', type=int, default=12, help='MACD fast period')
    parser.add_argument('--slow', type=int, default=26, help='MACD slow period')
    parser.add_argument('--signal', type=int, default=9, help='MACD signal period')
    parser.add_argument('-p', type=int, default=1, help='AR / GARCH order')
    parser.add_argument('-d', type=int, default=1, help='Differencing order')
    parser.add_argument('-q', type=int, default=1, help='MA / ARCH order')
    parser.add_argument('--lag', type=int, default=2, help='VAR lag')
    parser.add_argument('--steps', type=int, default=30, help='Forecast horizon')
    parser.add_argument('--epochs', type=int, help='Override training epochs')
    parser.add_argument('--seed', type=int, help='Random seed for demo data and training')
    parser.add_argument('--strict', action='store_true',
                        help='Fail on degenerate numeric input instead of flagging it')
    parser.add_argument('--plot', action='store_true', help='Save plots')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log per-epoch losses')
    parser.add_argument('--quiet', action='store_true', help='Hide the progress bar')
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None):
    """Main entry point with configuration and setup"""
    args = parse_args(argv)
    args.output_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logging(args.output_dir, args.verbose)

    try:
        stocks = load_stocks(args, logger)
        run_analysis(stocks, args, args.output_dir, logger)
    except Exception as e:
        logger.error(f"Pipeline failed: {str(e)}")
        raise

if __name__ == '__main__':
    main()
