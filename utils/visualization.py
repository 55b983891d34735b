from typing import Dict, List, Optional
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
import logging

from models import CorrelationResult, Timeline

logger = logging.getLogger(__name__)

class TimelineVisualizer:
    """Visualization utilities for analysis timelines"""

    def __init__(self, style: str = 'seaborn-v0_8'):
        """
        Initialize visualizer

        Parameters:
        -----------
        style : str
            Matplotlib style to use. Default is 'seaborn-v0_8'.
            Available styles can be listed with `plt.style.available`
        """
        try:
            plt.style.use(style)
        except OSError:
            plt.style.use('default')
            logger.warning(f"Style '{style}' not found, using default style")

        self.colors = plt.rcParams['axes.prop_cycle'].by_key()['color']

    def plot_timeline(self,
                      timeline: Timeline,
                      title: Optional[str] = None,
                      ylabel: str = 'Value',
                      save_path: Optional[Path] = None) -> plt.Figure:
        """
        Plot history values and forecast predictions of a timeline

        Parameters:
        -----------
        timeline : Timeline
            Rows to plot
        title : str, optional
            Plot title
        ylabel : str
            Y-axis label
        save_path : Path, optional
            Path to save figure
        """
        if len(timeline) == 0:
            raise ValueError("Empty timeline")

        df = timeline.to_dataframe()
        fig, ax = plt.subplots(figsize=(12, 6))

        history = df[df['value'].notna()]
        forecast = df[df['prediction'].notna()]
        if not history.empty:
            ax.plot(history['date'], history['value'], label='Actual', color=self.colors[0])
        if not forecast.empty:
            ax.plot(forecast['date'], forecast['prediction'], label='Forecast',
                    color=self.colors[1], linestyle='--')

        ax.set_xlabel('Date')
        ax.set_ylabel(ylabel)
        if title:
            ax.set_title(title)
        if timeline.degenerate:
            ax.text(0.01, 0.01, f"degenerate: {', '.join(timeline.degenerate)}",
                    transform=ax.transAxes, fontsize=8, alpha=0.7)
        ax.legend()
        ax.grid(True)
        fig.autofmt_xdate()

        if save_path:
            fig.savefig(save_path)

        return fig

    def plot_garch(self,
                   timelines: Dict[str, Timeline],
                   title: Optional[str] = None,
                   save_path: Optional[Path] = None) -> plt.Figure:
        """Price and volatility panels of a GARCH forecast"""
        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

        for ax, key, ylabel in ((ax1, 'price', 'Price'), (ax2, 'volatility', 'Volatility')):
            df = timelines[key].to_dataframe()
            history = df[df['value'].notna()]
            forecast = df[df['prediction'].notna()]
            ax.plot(history['date'], history['value'], color=self.colors[0], label='Actual')
            ax.plot(forecast['date'], forecast['prediction'], color=self.colors[1],
                    linestyle='--', label='Forecast')
            ax.set_ylabel(ylabel)
            ax.legend()
            ax.grid(True)

        ax2.set_xlabel('Date')
        if title:
            fig.suptitle(title)

        plt.tight_layout()

        if save_path:
            fig.savefig(save_path)

        return fig

    def plot_correlation(self,
                         result: CorrelationResult,
                         save_path: Optional[Path] = None) -> plt.Figure:
        """Scatter of aligned closes with a fitted regression line"""
        fig, ax = plt.subplots(figsize=(8, 8))
        sns.regplot(x=np.asarray(result.values_a), y=np.asarray(result.values_b), ax=ax,
                    scatter_kws={'alpha': 0.5, 's': 12}, line_kws={'color': self.colors[1]})
        ax.set_xlabel(result.symbol_a)
        ax.set_ylabel(result.symbol_b)
        ax.set_title(f"{result.symbol_a} vs {result.symbol_b}: r = {result.coefficient:.4f}")

        if save_path:
            fig.savefig(save_path)

        return fig

    def plot_correlation_matrix(self,
                                results: List[CorrelationResult],
                                save_path: Optional[Path] = None) -> plt.Figure:
        """Heatmap of pairwise coefficients"""
        if not results:
            raise ValueError("No correlation results to plot")

        symbols = []
        for r in results:
            for s in (r.symbol_a, r.symbol_b):
                if s not in symbols:
                    symbols.append(s)
        index = {s: i for i, s in enumerate(symbols)}
        matrix = np.eye(len(symbols))
        for r in results:
            matrix[index[r.symbol_a], index[r.symbol_b]] = r.coefficient
            matrix[index[r.symbol_b], index[r.symbol_a]] = r.coefficient

        fig, ax = plt.subplots(figsize=(8, 6))
        sns.heatmap(matrix, annot=True, fmt='.2f', vmin=-1, vmax=1, cmap='coolwarm',
                    xticklabels=symbols, yticklabels=symbols, ax=ax)
        ax.set_title('Correlation Matrix')
        plt.tight_layout()

        if save_path:
            fig.savefig(save_path)

        return fig

    def close_all(self):
        """Close all open figures"""
        plt.close('all')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_all()
