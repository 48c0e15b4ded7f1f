"""
Plotting utilities for convergence analysis.
"""

from typing import Dict, List, Optional

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

from metaopt.models.solution import OptimizationResult
from config import VIZ_CONFIG


class ConvergencePlotter:
    """Creates convergence plots for one or many runs."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize plotter.

        Args:
            config: Visualization configuration
        """
        self.config = config or VIZ_CONFIG.copy()

        plt.style.use('default')
        sns.set_palette(self.config.get('palette', 'husl'))

        self.fig_size = self.config['figure_size']
        self.dpi = self.config['dpi']
        self.font_size = self.config['font_size']
        self.line_width = self.config.get('line_width', 2)

    def plot_convergence(self, result: OptimizationResult, title: Optional[str] = None,
                         save_path: Optional[str] = None,
                         known_optimum: Optional[float] = None) -> plt.Figure:
        """
        Plot the best-so-far trace of one run.

        Args:
            result: Run result
            title: Plot title
            save_path: Optional path to save plot
            known_optimum: Draws a reference line when given

        Returns:
            Matplotlib figure
        """
        return self.plot_comparison({result.algorithm or 'run': result},
                                    title=title or f"{result.algorithm.upper()} Convergence",
                                    save_path=save_path, known_optimum=known_optimum)

    def plot_comparison(self, results: Dict[str, OptimizationResult],
                        title: str = "Convergence Comparison",
                        save_path: Optional[str] = None,
                        known_optimum: Optional[float] = None,
                        log_scale: bool = False) -> plt.Figure:
        """
        Overlay the convergence traces of several runs.

        Args:
            results: Results keyed by label
            title: Plot title
            save_path: Optional path to save plot
            known_optimum: Draws a reference line when given
            log_scale: Use a logarithmic cost axis

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.fig_size)
        colors: List = sns.color_palette(self.config.get('palette', 'husl'), max(1, len(results)))

        for color, (label, result) in zip(colors, results.items()):
            trace = result.convergence
            ax.plot(range(len(trace)), trace, color=color, linewidth=self.line_width,
                    label=f"{label} ({result.best.cost:.4g})")

        if known_optimum is not None:
            ax.axhline(known_optimum, color='gray', linestyle='--', linewidth=1,
                       label=f"Known optimum ({known_optimum:.4g})")
        if log_scale:
            ax.set_yscale('symlog')

        ax.set_xlabel('Iteration', fontsize=self.font_size)
        ax.set_ylabel('Best cost', fontsize=self.font_size)
        ax.set_title(title, fontsize=self.font_size + 2, fontweight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend()

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig

    def close(self, fig: plt.Figure):
        plt.close(fig)
