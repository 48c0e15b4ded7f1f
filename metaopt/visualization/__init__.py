"""
Convergence plots.
"""

from .plotter import ConvergencePlotter

__all__ = ['ConvergencePlotter']
