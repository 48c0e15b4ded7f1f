"""
Data model: solutions, results and problem bundles.
"""

from .solution import (
    Direction, Solution, OptimizationResult, is_better, worst_value, delta, WORST_COST
)
from .problem import Problem

__all__ = [
    'Direction', 'Solution', 'OptimizationResult', 'is_better', 'worst_value',
    'delta', 'WORST_COST', 'Problem'
]
