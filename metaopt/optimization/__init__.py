"""
Large neighborhood search.

This package contains the destroy-and-repair drivers:
- LNS with better-only or SA acceptance
- Adaptive LNS with roulette operator selection
- Built-in TSP destroy/repair operators
"""

# Load the driver registry first; it imports this package back.
import metaopt.algorithms  # noqa: F401
from .lns_optimizer import (
    LNSOptimizer, AdaptiveLNS, LNSConfig, LNSVariant, LNSAcceptance, OperatorWeights,
    destroy_random, destroy_worst, repair_greedy, repair_random,
    tsp_destroy_operators, tsp_repair_operators, run_lns, run_alns
)

__all__ = [
    'LNSOptimizer', 'AdaptiveLNS', 'LNSConfig', 'LNSVariant', 'LNSAcceptance',
    'OperatorWeights', 'destroy_random', 'destroy_worst', 'repair_greedy',
    'repair_random', 'tsp_destroy_operators', 'tsp_repair_operators', 'run_lns', 'run_alns'
]
