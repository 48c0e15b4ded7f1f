"""
Comparison of several drivers on one problem.
"""

import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from metaopt.algorithms import ALGORITHMS, get_algorithm, prepare_config
from metaopt.models.problem import Problem
from metaopt.models.solution import OptimizationResult

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ['algorithm', 'best_cost', 'gap_percent', 'iterations',
                   'evaluations', 'elapsed']


def gap_percent(best_cost: float, known_optimum: Optional[float]) -> float:
    """
    Relative gap to the known optimum in percent.

    NaN when no optimum is known or the optimum is zero.
    """
    if known_optimum is None or abs(known_optimum) < 1e-12:
        return float('nan')
    return (best_cost - known_optimum) / abs(known_optimum) * 100.0


class AlgorithmComparator:
    """Runs several drivers on the same problem and tabulates the outcome."""

    def __init__(self, problem: Problem):
        """
        Initialize comparator.

        Args:
            problem: Problem every driver is run on
        """
        self.problem = problem
        self.results: Dict[str, OptimizationResult] = {}

    def compatible_algorithms(self) -> List[str]:
        """Registry names whose drivers can run on this problem."""
        return [name for name, cls in ALGORITHMS.items() if cls.supports(self.problem)]

    def compare(self, algorithms: Optional[List[str]] = None, preset: Optional[str] = None,
                seed: Optional[int] = None, iterations: Optional[int] = None,
                profile: bool = False) -> pd.DataFrame:
        """
        Run each algorithm once and summarize.

        Args:
            algorithms: Registry names (all compatible ones when None)
            preset: Optional iteration preset
            seed: Optional seed shared by every run
            iterations: Optional explicit iteration cap
            profile: Record phase timings

        Returns:
            DataFrame with one row per algorithm, best first

        Raises:
            UnknownAlgorithmError: If a name is not registered
        """
        names = algorithms or self.compatible_algorithms()
        self.results = {}
        for name in names:
            cls = get_algorithm(name)
            if not cls.supports(self.problem):
                logger.warning(f"Skipping {name}: not applicable to '{self.problem.name}'")
                continue
            config = prepare_config(cls, self.problem, preset=preset, seed=seed,
                                    iterations=iterations)
            self.results[name] = cls(config, profile=profile).run(self.problem)

        return self.summary()

    def summary(self) -> pd.DataFrame:
        """Summary table of the last comparison, lowest cost first."""
        rows = []
        for name, result in self.results.items():
            rows.append({
                'algorithm': name,
                'best_cost': float(result.best.cost),
                'gap_percent': gap_percent(result.best.cost, self.problem.known_optimum),
                'iterations': result.iterations,
                'evaluations': result.evaluations,
                'elapsed': result.elapsed
            })
        df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
        if df.empty:
            return df
        return df.sort_values('best_cost', kind='mergesort').reset_index(drop=True)

    def convergence_frame(self) -> pd.DataFrame:
        """Convergence traces side by side, padded with NaN."""
        length = max((len(r.convergence) for r in self.results.values()), default=0)
        data = {}
        for name, result in self.results.items():
            trace = result.convergence
            data[name] = trace + [np.nan] * (length - len(trace))
        return pd.DataFrame(data)

    def best_algorithm(self) -> Optional[str]:
        df = self.summary()
        if df.empty:
            return None
        return df.iloc[0]['algorithm']
