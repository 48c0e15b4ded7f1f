"""
GRASP: greedy randomized construction followed by local search.
Reactive GRASP learns which RCL greediness values produce good solutions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.algorithms.local_search import NeighborhoodDescent
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import GRASP_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GRASPConfig(ConfigRecord):
    """GRASP parameters."""
    max_iterations: int = 500
    alpha: float = 0.3
    local_search_iterations: int = 100
    local_search_neighbors: int = 20
    enable_reactive: bool = False
    reactive_num_alphas: int = 5
    reactive_block_size: int = 50
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> GRASPConfig:
    """Defaults from ``config.GRASP_CONFIG``."""
    return GRASPConfig.from_dict(GRASP_CONFIG)


def construct_tsp_nearest_neighbor(size: int, alpha: float, context: Any,
                                   rng: RandomGenerator) -> np.ndarray:
    """
    Randomized nearest-neighbor tour.

    From a random start, the next city is drawn uniformly from the
    restricted candidate list of unvisited cities within
    ``dmin + alpha * (dmax - dmin)`` of the current one.

    Args:
        size: Number of cities
        alpha: RCL greediness in [0, 1]
        context: Object exposing a ``distances`` matrix
        rng: Run random generator

    Returns:
        Permutation of ``range(size)``
    """
    distances = context.distances
    tour = np.empty(size, dtype=np.int64)
    visited = np.zeros(size, dtype=bool)
    current = rng.randint(0, size - 1)
    tour[0] = current
    visited[current] = True

    for step in range(1, size):
        unvisited = np.flatnonzero(~visited)
        row = distances[current, unvisited]
        threshold = row.min() + alpha * (row.max() - row.min()) + 1e-9
        rcl = unvisited[row <= threshold]
        current = int(rcl[rng.randint(0, len(rcl) - 1)])
        tour[step] = current
        visited[current] = True
    return tour


def construct_continuous(size: int, alpha: float, context: Any,
                         rng: RandomGenerator) -> np.ndarray:
    """Point pulled from the box center towards a uniform sample by ``alpha``."""
    lower, upper = context.lower_bound, context.upper_bound
    center = (lower + upper) / 2.0
    data = np.empty(size, dtype=np.float64)
    for d in range(size):
        data[d] = center + alpha * (rng.uniform_range(lower, upper) - center)
    return data


class GRASP(BaseAlgorithm):
    """Multi-start construct-and-improve search."""

    name = "grasp"
    required_callbacks = ('objective', 'construct')

    @classmethod
    def default_config(cls) -> GRASPConfig:
        return default_config()

    def __init__(self, config: Optional[GRASPConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.alphas: List[float] = []
        self.alpha_probabilities: List[float] = []
        self.alpha_usage: List[int] = []

    def _init_reactive(self):
        n = self._clamp_min('reactive_num_alphas', self.config.reactive_num_alphas, 1)
        self.alphas = [(i + 1) / (n + 1) for i in range(n)]
        self.alpha_probabilities = [1.0 / n] * n
        self.alpha_usage = [0] * n
        self._block_sums = [0.0] * n
        self._block_counts = [0] * n

    def _pick_alpha(self) -> int:
        r = self.rng.uniform()
        cumulative = 0.0
        for i, p in enumerate(self.alpha_probabilities):
            cumulative += p
            if cumulative >= r:
                return i
        return len(self.alpha_probabilities) - 1

    def _update_probabilities(self):
        """
        Recompute alpha probabilities from mean block costs.

        Used alphas share the mass not held by unused ones in proportion to
        their quality score; unused alphas keep their previous share.
        """
        used = [i for i, c in enumerate(self._block_counts) if c > 0]
        if not used:
            return
        means = {i: self._block_sums[i] / self._block_counts[i] for i in used}
        low = min(means.values())
        if self.direction == Direction.MINIMIZE:
            scores = {i: 1.0 / (1.0 + means[i] - low) for i in used}
        else:
            scores = {i: means[i] - low + 1.0 for i in used}

        free_mass = sum(self.alpha_probabilities[i] for i in used)
        total = sum(scores.values())
        for i in used:
            self.alpha_probabilities[i] = free_mass * scores[i] / total

        self._block_sums = [0.0] * len(self.alphas)
        self._block_counts = [0] * len(self.alphas)
        logger.debug(f"{self.name}: alpha probabilities "
                     f"{[round(p, 3) for p in self.alpha_probabilities]}")

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        direction = self.direction
        evaluations = 0

        descent = None
        if problem.neighbor is not None:
            descent = NeighborhoodDescent(problem.objective, problem.neighbor, problem.context,
                                          direction, cfg.local_search_iterations,
                                          max(1, cfg.local_search_neighbors))
        if cfg.enable_reactive:
            self._init_reactive()
            block_size = self._clamp_min('reactive_block_size', cfg.reactive_block_size, 1)

        best: Optional[Solution] = None
        for iteration in range(cfg.max_iterations):
            with self._stage("iteration", iteration=iteration):
                alpha_idx = -1
                alpha = cfg.alpha
                if cfg.enable_reactive:
                    alpha_idx = self._pick_alpha()
                    alpha = self.alphas[alpha_idx]

                data = problem.construct(problem.size, alpha, problem.context, self.rng)
                cost = problem.evaluate(data)
                evaluations += 1

                if descent is not None:
                    descent.evaluations = 0
                    data, cost = descent.optimize(data, cost, self.rng)
                    evaluations += descent.evaluations

                if best is None or is_better(cost, best.cost, direction):
                    best = Solution.from_data(data, cost)
                    logger.debug(f"{self.name}: new best {cost:.6g} at iter {iteration} "
                                 f"(alpha={alpha:.3f})")

                if cfg.enable_reactive:
                    self.alpha_usage[alpha_idx] += 1
                    self._block_sums[alpha_idx] += cost
                    self._block_counts[alpha_idx] += 1
                    if (iteration + 1) % block_size == 0:
                        self._update_probabilities()

                result.record(iteration, best.cost)
                self._log_progress(iteration, best.cost)

        if best is None:
            data = problem.construct(problem.size, cfg.alpha, problem.context, self.rng)
            best = Solution.from_data(data, problem.evaluate(data))
            evaluations += 1
        result.best = best
        result.iterations = cfg.max_iterations
        result.evaluations = evaluations
        return result

    def _extra_statistics(self) -> Dict:
        if not self.config.enable_reactive:
            return {}
        return {
            'alphas': list(self.alphas),
            'alpha_probabilities': list(self.alpha_probabilities),
            'alpha_usage': list(self.alpha_usage)
        }


def run_grasp(problem: Problem, config: Optional[GRASPConfig] = None,
              profile: bool = False) -> OptimizationResult:
    """Run GRASP on ``problem``."""
    return GRASP(config, profile=profile).run(problem)
