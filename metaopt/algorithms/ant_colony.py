"""
Ant colony optimization for permutation problems.
Supports Ant System, Elitist Ant System and MAX-MIN Ant System.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import ACO_CONFIG

logger = logging.getLogger(__name__)


class ACOVariant(Enum):
    """Pheromone deposit rule."""
    ANT_SYSTEM = "ant_system"
    ELITIST = "elitist"
    MAX_MIN = "max_min"


@dataclass(frozen=True)
class ACOConfig(ConfigRecord):
    """Ant colony parameters."""
    n_ants: int = 20
    max_iterations: int = 500
    alpha: float = 1.0
    beta: float = 3.0
    rho: float = 0.1
    q: float = 1.0
    tau_0: float = 0.1
    variant: ACOVariant = ACOVariant.ANT_SYSTEM
    elitist_weight: float = 2.0
    tau_min: float = 0.001
    tau_max: float = 10.0
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> ACOConfig:
    """Defaults from ``config.ACO_CONFIG``."""
    return ACOConfig.from_dict(ACO_CONFIG)


class AntColonyOptimization(BaseAlgorithm):
    """Tour construction by pheromone-biased roulette."""

    name = "aco"
    required_callbacks = ('objective', 'heuristic')
    encodings = ('permutation',)

    @classmethod
    def default_config(cls) -> ACOConfig:
        return default_config()

    def __init__(self, config: Optional[ACOConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.pheromone: Optional[np.ndarray] = None

    def construct_tour(self, weights: np.ndarray) -> np.ndarray:
        """
        Build one ant's tour.

        Args:
            weights: Matrix of ``tau^alpha * eta^beta``

        Returns:
            Permutation of ``range(n)``
        """
        n = weights.shape[0]
        tour = np.empty(n, dtype=np.int64)
        visited = np.zeros(n, dtype=bool)
        current = self.rng.randint(0, n - 1)
        tour[0] = current
        visited[current] = True

        for step in range(1, n):
            row = weights[current]
            total = 0.0
            for j in range(n):
                if not visited[j]:
                    total += row[j]

            chosen = -1
            if total > 1e-15:
                r = self.rng.uniform()
                cumulative = 0.0
                for j in range(n):
                    if visited[j] or row[j] <= 0.0:
                        continue
                    cumulative += row[j] / total
                    if cumulative >= r:
                        chosen = j
                        break
            if chosen < 0:
                chosen = int(np.flatnonzero(~visited)[0])

            tour[step] = chosen
            visited[chosen] = True
            current = chosen
        return tour

    def _deposit(self, tour: np.ndarray, amount: float):
        tau = self.pheromone
        n = len(tour)
        for k in range(n):
            a = tour[k]
            b = tour[(k + 1) % n]
            tau[a, b] += amount
            tau[b, a] += amount

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        direction = self.direction
        n = problem.size
        n_ants = self._clamp_min('n_ants', cfg.n_ants, 1)
        evaluations = 0

        with self._stage("initialize"):
            self.pheromone = np.full((n, n), cfg.tau_0, dtype=np.float64)
            eta = np.zeros((n, n), dtype=np.float64)
            for i in range(n):
                for j in range(n):
                    if i != j:
                        eta[i, j] = problem.heuristic(i, j, problem.context)
            eta_beta = np.power(eta, cfg.beta)

        best: Optional[Solution] = None

        for iteration in range(cfg.max_iterations):
            with self._stage("iteration", iteration=iteration):
                weights = np.power(self.pheromone, cfg.alpha) * eta_beta
                tours: List[np.ndarray] = []
                costs: List[float] = []
                iter_best = 0
                for ant in range(n_ants):
                    tour = self.construct_tour(weights)
                    cost = problem.evaluate(tour)
                    evaluations += 1
                    tours.append(tour)
                    costs.append(cost)
                    if is_better(cost, costs[iter_best], direction):
                        iter_best = ant

                if best is None or is_better(costs[iter_best], best.cost, direction):
                    best = Solution.from_data(tours[iter_best], costs[iter_best])
                    logger.debug(f"{self.name}: new best {best.cost:.6g} at iter {iteration}")

                self.pheromone *= (1.0 - cfg.rho)
                if cfg.variant == ACOVariant.MAX_MIN:
                    if iteration % 5 == 0:
                        self._deposit(best.data, cfg.q / max(best.cost, 1e-15))
                    else:
                        self._deposit(tours[iter_best], cfg.q / max(costs[iter_best], 1e-15))
                    np.clip(self.pheromone, cfg.tau_min, cfg.tau_max, out=self.pheromone)
                else:
                    for tour, cost in zip(tours, costs):
                        self._deposit(tour, cfg.q / max(cost, 1e-15))
                    if cfg.variant == ACOVariant.ELITIST:
                        self._deposit(best.data, cfg.elitist_weight * cfg.q / max(best.cost, 1e-15))

                result.record(iteration, best.cost)
                self._log_progress(iteration, best.cost)

        if best is None:
            tour = self.construct_tour(np.power(self.pheromone, cfg.alpha) * eta_beta)
            best = Solution.from_data(tour, problem.evaluate(tour))
            evaluations += 1
        result.best = best
        result.iterations = cfg.max_iterations
        result.evaluations = evaluations
        return result


def run_ant_colony(problem: Problem, config: Optional[ACOConfig] = None,
                   profile: bool = False) -> OptimizationResult:
    """Run ant colony optimization on ``problem``."""
    return AntColonyOptimization(config, profile=profile).run(problem)
