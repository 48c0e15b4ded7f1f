"""
Variable neighborhood search: basic, reduced and general (VND) variants.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.algorithms.local_search import NeighborhoodDescent
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import VNS_CONFIG

logger = logging.getLogger(__name__)


class VNSVariant(Enum):
    """Improvement step applied after shaking."""
    BASIC = "basic"
    REDUCED = "reduced"
    GENERAL = "general"


@dataclass(frozen=True)
class VNSConfig(ConfigRecord):
    """Variable neighborhood search parameters."""
    max_iterations: int = 1000
    k_max: int = 5
    local_search_iterations: int = 200
    local_search_neighbors: int = 20
    variant: VNSVariant = VNSVariant.BASIC
    vnd_num_neighborhoods: int = 3
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> VNSConfig:
    """Defaults from ``config.VNS_CONFIG``."""
    return VNSConfig.from_dict(VNS_CONFIG)


def shake_tsp_swap(data: np.ndarray, k: int, context: Any, rng: RandomGenerator) -> np.ndarray:
    """Apply ``k`` random swaps of distinct positions."""
    shaken = data.copy()
    n = len(shaken)
    if n < 2:
        return shaken
    for _ in range(k):
        i = rng.randint(0, n - 1)
        j = rng.randint(0, n - 2)
        if j >= i:
            j += 1
        shaken[i], shaken[j] = shaken[j], shaken[i]
    return shaken


def shake_continuous_gaussian(data: np.ndarray, k: int, context: Any,
                              rng: RandomGenerator) -> np.ndarray:
    """Gaussian kick with sigma ``0.5 * k``, clamped to the context bounds."""
    sigma = 0.5 * k
    shaken = np.array(data, dtype=np.float64, copy=True)
    for d in range(len(shaken)):
        shaken[d] = min(max(shaken[d] + sigma * rng.gaussian(), context.lower_bound),
                        context.upper_bound)
    return shaken


class VariableNeighborhoodSearch(BaseAlgorithm):
    """Shake in growing neighborhoods, improve, and restart from k=1 on success."""

    name = "vns"
    required_callbacks = ('objective', 'generate', 'shake')

    @classmethod
    def default_config(cls) -> VNSConfig:
        return default_config()

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        direction = self.direction
        k_max = self._clamp_min('k_max', cfg.k_max, 1)
        evaluations = 0

        descent = None
        if problem.neighbor is not None and cfg.variant != VNSVariant.REDUCED:
            descent = NeighborhoodDescent(problem.objective, problem.neighbor, problem.context,
                                          direction, cfg.local_search_iterations,
                                          max(1, cfg.local_search_neighbors))

        def improve(data, cost):
            if descent is None:
                return data, cost
            descent.evaluations = 0
            if cfg.variant == VNSVariant.GENERAL:
                return descent.optimize_vnd(data, cost, self.rng,
                                            max(1, cfg.vnd_num_neighborhoods))
            return descent.optimize(data, cost, self.rng)

        with self._stage("initialize"):
            current = problem.generate(problem.size, problem.context, self.rng)
            current_cost = problem.evaluate(current)
            evaluations += 1
            current, current_cost = improve(current, current_cost)
            if descent is not None:
                evaluations += descent.evaluations
        best = Solution.from_data(current, current_cost)

        for iteration in range(cfg.max_iterations):
            with self._stage("iteration", iteration=iteration):
                k = 1
                while k <= k_max:
                    shaken = problem.shake(current, k, problem.context, self.rng)
                    shaken_cost = problem.evaluate(shaken)
                    evaluations += 1
                    shaken, shaken_cost = improve(shaken, shaken_cost)
                    if descent is not None:
                        evaluations += descent.evaluations

                    if is_better(shaken_cost, current_cost, direction):
                        current, current_cost = shaken, shaken_cost
                        k = 1
                        if is_better(current_cost, best.cost, direction):
                            best = Solution.from_data(current, current_cost)
                            logger.debug(f"{self.name}: new best {best.cost:.6g} "
                                         f"at iter {iteration}")
                    else:
                        k += 1

                result.record(iteration, best.cost)
                self._log_progress(iteration, best.cost)

        result.best = best
        result.iterations = cfg.max_iterations
        result.evaluations = evaluations
        return result


def run_vns(problem: Problem, config: Optional[VNSConfig] = None,
            profile: bool = False) -> OptimizationResult:
    """Run variable neighborhood search on ``problem``."""
    return VariableNeighborhoodSearch(config, profile=profile).run(problem)
