"""
Hill climbing variants: steepest, first improvement, random restart and
stochastic.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, delta, is_better, worst_value
)
from config import HC_CONFIG

logger = logging.getLogger(__name__)


class HCVariant(Enum):
    """Hill climbing move rule."""
    STEEPEST = "steepest"
    FIRST_IMPROVEMENT = "first_improvement"
    RANDOM_RESTART = "random_restart"
    STOCHASTIC = "stochastic"


@dataclass(frozen=True)
class HCConfig(ConfigRecord):
    """Hill climbing parameters."""
    variant: HCVariant = HCVariant.STEEPEST
    max_iterations: int = 1000
    neighbors_per_iter: int = 20
    num_restarts: int = 10
    temperature: float = 1.0
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> HCConfig:
    """Defaults from ``config.HC_CONFIG``."""
    return HCConfig.from_dict(HC_CONFIG)


class HillClimbing(BaseAlgorithm):
    """Local improvement from a single random start (or several)."""

    name = "hc"
    required_callbacks = ('objective', 'generate', 'neighbor')

    @classmethod
    def default_config(cls) -> HCConfig:
        return default_config()

    def _climb(self, problem: Problem, rng: RandomGenerator,
               variant: HCVariant) -> Tuple[Solution, List[float], int]:
        """
        One climb from a fresh random start.

        Returns:
            Tuple of (best solution, best-so-far trace, iterations executed)
        """
        cfg = self.config
        direction = self.direction
        k = self._num_neighbors

        current = problem.generate(problem.size, problem.context, rng)
        current_cost = problem.evaluate(current)
        self._evaluations += 1
        best = Solution.from_data(current, current_cost)
        trace: List[float] = []
        iterations = 0

        for iteration in range(cfg.max_iterations):
            iterations = iteration + 1
            moved = False

            if variant == HCVariant.STOCHASTIC:
                candidate = problem.neighbor(current, problem.context, rng)
                cost = problem.evaluate(candidate)
                self._evaluations += 1
                d = delta(cost, current_cost, direction)
                if d < 0.0 or (cfg.temperature > 1e-15
                               and rng.uniform() < math.exp(-abs(d) / cfg.temperature)):
                    current, current_cost = candidate, cost
                moved = True
            elif variant == HCVariant.FIRST_IMPROVEMENT:
                for _ in range(k):
                    candidate = problem.neighbor(current, problem.context, rng)
                    cost = problem.evaluate(candidate)
                    self._evaluations += 1
                    if is_better(cost, current_cost, direction):
                        current, current_cost = candidate, cost
                        moved = True
                        break
            else:
                chosen, chosen_cost = None, current_cost
                for _ in range(k):
                    candidate = problem.neighbor(current, problem.context, rng)
                    cost = problem.evaluate(candidate)
                    self._evaluations += 1
                    if chosen is None or is_better(cost, chosen_cost, direction):
                        chosen, chosen_cost = candidate, cost
                if is_better(chosen_cost, current_cost, direction):
                    current, current_cost = chosen, chosen_cost
                    moved = True

            if is_better(current_cost, best.cost, direction):
                best = Solution.from_data(current, current_cost)
            trace.append(best.cost)
            if not moved:
                break

        return best, trace, iterations

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        self._evaluations = 0
        self._num_neighbors = self._clamp_min('neighbors_per_iter', cfg.neighbors_per_iter, 1)

        if cfg.variant != HCVariant.RANDOM_RESTART:
            result = OptimizationResult.create(cfg.max_iterations, self.name)
            with self._stage("climb", variant=cfg.variant.name):
                best, trace, iterations = self._climb(problem, self.rng, cfg.variant)
            for i, value in enumerate(trace):
                result.record(i, value)
            result.best = best
            result.iterations = iterations
            result.evaluations = self._evaluations
            return result

        restarts = self._clamp_min('num_restarts', cfg.num_restarts, 1)
        result = OptimizationResult.create(cfg.max_iterations * restarts, self.name)
        best: Optional[Solution] = None
        running = worst_value(self.direction)
        offset = 0
        for r in range(restarts):
            # Each restart climbs with its own stream seeded seed + r
            with self._stage("restart", restart=r):
                sub_best, trace, _ = self._climb(
                    problem, RandomGenerator(cfg.seed + r), HCVariant.STEEPEST)
            if best is None or is_better(sub_best.cost, best.cost, self.direction):
                best = sub_best
                logger.debug(f"{self.name}: restart {r} improved best to {best.cost:.6g}")
            for value in trace:
                if is_better(value, running, self.direction):
                    running = value
                result.record(offset, running)
                offset += 1

        result.best = best
        result.iterations = offset
        result.evaluations = self._evaluations
        return result


def run_hill_climbing(problem: Problem, config: Optional[HCConfig] = None,
                      profile: bool = False) -> OptimizationResult:
    """Run hill climbing on ``problem``."""
    return HillClimbing(config, profile=profile).run(problem)
