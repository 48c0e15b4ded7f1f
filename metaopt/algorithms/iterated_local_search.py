"""
Iterated local search: perturb the incumbent, descend, and decide whether
to keep the new local optimum.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.algorithms.local_search import NeighborhoodDescent
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, delta, is_better
)
from config import ILS_CONFIG

logger = logging.getLogger(__name__)


class ILSAcceptance(Enum):
    """Acceptance criterion for the new local optimum."""
    BETTER = "better"
    ALWAYS = "always"
    SA_LIKE = "sa_like"
    RESTART = "restart"


@dataclass(frozen=True)
class ILSConfig(ConfigRecord):
    """Iterated local search parameters."""
    max_iterations: int = 1000
    local_search_iterations: int = 200
    local_search_neighbors: int = 20
    perturbation_strength: int = 1
    acceptance: ILSAcceptance = ILSAcceptance.BETTER
    sa_initial_temp: float = 10.0
    sa_alpha: float = 0.95
    restart_threshold: int = 50
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> ILSConfig:
    """Defaults from ``config.ILS_CONFIG``."""
    return ILSConfig.from_dict(ILS_CONFIG)


class IteratedLocalSearch(BaseAlgorithm):
    """Perturbation plus descent with four acceptance criteria."""

    name = "ils"
    required_callbacks = ('objective', 'generate', 'neighbor')

    @classmethod
    def default_config(cls) -> ILSConfig:
        return default_config()

    def __init__(self, config: Optional[ILSConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.restarts = 0
        self.accepted = 0

    def _perturb(self, problem: Problem, data: np.ndarray, strength: int) -> np.ndarray:
        if problem.perturb is not None:
            return problem.perturb(data, strength, problem.context, self.rng)
        for _ in range(strength):
            data = problem.neighbor(data, problem.context, self.rng)
        return data

    def _descend(self, data, cost):
        self._descent.evaluations = 0
        data, cost = self._descent.optimize(data, cost, self.rng)
        self._evaluations += self._descent.evaluations
        return data, cost

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        direction = self.direction
        strength = self._clamp_min('perturbation_strength', cfg.perturbation_strength, 1)
        self._evaluations = 0
        self.restarts = 0
        self.accepted = 0
        self._descent = NeighborhoodDescent(problem.objective, problem.neighbor, problem.context,
                                            direction, cfg.local_search_iterations,
                                            max(1, cfg.local_search_neighbors))

        with self._stage("initialize"):
            current = problem.generate(problem.size, problem.context, self.rng)
            current_cost = problem.evaluate(current)
            self._evaluations += 1
            current, current_cost = self._descend(current, current_cost)
        best = Solution.from_data(current, current_cost)

        temperature = cfg.sa_initial_temp
        no_improve = 0

        for iteration in range(cfg.max_iterations):
            with self._stage("iteration", iteration=iteration):
                candidate = self._perturb(problem, current, strength)
                candidate_cost = problem.evaluate(candidate)
                self._evaluations += 1
                candidate, candidate_cost = self._descend(candidate, candidate_cost)

                improved = is_better(candidate_cost, current_cost, direction)
                if cfg.acceptance == ILSAcceptance.ALWAYS:
                    accept = True
                elif cfg.acceptance == ILSAcceptance.SA_LIKE:
                    accept = improved
                    if not improved:
                        d = delta(candidate_cost, current_cost, direction)
                        if temperature > 1e-12:
                            accept = self.rng.uniform() < math.exp(-d / temperature)
                        temperature *= cfg.sa_alpha
                else:
                    accept = improved

                if accept:
                    current, current_cost = candidate, candidate_cost
                    self.accepted += 1

                if cfg.acceptance == ILSAcceptance.RESTART:
                    no_improve = 0 if improved else no_improve + 1
                    if no_improve >= cfg.restart_threshold:
                        current = problem.generate(problem.size, problem.context, self.rng)
                        current_cost = problem.evaluate(current)
                        self._evaluations += 1
                        current, current_cost = self._descend(current, current_cost)
                        no_improve = 0
                        self.restarts += 1
                        logger.debug(f"{self.name}: restart at iter {iteration}")

                if is_better(current_cost, best.cost, direction):
                    best = Solution.from_data(current, current_cost)
                    logger.debug(f"{self.name}: new best {best.cost:.6g} at iter {iteration}")

                result.record(iteration, best.cost)
                self._log_progress(iteration, best.cost)

        result.best = best
        result.iterations = cfg.max_iterations
        result.evaluations = self._evaluations
        return result

    def _extra_statistics(self) -> Dict:
        return {'accepted': self.accepted, 'restarts': self.restarts}


def run_iterated_local_search(problem: Problem, config: Optional[ILSConfig] = None,
                              profile: bool = False) -> OptimizationResult:
    """Run iterated local search on ``problem``."""
    return IteratedLocalSearch(config, profile=profile).run(problem)
