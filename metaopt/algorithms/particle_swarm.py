"""
Particle swarm optimization for continuous vectors.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import PSO_CONFIG

logger = logging.getLogger(__name__)


class InertiaSchedule(Enum):
    """Inertia weight policy."""
    CONSTANT = "constant"
    LINEAR_DECREASING = "linear_decreasing"
    CONSTRICTION = "constriction"


@dataclass(frozen=True)
class PSOConfig(ConfigRecord):
    """Particle swarm parameters."""
    num_particles: int = 30
    max_iterations: int = 500
    w: float = 0.729
    w_min: float = 0.4
    c1: float = 1.49445
    c2: float = 1.49445
    v_max_ratio: float = 0.1
    inertia: InertiaSchedule = InertiaSchedule.LINEAR_DECREASING
    lower_bound: float = -5.12
    upper_bound: float = 5.12
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> PSOConfig:
    """Defaults from ``config.PSO_CONFIG``."""
    return PSOConfig.from_dict(PSO_CONFIG)


def constriction_factor(c1: float, c2: float) -> float:
    """Clerc-Kennedy constriction coefficient; 1.0 when phi <= 4."""
    phi = c1 + c2
    if phi <= 4.0:
        return 1.0
    return 2.0 / abs(2.0 - phi - math.sqrt(phi * phi - 4.0 * phi))


class ParticleSwarm(BaseAlgorithm):
    """Global-best PSO with velocity and position clamping."""

    name = "pso"
    required_callbacks = ('objective',)
    encodings = ('continuous',)

    @classmethod
    def default_config(cls) -> PSOConfig:
        return default_config()

    def inertia_weight(self, iteration: int) -> float:
        cfg = self.config
        if cfg.inertia == InertiaSchedule.CONSTRICTION:
            return constriction_factor(cfg.c1, cfg.c2)
        if cfg.inertia == InertiaSchedule.LINEAR_DECREASING:
            return cfg.w - (cfg.w - cfg.w_min) * iteration / max(1, cfg.max_iterations)
        return cfg.w

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        direction = self.direction
        dim = problem.size
        lower, upper = cfg.lower_bound, cfg.upper_bound
        v_max = cfg.v_max_ratio * (upper - lower)
        n = self._clamp_min('num_particles', cfg.num_particles, 1)
        evaluations = 0

        with self._stage("initialize", num_particles=n):
            positions = np.empty((n, dim), dtype=np.float64)
            velocities = np.empty((n, dim), dtype=np.float64)
            for i in range(n):
                for d in range(dim):
                    positions[i, d] = self.rng.uniform_range(lower, upper)
                    velocities[i, d] = self.rng.uniform_range(-v_max, v_max)
            costs = np.empty(n, dtype=np.float64)
            for i in range(n):
                costs[i] = problem.evaluate(positions[i])
                evaluations += 1
            personal_best = positions.copy()
            personal_cost = costs.copy()

            g = 0
            for i in range(1, n):
                if is_better(personal_cost[i], personal_cost[g], direction):
                    g = i
            global_best = Solution.from_data(personal_best[g], personal_cost[g])

        for iteration in range(cfg.max_iterations):
            with self._stage("iteration", iteration=iteration):
                w = self.inertia_weight(iteration)
                for i in range(n):
                    for d in range(dim):
                        r1 = self.rng.uniform()
                        r2 = self.rng.uniform()
                        v = (w * velocities[i, d]
                             + cfg.c1 * r1 * (personal_best[i, d] - positions[i, d])
                             + cfg.c2 * r2 * (global_best.data[d] - positions[i, d]))
                        v = min(max(v, -v_max), v_max)
                        velocities[i, d] = v
                        positions[i, d] = min(max(positions[i, d] + v, lower), upper)

                    cost = problem.evaluate(positions[i])
                    evaluations += 1
                    if is_better(cost, personal_cost[i], direction):
                        personal_best[i] = positions[i]
                        personal_cost[i] = cost
                        if is_better(cost, global_best.cost, direction):
                            global_best = Solution.from_data(positions[i], cost)
                            logger.debug(f"{self.name}: new best {cost:.6g} at iter {iteration}")

                result.record(iteration, global_best.cost)
                self._log_progress(iteration, global_best.cost, inertia=w)

        result.best = global_best
        result.iterations = cfg.max_iterations
        result.evaluations = evaluations
        return result


def run_particle_swarm(problem: Problem, config: Optional[PSOConfig] = None,
                       profile: bool = False) -> OptimizationResult:
    """Run particle swarm optimization on ``problem``."""
    return ParticleSwarm(config, profile=profile).run(problem)
