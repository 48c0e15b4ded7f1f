"""
Differential evolution driver for continuous vectors.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import DE_CONFIG

logger = logging.getLogger(__name__)


class DEStrategy(Enum):
    """Donor vector construction rule."""
    RAND_1 = "rand/1"
    BEST_1 = "best/1"
    CURRENT_TO_BEST_1 = "current-to-best/1"
    RAND_2 = "rand/2"
    BEST_2 = "best/2"


# Distinct random vectors drawn per strategy, excluding the target.
STRATEGY_VECTORS = {
    DEStrategy.RAND_1: 3,
    DEStrategy.BEST_1: 2,
    DEStrategy.CURRENT_TO_BEST_1: 2,
    DEStrategy.RAND_2: 5,
    DEStrategy.BEST_2: 4,
}


@dataclass(frozen=True)
class DEConfig(ConfigRecord):
    """Differential evolution parameters."""
    population_size: int = 50
    max_generations: int = 1000
    F: float = 0.8
    CR: float = 0.9
    strategy: DEStrategy = DEStrategy.RAND_1
    lower_bound: float = -5.12
    upper_bound: float = 5.12
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> DEConfig:
    """Defaults from ``config.DE_CONFIG``."""
    return DEConfig.from_dict(DE_CONFIG)


def minimum_population(strategy: DEStrategy) -> int:
    """Smallest population able to supply the strategy's distinct vectors."""
    return max(4, STRATEGY_VECTORS[strategy] + 1)


class DifferentialEvolution(BaseAlgorithm):
    """DE with five mutation strategies and binomial crossover."""

    name = "de"
    required_callbacks = ('objective',)
    encodings = ('continuous',)

    @classmethod
    def default_config(cls) -> DEConfig:
        return default_config()

    def _donor(self, population: np.ndarray, i: int, best_idx: int) -> np.ndarray:
        cfg = self.config
        F = cfg.F
        picks = self.rng.distinct_indices(STRATEGY_VECTORS[cfg.strategy], len(population), i)
        v = [population[p] for p in picks]
        best = population[best_idx]

        if cfg.strategy == DEStrategy.BEST_1:
            return best + F * (v[0] - v[1])
        if cfg.strategy == DEStrategy.CURRENT_TO_BEST_1:
            x = population[i]
            return x + F * (best - x) + F * (v[0] - v[1])
        if cfg.strategy == DEStrategy.RAND_2:
            return v[0] + F * (v[1] - v[2]) + F * (v[3] - v[4])
        if cfg.strategy == DEStrategy.BEST_2:
            return best + F * (v[0] - v[1]) + F * (v[2] - v[3])
        return v[0] + F * (v[1] - v[2])

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_generations, self.name)
        direction = self.direction
        dim = problem.size
        lower, upper = cfg.lower_bound, cfg.upper_bound
        pop_size = self._clamp_min('population_size', cfg.population_size,
                                   minimum_population(cfg.strategy))
        evaluations = 0

        with self._stage("initialize", population_size=pop_size):
            population = np.empty((pop_size, dim), dtype=np.float64)
            for i in range(pop_size):
                for d in range(dim):
                    population[i, d] = self.rng.uniform_range(lower, upper)
            fitness = np.empty(pop_size, dtype=np.float64)
            for i in range(pop_size):
                fitness[i] = problem.evaluate(population[i])
                evaluations += 1

            best_idx = 0
            for i in range(1, pop_size):
                if is_better(fitness[i], fitness[best_idx], direction):
                    best_idx = i

        for generation in range(cfg.max_generations):
            with self._stage("generation", generation=generation):
                for i in range(pop_size):
                    donor = np.clip(self._donor(population, i, best_idx), lower, upper)

                    j_rand = self.rng.randint(0, dim - 1)
                    trial = population[i].copy()
                    for d in range(dim):
                        if self.rng.uniform() < cfg.CR or d == j_rand:
                            trial[d] = donor[d]

                    trial_cost = problem.evaluate(trial)
                    evaluations += 1
                    if not is_better(fitness[i], trial_cost, direction):
                        population[i] = trial
                        fitness[i] = trial_cost
                        if is_better(trial_cost, fitness[best_idx], direction):
                            best_idx = i

                result.record(generation, fitness[best_idx])
                self._log_progress(generation, float(fitness[best_idx]))

        result.best = Solution.from_data(population[best_idx], fitness[best_idx])
        result.iterations = cfg.max_generations
        result.evaluations = evaluations
        return result


def run_differential_evolution(problem: Problem, config: Optional[DEConfig] = None,
                               profile: bool = False) -> OptimizationResult:
    """Run differential evolution on ``problem``."""
    return DifferentialEvolution(config, profile=profile).run(problem)
