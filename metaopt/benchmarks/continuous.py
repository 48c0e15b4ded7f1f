"""
Continuous test functions on box domains.
All functions have known optimum 0.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from metaopt.algorithms.grasp import construct_continuous
from metaopt.algorithms.local_search import neighborhood_local_search
from metaopt.algorithms.operators import CrossoverOperator, MutationOperator
from metaopt.algorithms.vns import shake_continuous_gaussian
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem


class ContinuousFunction(Enum):
    """Benchmark function family."""
    SPHERE = "sphere"
    RASTRIGIN = "rastrigin"
    ROSENBROCK = "rosenbrock"
    ACKLEY = "ackley"
    SCHWEFEL = "schwefel"


@dataclass
class ContinuousInstance:
    """Function kind, dimension, bounds and neighbor step size."""
    function: ContinuousFunction
    dimension: int
    lower_bound: float
    upper_bound: float
    sigma: float = 0.1
    known_optimum: float = 0.0

    @property
    def name(self) -> str:
        return f"{self.function.value}-{self.dimension}d"

    def optimum_point(self) -> np.ndarray:
        """Location of the global minimum."""
        if self.function == ContinuousFunction.ROSENBROCK:
            return np.ones(self.dimension)
        if self.function == ContinuousFunction.SCHWEFEL:
            return np.full(self.dimension, 420.9687)
        return np.zeros(self.dimension)

    def to_problem(self) -> Problem:
        """Bundle this instance with the continuous callbacks."""
        return Problem(
            size=self.dimension,
            objective=evaluate,
            context=self,
            generate=generate_random,
            neighbor=neighbor_gaussian,
            crossover=CrossoverOperator.blend_crossover,
            mutate=MutationOperator.gaussian_mutation,
            local_search=neighborhood_local_search(neighbor_gaussian),
            shake=shake_continuous_gaussian,
            construct=construct_continuous,
            name=self.name,
            known_optimum=self.known_optimum,
            encoding="continuous"
        )


def create_sphere(dimension: int = 10) -> ContinuousInstance:
    return ContinuousInstance(ContinuousFunction.SPHERE, dimension, -5.12, 5.12)


def create_rastrigin(dimension: int = 10) -> ContinuousInstance:
    return ContinuousInstance(ContinuousFunction.RASTRIGIN, dimension, -5.12, 5.12)


def create_rosenbrock(dimension: int = 10) -> ContinuousInstance:
    return ContinuousInstance(ContinuousFunction.ROSENBROCK, dimension, -5.0, 10.0)


def create_ackley(dimension: int = 10) -> ContinuousInstance:
    return ContinuousInstance(ContinuousFunction.ACKLEY, dimension, -32.768, 32.768, sigma=0.5)


def create_schwefel(dimension: int = 10) -> ContinuousInstance:
    return ContinuousInstance(ContinuousFunction.SCHWEFEL, dimension, -500.0, 500.0, sigma=5.0)


def sphere(x: np.ndarray) -> float:
    return float(np.sum(x * x))


def rastrigin(x: np.ndarray) -> float:
    return float(10.0 * len(x) + np.sum(x * x - 10.0 * np.cos(2.0 * math.pi * x)))


def rosenbrock(x: np.ndarray) -> float:
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


def ackley(x: np.ndarray) -> float:
    d = len(x)
    term1 = -20.0 * math.exp(-0.2 * math.sqrt(np.sum(x * x) / d))
    term2 = -math.exp(np.sum(np.cos(2.0 * math.pi * x)) / d)
    return float(term1 + term2 + 20.0 + math.e)


def schwefel(x: np.ndarray) -> float:
    return float(418.9829 * len(x) - np.sum(x * np.sin(np.sqrt(np.abs(x)))))


FUNCTIONS = {
    ContinuousFunction.SPHERE: sphere,
    ContinuousFunction.RASTRIGIN: rastrigin,
    ContinuousFunction.ROSENBROCK: rosenbrock,
    ContinuousFunction.ACKLEY: ackley,
    ContinuousFunction.SCHWEFEL: schwefel,
}


def evaluate(data: np.ndarray, context: Any) -> float:
    """Objective value of ``data`` under ``context.function``."""
    return FUNCTIONS[context.function](np.asarray(data, dtype=np.float64))


def generate_random(size: int, context: Any, rng: RandomGenerator) -> np.ndarray:
    """Uniform point inside the bounds."""
    return np.array([rng.uniform_range(context.lower_bound, context.upper_bound)
                     for _ in range(size)], dtype=np.float64)


def neighbor_gaussian(data: np.ndarray, context: Any, rng: RandomGenerator) -> np.ndarray:
    """Add N(0, sigma) to every coordinate, clamped to the bounds."""
    result = np.array(data, dtype=np.float64, copy=True)
    for d in range(len(result)):
        result[d] = min(max(result[d] + context.sigma * rng.gaussian(), context.lower_bound),
                        context.upper_bound)
    return result


def is_within_bounds(data: np.ndarray, context: Any) -> bool:
    return bool(np.all(data >= context.lower_bound) and np.all(data <= context.upper_bound))
