"""
Benchmark problems: TSP instances and continuous test functions.
"""

from typing import Optional

from config import BENCHMARK_CONFIG
from metaopt.core.exceptions import UnknownProblemError
from metaopt.models.problem import Problem
from .tsp import (
    TSPInstance, create_example_5, create_example_10, create_example_20, create_random,
    tour_cost, is_valid_tour
)
from .continuous import (
    ContinuousFunction, ContinuousInstance, create_sphere, create_rastrigin,
    create_rosenbrock, create_ackley, create_schwefel
)

TSP_PROBLEMS = {
    'tsp5': create_example_5,
    'tsp10': create_example_10,
    'tsp20': create_example_20,
}

CONTINUOUS_PROBLEMS = {
    'sphere': create_sphere,
    'rastrigin': create_rastrigin,
    'rosenbrock': create_rosenbrock,
    'ackley': create_ackley,
    'schwefel': create_schwefel,
}

PROBLEM_NAMES = sorted(list(TSP_PROBLEMS) + ['tsp-random'] + list(CONTINUOUS_PROBLEMS))


def create_problem(name: str, dimension: Optional[int] = None, cities: Optional[int] = None,
                   seed: Optional[int] = None) -> Problem:
    """
    Build a benchmark ``Problem`` by CLI name.

    Args:
        name: One of ``PROBLEM_NAMES``
        dimension: Dimension for continuous functions
        cities: City count for 'tsp-random'
        seed: Instance seed for 'tsp-random'

    Raises:
        UnknownProblemError: If ``name`` is not a known benchmark
    """
    key = name.lower()
    if key in TSP_PROBLEMS:
        return TSP_PROBLEMS[key]().to_problem()
    if key == 'tsp-random':
        return create_random(cities or BENCHMARK_CONFIG['random_cities'],
                             BENCHMARK_CONFIG['random_seed'] if seed is None else seed).to_problem()
    if key in CONTINUOUS_PROBLEMS:
        return CONTINUOUS_PROBLEMS[key](dimension or BENCHMARK_CONFIG['continuous_dimension']).to_problem()
    raise UnknownProblemError(name, PROBLEM_NAMES)


def is_permutation_problem(problem: Problem) -> bool:
    return isinstance(problem.context, TSPInstance)


__all__ = [
    'TSPInstance', 'create_example_5', 'create_example_10', 'create_example_20',
    'create_random', 'tour_cost', 'is_valid_tour',
    'ContinuousFunction', 'ContinuousInstance', 'create_sphere', 'create_rastrigin',
    'create_rosenbrock', 'create_ackley', 'create_schwefel',
    'TSP_PROBLEMS', 'CONTINUOUS_PROBLEMS', 'PROBLEM_NAMES', 'create_problem',
    'is_permutation_problem'
]
