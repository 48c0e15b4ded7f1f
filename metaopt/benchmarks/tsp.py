"""
Symmetric Euclidean TSP instances and their callbacks.
Tours are int64 permutations of ``range(n)``; the cost includes the
closing edge back to the first city.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from metaopt.algorithms.grasp import construct_tsp_nearest_neighbor
from metaopt.algorithms.operators import CrossoverOperator, MutationOperator
from metaopt.algorithms.vns import shake_tsp_swap
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import WORST_COST
from metaopt.optimization.lns_optimizer import tsp_destroy_operators, tsp_repair_operators


def distance_matrix(coordinates: np.ndarray) -> np.ndarray:
    """Pairwise Euclidean distances."""
    diff = coordinates[:, None, :] - coordinates[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=2))


@dataclass
class TSPInstance:
    """Named city set with its distance matrix and known optimum."""
    name: str
    coordinates: np.ndarray
    known_optimum: Optional[float] = None
    distances: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        self.coordinates = np.asarray(self.coordinates, dtype=np.float64)
        self.distances = distance_matrix(self.coordinates)

    @property
    def num_cities(self) -> int:
        return len(self.coordinates)

    def to_problem(self, neighbor: str = "swap") -> Problem:
        """
        Bundle this instance with the TSP callbacks.

        Args:
            neighbor: 'swap' or 'two_opt'

        Returns:
            Problem usable by every permutation driver
        """
        return Problem(
            size=self.num_cities,
            objective=tour_cost,
            context=self,
            generate=generate_random_tour,
            neighbor=neighbor_two_opt if neighbor == "two_opt" else neighbor_swap,
            perturb=perturb_double_bridge,
            crossover=CrossoverOperator.order_crossover,
            mutate=MutationOperator.swap_mutation,
            local_search=two_opt_local_search,
            shake=shake_tsp_swap,
            construct=construct_tsp_nearest_neighbor,
            destroy_ops=tsp_destroy_operators(),
            repair_ops=tsp_repair_operators(),
            heuristic=inverse_distance,
            name=self.name,
            known_optimum=self.known_optimum,
            encoding="permutation"
        )


def create_example_5() -> TSPInstance:
    """Regular pentagon of radius 10."""
    angles = [2.0 * math.pi * k / 5 for k in range(5)]
    coords = [(10.0 * math.cos(a), 10.0 * math.sin(a)) for a in angles]
    optimum = 5 * 2 * 10.0 * math.sin(math.pi / 5)
    return TSPInstance("tsp5", np.array(coords), optimum)


def create_example_10() -> TSPInstance:
    """Ten cities on the boundary of a 40x10 rectangle (optimum: its perimeter)."""
    coords = [(0, 0), (10, 0), (20, 0), (30, 0), (40, 0),
              (40, 10), (30, 10), (20, 10), (10, 10), (0, 10)]
    return TSPInstance("tsp10", np.array(coords), 100.0)


def create_example_20() -> TSPInstance:
    """Twenty cities on the boundary of a 90x10 rectangle (optimum: its perimeter)."""
    coords = [(x, 0) for x in range(0, 100, 10)] + [(x, 10) for x in range(90, -10, -10)]
    return TSPInstance("tsp20", np.array(coords), 200.0)


def create_random(n: int, seed: int = 42) -> TSPInstance:
    """``n`` cities uniform in [0, 100)^2 (at least 2)."""
    n = max(2, int(n))
    rng = RandomGenerator(seed)
    coords = [(rng.uniform() * 100.0, rng.uniform() * 100.0) for _ in range(n)]
    return TSPInstance(f"tsp-random-{n}", np.array(coords), None)


def tour_cost(data: np.ndarray, context: Any) -> float:
    """Closed tour length; WORST_COST for fewer than two cities."""
    n = len(data)
    if n < 2:
        return WORST_COST
    tour = np.asarray(data, dtype=np.int64)
    return float(context.distances[tour, np.roll(tour, -1)].sum())


def is_valid_tour(data: np.ndarray, n: int) -> bool:
    """True if ``data`` is a permutation of ``range(n)``."""
    if data is None or len(data) != n:
        return False
    return bool(np.array_equal(np.sort(np.asarray(data)), np.arange(n)))


def generate_random_tour(size: int, context: Any, rng: RandomGenerator) -> np.ndarray:
    tour = list(range(size))
    rng.shuffle(tour)
    return np.array(tour, dtype=np.int64)


def neighbor_swap(data: np.ndarray, context: Any, rng: RandomGenerator) -> np.ndarray:
    """Swap two distinct positions."""
    result = data.copy()
    n = len(result)
    if n < 2:
        return result
    i = rng.randint(0, n - 1)
    j = rng.randint(0, n - 2)
    if j >= i:
        j += 1
    result[i], result[j] = result[j], result[i]
    return result


def neighbor_two_opt(data: np.ndarray, context: Any, rng: RandomGenerator) -> np.ndarray:
    """Reverse a random segment."""
    result = data.copy()
    n = len(result)
    if n < 2:
        return result
    i = rng.randint(0, n - 2)
    j = rng.randint(i + 1, n - 1)
    result[i:j + 1] = result[i:j + 1][::-1]
    return result


def perturb_double_bridge(data: np.ndarray, strength: int, context: Any,
                          rng: RandomGenerator) -> np.ndarray:
    """
    Double-bridge move: split into A B C D and reconnect as A C B D.

    Tours shorter than 8 are returned unchanged (as a copy).
    """
    n = len(data)
    if n < 8:
        return data.copy()
    p1 = rng.randint(1, n // 4)
    p2 = rng.randint(p1 + 1, n // 2)
    p3 = rng.randint(p2 + 1, 3 * n // 4)
    return np.concatenate((data[:p1], data[p2:p3], data[p1:p2], data[p3:]))


def inverse_distance(i: int, j: int, context: Any) -> float:
    """ACO visibility ``1/d``; large for coincident cities."""
    d = context.distances[i, j]
    if d <= 1e-12:
        return 1e12
    return 1.0 / d


def two_opt_local_search(data: np.ndarray, objective, context: Any, rng: RandomGenerator,
                         max_passes: int = 50):
    """
    First-improvement 2-opt over all segment pairs.

    Sweeps until a full pass finds no improving reversal or ``max_passes``
    is reached.

    Returns:
        Tuple of (improved tour, its cost)
    """
    dist = context.distances
    tour = np.array(data, dtype=np.int64, copy=True)
    n = len(tour)
    if n < 4:
        return tour, objective(tour, context)

    for _ in range(max_passes):
        improved = False
        for i in range(n - 1):
            for j in range(i + 2, n if i > 0 else n - 1):
                a, b = tour[i], tour[i + 1]
                c, d = tour[j], tour[(j + 1) % n]
                gain = dist[a, b] + dist[c, d] - dist[a, c] - dist[b, d]
                if gain > 1e-10:
                    tour[i + 1:j + 1] = tour[i + 1:j + 1][::-1]
                    improved = True
        if not improved:
            break
    return tour, objective(tour, context)
