"""
Neighborhood descent used inside GRASP, VNS, ILS and the memetic algorithm.
Each step samples a batch of neighbors and moves to the best one only when
it strictly improves the current cost.
"""

from typing import Any, Tuple

import numpy as np

from metaopt.core.callbacks import LocalSearchFn, NeighborFn, ObjectiveFn
from metaopt.core.rng import RandomGenerator
from metaopt.models.solution import Direction, is_better, worst_value


class NeighborhoodDescent:
    """Best-of-k descent driven by a neighbor callable."""

    def __init__(self, objective: ObjectiveFn, neighbor: NeighborFn, context: Any,
                 direction: Direction, max_iterations: int, num_neighbors: int):
        """
        Initialize descent.

        Args:
            objective: Objective callable
            neighbor: Neighbor callable
            context: Problem context
            direction: Optimization direction
            max_iterations: Maximum improving steps
            num_neighbors: Neighbors sampled per step
        """
        self.objective = objective
        self.neighbor = neighbor
        self.context = context
        self.direction = direction
        self.max_iterations = max_iterations
        self.num_neighbors = num_neighbors
        self.evaluations = 0

    def _best_neighbor(self, data: np.ndarray, count: int,
                       rng: RandomGenerator) -> Tuple[np.ndarray, float]:
        best_data = None
        best_cost = worst_value(self.direction)
        for _ in range(count):
            candidate = self.neighbor(data, self.context, rng)
            cost = self.objective(candidate, self.context)
            self.evaluations += 1
            if best_data is None or is_better(cost, best_cost, self.direction):
                best_data = candidate
                best_cost = cost
        return best_data, best_cost

    def optimize(self, data: np.ndarray, cost: float,
                 rng: RandomGenerator) -> Tuple[np.ndarray, float]:
        """
        Descend from ``data`` until no sampled neighbor improves.

        Args:
            data: Starting solution (not modified)
            cost: Its objective value
            rng: Run random generator

        Returns:
            Tuple of (improved data, improved cost)
        """
        current = data
        for _ in range(self.max_iterations):
            candidate, candidate_cost = self._best_neighbor(current, self.num_neighbors, rng)
            if candidate is None or not is_better(candidate_cost, cost, self.direction):
                break
            current, cost = candidate, candidate_cost
        return current, cost

    def optimize_vnd(self, data: np.ndarray, cost: float, rng: RandomGenerator,
                     num_neighborhoods: int) -> Tuple[np.ndarray, float]:
        """
        Variable neighborhood descent.

        Neighborhood ``l`` samples ``num_neighbors * l`` candidates per step;
        any improvement sends the search back to ``l = 1``.
        """
        current = data
        level = 1
        while level <= num_neighborhoods:
            improved = False
            for _ in range(self.max_iterations):
                candidate, candidate_cost = self._best_neighbor(
                    current, self.num_neighbors * level, rng)
                if candidate is None or not is_better(candidate_cost, cost, self.direction):
                    break
                current, cost = candidate, candidate_cost
                improved = True
            level = 1 if improved else level + 1
        return current, cost


def neighborhood_local_search(neighbor: NeighborFn, max_iterations: int = 50,
                              num_neighbors: int = 10,
                              direction: Direction = Direction.MINIMIZE) -> LocalSearchFn:
    """
    Wrap a neighbor callable as a ``LocalSearchFn`` for the genetic algorithm.

    Args:
        neighbor: Neighbor callable
        max_iterations: Maximum improving steps
        num_neighbors: Neighbors sampled per step
        direction: Optimization direction

    Returns:
        Callable ``(data, objective, context, rng) -> (data, cost)``
    """
    def local_search(data, objective, context, rng):
        descent = NeighborhoodDescent(objective, neighbor, context, direction,
                                      max_iterations, num_neighbors)
        return descent.optimize(data, objective(data, context), rng)

    return local_search
