"""
Callable contracts for problem-specific behavior.

Solution data is a numpy array (``int64`` for permutations, ``float64`` for
continuous vectors). Callbacks return new arrays and must not mutate their
inputs; ``context`` is the read-only problem instance and ``rng`` the run's
``RandomGenerator``.
"""

from typing import Any, Callable, Protocol, Tuple

import numpy as np

from metaopt.core.rng import RandomGenerator


class ObjectiveFn(Protocol):
    def __call__(self, data: np.ndarray, context: Any) -> float: ...


class NeighborFn(Protocol):
    def __call__(self, data: np.ndarray, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class PerturbFn(Protocol):
    def __call__(self, data: np.ndarray, strength: int, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class GenerateFn(Protocol):
    def __call__(self, size: int, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class CrossoverFn(Protocol):
    def __call__(self, parent1: np.ndarray, parent2: np.ndarray, context: Any,
                 rng: RandomGenerator) -> Tuple[np.ndarray, np.ndarray]: ...


class MutationFn(Protocol):
    def __call__(self, data: np.ndarray, rate: float, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class LocalSearchFn(Protocol):
    """Refines ``data`` and returns the refined array with its cost."""

    def __call__(self, data: np.ndarray, objective: ObjectiveFn, context: Any,
                 rng: RandomGenerator) -> Tuple[np.ndarray, float]: ...


class ShakeFn(Protocol):
    def __call__(self, data: np.ndarray, k: int, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class ConstructFn(Protocol):
    def __call__(self, size: int, alpha: float, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class DestroyFn(Protocol):
    """Returns a copy of ``data`` with removed positions set to -1."""

    def __call__(self, data: np.ndarray, degree: float, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class RepairFn(Protocol):
    def __call__(self, destroyed: np.ndarray, context: Any,
                 rng: RandomGenerator) -> np.ndarray: ...


class HeuristicFn(Protocol):
    def __call__(self, i: int, j: int, context: Any) -> float: ...


HashFn = Callable[[np.ndarray], int]
