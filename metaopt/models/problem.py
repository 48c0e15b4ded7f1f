"""
Problem definition handed to drivers.
Bundles the solution size, the read-only context and the callables that
supply problem-specific behavior.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np

from metaopt.core.callbacks import (
    ObjectiveFn, NeighborFn, PerturbFn, GenerateFn, CrossoverFn, MutationFn,
    LocalSearchFn, HashFn, ShakeFn, ConstructFn, DestroyFn, RepairFn, HeuristicFn
)
from metaopt.core.exceptions import MissingCallbackError


@dataclass
class Problem:
    """Callables and context describing one optimization problem."""
    size: int
    objective: ObjectiveFn
    context: Any = None
    generate: Optional[GenerateFn] = None
    neighbor: Optional[NeighborFn] = None
    perturb: Optional[PerturbFn] = None
    crossover: Optional[CrossoverFn] = None
    mutate: Optional[MutationFn] = None
    local_search: Optional[LocalSearchFn] = None
    hash_fn: Optional[HashFn] = None
    shake: Optional[ShakeFn] = None
    construct: Optional[ConstructFn] = None
    destroy_ops: List[DestroyFn] = field(default_factory=list)
    repair_ops: List[RepairFn] = field(default_factory=list)
    heuristic: Optional[HeuristicFn] = None
    name: str = "problem"
    known_optimum: Optional[float] = None
    encoding: Optional[str] = None  # 'permutation' | 'continuous'

    def evaluate(self, data: np.ndarray) -> float:
        """Objective value of ``data``."""
        return float(self.objective(data, self.context))

    def has_callbacks(self, *names: str) -> bool:
        """True if every named callable is present."""
        for name in names:
            value = getattr(self, name)
            if value is None or (isinstance(value, list) and not value):
                return False
        return True

    def require(self, algorithm: str, *names: str):
        """
        Check that every named callable is present.

        Raises:
            MissingCallbackError: If one of them is None or an empty list
        """
        for name in names:
            if not self.has_callbacks(name):
                raise MissingCallbackError(callback=name, algorithm=algorithm)
