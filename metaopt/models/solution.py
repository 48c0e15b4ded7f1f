"""
Solution and result representation shared by every driver.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np


class Direction(Enum):
    """Optimization direction."""
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


WORST_COST = sys.float_info.max


def is_better(a: float, b: float, direction: Direction) -> bool:
    """Strict comparison under the given direction."""
    if direction == Direction.MINIMIZE:
        return a < b
    return a > b


def worst_value(direction: Direction) -> float:
    """Worst representable cost under the given direction."""
    return WORST_COST if direction == Direction.MINIMIZE else -WORST_COST


def delta(new_cost: float, current_cost: float, direction: Direction) -> float:
    """Direction-adjusted cost change; negative means improvement."""
    if direction == Direction.MINIMIZE:
        return new_cost - current_cost
    return current_cost - new_cost


@dataclass
class Solution:
    """A candidate solution owned by whichever driver currently holds it."""
    data: Optional[np.ndarray] = None
    cost: float = WORST_COST

    @classmethod
    def create(cls, size: int, dtype=np.float64) -> 'Solution':
        """Zeroed buffer of ``size`` elements with the worst cost."""
        return cls(data=np.zeros(size, dtype=dtype), cost=WORST_COST)

    @classmethod
    def from_data(cls, data, cost: float) -> 'Solution':
        """Own a copy of ``data`` together with its known cost."""
        return cls(data=np.array(data, copy=True), cost=float(cost))

    @property
    def size(self) -> int:
        return 0 if self.data is None else len(self.data)

    @property
    def is_destroyed(self) -> bool:
        return self.data is None

    def clone(self) -> 'Solution':
        """Deep copy of data and cost."""
        data = None if self.data is None else self.data.copy()
        return Solution(data=data, cost=self.cost)

    def destroy(self):
        """Release the buffer. Calling it again is a no-op."""
        self.data = None

    def to_dict(self) -> Dict:
        """Convert solution to dictionary."""
        return {
            'data': [] if self.data is None else self.data.tolist(),
            'cost': float(self.cost),
            'size': self.size
        }


@dataclass
class OptimizationResult:
    """
    Outcome of one driver run.

    ``convergence[i]`` holds the best cost known after iteration ``i``;
    writes beyond the capacity given at creation are skipped.
    """
    best: Solution = field(default_factory=Solution)
    iterations: int = 0
    evaluations: int = 0
    elapsed: float = 0.0
    algorithm: str = ""
    capacity: int = 0
    _trace: List[float] = field(default_factory=list, repr=False)

    @classmethod
    def create(cls, max_iterations: int, algorithm: str = "") -> 'OptimizationResult':
        return cls(capacity=max(0, int(max_iterations)), algorithm=algorithm)

    @classmethod
    def empty(cls, algorithm: str = "") -> 'OptimizationResult':
        """Degenerate result: no data, no samples, zero counters."""
        return cls(capacity=0, algorithm=algorithm)

    @property
    def convergence(self) -> List[float]:
        return list(self._trace)

    def record(self, iteration: int, value: float):
        """Store the best-so-far cost for ``iteration`` if it fits."""
        if iteration < 0 or iteration >= self.capacity:
            return
        if iteration < len(self._trace):
            self._trace[iteration] = float(value)
            return
        while len(self._trace) < iteration:
            self._trace.append(float(value))
        self._trace.append(float(value))

    def is_empty(self) -> bool:
        return self.best.is_destroyed and self.iterations == 0

    def summary(self) -> Dict:
        """Flat statistics used by the comparator and exporter."""
        return {
            'algorithm': self.algorithm,
            'best_cost': float(self.best.cost),
            'iterations': self.iterations,
            'evaluations': self.evaluations,
            'elapsed': self.elapsed,
            'samples': len(self._trace)
        }

    def to_dict(self) -> Dict:
        data = self.summary()
        data['best'] = self.best.to_dict()
        data['convergence'] = self.convergence
        return data
