"""
Seedable random number generator handed explicitly to drivers and callbacks.

Each run owns one ``RandomGenerator`` seeded from its config, so identical
seeds reproduce identical draws and concurrent runs never interfere.
"""

import math
import random
from typing import MutableSequence, Optional


class RandomGenerator:
    """Uniform, inclusive-integer and Gaussian draws from one seeded stream."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random()
        self._spare: Optional[float] = None
        self.seed = seed
        self.set_seed(seed)

    def set_seed(self, seed: Optional[int]):
        """Reset the stream and drop any cached Gaussian spare."""
        self.seed = seed
        self._random.seed(seed)
        self._spare = None

    def uniform(self) -> float:
        """Uniform draw in [0, 1)."""
        return self._random.random()

    def uniform_range(self, low: float, high: float) -> float:
        """Uniform draw in [low, high)."""
        return low + self._random.random() * (high - low)

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both inclusive. Returns ``low`` when low >= high."""
        if low >= high:
            return low
        return self._random.randint(low, high)

    def gaussian(self) -> float:
        """
        Standard normal draw (Marsaglia polar form of Box-Muller).

        Each accepted pair yields two values; the second is cached and
        returned by the next call.
        """
        if self._spare is not None:
            value = self._spare
            self._spare = None
            return value

        while True:
            u = self._random.random() * 2.0 - 1.0
            v = self._random.random() * 2.0 - 1.0
            s = u * u + v * v
            if 0.0 < s < 1.0:
                break

        factor = math.sqrt(-2.0 * math.log(s) / s)
        self._spare = v * factor
        return u * factor

    def shuffle(self, items: MutableSequence):
        """In-place Fisher-Yates shuffle driven by ``randint``."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def distinct_indices(self, count: int, upper: int, exclude: int = -1) -> list:
        """
        Draw ``count`` distinct integers in [0, upper) other than ``exclude``.

        Rejection sampling; the caller guarantees enough candidates exist.
        """
        chosen = []
        while len(chosen) < count:
            r = self.randint(0, upper - 1)
            if r != exclude and r not in chosen:
                chosen.append(r)
        return chosen
