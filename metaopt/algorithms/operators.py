"""
Genetic operators.
Selection works on a population of ``Solution`` objects; crossover and
mutation are built-in callables for permutation and continuous encodings.
"""

from enum import Enum
from typing import Any, List, Tuple

import numpy as np

from metaopt.core.rng import RandomGenerator
from metaopt.models.solution import Direction, Solution, is_better


class SelectionMethod(Enum):
    """Parent selection scheme."""
    TOURNAMENT = "tournament"
    ROULETTE = "roulette"
    RANK = "rank"


class SelectionOperator:
    """Selection operators returning population indices."""

    @staticmethod
    def tournament_selection(population: List[Solution], rng: RandomGenerator,
                             direction: Direction, tournament_size: int = 3) -> int:
        """
        Tournament selection.

        Args:
            population: Current population
            rng: Run random generator
            direction: Optimization direction
            tournament_size: Number of random draws (with replacement)

        Returns:
            Index of the fittest drawn individual
        """
        n = len(population)
        best = rng.randint(0, n - 1)
        for _ in range(1, tournament_size):
            idx = rng.randint(0, n - 1)
            if is_better(population[idx].cost, population[best].cost, direction):
                best = idx
        return best

    @staticmethod
    def roulette_wheel_selection(population: List[Solution], rng: RandomGenerator,
                                 direction: Direction) -> int:
        """
        Fitness-proportional selection.

        Costs are shifted by the worst value so that minimization and
        negative costs both yield positive weights.
        """
        n = len(population)
        costs = [ind.cost for ind in population]
        worst = costs[0]
        for cost in costs[1:]:
            if not is_better(cost, worst, direction):
                worst = cost

        if direction == Direction.MINIMIZE:
            weights = [worst + 1.0 - c for c in costs]
        else:
            weights = [c - worst + 1.0 for c in costs]

        total = sum(weights)
        if total <= 0.0:
            return rng.randint(0, n - 1)

        r = rng.uniform() * total
        cumulative = 0.0
        for i, weight in enumerate(weights):
            cumulative += weight
            if cumulative >= r:
                return i
        return n - 1

    @staticmethod
    def rank_selection(population: List[Solution], rng: RandomGenerator) -> int:
        """
        Linear rank selection on a population sorted best first.

        Individual ``i`` has weight ``n - i``.
        """
        n = len(population)
        total = n * (n + 1) / 2.0
        r = rng.uniform() * total
        cumulative = 0.0
        for i in range(n):
            cumulative += n - i
            if cumulative >= r:
                return i
        return n - 1

    @staticmethod
    def select(method: SelectionMethod, population: List[Solution],
               rng: RandomGenerator, direction: Direction,
               tournament_size: int = 3) -> int:
        if method == SelectionMethod.ROULETTE:
            return SelectionOperator.roulette_wheel_selection(population, rng, direction)
        if method == SelectionMethod.RANK:
            return SelectionOperator.rank_selection(population, rng)
        return SelectionOperator.tournament_selection(population, rng, direction, tournament_size)


def _bounds(context: Any) -> Tuple[float, float]:
    lower = getattr(context, 'lower_bound', None)
    upper = getattr(context, 'upper_bound', None)
    return (-np.inf if lower is None else lower, np.inf if upper is None else upper)


class CrossoverOperator:
    """Crossover operators. Each returns two new children."""

    @staticmethod
    def order_crossover(parent1: np.ndarray, parent2: np.ndarray, context: Any,
                        rng: RandomGenerator) -> Tuple[np.ndarray, np.ndarray]:
        """
        Order crossover (OX) for permutations.

        Each child keeps a segment ``[i, j]`` of one parent and takes the
        remaining genes in the other parent's order, starting after ``j``.
        """
        n = len(parent1)
        if n < 2:
            return parent1.copy(), parent2.copy()
        i = rng.randint(0, n - 2)
        j = rng.randint(i + 1, n - 1)

        def build(keep: np.ndarray, donor: np.ndarray) -> np.ndarray:
            child = np.full(n, -1, dtype=keep.dtype)
            child[i:j + 1] = keep[i:j + 1]
            segment = set(keep[i:j + 1].tolist())
            pos = (j + 1) % n
            for k in range(n):
                gene = donor[(j + 1 + k) % n]
                if gene not in segment:
                    child[pos] = gene
                    pos = (pos + 1) % n
            return child

        return build(parent1, parent2), build(parent2, parent1)

    @staticmethod
    def partially_mapped_crossover(parent1: np.ndarray, parent2: np.ndarray, context: Any,
                                   rng: RandomGenerator) -> Tuple[np.ndarray, np.ndarray]:
        """
        Partially mapped crossover (PMX) for permutations.

        Children start as copies of the opposite parent; for each position
        of the segment the two mapped values are swapped, which keeps
        every child a permutation.
        """
        n = len(parent1)
        child1 = parent2.copy()
        child2 = parent1.copy()
        if n < 2:
            return child1, child2
        i = rng.randint(0, n - 2)
        j = rng.randint(i + 1, n - 1)

        pos1 = {int(v): k for k, v in enumerate(child1)}
        pos2 = {int(v): k for k, v in enumerate(child2)}
        for k in range(i, j + 1):
            a, b = int(parent1[k]), int(parent2[k])
            if a == b:
                continue
            pa, pb = pos1[a], pos1[b]
            child1[pa], child1[pb] = b, a
            pos1[a], pos1[b] = pb, pa

            qb, qa = pos2[b], pos2[a]
            child2[qb], child2[qa] = a, b
            pos2[b], pos2[a] = qa, qb
        return child1, child2

    @staticmethod
    def blend_crossover(parent1: np.ndarray, parent2: np.ndarray, context: Any,
                        rng: RandomGenerator, alpha: float = 0.5) -> Tuple[np.ndarray, np.ndarray]:
        """
        BLX-alpha crossover for continuous vectors.

        Genes are drawn uniformly from the parents' interval widened by
        ``alpha`` on each side, clamped to the context bounds.
        """
        lower, upper = _bounds(context)
        n = len(parent1)
        child1 = np.empty(n, dtype=np.float64)
        child2 = np.empty(n, dtype=np.float64)
        for k in range(n):
            lo = min(parent1[k], parent2[k])
            hi = max(parent1[k], parent2[k])
            spread = hi - lo
            low_bound = max(lo - alpha * spread, lower)
            high_bound = min(hi + alpha * spread, upper)
            child1[k] = low_bound + rng.uniform() * (high_bound - low_bound)
            child2[k] = low_bound + rng.uniform() * (high_bound - low_bound)
        return child1, child2


class MutationOperator:
    """Mutation operators. Each returns a new array."""

    @staticmethod
    def swap_mutation(data: np.ndarray, rate: float, context: Any,
                      rng: RandomGenerator) -> np.ndarray:
        """With probability ``rate`` swap two distinct positions."""
        mutated = data.copy()
        n = len(mutated)
        if rng.uniform() >= rate or n < 2:
            return mutated
        i = rng.randint(0, n - 1)
        j = rng.randint(0, n - 2)
        if j >= i:
            j += 1
        mutated[i], mutated[j] = mutated[j], mutated[i]
        return mutated

    @staticmethod
    def inversion_mutation(data: np.ndarray, rate: float, context: Any,
                           rng: RandomGenerator) -> np.ndarray:
        """With probability ``rate`` reverse a random segment (size >= 3)."""
        mutated = data.copy()
        n = len(mutated)
        if rng.uniform() >= rate or n < 3:
            return mutated
        i = rng.randint(0, n - 2)
        j = rng.randint(i + 1, n - 1)
        mutated[i:j + 1] = mutated[i:j + 1][::-1]
        return mutated

    @staticmethod
    def gaussian_mutation(data: np.ndarray, rate: float, context: Any,
                          rng: RandomGenerator) -> np.ndarray:
        """Perturb each gene with probability ``rate`` by N(0, sigma), clamped."""
        sigma = getattr(context, 'sigma', None) or 0.1
        lower, upper = _bounds(context)
        mutated = np.array(data, dtype=np.float64, copy=True)
        for k in range(len(mutated)):
            if rng.uniform() < rate:
                mutated[k] = min(max(mutated[k] + sigma * rng.gaussian(), lower), upper)
        return mutated
