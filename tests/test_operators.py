"""
Unit tests for genetic operators.
"""

import unittest

import numpy as np

from metaopt.algorithms.operators import (
    SelectionMethod, SelectionOperator, CrossoverOperator, MutationOperator
)
from metaopt.benchmarks import create_sphere, is_valid_tour
from metaopt.core.rng import RandomGenerator
from metaopt.models.solution import Direction, Solution


class TestSelectionOperator(unittest.TestCase):
    """Test selection operators."""

    def setUp(self):
        """Set up test population, sorted best first."""
        self.rng = RandomGenerator(42)
        self.population = [Solution.from_data([i], float(i * 10)) for i in range(8)]

    def test_indices_in_range(self):
        """Test every scheme returns a valid population index."""
        for method in SelectionMethod:
            for _ in range(200):
                idx = SelectionOperator.select(method, self.population, self.rng,
                                               Direction.MINIMIZE, tournament_size=3)
                self.assertTrue(0 <= idx < len(self.population), method)

    def test_tournament_prefers_better(self):
        """Test large tournaments mostly pick the best individual."""
        picks = [SelectionOperator.tournament_selection(self.population, self.rng,
                                                        Direction.MINIMIZE, 20)
                 for _ in range(100)]
        self.assertGreater(picks.count(0), 80)

    def test_tournament_maximize(self):
        """Test tournament honours the maximize direction."""
        picks = [SelectionOperator.tournament_selection(self.population, self.rng,
                                                        Direction.MAXIMIZE, 20)
                 for _ in range(100)]
        self.assertGreater(picks.count(7), 80)

    def test_roulette_bias(self):
        """Test roulette favours low costs when minimizing."""
        picks = [SelectionOperator.roulette_wheel_selection(self.population, self.rng,
                                                            Direction.MINIMIZE)
                 for _ in range(2000)]
        self.assertGreater(picks.count(0), picks.count(7))

    def test_roulette_negative_costs(self):
        """Test roulette handles negative costs."""
        population = [Solution.from_data([0], c) for c in (-5.0, -1.0, 3.0)]
        for _ in range(100):
            idx = SelectionOperator.roulette_wheel_selection(population, self.rng,
                                                             Direction.MAXIMIZE)
            self.assertIn(idx, (0, 1, 2))

    def test_rank_bias(self):
        """Test rank selection favours the head of a sorted population."""
        picks = [SelectionOperator.rank_selection(self.population, self.rng)
                 for _ in range(2000)]
        self.assertGreater(picks.count(0), picks.count(7))


class TestPermutationOperators(unittest.TestCase):
    """Test that permutation operators keep permutations."""

    def setUp(self):
        """Set up parents."""
        self.rng = RandomGenerator(7)
        self.n = 12
        self.parent1 = np.arange(self.n, dtype=np.int64)
        self.parent2 = np.array([5, 3, 11, 0, 9, 1, 7, 2, 10, 4, 8, 6], dtype=np.int64)

    def test_order_crossover(self):
        """Test OX children are permutations."""
        for _ in range(200):
            c1, c2 = CrossoverOperator.order_crossover(self.parent1, self.parent2,
                                                       None, self.rng)
            self.assertTrue(is_valid_tour(c1, self.n))
            self.assertTrue(is_valid_tour(c2, self.n))

    def test_pmx_crossover(self):
        """Test PMX children are permutations."""
        for _ in range(200):
            c1, c2 = CrossoverOperator.partially_mapped_crossover(self.parent1, self.parent2,
                                                                  None, self.rng)
            self.assertTrue(is_valid_tour(c1, self.n))
            self.assertTrue(is_valid_tour(c2, self.n))

    def test_crossover_leaves_parents(self):
        """Test parents are not modified."""
        p1, p2 = self.parent1.copy(), self.parent2.copy()
        CrossoverOperator.order_crossover(self.parent1, self.parent2, None, self.rng)
        CrossoverOperator.partially_mapped_crossover(self.parent1, self.parent2, None, self.rng)
        np.testing.assert_array_equal(self.parent1, p1)
        np.testing.assert_array_equal(self.parent2, p2)

    def test_swap_and_inversion(self):
        """Test mutations keep permutations and respect rate 0."""
        for _ in range(200):
            self.assertTrue(is_valid_tour(
                MutationOperator.swap_mutation(self.parent2, 1.0, None, self.rng), self.n))
            self.assertTrue(is_valid_tour(
                MutationOperator.inversion_mutation(self.parent2, 1.0, None, self.rng), self.n))
        unchanged = MutationOperator.swap_mutation(self.parent2, 0.0, None, self.rng)
        np.testing.assert_array_equal(unchanged, self.parent2)

    def test_swap_always_changes(self):
        """Test swap with rate 1 changes exactly two positions."""
        mutated = MutationOperator.swap_mutation(self.parent1, 1.0, None, self.rng)
        self.assertEqual(int(np.sum(mutated != self.parent1)), 2)


class TestContinuousOperators(unittest.TestCase):
    """Test continuous crossover and mutation."""

    def setUp(self):
        """Set up a bounded context."""
        self.rng = RandomGenerator(3)
        self.context = create_sphere(5)

    def test_blend_crossover_bounds(self):
        """Test BLX children stay inside the box."""
        p1 = np.full(5, -5.0)
        p2 = np.full(5, 5.0)
        for _ in range(100):
            c1, c2 = CrossoverOperator.blend_crossover(p1, p2, self.context, self.rng)
            for child in (c1, c2):
                self.assertTrue(np.all(child >= -5.12))
                self.assertTrue(np.all(child <= 5.12))

    def test_gaussian_mutation_bounds(self):
        """Test gaussian mutation is clamped and returns a new array."""
        data = np.full(5, 5.12)
        for _ in range(100):
            mutated = MutationOperator.gaussian_mutation(data, 1.0, self.context, self.rng)
            self.assertTrue(np.all(mutated <= 5.12))
            self.assertTrue(np.all(mutated >= -5.12))
        self.assertTrue(np.all(data == 5.12))


if __name__ == '__main__':
    unittest.main()
