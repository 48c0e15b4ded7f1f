"""
Unit tests for benchmark problems.
"""

import math
import unittest

import numpy as np

from metaopt.benchmarks import (
    PROBLEM_NAMES, create_example_5, create_example_10, create_example_20, create_problem,
    create_random, is_permutation_problem, is_valid_tour, tour_cost
)
from metaopt.benchmarks.continuous import (
    FUNCTIONS, ContinuousFunction, create_ackley, create_rastrigin, create_rosenbrock,
    create_schwefel, create_sphere, generate_random, is_within_bounds, neighbor_gaussian
)
from metaopt.benchmarks.tsp import (
    generate_random_tour, neighbor_swap, neighbor_two_opt, perturb_double_bridge,
    two_opt_local_search, inverse_distance
)
from metaopt.core.rng import RandomGenerator
from metaopt.models.solution import WORST_COST


class TestTSPInstances(unittest.TestCase):
    """Test TSP instances and their known optima."""

    def test_pentagon_optimum(self):
        """Test the 5-city optimum is the pentagon perimeter."""
        instance = create_example_5()
        tour = np.arange(5)
        self.assertAlmostEqual(tour_cost(tour, instance), instance.known_optimum, places=9)
        self.assertAlmostEqual(instance.known_optimum, 100.0 * math.sin(math.pi / 5), places=9)

    def test_rectangle_optima(self):
        """Test the boundary tours of the 10- and 20-city rectangles."""
        ten = create_example_10()
        self.assertAlmostEqual(tour_cost(np.arange(10), ten), 100.0)
        self.assertEqual(ten.known_optimum, 100.0)

        twenty = create_example_20()
        self.assertAlmostEqual(tour_cost(np.arange(20), twenty), 200.0)
        self.assertEqual(twenty.known_optimum, 200.0)

    def test_distances_symmetric(self):
        """Test the distance matrix is symmetric with a zero diagonal."""
        instance = create_random(15, seed=3)
        np.testing.assert_allclose(instance.distances, instance.distances.T)
        self.assertTrue(np.all(np.diag(instance.distances) == 0.0))
        self.assertIsNone(instance.known_optimum)

    def test_random_instance_reproducible(self):
        """Test equal seeds give equal instances."""
        a = create_random(10, seed=5)
        b = create_random(10, seed=5)
        np.testing.assert_array_equal(a.coordinates, b.coordinates)

    def test_degenerate_tour_cost(self):
        """Test fewer than two cities yields the worst cost."""
        self.assertEqual(tour_cost(np.array([0]), create_example_5()), WORST_COST)

    def test_is_valid_tour(self):
        """Test the permutation predicate."""
        self.assertTrue(is_valid_tour(np.array([2, 0, 1]), 3))
        self.assertFalse(is_valid_tour(np.array([0, 0, 1]), 3))
        self.assertFalse(is_valid_tour(np.array([0, 1]), 3))
        self.assertFalse(is_valid_tour(None, 3))


class TestTSPCallbacks(unittest.TestCase):
    """Test TSP callbacks keep tours valid."""

    def setUp(self):
        """Set up instance and rng."""
        self.instance = create_example_20()
        self.rng = RandomGenerator(11)
        self.tour = generate_random_tour(20, self.instance, self.rng)

    def test_generate(self):
        """Test random tours are permutations."""
        self.assertTrue(is_valid_tour(self.tour, 20))
        self.assertEqual(self.tour.dtype, np.int64)

    def test_neighbors_return_new_valid_tours(self):
        """Test swap and 2-opt neighbors."""
        original = self.tour.copy()
        for neighbor in (neighbor_swap, neighbor_two_opt):
            for _ in range(50):
                self.assertTrue(is_valid_tour(neighbor(self.tour, self.instance, self.rng), 20))
        np.testing.assert_array_equal(self.tour, original)

    def test_double_bridge(self):
        """Test the double bridge keeps a permutation and changes the tour."""
        perturbed = perturb_double_bridge(self.tour, 1, self.instance, self.rng)
        self.assertTrue(is_valid_tour(perturbed, 20))
        self.assertFalse(np.array_equal(perturbed, self.tour))

        short = np.arange(5)
        np.testing.assert_array_equal(perturb_double_bridge(short, 1, None, self.rng), short)

    def test_two_opt_improves(self):
        """Test 2-opt never worsens and reaches the rectangle optimum from a scramble."""
        start_cost = tour_cost(self.tour, self.instance)
        tour, cost = two_opt_local_search(self.tour, tour_cost, self.instance, self.rng)
        self.assertTrue(is_valid_tour(tour, 20))
        self.assertLessEqual(cost, start_cost)
        self.assertAlmostEqual(cost, tour_cost(tour, self.instance))

    def test_inverse_distance(self):
        """Test ACO visibility."""
        instance = create_example_10()
        self.assertAlmostEqual(inverse_distance(0, 1, instance), 0.1)


class TestContinuousFunctions(unittest.TestCase):
    """Test continuous benchmark functions."""

    def test_optimum_values(self):
        """Test every function reaches zero at its optimum point."""
        for factory in (create_sphere, create_rastrigin, create_rosenbrock,
                        create_ackley, create_schwefel):
            instance = factory(6)
            value = FUNCTIONS[instance.function](instance.optimum_point())
            self.assertAlmostEqual(value, 0.0, delta=1e-3, msg=instance.name)

    def test_known_values(self):
        """Test a few hand-computed values."""
        self.assertAlmostEqual(FUNCTIONS[ContinuousFunction.SPHERE](np.array([1.0, 2.0])), 5.0)
        self.assertAlmostEqual(FUNCTIONS[ContinuousFunction.RASTRIGIN](np.array([1.0])), 1.0)
        self.assertAlmostEqual(FUNCTIONS[ContinuousFunction.ROSENBROCK](np.array([0.0, 0.0])), 1.0)

    def test_generate_and_neighbor_in_bounds(self):
        """Test generated points and neighbors stay in the box."""
        instance = create_rastrigin(8)
        rng = RandomGenerator(2)
        point = generate_random(8, instance, rng)
        self.assertTrue(is_within_bounds(point, instance))
        for _ in range(100):
            point = neighbor_gaussian(point, instance, rng)
            self.assertTrue(is_within_bounds(point, instance))


class TestProblemFactory(unittest.TestCase):
    """Test the benchmark factory."""

    def test_every_name_builds(self):
        """Test every CLI problem name builds a problem."""
        for name in PROBLEM_NAMES:
            problem = create_problem(name, dimension=4, cities=12)
            self.assertGreater(problem.size, 0, name)
            self.assertIn(problem.encoding, ('permutation', 'continuous'))

    def test_sizes(self):
        """Test dimension and city options."""
        self.assertEqual(create_problem('sphere', dimension=7).size, 7)
        self.assertEqual(create_problem('tsp-random', cities=25).size, 25)
        self.assertEqual(create_problem('tsp20').known_optimum, 200.0)

    def test_permutation_flag(self):
        """Test permutation problem detection."""
        self.assertTrue(is_permutation_problem(create_problem('tsp5')))
        self.assertFalse(is_permutation_problem(create_problem('ackley')))


if __name__ == '__main__':
    unittest.main()
