"""
Unit tests for metaopt core components.
Tests the random generator, solution/result models, config records,
exceptions, validation and profiling.
"""

import logging
import math
import unittest

import numpy as np

from metaopt.algorithms import (
    ALGORITHMS, get_algorithm, prepare_config, apply_preset,
    SimulatedAnnealing, SAConfig, CoolingSchedule, GAConfig, TabuConfig,
    DEConfig, DEStrategy, DifferentialEvolution
)
from metaopt.benchmarks import create_problem, tour_cost
from metaopt.core.exceptions import (
    OptimizationError, InvalidConfigurationError, MissingCallbackError,
    UnknownAlgorithmError, UnknownProblemError
)
from metaopt.core.logger import get_logger, setup_logger
from metaopt.core.pipeline_profiler import pipeline_profiler
from metaopt.core.rng import RandomGenerator
from metaopt.core.validators import ConfigValidator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, WORST_COST, delta, is_better, worst_value
)


class TestRandomGenerator(unittest.TestCase):
    """Test the seeded random generator."""

    def test_same_seed_same_stream(self):
        """Test that equal seeds reproduce the same draws."""
        a = RandomGenerator(123)
        b = RandomGenerator(123)
        self.assertEqual([a.uniform() for _ in range(20)], [b.uniform() for _ in range(20)])
        self.assertEqual([a.gaussian() for _ in range(5)], [b.gaussian() for _ in range(5)])

    def test_set_seed_resets_stream(self):
        """Test that reseeding restarts the sequence."""
        rng = RandomGenerator(7)
        first = [rng.randint(0, 100) for _ in range(10)]
        rng.gaussian()
        rng.set_seed(7)
        self.assertEqual(first, [rng.randint(0, 100) for _ in range(10)])

    def test_uniform_range(self):
        """Test uniform draws stay in [0, 1) and in the requested range."""
        rng = RandomGenerator(1)
        for _ in range(1000):
            u = rng.uniform()
            self.assertGreaterEqual(u, 0.0)
            self.assertLess(u, 1.0)
            x = rng.uniform_range(-2.0, 3.0)
            self.assertGreaterEqual(x, -2.0)
            self.assertLess(x, 3.0)

    def test_randint_inclusive(self):
        """Test randint covers both ends and degenerates to low."""
        rng = RandomGenerator(2)
        values = {rng.randint(0, 3) for _ in range(500)}
        self.assertEqual(values, {0, 1, 2, 3})
        self.assertEqual(rng.randint(5, 5), 5)
        self.assertEqual(rng.randint(5, 3), 5)

    def test_gaussian_moments(self):
        """Test gaussian draws have roughly zero mean and unit variance."""
        rng = RandomGenerator(3)
        samples = np.array([rng.gaussian() for _ in range(20000)])
        self.assertLess(abs(samples.mean()), 0.05)
        self.assertLess(abs(samples.std() - 1.0), 0.05)

    def test_shuffle_and_distinct_indices(self):
        """Test shuffle keeps a permutation and distinct draws exclude one index."""
        rng = RandomGenerator(4)
        items = list(range(10))
        rng.shuffle(items)
        self.assertEqual(sorted(items), list(range(10)))

        picks = rng.distinct_indices(4, 6, exclude=2)
        self.assertEqual(len(set(picks)), 4)
        self.assertNotIn(2, picks)
        for p in picks:
            self.assertTrue(0 <= p < 6)


class TestSolution(unittest.TestCase):
    """Test solution and result models."""

    def test_create(self):
        """Test zeroed buffer with worst cost."""
        sol = Solution.create(5)
        self.assertEqual(sol.size, 5)
        self.assertTrue(np.all(sol.data == 0.0))
        self.assertEqual(sol.cost, WORST_COST)

    def test_clone_is_independent(self):
        """Test that clone deep-copies the data."""
        sol = Solution.from_data([1.0, 2.0, 3.0], 6.0)
        copy = sol.clone()
        copy.data[0] = 99.0
        self.assertEqual(sol.data[0], 1.0)
        self.assertEqual(copy.cost, 6.0)

    def test_from_data_copies(self):
        """Test that from_data does not alias the caller's buffer."""
        data = np.array([3, 1, 2])
        sol = Solution.from_data(data, 1.0)
        data[0] = 0
        self.assertEqual(sol.data[0], 3)

    def test_destroy_twice(self):
        """Test that destroy is idempotent."""
        sol = Solution.create(3)
        sol.destroy()
        sol.destroy()
        self.assertTrue(sol.is_destroyed)
        self.assertEqual(sol.size, 0)
        sol.clone()

    def test_direction_helpers(self):
        """Test comparisons under both directions."""
        self.assertTrue(is_better(1.0, 2.0, Direction.MINIMIZE))
        self.assertTrue(is_better(2.0, 1.0, Direction.MAXIMIZE))
        self.assertFalse(is_better(1.0, 1.0, Direction.MINIMIZE))
        self.assertEqual(worst_value(Direction.MAXIMIZE), -WORST_COST)
        self.assertLess(delta(1.0, 2.0, Direction.MINIMIZE), 0.0)
        self.assertLess(delta(2.0, 1.0, Direction.MAXIMIZE), 0.0)

    def test_result_bounded_writes(self):
        """Test that writes beyond capacity are skipped."""
        result = OptimizationResult.create(3)
        for i in range(6):
            result.record(i, 10.0 - i)
        result.record(-1, 0.0)
        self.assertEqual(result.convergence, [10.0, 9.0, 8.0])

    def test_result_fills_gaps(self):
        """Test that a sparse write fills the earlier samples."""
        result = OptimizationResult.create(5)
        result.record(2, 4.0)
        self.assertEqual(result.convergence, [4.0, 4.0, 4.0])

    def test_empty_result(self):
        """Test the degenerate result."""
        result = OptimizationResult.empty('sa')
        self.assertTrue(result.is_empty())
        self.assertEqual(result.convergence, [])
        self.assertEqual(result.summary()['samples'], 0)

    def test_result_to_dict(self):
        """Test serialization of a result."""
        result = OptimizationResult.create(2, 'ga')
        result.best = Solution.from_data([0, 1], 5.0)
        result.record(0, 5.0)
        data = result.to_dict()
        self.assertEqual(data['algorithm'], 'ga')
        self.assertEqual(data['best']['data'], [0, 1])
        self.assertEqual(data['convergence'], [5.0])


class TestConfigRecords(unittest.TestCase):
    """Test config records, presets and the registry."""

    def test_from_dict_converts_enum_names(self):
        """Test that enum fields accept case-insensitive names."""
        config = SAConfig.from_dict({'cooling': 'linear', 'direction': 'MAXIMIZE'})
        self.assertEqual(config.cooling, CoolingSchedule.LINEAR)
        self.assertEqual(config.direction, Direction.MAXIMIZE)

    def test_from_dict_rejects_unknown_key(self):
        """Test unknown keys raise."""
        with self.assertRaises(InvalidConfigurationError):
            SAConfig.from_dict({'temperature': 5.0})

    def test_from_dict_rejects_bad_enum(self):
        """Test bad enum names raise."""
        with self.assertRaises(InvalidConfigurationError):
            GAConfig.from_dict({'selection': 'LOTTERY'})

    def test_to_dict_uses_names(self):
        """Test enum fields are serialized by name."""
        data = SAConfig().to_dict()
        self.assertEqual(data['cooling'], 'GEOMETRIC')
        self.assertEqual(SAConfig.from_dict(data), SAConfig())

    def test_default_configs_match_config_module(self):
        """Test every driver builds its default config."""
        for name, cls in ALGORITHMS.items():
            config = cls.default_config()
            self.assertEqual(config.seed, 42, name)

    def test_apply_preset(self):
        """Test iteration caps are scaled by presets."""
        config = apply_preset(SAConfig(max_iterations=10000), 'quick')
        self.assertEqual(config.max_iterations, 1000)
        config = apply_preset(GAConfig(max_generations=100), 'thorough')
        self.assertEqual(config.max_generations, 300)
        with self.assertRaises(InvalidConfigurationError):
            apply_preset(SAConfig(), 'forever')

    def test_prepare_config(self):
        """Test seed, iteration and bound overrides."""
        problem = create_problem('ackley', dimension=3)
        config = prepare_config(DifferentialEvolution, problem, seed=9, iterations=12)
        self.assertEqual(config.seed, 9)
        self.assertEqual(config.max_generations, 12)
        self.assertAlmostEqual(config.lower_bound, -32.768)
        self.assertAlmostEqual(config.upper_bound, 32.768)

    def test_get_algorithm(self):
        """Test registry lookup."""
        self.assertIs(get_algorithm('SA'), SimulatedAnnealing)
        with self.assertRaises(UnknownAlgorithmError):
            get_algorithm('bogus')
        self.assertEqual(len(ALGORITHMS), 13)


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_str_includes_details(self):
        """Test message rendering with details."""
        error = OptimizationError("boom", {'k': 1})
        self.assertEqual(str(error), "boom | Details: {'k': 1}")
        self.assertEqual(str(OptimizationError("plain")), "plain")

    def test_invalid_configuration(self):
        """Test invalid configuration details."""
        error = InvalidConfigurationError('alpha', 2.0, 'in (0, 1)')
        self.assertIsInstance(error, OptimizationError)
        self.assertEqual(error.details['parameter'], 'alpha')
        self.assertIn('alpha = 2.0', str(error))

    def test_missing_callback_raised_by_run(self):
        """Test that a driver refuses a problem without its callables."""
        problem = Problem(size=5, objective=tour_cost, name='bare')
        with self.assertRaises(MissingCallbackError) as ctx:
            SimulatedAnnealing(SAConfig(max_iterations=10)).run(problem)
        self.assertEqual(ctx.exception.details['algorithm'], 'sa')

    def test_unknown_problem(self):
        """Test unknown benchmark names."""
        with self.assertRaises(UnknownProblemError):
            create_problem('tsp1000000')

    def test_empty_problem_returns_empty_result(self):
        """Test that size 0 short-circuits before callback checks."""
        problem = Problem(size=0, objective=tour_cost, name='empty')
        result = SimulatedAnnealing().run(problem)
        self.assertTrue(result.is_empty())
        self.assertEqual(result.iterations, 0)


class TestConfigValidator(unittest.TestCase):
    """Test opt-in fail-fast validation."""

    def test_defaults_are_valid(self):
        """Test every default config passes validation."""
        for name, cls in ALGORITHMS.items():
            self.assertTrue(ConfigValidator.validate(cls.default_config()), name)

    def test_sa_temperatures(self):
        """Test final_temp must stay below initial_temp."""
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(SAConfig(initial_temp=1.0, final_temp=2.0))
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(SAConfig(alpha=1.5))

    def test_ga_population(self):
        """Test population minimum and parity."""
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(GAConfig(population_size=2))
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(GAConfig(population_size=7))
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(GAConfig(mutation_rate=1.5))

    def test_tabu_tenure(self):
        """Test tenure bounds."""
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(TabuConfig(tabu_tenure=0))
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(TabuConfig(min_tenure=60, max_tenure=50))

    def test_de_population_per_strategy(self):
        """Test DE minimum population depends on the strategy."""
        self.assertTrue(ConfigValidator.validate(DEConfig(population_size=4)))
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(DEConfig(population_size=5, strategy=DEStrategy.RAND_2))

    def test_unknown_record(self):
        """Test unknown config types raise."""
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate(object())


class TestLogger(unittest.TestCase):
    """Test logger setup."""

    def tearDown(self):
        logging.getLogger('metaopt.test_logger').handlers.clear()

    def test_console_only(self):
        """Test a console-only logger gets exactly one handler."""
        logger = setup_logger('metaopt.test_logger', level=logging.DEBUG, to_file=False)
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_get_logger_reuses_handlers(self):
        """Test get_logger does not stack handlers on repeated calls."""
        first = get_logger('metaopt.test_logger')
        second = get_logger('metaopt.test_logger')
        self.assertIs(first, second)
        self.assertEqual(len(second.handlers), 1)


class TestProfiler(unittest.TestCase):
    """Test phase profiling of driver runs."""

    def setUp(self):
        """Set up a clean profiler."""
        pipeline_profiler.reset()

    def tearDown(self):
        pipeline_profiler.reset()

    def test_profiled_run_records_stages(self):
        """Test that profile=True records run, initialize and iteration stages."""
        problem = create_problem('tsp5')
        SimulatedAnnealing(SAConfig(max_iterations=100), profile=True).run(problem)
        stages = pipeline_profiler.stages()
        for stage in ('sa.run', 'sa.initialize', 'sa.iteration'):
            self.assertIn(stage, stages)
        self.assertTrue(pipeline_profiler.format_summary().startswith("=== Profiling Summary"))

    def test_unprofiled_run_records_nothing(self):
        """Test that profiling is off by default."""
        SimulatedAnnealing(SAConfig(max_iterations=50)).run(create_problem('tsp5'))
        self.assertEqual(pipeline_profiler.stages(), [])

    def test_summary_aggregates(self):
        """Test summary statistics per stage."""
        pipeline_profiler.record('x', 0.5)
        pipeline_profiler.record('x', 1.5)
        summary = pipeline_profiler.get_summary()[0]
        self.assertEqual(summary['count'], 2)
        self.assertTrue(math.isclose(summary['avg_seconds'], 1.0))
        self.assertEqual(summary['max_seconds'], 1.5)

    def test_driver_totals(self):
        """Test run stages are grouped per driver."""
        pipeline_profiler.record('sa.run', 2.0)
        pipeline_profiler.record('sa.iteration', 0.1)
        pipeline_profiler.record('ga.run', 1.0)
        self.assertEqual(pipeline_profiler.driver_totals(), {'sa': 2.0, 'ga': 1.0})


if __name__ == '__main__':
    unittest.main()
