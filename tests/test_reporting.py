"""
Unit tests for comparison, export, plotting and the CLI parser.
"""

import json
import math
import os
import tempfile
import unittest

import pandas as pd

from metaopt.algorithms import HillClimbing, HCConfig, SimulatedAnnealing, SAConfig
from metaopt.benchmarks import create_problem
from metaopt.core.exceptions import UnknownAlgorithmError
from metaopt.evaluation import AlgorithmComparator, ResultExporter, gap_percent
from metaopt.evaluation.comparator import SUMMARY_COLUMNS


class TestGap(unittest.TestCase):
    """Test the optimality gap."""

    def test_gap(self):
        """Test relative gap in percent."""
        self.assertAlmostEqual(gap_percent(110.0, 100.0), 10.0)
        self.assertAlmostEqual(gap_percent(100.0, 100.0), 0.0)

    def test_gap_undefined(self):
        """Test missing or zero optima give NaN."""
        self.assertTrue(math.isnan(gap_percent(1.0, None)))
        self.assertTrue(math.isnan(gap_percent(1.0, 0.0)))


class TestAlgorithmComparator(unittest.TestCase):
    """Test the algorithm comparator."""

    def setUp(self):
        """Set up test problem."""
        self.problem = create_problem('tsp10')
        self.comparator = AlgorithmComparator(self.problem)

    def test_compatible_algorithms(self):
        """Test applicability filtering by encoding and callbacks."""
        tsp = self.comparator.compatible_algorithms()
        self.assertIn('aco', tsp)
        self.assertIn('alns', tsp)
        self.assertNotIn('de', tsp)
        self.assertNotIn('pso', tsp)

        sphere = AlgorithmComparator(create_problem('sphere', dimension=3)).compatible_algorithms()
        self.assertIn('de', sphere)
        self.assertIn('pso', sphere)
        self.assertNotIn('aco', sphere)
        self.assertNotIn('lns', sphere)

    def test_compare_summary(self):
        """Test the summary table is sorted by best cost."""
        df = self.comparator.compare(['sa', 'hc', 'ga'], seed=3, iterations=20)
        self.assertEqual(list(df.columns), SUMMARY_COLUMNS)
        self.assertEqual(len(df), 3)
        self.assertTrue(df['best_cost'].is_monotonic_increasing)
        self.assertEqual(self.comparator.best_algorithm(), df.iloc[0]['algorithm'])
        self.assertTrue((df['gap_percent'] >= -1e-9).all())

    def test_skips_inapplicable(self):
        """Test inapplicable drivers are skipped."""
        with self.assertLogs('metaopt.evaluation.comparator', level='WARNING'):
            df = self.comparator.compare(['de', 'hc'], iterations=10)
        self.assertEqual(list(df['algorithm']), ['hc'])

    def test_unknown_algorithm(self):
        """Test unknown names raise."""
        with self.assertRaises(UnknownAlgorithmError):
            self.comparator.compare(['nope'])

    def test_convergence_frame(self):
        """Test traces are padded to equal length."""
        self.comparator.compare(['sa', 'hc'], iterations=15)
        frame = self.comparator.convergence_frame()
        self.assertEqual(list(frame.columns), ['sa', 'hc'])
        self.assertEqual(len(frame), max(len(r.convergence)
                                         for r in self.comparator.results.values()))

    def test_empty_summary(self):
        """Test an empty comparison."""
        self.assertTrue(self.comparator.summary().empty)
        self.assertIsNone(self.comparator.best_algorithm())


class TestResultExporter(unittest.TestCase):
    """Test CSV and JSON export."""

    def setUp(self):
        """Set up temp directory and a finished run."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = os.path.join(self.temp_dir.name, 'results')
        self.exporter = ResultExporter(self.output_dir)
        self.problem = create_problem('tsp5')
        self.result = SimulatedAnnealing(SAConfig(max_iterations=100)).run(self.problem)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_creates_directory(self):
        """Test the output directory is created."""
        self.assertTrue(os.path.isdir(self.output_dir))

    def test_export_convergence(self):
        """Test the convergence CSV."""
        path = self.exporter.export_convergence(self.result, 'trace.csv')
        df = pd.read_csv(path)
        self.assertEqual(list(df.columns), ['iteration', 'best_cost'])
        self.assertEqual(len(df), len(self.result.convergence))

    def test_export_summary(self):
        """Test the summary CSV with a gap column."""
        other = HillClimbing(HCConfig(max_iterations=50)).run(self.problem)
        path = self.exporter.export_summary({'sa': self.result, 'hc': other},
                                            known_optimum=self.problem.known_optimum)
        df = pd.read_csv(path)
        self.assertEqual(df.columns[0], 'label')
        self.assertIn('gap_percent', df.columns)
        self.assertEqual(list(df['label']), ['sa', 'hc'])

    def test_save_result_json(self):
        """Test the JSON result."""
        path = self.exporter.save_result_json(self.result, 'result.json',
                                              metadata={'problem': 'tsp5'})
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data['algorithm'], 'sa')
        self.assertEqual(len(data['best']['data']), 5)
        self.assertEqual(data['metadata']['problem'], 'tsp5')
        self.assertIn('exported_at', data)


class TestConvergencePlotter(unittest.TestCase):
    """Test the convergence plot."""

    def test_saves_png(self):
        """Test a comparison plot is written to disk."""
        from metaopt.visualization import ConvergencePlotter

        problem = create_problem('tsp5')
        results = {
            'sa': SimulatedAnnealing(SAConfig(max_iterations=50)).run(problem),
            'hc': HillClimbing(HCConfig(max_iterations=50)).run(problem),
        }
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, 'convergence.png')
            plotter = ConvergencePlotter()
            fig = plotter.plot_comparison(results, save_path=path,
                                          known_optimum=problem.known_optimum)
            plotter.close(fig)
            self.assertTrue(os.path.exists(path))

            single = os.path.join(temp_dir, 'single.png')
            fig = plotter.plot_convergence(results['sa'], save_path=single)
            plotter.close(fig)
            self.assertTrue(os.path.exists(single))


class TestArgumentParser(unittest.TestCase):
    """Test the command line parser."""

    def test_defaults(self):
        """Test default options."""
        from main import create_argument_parser

        args = create_argument_parser().parse_args([])
        self.assertEqual(args.algorithm, 'sa')
        self.assertEqual(args.problem, 'tsp10')
        self.assertIsNone(args.compare)

    def test_compare_names(self):
        """Test --compare with and without names."""
        from main import create_argument_parser

        parser = create_argument_parser()
        self.assertEqual(parser.parse_args(['--compare']).compare, [])
        self.assertEqual(parser.parse_args(['--compare', 'sa', 'ga']).compare, ['sa', 'ga'])

    def test_rejects_unknown_problem(self):
        """Test unknown problems are rejected by argparse."""
        from main import create_argument_parser

        with self.assertRaises(SystemExit):
            create_argument_parser().parse_args(['--problem', 'tsp9999'])


if __name__ == '__main__':
    unittest.main()
