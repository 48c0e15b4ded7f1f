"""
Main application entry point for metaopt.
Provides a CLI for running one driver or comparing several on a benchmark.
"""

import argparse
import logging
import os
import sys
from typing import Dict, List, Optional

from metaopt.algorithms import ALGORITHMS, get_algorithm, prepare_config
from metaopt.benchmarks import PROBLEM_NAMES, create_problem
from metaopt.core.exceptions import OptimizationError
from metaopt.core.logger import setup_logger
from metaopt.core.pipeline_profiler import pipeline_profiler
from metaopt.evaluation import AlgorithmComparator, ResultExporter, gap_percent
from metaopt.models.problem import Problem
from metaopt.models.solution import OptimizationResult
from config import PATHS, PRESETS


def main(argv: Optional[List[str]] = None):
    """Main application entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger('metaopt', level=level, log_dir=PATHS['logs'])

    try:
        if args.list_algorithms:
            list_algorithms()
            return

        problem = create_problem(args.problem, dimension=args.dimension,
                                 cities=args.cities, seed=args.seed)
        logger.info(f"Problem '{problem.name}' (size={problem.size}, "
                    f"encoding={problem.encoding})")

        if args.compare is not None:
            results = run_comparison(problem, args)
        else:
            results = {args.algorithm: run_single(problem, args)}

        if args.output:
            export_results(results, problem, args.output)
        if args.plot:
            save_plot(results, problem, args.output or PATHS['results'])
        if args.profile:
            print()
            print(pipeline_profiler.format_summary(top_n=15))

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except OptimizationError as e:
        logger.error(f"Optimization error: {e}", exc_info=args.verbose)
        print(f"Error: {e}")
        sys.exit(1)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="metaopt: metaheuristic optimization engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List available drivers
  python main.py --list-algorithms

  # Simulated annealing on the 10-city TSP
  python main.py --algorithm sa --problem tsp10

  # Differential evolution on a 30-dimensional Rastrigin
  python main.py --algorithm de --problem rastrigin --dimension 30

  # Compare every applicable driver with the quick preset
  python main.py --problem tsp20 --compare --preset quick --output results --plot

  # Compare a subset
  python main.py --problem sphere --compare de pso hc --iterations 200
        """
    )

    parser.add_argument('--algorithm', type=str, default='sa',
                        help=f"Driver to run (default: sa). One of: {', '.join(ALGORITHMS)}")
    parser.add_argument('--problem', type=str, default='tsp10', choices=PROBLEM_NAMES,
                        help='Benchmark problem (default: tsp10)')
    parser.add_argument('--dimension', type=int,
                        help='Dimension of continuous benchmarks')
    parser.add_argument('--cities', type=int,
                        help='City count for tsp-random')

    parser.add_argument('--iterations', type=int,
                        help='Iteration/generation cap (overrides config and preset)')
    parser.add_argument('--seed', type=int,
                        help='Random seed for reproducibility')
    parser.add_argument('--preset', type=str, choices=sorted(PRESETS),
                        help='Iteration budget preset')

    parser.add_argument('--compare', type=str, nargs='*', metavar='ALGORITHM',
                        help='Compare several drivers (all applicable ones when no names given)')

    parser.add_argument('--output', type=str,
                        help='Directory for CSV/JSON export')
    parser.add_argument('--plot', action='store_true',
                        help='Save a convergence plot (PNG)')
    parser.add_argument('--profile', action='store_true',
                        help='Print the phase timing summary')
    parser.add_argument('--verbose', action='store_true',
                        help='Verbose (debug) logging')
    parser.add_argument('--list-algorithms', action='store_true',
                        help='List registered drivers and exit')

    return parser


def list_algorithms():
    """Print the driver registry."""
    print("Available algorithms:")
    print("-" * 60)
    for name, cls in ALGORITHMS.items():
        encodings = ', '.join(cls.encodings) if cls.encodings else 'any'
        print(f"  {name:<8} {cls.__name__:<28} encoding: {encodings}")
        print(f"           requires: {', '.join(cls.required_callbacks)}")


def run_single(problem: Problem, args) -> OptimizationResult:
    """Run one driver and print its outcome."""
    cls = get_algorithm(args.algorithm)
    if not cls.supports(problem):
        logging.getLogger('metaopt').warning(
            f"{args.algorithm} is not designed for '{problem.name}' ({problem.encoding})")

    config = prepare_config(cls, problem, preset=args.preset, seed=args.seed,
                            iterations=args.iterations)
    driver = cls(config, profile=args.profile)
    result = driver.run(problem)

    print("=" * 60)
    print(f"{cls.__name__} on {problem.name}")
    print("=" * 60)
    print(f"Best cost:    {result.best.cost:.6f}")
    if problem.known_optimum is not None:
        print(f"Known optimum: {problem.known_optimum:.6f} "
              f"(gap {gap_percent(result.best.cost, problem.known_optimum):.2f}%)")
    print(f"Iterations:   {result.iterations}")
    print(f"Evaluations:  {result.evaluations}")
    print(f"Elapsed:      {result.elapsed:.3f}s")
    if result.best.data is not None and result.best.size <= 30:
        print(f"Best solution: {result.best.data.tolist()}")

    extra = {k: v for k, v in driver.get_statistics().items()
             if k not in result.summary()}
    for key, value in extra.items():
        print(f"  {key}: {value}")
    return result


def run_comparison(problem: Problem, args) -> Dict[str, OptimizationResult]:
    """Run several drivers on the same problem and print the table."""
    comparator = AlgorithmComparator(problem)
    df = comparator.compare(args.compare or None, preset=args.preset, seed=args.seed,
                            iterations=args.iterations, profile=args.profile)

    print("=" * 60)
    print(f"Comparison on {problem.name}")
    print("=" * 60)
    print(df.to_string(index=False, float_format=lambda v: f"{v:.4f}"))
    best = comparator.best_algorithm()
    if best:
        print(f"\nBest algorithm: {best}")
    return comparator.results


def export_results(results: Dict[str, OptimizationResult], problem: Problem, output_dir: str):
    """Write CSV traces, a summary table and JSON results."""
    exporter = ResultExporter(output_dir)
    for name, result in results.items():
        exporter.export_convergence(result)
        exporter.save_result_json(result, metadata={'problem': problem.name,
                                                    'size': problem.size})
    summary_path = exporter.export_summary(results, known_optimum=problem.known_optimum)
    print(f"\nResults exported to: {output_dir} (summary: {os.path.basename(summary_path)})")


def save_plot(results: Dict[str, OptimizationResult], problem: Problem, output_dir: str):
    """Save a convergence PNG for the given results."""
    from metaopt.visualization import ConvergencePlotter

    os.makedirs(output_dir, exist_ok=True)
    plotter = ConvergencePlotter()
    save_path = os.path.join(output_dir, f"convergence_{problem.name}.png")
    fig = plotter.plot_comparison(results, title=f"Convergence on {problem.name}",
                                  save_path=save_path, known_optimum=problem.known_optimum)
    plotter.close(fig)
    print(f"Convergence plot saved to: {save_path}")


if __name__ == "__main__":
    main()
