"""
metaopt Demo Script
Runs every registered driver once on a TSP and a continuous benchmark.
"""

import logging
import time

from metaopt.algorithms import ALGORITHMS, prepare_config
from metaopt.benchmarks import create_problem
from metaopt.core.exceptions import OptimizationError
from metaopt.core.logger import get_logger, setup_logger
from metaopt.evaluation import gap_percent


def run_demo(preset: str = 'quick', seed: int = 42):
    """Run demonstration of the driver registry."""
    setup_logger('metaopt', level=logging.WARNING, to_file=False)
    logger = get_logger('metaopt')

    print("=" * 80)
    print("METAOPT DEMONSTRATION")
    print("=" * 80)

    problems = [create_problem('tsp10'), create_problem('sphere', dimension=10)]

    for problem in problems:
        print(f"\nProblem: {problem.name} (size {problem.size}, "
              f"known optimum {problem.known_optimum})")
        print("-" * 80)
        print(f"{'Algorithm':<10} {'Best cost':>14} {'Gap %':>10} {'Evaluations':>12} {'Time (s)':>10}")

        for name, cls in ALGORITHMS.items():
            if not cls.supports(problem):
                print(f"{name:<10} {'skipped (not applicable)':>14}")
                continue

            config = prepare_config(cls, problem, preset=preset, seed=seed)
            start_time = time.time()
            try:
                result = cls(config).run(problem)
            except OptimizationError as e:
                print(f"✗ {name} failed: {e}")
                continue
            elapsed = time.time() - start_time
            logger.debug(f"{name} on {problem.name}: {result.evaluations} evaluations")

            gap = gap_percent(result.best.cost, problem.known_optimum)
            print(f"{name:<10} {result.best.cost:>14.4f} {gap:>10.2f} "
                  f"{result.evaluations:>12} {elapsed:>10.2f}")

    print("\n" + "=" * 80)
    print("DEMONSTRATION COMPLETED")
    print("=" * 80)
    print("\nNext steps:")
    print("  python main.py --list-algorithms")
    print("  python main.py --problem tsp20 --compare --preset quick --output results --plot")


if __name__ == "__main__":
    run_demo()
