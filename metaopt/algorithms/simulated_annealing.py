"""
Simulated annealing driver.
Metropolis acceptance over Markov chains of fixed length, with four cooling
schedules, optional reheating and optional automatic T0 calibration.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, delta, is_better
)
from config import SA_CONFIG

logger = logging.getLogger(__name__)


class CoolingSchedule(Enum):
    """Temperature update applied after each Markov chain."""
    GEOMETRIC = "geometric"
    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"
    ADAPTIVE = "adaptive"


@dataclass(frozen=True)
class SAConfig(ConfigRecord):
    """Simulated annealing parameters."""
    initial_temp: float = 100.0
    final_temp: float = 0.001
    alpha: float = 0.95
    cooling: CoolingSchedule = CoolingSchedule.GEOMETRIC
    max_iterations: int = 10000
    markov_chain_length: int = 50
    enable_reheating: bool = False
    reheat_threshold: float = 0.01
    reheat_factor: float = 2.0
    auto_calibrate: bool = False
    calibration_samples: int = 100
    target_acceptance: float = 0.8
    adaptive_target_low: float = 0.2
    adaptive_target_high: float = 0.5
    adaptive_factor: float = 1.05
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> SAConfig:
    """Defaults from ``config.SA_CONFIG``."""
    return SAConfig.from_dict(SA_CONFIG)


class SimulatedAnnealing(BaseAlgorithm):
    """Simulated annealing over a neighbor callable."""

    name = "sa"
    required_callbacks = ('objective', 'generate', 'neighbor')

    @classmethod
    def default_config(cls) -> SAConfig:
        return default_config()

    def __init__(self, config: Optional[SAConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.initial_temperature = self.config.initial_temp
        self.reheats = 0
        self._evaluations = 0

    def calibrate_temperature(self, problem: Problem) -> float:
        """
        Estimate T0 so that an average uphill move is accepted with
        probability ``target_acceptance``.

        Args:
            problem: Problem bundle

        Returns:
            Calibrated T0, or the configured one when no uphill delta
            was observed
        """
        cfg = self.config
        if self.rng is None:
            self.rng = RandomGenerator(cfg.seed)
        target = cfg.target_acceptance
        if target <= 0.0 or target >= 1.0:
            target = 0.8

        data = problem.generate(problem.size, problem.context, self.rng)
        cost = problem.evaluate(data)
        self._evaluations += 1

        total = 0.0
        count = 0
        for _ in range(max(1, cfg.calibration_samples)):
            candidate = problem.neighbor(data, problem.context, self.rng)
            candidate_cost = problem.evaluate(candidate)
            self._evaluations += 1
            d = abs(candidate_cost - cost)
            if d > 1e-15:
                total += d
                count += 1

        if count == 0:
            logger.warning(f"{self.name}: calibration saw no cost change, "
                           f"keeping T0={cfg.initial_temp}")
            return cfg.initial_temp

        temperature = -(total / count) / math.log(target)
        if not math.isfinite(temperature) or temperature <= 0.0:
            return cfg.initial_temp
        logger.info(f"{self.name}: calibrated T0={temperature:.6g} from {count} samples")
        return temperature

    def _cool(self, temperature: float, t0: float, step: int, acceptance_rate: float) -> float:
        cfg = self.config
        if cfg.cooling == CoolingSchedule.LINEAR:
            return max(temperature - (t0 - cfg.final_temp) / 1000.0, cfg.final_temp)
        if cfg.cooling == CoolingSchedule.LOGARITHMIC:
            return t0 / math.log(2.0 + step)
        if cfg.cooling == CoolingSchedule.ADAPTIVE:
            if acceptance_rate < cfg.adaptive_target_low:
                return temperature * cfg.adaptive_factor
            if acceptance_rate > cfg.adaptive_target_high:
                return temperature / cfg.adaptive_factor
            return temperature
        return temperature * cfg.alpha

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        chain_length = self._clamp_min('markov_chain_length', cfg.markov_chain_length, 1)
        self._evaluations = 0
        self.reheats = 0

        with self._stage("initialize"):
            current = problem.generate(problem.size, problem.context, self.rng)
            current_cost = problem.evaluate(current)
            self._evaluations += 1

            t0 = cfg.initial_temp
            if cfg.auto_calibrate:
                t0 = self.calibrate_temperature(problem)
                self.rng.set_seed(cfg.seed)
                current = problem.generate(problem.size, problem.context, self.rng)
                current_cost = problem.evaluate(current)
                self._evaluations += 1
            self.initial_temperature = t0

        best = Solution.from_data(current, current_cost)
        temperature = t0
        iteration = 0
        step = 0

        while temperature > cfg.final_temp and iteration < cfg.max_iterations:
            accepted = 0
            with self._stage("iteration", temperature=temperature):
                for _ in range(chain_length):
                    if iteration >= cfg.max_iterations:
                        break
                    candidate = problem.neighbor(current, problem.context, self.rng)
                    candidate_cost = problem.evaluate(candidate)
                    self._evaluations += 1

                    d = delta(candidate_cost, current_cost, self.direction)
                    if d < 0.0 or (temperature > 1e-15
                                   and self.rng.uniform() < math.exp(-d / temperature)):
                        current, current_cost = candidate, candidate_cost
                        accepted += 1
                        if is_better(current_cost, best.cost, self.direction):
                            best = Solution.from_data(current, current_cost)
                            logger.debug(f"{self.name}: new best {best.cost:.6g} "
                                         f"at iter {iteration} (T={temperature:.4g})")

                    result.record(iteration, best.cost)
                    self._log_progress(iteration, best.cost, temperature=temperature)
                    iteration += 1

            acceptance_rate = accepted / chain_length
            if cfg.enable_reheating and acceptance_rate < cfg.reheat_threshold \
                    and temperature < 0.5 * t0:
                temperature = min(temperature * cfg.reheat_factor, t0)
                self.reheats += 1
                logger.debug(f"{self.name}: reheated to T={temperature:.4g}")
            else:
                step += 1
                temperature = self._cool(temperature, t0, step, acceptance_rate)

        self.final_temperature = temperature
        result.best = best
        result.iterations = iteration
        result.evaluations = self._evaluations
        return result

    def _extra_statistics(self) -> Dict:
        return {
            'initial_temperature': self.initial_temperature,
            'final_temperature': getattr(self, 'final_temperature', None),
            'reheats': self.reheats
        }


def run_simulated_annealing(problem: Problem, config: Optional[SAConfig] = None,
                            profile: bool = False) -> OptimizationResult:
    """Run simulated annealing on ``problem``."""
    return SimulatedAnnealing(config, profile=profile).run(problem)
