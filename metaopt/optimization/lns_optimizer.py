"""
Large Neighborhood Search (LNS) and Adaptive LNS.

Key concept: "destroy and repair"
1. DESTROY: mark a fraction of positions as holes (-1)
2. REPAIR: reinsert the missing elements
3. ACCEPT: keep if better, or with SA probability
4. REPEAT until the iteration cap

ALNS keeps a weight per operator and rewards operators whose moves found
a new global best, improved the current solution, or were accepted.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, delta, is_better
)
from config import LNS_CONFIG

logger = logging.getLogger(__name__)

HOLE = -1


class LNSVariant(Enum):
    """Operator selection policy."""
    BASIC = "basic"
    ADAPTIVE = "adaptive"


class LNSAcceptance(Enum):
    """Acceptance rule for repaired solutions."""
    BETTER = "better"
    SA_LIKE = "sa_like"


@dataclass(frozen=True)
class LNSConfig(ConfigRecord):
    """LNS / ALNS parameters."""
    max_iterations: int = 1000
    destroy_degree: float = 0.3
    variant: LNSVariant = LNSVariant.BASIC
    acceptance: LNSAcceptance = LNSAcceptance.BETTER
    sa_initial_temp: float = 100.0
    sa_alpha: float = 0.99
    reward_best: float = 10.0
    reward_better: float = 5.0
    reward_accepted: float = 1.0
    weight_update_interval: int = 50
    weight_decay: float = 0.8
    min_weight: float = 0.01
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> LNSConfig:
    """Defaults from ``config.LNS_CONFIG``."""
    return LNSConfig.from_dict(LNS_CONFIG)


# ---------------------------------------------------------------------------
# Built-in TSP destroy/repair operators. ``context`` exposes ``distances``.
# ---------------------------------------------------------------------------

def removal_count(n: int, degree: float) -> int:
    """Number of positions a destroy operator removes from a tour of ``n``."""
    return max(1, min(n - 1, int(degree * n)))


def destroy_random(data: np.ndarray, degree: float, context: Any,
                   rng: RandomGenerator) -> np.ndarray:
    """
    Random removal.

    Each pick scans forward past slots that are already holes.
    """
    destroyed = data.copy()
    n = len(destroyed)
    for _ in range(removal_count(n, degree)):
        idx = rng.randint(0, n - 1)
        while destroyed[idx] == HOLE:
            idx = (idx + 1) % n
        destroyed[idx] = HOLE
    return destroyed


def destroy_worst(data: np.ndarray, degree: float, context: Any,
                  rng: RandomGenerator) -> np.ndarray:
    """
    Worst removal.

    Removes the positions whose city contributes the largest
    ``d(prev, cur) + d(cur, next)`` on the original tour.
    """
    distances = context.distances
    destroyed = data.copy()
    n = len(destroyed)
    contribution = np.empty(n, dtype=np.float64)
    for i in range(n):
        prev, cur, nxt = data[i - 1], data[i], data[(i + 1) % n]
        contribution[i] = distances[prev, cur] + distances[cur, nxt]

    for _ in range(removal_count(n, degree)):
        pos = int(np.argmax(contribution))
        destroyed[pos] = HOLE
        contribution[pos] = -1.0
    return destroyed


def _split(destroyed: np.ndarray):
    partial = [int(c) for c in destroyed if c != HOLE]
    present = set(partial)
    missing = [c for c in range(len(destroyed)) if c not in present]
    return partial, missing


def repair_greedy(destroyed: np.ndarray, context: Any, rng: RandomGenerator) -> np.ndarray:
    """
    Cheapest insertion of each missing city, in ascending city order.

    The tour is closed, so inserting at either end sits between the last
    and first cities.
    """
    distances = context.distances
    partial, missing = _split(destroyed)
    for city in missing:
        if not partial:
            partial.append(city)
            continue
        length = len(partial)
        best_pos, best_increase = 0, math.inf
        for p in range(length + 1):
            prev = partial[p - 1] if p > 0 else partial[-1]
            nxt = partial[p] if p < length else partial[0]
            increase = distances[prev, city] + distances[city, nxt] - distances[prev, nxt]
            if increase < best_increase:
                best_pos, best_increase = p, increase
        partial.insert(best_pos, city)
    return np.array(partial, dtype=destroyed.dtype)


def repair_random(destroyed: np.ndarray, context: Any, rng: RandomGenerator) -> np.ndarray:
    """Insert the shuffled missing cities at random positions."""
    partial, missing = _split(destroyed)
    rng.shuffle(missing)
    for city in missing:
        partial.insert(rng.randint(0, len(partial)), city)
    return np.array(partial, dtype=destroyed.dtype)


class OperatorWeights:
    """Roulette weights, scores and usage counters for one operator family."""

    def __init__(self, count: int):
        self.weights = [1.0] * count
        self.scores = [0.0] * count
        self.usage = [0] * count

    def select(self, rng: RandomGenerator) -> int:
        total = sum(self.weights)
        if total <= 0.0:
            return rng.randint(0, len(self.weights) - 1)
        r = rng.uniform() * total
        cumulative = 0.0
        for i, w in enumerate(self.weights):
            cumulative += w
            if cumulative >= r:
                return i
        return len(self.weights) - 1

    def reward(self, idx: int, amount: float):
        self.usage[idx] += 1
        self.scores[idx] += amount

    def update(self, decay: float, min_weight: float):
        """Blend the mean score into each used operator's weight, then reset."""
        for i, used in enumerate(self.usage):
            if used > 0:
                w = decay * self.weights[i] + (1.0 - decay) * self.scores[i] / used
                self.weights[i] = max(w, min_weight)
        self.scores = [0.0] * len(self.weights)
        self.usage = [0] * len(self.weights)


class LNSOptimizer(BaseAlgorithm):
    """Destroy-and-repair search with better-only or SA acceptance."""

    name = "lns"
    required_callbacks = ('objective', 'generate', 'destroy_ops', 'repair_ops')

    @classmethod
    def default_config(cls) -> LNSConfig:
        return default_config()

    def __init__(self, config: Optional[LNSConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.destroy_weights: Optional[OperatorWeights] = None
        self.repair_weights: Optional[OperatorWeights] = None
        self.accepts = 0
        self.improvements = 0

    def run_adaptive(self, problem: Problem) -> OptimizationResult:
        """Run ALNS regardless of the configured variant."""
        original = self.config
        self.config = original.with_overrides(variant=LNSVariant.ADAPTIVE)
        try:
            return self.run(problem)
        finally:
            self.config = original

    def _accept(self, candidate_cost: float, current_cost: float, temperature: float) -> bool:
        if self.config.acceptance == LNSAcceptance.SA_LIKE:
            d = delta(candidate_cost, current_cost, self.direction)
            if d <= 0.0:
                return True
            if temperature <= 0.0:
                return False
            return self.rng.uniform() < math.exp(-d / temperature)
        return is_better(candidate_cost, current_cost, self.direction)

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        direction = self.direction
        adaptive = cfg.variant == LNSVariant.ADAPTIVE
        interval = self._clamp_min('weight_update_interval', cfg.weight_update_interval, 1)
        evaluations = 0
        self.accepts = 0
        self.improvements = 0

        with self._stage("initialize"):
            current = problem.generate(problem.size, problem.context, self.rng)
            current_cost = problem.evaluate(current)
            evaluations += 1
            self.destroy_weights = OperatorWeights(len(problem.destroy_ops))
            self.repair_weights = OperatorWeights(len(problem.repair_ops))
        best = Solution.from_data(current, current_cost)
        temperature = cfg.sa_initial_temp

        logger.info(f"{self.name}: variant={cfg.variant.name} acceptance={cfg.acceptance.name} "
                    f"destroy_ops={len(problem.destroy_ops)} repair_ops={len(problem.repair_ops)}")

        for iteration in range(cfg.max_iterations):
            with self._stage("iteration", iteration=iteration):
                d_idx = self.destroy_weights.select(self.rng) if adaptive else 0
                r_idx = self.repair_weights.select(self.rng) if adaptive else 0

                destroyed = problem.destroy_ops[d_idx](current, cfg.destroy_degree,
                                                       problem.context, self.rng)
                candidate = problem.repair_ops[r_idx](destroyed, problem.context, self.rng)
                candidate_cost = problem.evaluate(candidate)
                evaluations += 1

                new_best = is_better(candidate_cost, best.cost, direction)
                better = is_better(candidate_cost, current_cost, direction)
                accepted = self._accept(candidate_cost, current_cost, temperature)
                if cfg.acceptance == LNSAcceptance.SA_LIKE:
                    temperature *= cfg.sa_alpha

                if adaptive:
                    if new_best:
                        score = cfg.reward_best
                    elif better:
                        score = cfg.reward_better
                    elif accepted:
                        score = cfg.reward_accepted
                    else:
                        score = 0.0
                    self.destroy_weights.reward(d_idx, score)
                    self.repair_weights.reward(r_idx, score)

                if accepted:
                    current, current_cost = candidate, candidate_cost
                    self.accepts += 1
                    if is_better(current_cost, best.cost, direction):
                        best = Solution.from_data(current, current_cost)
                        self.improvements += 1
                        logger.debug(f"{self.name}: iter {iteration} new best {best.cost:.6g}")

                if adaptive and (iteration + 1) % interval == 0:
                    self.destroy_weights.update(cfg.weight_decay, cfg.min_weight)
                    self.repair_weights.update(cfg.weight_decay, cfg.min_weight)

                result.record(iteration, best.cost)
                self._log_progress(iteration, best.cost, temperature=temperature)

        result.best = best
        result.iterations = cfg.max_iterations
        result.evaluations = evaluations
        return result

    def _extra_statistics(self) -> Dict:
        stats = {'accepts': self.accepts, 'improvements': self.improvements}
        if self.config.variant == LNSVariant.ADAPTIVE and self.destroy_weights is not None:
            stats['destroy_weights'] = list(self.destroy_weights.weights)
            stats['repair_weights'] = list(self.repair_weights.weights)
        return stats


class AdaptiveLNS(LNSOptimizer):
    """ALNS: LNS with the adaptive variant as its default."""

    name = "alns"

    @classmethod
    def default_config(cls) -> LNSConfig:
        return default_config().with_overrides(variant=LNSVariant.ADAPTIVE)


def tsp_destroy_operators() -> List:
    """Built-in TSP destroy operators."""
    return [destroy_random, destroy_worst]


def tsp_repair_operators() -> List:
    """Built-in TSP repair operators."""
    return [repair_greedy, repair_random]


def run_lns(problem: Problem, config: Optional[LNSConfig] = None,
            profile: bool = False) -> OptimizationResult:
    """Run LNS (or ALNS when the config selects the adaptive variant)."""
    return LNSOptimizer(config, profile=profile).run(problem)


def run_alns(problem: Problem, config: Optional[LNSConfig] = None,
             profile: bool = False) -> OptimizationResult:
    """Run adaptive LNS on ``problem``."""
    return LNSOptimizer(config, profile=profile).run_adaptive(problem)
