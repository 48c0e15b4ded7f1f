"""
Tabu search driver and its memory structures.
Solutions are remembered by hash in a bounded FIFO tabu list; an optional
frequency memory drives diversification penalties.
"""

import logging
from collections import OrderedDict, deque
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.core.callbacks import HashFn
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import TABU_CONFIG

logger = logging.getLogger(__name__)

FNV_OFFSET_BASIS = 14695981039346656037
FNV_PRIME = 1099511628211
_MASK64 = 0xFFFFFFFFFFFFFFFF
_MASK32 = 0xFFFFFFFF


def _fnv1a(values, mask: int = _MASK32) -> int:
    h = FNV_OFFSET_BASIS
    for value in values:
        h ^= int(value) & mask
        h = (h * FNV_PRIME) & _MASK64
    return h


def hash_int_array(data: np.ndarray) -> int:
    """FNV-1a 64-bit hash of an integer array."""
    return _fnv1a(data.tolist())


def hash_float_array(data: np.ndarray) -> int:
    """FNV-1a 64-bit hash of a float array discretized to 1e-4."""
    return _fnv1a((int(x * 10000) for x in data.tolist()), _MASK64)


def default_hash(data: np.ndarray) -> HashFn:
    """Pick the hash function matching the dtype of ``data``."""
    if np.issubdtype(data.dtype, np.integer):
        return hash_int_array
    return hash_float_array


class TabuList:
    """Bounded FIFO of recently visited solution hashes."""

    def __init__(self, capacity: int):
        self._items = deque(maxlen=max(1, int(capacity)))

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def add(self, h: int):
        """Append ``h``, evicting the oldest entry when full."""
        self._items.append(h)

    def contains(self, h: int) -> bool:
        return h in self._items

    def __contains__(self, h: int) -> bool:
        return self.contains(h)

    def __len__(self) -> int:
        return len(self._items)

    def resize(self, capacity: int):
        """Change capacity, keeping the most recent entries."""
        capacity = max(1, int(capacity))
        if capacity == self._items.maxlen:
            return
        self._items = deque(self._items, maxlen=capacity)

    def to_list(self):
        """Entries from oldest to newest."""
        return list(self._items)


class FrequencyMemory:
    """
    Bounded visit counter keyed by solution hash.

    When full, the least frequent entry is evicted before inserting; ties go
    to the entry inserted first.
    """

    def __init__(self, capacity: int):
        self.capacity = max(1, int(capacity))
        self._counts: 'OrderedDict[int, int]' = OrderedDict()

    def increment(self, h: int):
        if h in self._counts:
            self._counts[h] += 1
            return
        if len(self._counts) >= self.capacity:
            victim = min(self._counts, key=self._counts.get)
            del self._counts[victim]
        self._counts[h] = 1

    def get(self, h: int) -> int:
        return self._counts.get(h, 0)

    def __len__(self) -> int:
        return len(self._counts)


@dataclass(frozen=True)
class TabuConfig(ConfigRecord):
    """Tabu search parameters."""
    max_iterations: int = 5000
    neighbors_per_iter: int = 20
    tabu_tenure: int = 15
    aspiration_enabled: bool = True
    diversification_enabled: bool = False
    diversification_weight: float = 0.1
    diversification_trigger: int = 100
    intensification_enabled: bool = False
    intensification_trigger: int = 50
    reactive_tenure: bool = False
    reactive_increase: int = 5
    reactive_decrease: int = 1
    min_tenure: int = 5
    max_tenure: int = 50
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> TabuConfig:
    """Defaults from ``config.TABU_CONFIG``."""
    return TabuConfig.from_dict(TABU_CONFIG)


class TabuSearch(BaseAlgorithm):
    """Hash-based tabu search with aspiration, reactive tenure and long-term memory."""

    name = "tabu"
    required_callbacks = ('objective', 'generate', 'neighbor')

    @classmethod
    def default_config(cls) -> TabuConfig:
        return default_config()

    def __init__(self, config: Optional[TabuConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.final_tenure = self.config.tabu_tenure

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_iterations, self.name)
        tenure = self._clamp_min('tabu_tenure', cfg.tabu_tenure, 1)
        num_neighbors = self._clamp_min('neighbors_per_iter', cfg.neighbors_per_iter, 1)
        direction = self.direction
        evaluations = 0

        with self._stage("initialize"):
            current = problem.generate(problem.size, problem.context, self.rng)
            current_cost = problem.evaluate(current)
            evaluations += 1
            hash_fn = problem.hash_fn or default_hash(current)

            tabu_list = TabuList(tenure)
            memory = None
            if cfg.diversification_enabled or cfg.intensification_enabled:
                memory = FrequencyMemory(min(cfg.max_iterations, 4096))

            current_hash = hash_fn(current)
            tabu_list.add(current_hash)
            if memory is not None:
                memory.increment(current_hash)

        best = Solution.from_data(current, current_cost)
        previous_hash = current_hash
        no_improve = 0
        iterations = 0

        for iteration in range(cfg.max_iterations):
            with self._stage("iteration"):
                chosen = None
                chosen_hash = 0
                chosen_score = 0.0
                for _ in range(num_neighbors):
                    candidate = problem.neighbor(current, problem.context, self.rng)
                    cost = problem.evaluate(candidate)
                    evaluations += 1
                    h = hash_fn(candidate)

                    admissible = not tabu_list.contains(h) or (
                        cfg.aspiration_enabled and is_better(cost, best.cost, direction))
                    if not admissible:
                        continue

                    score = cost
                    if cfg.diversification_enabled and memory is not None:
                        penalty = cfg.diversification_weight * memory.get(h)
                        score = cost + penalty if direction == Direction.MINIMIZE else cost - penalty

                    if chosen is None or is_better(score, chosen_score, direction):
                        chosen, chosen_hash, chosen_score = candidate, h, score

                if chosen is None:
                    result.record(iteration, best.cost)
                    iterations = iteration + 1
                    continue

                current = chosen
                current_cost = problem.evaluate(current)
                evaluations += 1
                tabu_list.add(chosen_hash)
                if memory is not None:
                    memory.increment(chosen_hash)

                if is_better(current_cost, best.cost, direction):
                    best = Solution.from_data(current, current_cost)
                    no_improve = 0
                    logger.debug(f"{self.name}: new best {best.cost:.6g} at iter {iteration}")
                else:
                    no_improve += 1

                if cfg.reactive_tenure:
                    if chosen_hash == previous_hash:
                        tenure = min(tenure + cfg.reactive_increase, cfg.max_tenure)
                    elif no_improve == 0:
                        if tenure > cfg.reactive_decrease + cfg.min_tenure:
                            tenure -= cfg.reactive_decrease
                        else:
                            tenure = cfg.min_tenure
                    tenure = max(1, tenure)
                    tabu_list.resize(tenure)
                previous_hash = chosen_hash

                if cfg.intensification_enabled and no_improve == cfg.intensification_trigger:
                    current, current_cost = best.data.copy(), best.cost
                    logger.debug(f"{self.name}: intensify from best at iter {iteration}")

                if cfg.diversification_enabled and no_improve == cfg.diversification_trigger:
                    current = problem.generate(problem.size, problem.context, self.rng)
                    current_cost = problem.evaluate(current)
                    evaluations += 1
                    no_improve = 0
                    logger.debug(f"{self.name}: diversify at iter {iteration}")

                result.record(iteration, best.cost)
                self._log_progress(iteration, best.cost, tenure=tenure)
                iterations = iteration + 1

        self.final_tenure = tenure
        result.best = best
        result.iterations = iterations
        result.evaluations = evaluations
        return result

    def _extra_statistics(self) -> Dict:
        return {'final_tenure': self.final_tenure}


def run_tabu_search(problem: Problem, config: Optional[TabuConfig] = None,
                    profile: bool = False) -> OptimizationResult:
    """Run tabu search on ``problem``."""
    return TabuSearch(config, profile=profile).run(problem)
