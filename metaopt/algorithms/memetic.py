"""
Memetic algorithm: a generational GA whose offspring are refined by
neighborhood descent, with Lamarckian or Baldwinian learning.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.algorithms.genetic_algorithm import sort_population
from metaopt.algorithms.local_search import NeighborhoodDescent
from metaopt.algorithms.operators import SelectionMethod, SelectionOperator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better, worst_value
)
from config import MEMETIC_CONFIG

logger = logging.getLogger(__name__)


class LearningMode(Enum):
    """How local search results feed back into the population."""
    LAMARCKIAN = "lamarckian"
    BALDWINIAN = "baldwinian"


@dataclass(frozen=True)
class MAConfig(ConfigRecord):
    """Memetic algorithm parameters."""
    population_size: int = 50
    max_generations: int = 200
    crossover_rate: float = 0.8
    mutation_rate: float = 0.05
    elitism_count: int = 2
    selection: SelectionMethod = SelectionMethod.TOURNAMENT
    tournament_size: int = 3
    learning: LearningMode = LearningMode.LAMARCKIAN
    ls_iterations: int = 50
    ls_neighbors: int = 10
    ls_probability: float = 1.0
    ls_on_initial: bool = True
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> MAConfig:
    """Defaults from ``config.MEMETIC_CONFIG``."""
    return MAConfig.from_dict(MEMETIC_CONFIG)


class MemeticAlgorithm(BaseAlgorithm):
    """GA plus per-offspring local search."""

    name = "memetic"
    required_callbacks = ('objective', 'generate', 'crossover', 'mutate', 'neighbor')

    @classmethod
    def default_config(cls) -> MAConfig:
        return default_config()

    def __init__(self, config: Optional[MAConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.population: List[Solution] = []
        self.local_search_calls = 0

    def _learn(self, individual: Solution) -> Solution:
        """
        Refine ``individual`` and update the tracked best.

        Lamarckian learning writes the refined genotype back; Baldwinian
        learning keeps the genotype and credits only the refined cost.
        """
        self._descent.evaluations = 0
        refined, refined_cost = self._descent.optimize(individual.data, individual.cost, self.rng)
        self._evaluations += self._descent.evaluations
        self.local_search_calls += 1

        if is_better(refined_cost, self._best.cost, self.direction):
            self._best = Solution.from_data(refined, refined_cost)

        if self.config.learning == LearningMode.BALDWINIAN:
            return Solution(data=individual.data, cost=float(refined_cost))
        return Solution(data=refined, cost=float(refined_cost))

    def _observe(self, individual: Solution):
        if is_better(individual.cost, self._best.cost, self.direction):
            self._best = individual.clone()

    def _select(self) -> Solution:
        cfg = self.config
        idx = SelectionOperator.select(cfg.selection, self.population, self.rng,
                                       self.direction, cfg.tournament_size)
        return self.population[idx]

    def _offspring(self, problem: Problem, data) -> Solution:
        child = Solution(data=data, cost=problem.evaluate(data))
        self._evaluations += 1
        self._observe(child)
        if self.rng.uniform() < self.config.ls_probability:
            child = self._learn(child)
        return child

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_generations, self.name)
        direction = self.direction
        pop_size = self._clamp_min('population_size', cfg.population_size, 4)
        elite = min(max(0, cfg.elitism_count), pop_size)
        self._evaluations = 0
        self.local_search_calls = 0
        self._descent = NeighborhoodDescent(problem.objective, problem.neighbor, problem.context,
                                            direction, cfg.ls_iterations, max(1, cfg.ls_neighbors))

        with self._stage("initialize", population_size=pop_size):
            self._best = Solution(cost=worst_value(direction))
            self.population = []
            for _ in range(pop_size):
                data = problem.generate(problem.size, problem.context, self.rng)
                individual = Solution(data=data, cost=problem.evaluate(data))
                self._evaluations += 1
                self._observe(individual)
                if cfg.ls_on_initial:
                    individual = self._learn(individual)
                self.population.append(individual)
            sort_population(self.population, direction)

        for generation in range(cfg.max_generations):
            with self._stage("generation", generation=generation):
                offspring = [ind.clone() for ind in self.population[:elite]]
                while len(offspring) + 1 < pop_size:
                    parent1 = self._select()
                    parent2 = self._select()
                    if self.rng.uniform() < cfg.crossover_rate:
                        child1, child2 = problem.crossover(parent1.data, parent2.data,
                                                           problem.context, self.rng)
                    else:
                        child1, child2 = parent1.data.copy(), parent2.data.copy()
                    child1 = problem.mutate(child1, cfg.mutation_rate, problem.context, self.rng)
                    child2 = problem.mutate(child2, cfg.mutation_rate, problem.context, self.rng)
                    offspring.append(self._offspring(problem, child1))
                    offspring.append(self._offspring(problem, child2))

                if len(offspring) < pop_size:
                    offspring.append(self._select().clone())

                self.population = offspring
                sort_population(self.population, direction)
                result.record(generation, self._best.cost)
                self._log_progress(generation, self._best.cost)

        result.best = self._best
        result.iterations = cfg.max_generations
        result.evaluations = self._evaluations
        return result

    def _extra_statistics(self):
        return {
            'learning': self.config.learning.name,
            'local_search_calls': self.local_search_calls
        }


def run_memetic(problem: Problem, config: Optional[MAConfig] = None,
                profile: bool = False) -> OptimizationResult:
    """Run the memetic algorithm on ``problem``."""
    return MemeticAlgorithm(config, profile=profile).run(problem)
