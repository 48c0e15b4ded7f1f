"""
Main Genetic Algorithm engine.
Generational GA with elitism, pluggable crossover/mutation callables,
optional local search and diversity-driven adaptive mutation.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from metaopt.algorithms.base import BaseAlgorithm, ConfigRecord
from metaopt.algorithms.operators import SelectionMethod, SelectionOperator
from metaopt.models.problem import Problem
from metaopt.models.solution import (
    Direction, OptimizationResult, Solution, is_better
)
from config import GA_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GAConfig(ConfigRecord):
    """Genetic algorithm parameters."""
    population_size: int = 50
    max_generations: int = 500
    crossover_rate: float = 0.8
    mutation_rate: float = 0.05
    elitism_count: int = 2
    selection: SelectionMethod = SelectionMethod.TOURNAMENT
    tournament_size: int = 3
    enable_local_search: bool = False
    enable_adaptive_rates: bool = False
    adaptive_min_mutation: float = 0.01
    adaptive_max_mutation: float = 0.3
    direction: Direction = Direction.MINIMIZE
    seed: int = 42


def default_config() -> GAConfig:
    """Defaults from ``config.GA_CONFIG``."""
    return GAConfig.from_dict(GA_CONFIG)


def sort_population(population: List[Solution], direction: Direction):
    """Sort in place, best first."""
    population.sort(key=lambda ind: ind.cost, reverse=(direction == Direction.MAXIMIZE))


def population_diversity(population: List[Solution]) -> float:
    """Mean absolute cost distance to the best (first) individual."""
    if not population:
        return 0.0
    head = population[0].cost
    return sum(abs(ind.cost - head) for ind in population[1:]) / len(population)


class GeneticAlgorithm(BaseAlgorithm):
    """Main Genetic Algorithm engine."""

    name = "ga"
    required_callbacks = ('objective', 'generate', 'crossover', 'mutate')

    @classmethod
    def default_config(cls) -> GAConfig:
        return default_config()

    def __init__(self, config: Optional[GAConfig] = None, profile: bool = False):
        super().__init__(config, profile)
        self.population: List[Solution] = []
        self.mutation_rate = self.config.mutation_rate
        self.diversity_history: List[float] = []

    def _evaluate_child(self, problem: Problem, data) -> Solution:
        cost = problem.evaluate(data)
        self._evaluations += 1
        if self.config.enable_local_search and problem.local_search is not None:
            data, cost = problem.local_search(data, problem.objective, problem.context, self.rng)
            self._evaluations += 1
        return Solution(data=data, cost=float(cost))

    def initialize_population(self, problem: Problem, size: int) -> List[Solution]:
        """
        Create and evaluate the initial population.

        Args:
            problem: Problem bundle
            size: Population size

        Returns:
            Population sorted best first
        """
        population = []
        for _ in range(size):
            data = problem.generate(problem.size, problem.context, self.rng)
            population.append(self._evaluate_child(problem, data))
        sort_population(population, self.direction)
        return population

    def _adapt_mutation_rate(self) -> float:
        cfg = self.config
        diversity = population_diversity(self.population)
        self.diversity_history.append(diversity)
        if diversity < 1e-6:
            return cfg.adaptive_max_mutation
        ratio = diversity / (abs(self.population[0].cost) + 1e-15)
        return cfg.adaptive_min_mutation + \
            (cfg.adaptive_max_mutation - cfg.adaptive_min_mutation) / (1.0 + ratio)

    def _select(self) -> Solution:
        cfg = self.config
        idx = SelectionOperator.select(cfg.selection, self.population, self.rng,
                                       self.direction, cfg.tournament_size)
        return self.population[idx]

    def evolve_generation(self, problem: Problem, pop_size: int, elite: int) -> List[Solution]:
        """
        Build the next generation.

        Args:
            problem: Problem bundle
            pop_size: Population size
            elite: Number of elites carried over unchanged

        Returns:
            New population (unsorted)
        """
        cfg = self.config
        offspring = [ind.clone() for ind in self.population[:elite]]

        for i in range(elite, pop_size, 2):
            parent1 = self._select()
            parent2 = self._select()
            if self.rng.uniform() < cfg.crossover_rate:
                child1, child2 = problem.crossover(parent1.data, parent2.data,
                                                   problem.context, self.rng)
            else:
                child1, child2 = parent1.data.copy(), parent2.data.copy()

            child1 = problem.mutate(child1, self.mutation_rate, problem.context, self.rng)
            child2 = problem.mutate(child2, self.mutation_rate, problem.context, self.rng)

            offspring.append(self._evaluate_child(problem, child1))
            if i + 1 < pop_size:
                offspring.append(self._evaluate_child(problem, child2))
        return offspring

    def _run(self, problem: Problem) -> OptimizationResult:
        cfg = self.config
        result = OptimizationResult.create(cfg.max_generations, self.name)
        self._evaluations = 0
        self.mutation_rate = cfg.mutation_rate
        self.diversity_history = []

        pop_size = self._clamp_min('population_size', cfg.population_size, 4)
        if pop_size % 2 != 0:
            logger.warning(f"{self.name}: population_size={pop_size} rounded up to {pop_size + 1}")
            pop_size += 1
        elite = min(max(0, cfg.elitism_count), pop_size)

        with self._stage("initialize", population_size=pop_size):
            self.population = self.initialize_population(problem, pop_size)
        best = self.population[0].clone()

        for generation in range(cfg.max_generations):
            with self._stage("generation", generation=generation):
                if cfg.enable_adaptive_rates:
                    self.mutation_rate = self._adapt_mutation_rate()

                self.population = self.evolve_generation(problem, pop_size, elite)
                sort_population(self.population, self.direction)

                if is_better(self.population[0].cost, best.cost, self.direction):
                    best = self.population[0].clone()
                    logger.debug(f"{self.name}: new best {best.cost:.6g} at gen {generation}")

                result.record(generation, best.cost)
                self._log_progress(generation, best.cost, mutation_rate=self.mutation_rate)

        result.best = best
        result.iterations = cfg.max_generations
        result.evaluations = self._evaluations
        return result

    def _extra_statistics(self) -> Dict:
        return {
            'final_mutation_rate': self.mutation_rate,
            'final_diversity': population_diversity(self.population),
            'population_size': len(self.population)
        }


def run_genetic_algorithm(problem: Problem, config: Optional[GAConfig] = None,
                          profile: bool = False) -> OptimizationResult:
    """Run the genetic algorithm on ``problem``."""
    return GeneticAlgorithm(config, profile=profile).run(problem)
