"""
Optimization drivers and the name registry used by the CLI and comparator.
"""

from typing import Dict, Type

from metaopt.core.exceptions import UnknownAlgorithmError
from .base import (
    BaseAlgorithm, ConfigRecord, apply_preset, bind_problem_bounds, prepare_config
)
from .operators import SelectionMethod, SelectionOperator, CrossoverOperator, MutationOperator
from .local_search import NeighborhoodDescent, neighborhood_local_search
from .simulated_annealing import SimulatedAnnealing, SAConfig, CoolingSchedule
from .tabu_search import TabuSearch, TabuConfig, TabuList, FrequencyMemory
from .genetic_algorithm import GeneticAlgorithm, GAConfig
from .differential_evolution import DifferentialEvolution, DEConfig, DEStrategy
from .ant_colony import AntColonyOptimization, ACOConfig, ACOVariant
from .particle_swarm import ParticleSwarm, PSOConfig, InertiaSchedule
from .grasp import GRASP, GRASPConfig
from .vns import VariableNeighborhoodSearch, VNSConfig, VNSVariant
from .memetic import MemeticAlgorithm, MAConfig, LearningMode
from .iterated_local_search import IteratedLocalSearch, ILSConfig, ILSAcceptance
from .hill_climbing import HillClimbing, HCConfig, HCVariant
from metaopt.optimization.lns_optimizer import LNSOptimizer, AdaptiveLNS

ALGORITHMS: Dict[str, Type[BaseAlgorithm]] = {
    'sa': SimulatedAnnealing,
    'tabu': TabuSearch,
    'ga': GeneticAlgorithm,
    'de': DifferentialEvolution,
    'aco': AntColonyOptimization,
    'pso': ParticleSwarm,
    'grasp': GRASP,
    'vns': VariableNeighborhoodSearch,
    'lns': LNSOptimizer,
    'alns': AdaptiveLNS,
    'memetic': MemeticAlgorithm,
    'ils': IteratedLocalSearch,
    'hc': HillClimbing,
}


def get_algorithm(name: str) -> Type[BaseAlgorithm]:
    """
    Look up a driver class by short name.

    Raises:
        UnknownAlgorithmError: If ``name`` is not registered
    """
    key = name.lower()
    if key not in ALGORITHMS:
        raise UnknownAlgorithmError(name, sorted(ALGORITHMS))
    return ALGORITHMS[key]


__all__ = [
    'ALGORITHMS', 'get_algorithm', 'BaseAlgorithm', 'ConfigRecord', 'apply_preset',
    'bind_problem_bounds', 'prepare_config',
    'SelectionMethod', 'SelectionOperator', 'CrossoverOperator', 'MutationOperator',
    'NeighborhoodDescent', 'neighborhood_local_search',
    'SimulatedAnnealing', 'SAConfig', 'CoolingSchedule',
    'TabuSearch', 'TabuConfig', 'TabuList', 'FrequencyMemory',
    'GeneticAlgorithm', 'GAConfig',
    'DifferentialEvolution', 'DEConfig', 'DEStrategy',
    'AntColonyOptimization', 'ACOConfig', 'ACOVariant',
    'ParticleSwarm', 'PSOConfig', 'InertiaSchedule',
    'GRASP', 'GRASPConfig',
    'VariableNeighborhoodSearch', 'VNSConfig', 'VNSVariant',
    'MemeticAlgorithm', 'MAConfig', 'LearningMode',
    'IteratedLocalSearch', 'ILSConfig', 'ILSAcceptance',
    'HillClimbing', 'HCConfig', 'HCVariant',
    'LNSOptimizer', 'AdaptiveLNS',
]
