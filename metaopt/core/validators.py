"""
Validation layer for metaopt.
Drivers clamp bad parameters with a warning; callers who prefer errors run
``ConfigValidator.validate`` on a config record first.
"""

import math

from metaopt.core.exceptions import InvalidConfigurationError


def _check_min(config, name: str, minimum):
    value = getattr(config, name)
    if value < minimum:
        raise InvalidConfigurationError(parameter=name, value=value, expected=f">= {minimum}")


def _check_rate(config, name: str):
    value = getattr(config, name)
    if not 0.0 <= value <= 1.0:
        raise InvalidConfigurationError(parameter=name, value=value, expected="in [0, 1]")


def _check_positive(config, name: str):
    value = getattr(config, name)
    if not value > 0.0 or not math.isfinite(value):
        raise InvalidConfigurationError(parameter=name, value=value, expected="> 0")


def _check_bounds(config):
    if config.lower_bound >= config.upper_bound:
        raise InvalidConfigurationError(
            parameter='upper_bound', value=config.upper_bound,
            expected=f"> lower_bound ({config.lower_bound})"
        )


class ConfigValidator:
    """Validate config records."""

    @staticmethod
    def validate_sa_config(config) -> bool:
        """
        Validate simulated annealing configuration.

        Returns:
            True if valid

        Raises:
            InvalidConfigurationError: If configuration is invalid
        """
        _check_positive(config, 'initial_temp')
        _check_positive(config, 'final_temp')
        if config.final_temp >= config.initial_temp:
            raise InvalidConfigurationError(
                parameter='final_temp', value=config.final_temp,
                expected=f"< initial_temp ({config.initial_temp})"
            )
        if not 0.0 < config.alpha < 1.0:
            raise InvalidConfigurationError(parameter='alpha', value=config.alpha,
                                            expected="in (0, 1)")
        _check_min(config, 'markov_chain_length', 1)
        _check_min(config, 'max_iterations', 0)
        if not 0.0 < config.target_acceptance < 1.0:
            raise InvalidConfigurationError(parameter='target_acceptance',
                                            value=config.target_acceptance,
                                            expected="in (0, 1)")
        if config.adaptive_target_low > config.adaptive_target_high:
            raise InvalidConfigurationError(
                parameter='adaptive_target_low', value=config.adaptive_target_low,
                expected=f"<= adaptive_target_high ({config.adaptive_target_high})"
            )
        return True

    @staticmethod
    def validate_tabu_config(config) -> bool:
        """Validate tabu search configuration."""
        _check_min(config, 'tabu_tenure', 1)
        _check_min(config, 'neighbors_per_iter', 1)
        _check_min(config, 'max_iterations', 0)
        _check_min(config, 'min_tenure', 1)
        if config.min_tenure > config.max_tenure:
            raise InvalidConfigurationError(
                parameter='min_tenure', value=config.min_tenure,
                expected=f"<= max_tenure ({config.max_tenure})"
            )
        return True

    @staticmethod
    def validate_ga_config(config) -> bool:
        """Validate genetic algorithm configuration."""
        _check_min(config, 'population_size', 4)
        if config.population_size % 2 != 0:
            raise InvalidConfigurationError(parameter='population_size',
                                            value=config.population_size,
                                            expected="an even number")
        _check_min(config, 'max_generations', 0)
        _check_rate(config, 'crossover_rate')
        _check_rate(config, 'mutation_rate')
        _check_min(config, 'tournament_size', 1)
        _check_min(config, 'elitism_count', 0)
        if config.elitism_count > config.population_size:
            raise InvalidConfigurationError(
                parameter='elitism_count', value=config.elitism_count,
                expected=f"<= population_size ({config.population_size})"
            )
        _check_rate(config, 'adaptive_min_mutation')
        _check_rate(config, 'adaptive_max_mutation')
        return True

    @staticmethod
    def validate_de_config(config) -> bool:
        """Validate differential evolution configuration."""
        # Local import: the strategy table lives with the driver.
        from metaopt.algorithms.differential_evolution import minimum_population
        _check_min(config, 'population_size', minimum_population(config.strategy))
        _check_min(config, 'max_generations', 0)
        _check_rate(config, 'CR')
        if not 0.0 < config.F <= 2.0:
            raise InvalidConfigurationError(parameter='F', value=config.F, expected="in (0, 2]")
        _check_bounds(config)
        return True

    @staticmethod
    def validate_aco_config(config) -> bool:
        """Validate ant colony configuration."""
        _check_min(config, 'n_ants', 1)
        _check_min(config, 'max_iterations', 0)
        if not 0.0 < config.rho < 1.0:
            raise InvalidConfigurationError(parameter='rho', value=config.rho,
                                            expected="in (0, 1)")
        _check_positive(config, 'tau_0')
        _check_positive(config, 'q')
        if config.tau_min >= config.tau_max:
            raise InvalidConfigurationError(
                parameter='tau_min', value=config.tau_min,
                expected=f"< tau_max ({config.tau_max})"
            )
        return True

    @staticmethod
    def validate_pso_config(config) -> bool:
        """Validate particle swarm configuration."""
        _check_min(config, 'num_particles', 1)
        _check_min(config, 'max_iterations', 0)
        _check_positive(config, 'v_max_ratio')
        _check_bounds(config)
        return True

    @staticmethod
    def validate_grasp_config(config) -> bool:
        """Validate GRASP configuration."""
        _check_rate(config, 'alpha')
        _check_min(config, 'max_iterations', 0)
        _check_min(config, 'reactive_num_alphas', 1)
        _check_min(config, 'reactive_block_size', 1)
        return True

    @staticmethod
    def validate_vns_config(config) -> bool:
        """Validate VNS configuration."""
        _check_min(config, 'k_max', 1)
        _check_min(config, 'max_iterations', 0)
        _check_min(config, 'vnd_num_neighborhoods', 1)
        return True

    @staticmethod
    def validate_lns_config(config) -> bool:
        """Validate LNS configuration."""
        if not 0.0 < config.destroy_degree < 1.0:
            raise InvalidConfigurationError(parameter='destroy_degree',
                                            value=config.destroy_degree, expected="in (0, 1)")
        _check_min(config, 'max_iterations', 0)
        _check_min(config, 'weight_update_interval', 1)
        _check_rate(config, 'weight_decay')
        return True

    @staticmethod
    def validate_memetic_config(config) -> bool:
        """Validate memetic algorithm configuration."""
        _check_min(config, 'population_size', 4)
        _check_min(config, 'max_generations', 0)
        _check_rate(config, 'crossover_rate')
        _check_rate(config, 'mutation_rate')
        _check_rate(config, 'ls_probability')
        _check_min(config, 'ls_neighbors', 1)
        return True

    @staticmethod
    def validate_ils_config(config) -> bool:
        """Validate iterated local search configuration."""
        _check_min(config, 'perturbation_strength', 1)
        _check_min(config, 'max_iterations', 0)
        _check_min(config, 'restart_threshold', 1)
        return True

    @staticmethod
    def validate_hc_config(config) -> bool:
        """Validate hill climbing configuration."""
        _check_min(config, 'neighbors_per_iter', 1)
        _check_min(config, 'num_restarts', 1)
        _check_min(config, 'max_iterations', 0)
        return True

    @staticmethod
    def validate(config) -> bool:
        """
        Validate any driver config record.

        Args:
            config: A config record such as ``SAConfig``

        Returns:
            True if valid

        Raises:
            InvalidConfigurationError: If a parameter is out of range or the
                record type is unknown
        """
        validators = {
            'SAConfig': ConfigValidator.validate_sa_config,
            'TabuConfig': ConfigValidator.validate_tabu_config,
            'GAConfig': ConfigValidator.validate_ga_config,
            'DEConfig': ConfigValidator.validate_de_config,
            'ACOConfig': ConfigValidator.validate_aco_config,
            'PSOConfig': ConfigValidator.validate_pso_config,
            'GRASPConfig': ConfigValidator.validate_grasp_config,
            'VNSConfig': ConfigValidator.validate_vns_config,
            'LNSConfig': ConfigValidator.validate_lns_config,
            'MAConfig': ConfigValidator.validate_memetic_config,
            'ILSConfig': ConfigValidator.validate_ils_config,
            'HCConfig': ConfigValidator.validate_hc_config,
        }
        kind = type(config).__name__
        if kind not in validators:
            raise InvalidConfigurationError(parameter='config', value=kind,
                                            expected=f"one of {sorted(validators)}")
        return validators[kind](config)
