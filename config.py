# Configuration parameters for the metaopt engine
# Defaults follow the classic literature settings for each metaheuristic.
# Enum-valued fields are given by member name (e.g. 'GEOMETRIC').

# Simulated Annealing
SA_CONFIG = {
    'initial_temp': 100.0,
    'final_temp': 0.001,
    'alpha': 0.95,               # Geometric cooling factor
    'cooling': 'GEOMETRIC',      # GEOMETRIC | LINEAR | LOGARITHMIC | ADAPTIVE
    'max_iterations': 10000,
    'markov_chain_length': 50,   # Inner iterations per temperature level

    'enable_reheating': False,
    'reheat_threshold': 0.01,    # Acceptance rate that triggers reheating
    'reheat_factor': 2.0,

    'auto_calibrate': False,     # Estimate T0 from sampled neighbor deltas
    'calibration_samples': 100,
    'target_acceptance': 0.8,

    'adaptive_target_low': 0.2,  # Adaptive cooling acceptance band
    'adaptive_target_high': 0.5,
    'adaptive_factor': 1.05,

    'direction': 'MINIMIZE',
    'seed': 42
}

# Tabu Search
TABU_CONFIG = {
    'max_iterations': 5000,
    'neighbors_per_iter': 20,
    'tabu_tenure': 15,
    'aspiration_enabled': True,

    'diversification_enabled': False,
    'diversification_weight': 0.1,   # Penalty per recorded visit
    'diversification_trigger': 100,  # Iterations without improvement

    'intensification_enabled': False,
    'intensification_trigger': 50,

    'reactive_tenure': False,
    'reactive_increase': 5,
    'reactive_decrease': 1,
    'min_tenure': 5,
    'max_tenure': 50,

    'direction': 'MINIMIZE',
    'seed': 42
}

# Genetic Algorithm
GA_CONFIG = {
    'population_size': 50,       # Clamped to >= 4 and made even
    'max_generations': 500,
    'crossover_rate': 0.8,
    'mutation_rate': 0.05,
    'elitism_count': 2,
    'selection': 'TOURNAMENT',   # TOURNAMENT | ROULETTE | RANK
    'tournament_size': 3,
    'enable_local_search': False,
    'enable_adaptive_rates': False,
    'adaptive_min_mutation': 0.01,
    'adaptive_max_mutation': 0.3,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Differential Evolution
DE_CONFIG = {
    'population_size': 50,
    'max_generations': 1000,
    'F': 0.8,                    # Differential weight
    'CR': 0.9,                   # Crossover probability
    'strategy': 'RAND_1',        # RAND_1 | BEST_1 | CURRENT_TO_BEST_1 | RAND_2 | BEST_2
    'lower_bound': -5.12,
    'upper_bound': 5.12,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Ant Colony Optimization
ACO_CONFIG = {
    'n_ants': 20,
    'max_iterations': 500,
    'alpha': 1.0,                # Pheromone exponent
    'beta': 3.0,                 # Heuristic exponent
    'rho': 0.1,                  # Evaporation rate
    'q': 1.0,                    # Deposit constant
    'tau_0': 0.1,
    'variant': 'ANT_SYSTEM',     # ANT_SYSTEM | ELITIST | MAX_MIN
    'elitist_weight': 2.0,
    'tau_min': 0.001,
    'tau_max': 10.0,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Particle Swarm Optimization
PSO_CONFIG = {
    'num_particles': 30,
    'max_iterations': 500,
    'w': 0.729,                  # Inertia (upper value for linear schedule)
    'w_min': 0.4,
    'c1': 1.49445,               # Cognitive coefficient
    'c2': 1.49445,               # Social coefficient
    'v_max_ratio': 0.1,          # Velocity clamp as a fraction of the range
    'inertia': 'LINEAR_DECREASING',  # CONSTANT | LINEAR_DECREASING | CONSTRICTION
    'lower_bound': -5.12,
    'upper_bound': 5.12,
    'direction': 'MINIMIZE',
    'seed': 42
}

# GRASP
GRASP_CONFIG = {
    'max_iterations': 500,
    'alpha': 0.3,                # RCL greediness (0 = greedy, 1 = random)
    'local_search_iterations': 100,
    'local_search_neighbors': 20,
    'enable_reactive': False,
    'reactive_num_alphas': 5,
    'reactive_block_size': 50,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Variable Neighborhood Search
VNS_CONFIG = {
    'max_iterations': 1000,
    'k_max': 5,
    'local_search_iterations': 200,
    'local_search_neighbors': 20,
    'variant': 'BASIC',          # BASIC | REDUCED | GENERAL
    'vnd_num_neighborhoods': 3,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Large Neighborhood Search / ALNS
LNS_CONFIG = {
    'max_iterations': 1000,
    'destroy_degree': 0.3,       # Fraction of positions removed per destroy
    'variant': 'BASIC',          # BASIC | ADAPTIVE
    'acceptance': 'BETTER',      # BETTER | SA_LIKE
    'sa_initial_temp': 100.0,
    'sa_alpha': 0.99,
    'reward_best': 10.0,
    'reward_better': 5.0,
    'reward_accepted': 1.0,
    'weight_update_interval': 50,
    'weight_decay': 0.8,
    'min_weight': 0.01,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Memetic Algorithm
MEMETIC_CONFIG = {
    'population_size': 50,
    'max_generations': 200,
    'crossover_rate': 0.8,
    'mutation_rate': 0.05,
    'elitism_count': 2,
    'selection': 'TOURNAMENT',
    'tournament_size': 3,
    'learning': 'LAMARCKIAN',    # LAMARCKIAN | BALDWINIAN
    'ls_iterations': 50,
    'ls_neighbors': 10,
    'ls_probability': 1.0,
    'ls_on_initial': True,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Iterated Local Search
ILS_CONFIG = {
    'max_iterations': 1000,
    'local_search_iterations': 200,
    'local_search_neighbors': 20,
    'perturbation_strength': 1,
    'acceptance': 'BETTER',      # BETTER | ALWAYS | SA_LIKE | RESTART
    'sa_initial_temp': 10.0,
    'sa_alpha': 0.95,
    'restart_threshold': 50,
    'direction': 'MINIMIZE',
    'seed': 42
}

# Hill Climbing
HC_CONFIG = {
    'variant': 'STEEPEST',       # STEEPEST | FIRST_IMPROVEMENT | RANDOM_RESTART | STOCHASTIC
    'max_iterations': 1000,
    'neighbors_per_iter': 20,
    'num_restarts': 10,
    'temperature': 1.0,          # Stochastic variant only
    'direction': 'MINIMIZE',
    'seed': 42
}

# Iteration budget presets (multiplier applied to the cap fields)
PRESETS = {
    'quick': {
        'description': 'Smoke runs and tests',
        'iteration_scale': 0.1
    },
    'default': {
        'description': 'Literature defaults',
        'iteration_scale': 1.0
    },
    'thorough': {
        'description': 'Longer searches for final numbers',
        'iteration_scale': 3.0
    }
}

# Fields scaled by PRESETS
ITERATION_FIELDS = ('max_iterations', 'max_generations')

# Benchmark defaults
BENCHMARK_CONFIG = {
    'continuous_dimension': 10,
    'random_cities': 30,
    'random_seed': 42
}

# Logging
LOGGING_CONFIG = {
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'datefmt': '%Y-%m-%d %H:%M:%S',
    'log_dir': 'logs',
    'file_prefix': 'metaopt',
    'progress_interval': 100     # Debug progress line every N iterations
}

# Visualization
VIZ_CONFIG = {
    'figure_size': (12, 7),
    'dpi': 150,
    'line_width': 2,
    'font_size': 12,
    'palette': 'husl'
}

# File Paths
PATHS = {
    'results': 'results/',
    'logs': 'logs/'
}
