"""
metaopt: metaheuristic optimization engine.

Drivers share one solution/result model and receive problem-specific
behavior (objective, neighbor, crossover, ...) as plain callables.
"""

__version__ = "1.0.0"
