"""
Core infrastructure: logging, errors, validation, profiling and randomness.
"""

from .exceptions import (
    OptimizationError, InvalidConfigurationError, MissingCallbackError,
    UnknownAlgorithmError, UnknownProblemError
)
from .rng import RandomGenerator
from .validators import ConfigValidator
from .pipeline_profiler import pipeline_profiler

__all__ = [
    'OptimizationError', 'InvalidConfigurationError', 'MissingCallbackError',
    'UnknownAlgorithmError', 'UnknownProblemError',
    'RandomGenerator', 'ConfigValidator', 'pipeline_profiler'
]
