"""
Abstract base for optimization drivers.
Handles what every driver shares: config records, per-run seeding, timing,
logging and the uniform ``run(problem) -> OptimizationResult`` contract.
"""

import dataclasses
import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, get_type_hints

from metaopt.core.exceptions import InvalidConfigurationError
from metaopt.core.pipeline_profiler import pipeline_profiler
from metaopt.core.rng import RandomGenerator
from metaopt.models.problem import Problem
from metaopt.models.solution import Direction, OptimizationResult
from config import LOGGING_CONFIG, PRESETS, ITERATION_FIELDS

logger = logging.getLogger(__name__)

C = TypeVar('C', bound='ConfigRecord')


class ConfigRecord:
    """Mixin for frozen config dataclasses built from ``config.py`` dicts."""

    @classmethod
    def from_dict(cls: Type[C], mapping: Mapping[str, Any]) -> C:
        """
        Build a config record from a plain dict.

        Enum fields accept either the member or its name.

        Raises:
            InvalidConfigurationError: On unknown keys or bad enum names
        """
        hints = get_type_hints(cls)
        names = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            if key not in names:
                raise InvalidConfigurationError(
                    parameter=key, value=value,
                    expected=f"one of {sorted(names)}"
                )
            field_type = hints.get(key)
            if isinstance(field_type, type) and issubclass(field_type, Enum) \
                    and not isinstance(value, field_type):
                try:
                    value = field_type[str(value).upper()]
                except KeyError:
                    raise InvalidConfigurationError(
                        parameter=key, value=value,
                        expected=f"one of {[m.name for m in field_type]}"
                    ) from None
            kwargs[key] = value
        return cls(**kwargs)

    def with_overrides(self: C, **overrides) -> C:
        """Copy of this record with some fields replaced."""
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.name
        return data


def apply_preset(config: C, preset: str) -> C:
    """
    Scale the iteration caps of ``config`` by a named preset.

    Raises:
        InvalidConfigurationError: If the preset name is unknown
    """
    if preset not in PRESETS:
        raise InvalidConfigurationError(
            parameter='preset', value=preset, expected=f"one of {sorted(PRESETS)}"
        )
    scale = PRESETS[preset]['iteration_scale']
    overrides = {}
    for name in ITERATION_FIELDS:
        if hasattr(config, name):
            overrides[name] = max(1, int(round(getattr(config, name) * scale)))
    return config.with_overrides(**overrides)


class BaseAlgorithm(ABC):
    """Base class for all optimization drivers."""

    name = "base"
    required_callbacks: Tuple[str, ...] = ('objective',)
    # Encodings the driver can search; empty means any
    encodings: Tuple[str, ...] = ()

    def __init__(self, config: Optional[ConfigRecord] = None, profile: bool = False):
        """
        Initialize driver.

        Args:
            config: Immutable config record (driver default when None)
            profile: Record phase timings in ``pipeline_profiler``
        """
        self.config = config if config is not None else self.default_config()
        self.profile = profile
        self.rng: Optional[RandomGenerator] = None
        self.stats: Dict[str, Any] = {}
        self._progress_interval = LOGGING_CONFIG.get('progress_interval', 100)

    @classmethod
    @abstractmethod
    def default_config(cls) -> ConfigRecord:
        """Documented default configuration."""

    @classmethod
    def supports(cls, problem: Problem) -> bool:
        """True if ``problem`` has the encoding and callables this driver needs."""
        if cls.encodings and problem.encoding is not None \
                and problem.encoding not in cls.encodings:
            return False
        return problem.has_callbacks(*cls.required_callbacks)

    @property
    def direction(self) -> Direction:
        return self.config.direction

    def run(self, problem: Problem) -> OptimizationResult:
        """
        Optimize ``problem`` and return the result of this run.

        Args:
            problem: Problem bundle with the callables this driver needs

        Returns:
            Result with best solution, convergence trace and counters

        Raises:
            MissingCallbackError: If a required callable is absent
        """
        if problem.size <= 0:
            logger.warning(f"{self.name}: empty problem '{problem.name}', returning empty result")
            return OptimizationResult.empty(self.name)
        problem.require(self.name, *self.required_callbacks)

        self.rng = RandomGenerator(self.config.seed)
        logger.info(f"{self.name}: starting on '{problem.name}' (size={problem.size}, "
                    f"seed={self.config.seed}, direction={self.direction.value})")

        start = time.perf_counter()
        with pipeline_profiler.maybe_profile(self.profile, f"{self.name}.run",
                                             {'problem': problem.name, 'size': problem.size}):
            result = self._run(problem)
        result.elapsed = time.perf_counter() - start
        result.algorithm = self.name

        self.stats = result.summary()
        self.stats.update(self._extra_statistics())
        logger.info(f"{self.name}: finished best={result.best.cost:.6g} "
                    f"iterations={result.iterations} evaluations={result.evaluations} "
                    f"elapsed={result.elapsed:.3f}s")
        return result

    @abstractmethod
    def _run(self, problem: Problem) -> OptimizationResult:
        """Driver body; ``self.rng`` is seeded before this is called."""

    def get_statistics(self) -> Dict[str, Any]:
        """Statistics of the last run."""
        return dict(self.stats)

    def _extra_statistics(self) -> Dict[str, Any]:
        return {}

    def _stage(self, stage: str, **metadata):
        return pipeline_profiler.maybe_profile(self.profile, f"{self.name}.{stage}", metadata)

    def _clamp_min(self, parameter: str, value, minimum):
        """Lenient config handling: raise ``value`` to ``minimum`` with a warning."""
        if value < minimum:
            logger.warning(f"{self.name}: {parameter}={value} clamped to {minimum}")
            return minimum
        return value

    def _log_progress(self, iteration: int, best_cost: float, **extra):
        if self._progress_interval and iteration % self._progress_interval == 0 \
                and logger.isEnabledFor(logging.DEBUG):
            details = ", ".join(f"{k}={v:.4g}" if isinstance(v, float) else f"{k}={v}"
                                for k, v in extra.items())
            logger.debug(f"{self.name}: iter {iteration} best={best_cost:.6g}"
                         + (f" {details}" if details else ""))


def bind_problem_bounds(config: C, problem: Problem) -> C:
    """
    Copy the context box bounds into configs that carry their own
    (DE, PSO), so vector drivers search the problem's domain.
    """
    context = problem.context
    if not (hasattr(config, 'lower_bound') and hasattr(context, 'lower_bound')):
        return config
    return config.with_overrides(lower_bound=context.lower_bound,
                                 upper_bound=context.upper_bound)


def prepare_config(algorithm: Type['BaseAlgorithm'], problem: Problem,
                   preset: Optional[str] = None, seed: Optional[int] = None,
                   iterations: Optional[int] = None) -> ConfigRecord:
    """
    Driver default config adjusted for one run.

    Args:
        algorithm: Driver class
        problem: Problem the run targets (box bounds are copied over)
        preset: Optional ``PRESETS`` name scaling the iteration caps
        seed: Optional seed override
        iterations: Optional explicit iteration/generation cap

    Returns:
        Config record for ``algorithm``
    """
    config = bind_problem_bounds(algorithm.default_config(), problem)
    if preset is not None:
        config = apply_preset(config, preset)
    if seed is not None:
        config = config.with_overrides(seed=seed)
    if iterations is not None:
        overrides = {name: iterations for name in ITERATION_FIELDS if hasattr(config, name)}
        config = config.with_overrides(**overrides)
    return config
