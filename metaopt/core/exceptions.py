"""
Custom exceptions for metaopt.
Drivers never raise mid-run; these cover misuse at the API boundary.
"""


class OptimizationError(Exception):
    """Base exception for the optimization engine."""

    def __init__(self, message: str = "", details: dict = None):
        """
        Initialize optimization exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidConfigurationError(OptimizationError):
    """Raised when configuration parameters are invalid."""

    def __init__(self, parameter: str = None, value=None,
                 expected: str = None):
        """
        Initialize invalid configuration error.

        Args:
            parameter: Parameter name
            value: Invalid value
            expected: Expected value or range
        """
        message = "Invalid configuration parameter"
        details = {}

        if parameter:
            details['parameter'] = parameter
        if value is not None:
            details['value'] = value
        if expected:
            details['expected'] = expected

        if parameter:
            message += f": {parameter} = {value}"
            if expected:
                message += f" (expected: {expected})"

        super().__init__(message, details)


class MissingCallbackError(OptimizationError):
    """Raised when a driver is given a problem without a required callable."""

    def __init__(self, callback: str = None, algorithm: str = None):
        message = "Required callback missing"
        details = {}

        if callback:
            details['callback'] = callback
            message += f": '{callback}'"
        if algorithm:
            details['algorithm'] = algorithm
            message += f" (needed by {algorithm})"

        super().__init__(message, details)


class UnknownAlgorithmError(OptimizationError):
    """Raised when an algorithm name is not registered."""

    def __init__(self, name: str = None, available: list = None):
        message = f"Unknown algorithm: '{name}'"
        details = {'name': name}
        if available:
            details['available'] = sorted(available)
        super().__init__(message, details)


class UnknownProblemError(OptimizationError):
    """Raised when a benchmark problem name is not recognised."""

    def __init__(self, name: str = None, available: list = None):
        message = f"Unknown problem: '{name}'"
        details = {'name': name}
        if available:
            details['available'] = sorted(available)
        super().__init__(message, details)
