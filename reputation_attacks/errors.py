"""
Errors raised by the attack models.
"""


class SimulationError(Exception):
    """Base class for errors raised while evaluating a scenario."""
    pass


class ConfigError(SimulationError, ValueError):
    """Raised when a scenario is malformed (route, percentages, cutoff)."""
    pass


class InsufficientHoldDurationError(SimulationError, ValueError):
    """Raised when a hold duration cannot be converted into capacity."""
    pass


class InvariantViolation(SimulationError, RuntimeError):
    """Raised when a model produces a result that breaks one of its invariants."""
    pass
