"""
Error Taxonomy
==============
Exceptions raised by the scale engine.

Configuration problems are the caller's fault and surface immediately.
Computation problems signal a broken internal invariant and abort the
computation that hit them. Soft problems (anchor outside bounds, garbage
hysteresis output) are never raised; they are logged where they happen.
"""


class ChartScaleError(Exception):
    """Base class for all scale engine errors."""


class ConfigurationError(ChartScaleError, ValueError):
    """Invalid argument or option shape (padding, bounds, step size, rounding value)."""


class ComputationError(ChartScaleError, RuntimeError):
    """An internal invariant was violated while computing ticks or rounding dates."""


class NotConfiguredError(ChartScaleError, RuntimeError):
    """A controller was asked for its host before `configure()` (or after the host died)."""
