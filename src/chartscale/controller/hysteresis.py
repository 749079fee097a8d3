"""
Hysteresis Policies
===================
Smoothing applied to a freshly computed content range before it is adopted.

Why is this file needed?
------------------------
Autoscaling to the exact data bounds makes the axis twitch on every new
sample. A hysteresis policy snaps the range outward to coarser boundaries
(fixed steps or the ticks of a scale), so the view only changes when the
data crosses one of them.

A policy returns the smoothed range, or None to keep the input unchanged.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Protocol

from chartscale.errors import ConfigurationError
from chartscale.model.geometry import Range
from chartscale.utils import is_finite_number

HysteresisFunc = Callable[[float, float, Optional[float], Optional[float]], Any]


class TickScaleLike(Protocol):
    def update_tick_scale(self, start, end, expand: bool = False, **constraints) -> bool:
        ...

    def value_at_location(self, location: float) -> Any:
        ...

    def span_location_range(self, start: float, end: float) -> Range:
        ...


class Hysteresis(ABC):
    """
    Base class of hysteresis policies.

    `prev_min` and `prev_max` are the static bounds configured on the
    controller (either may be None).
    """

    @abstractmethod
    def apply(
        self,
        min: float,
        max: float,
        prev_min: Optional[float] = None,
        prev_max: Optional[float] = None,
    ) -> Optional[Range]:
        ...

    def __call__(self, min, max, prev_min=None, prev_max=None):
        return self.apply(min, max, prev_min, prev_max)

    # ==========================================
    # FACTORIES
    # ==========================================
    @staticmethod
    def none() -> Hysteresis:
        return NoHysteresis()

    @staticmethod
    def step(size: float, origin: float = 0.0) -> Hysteresis:
        return StepHysteresis(size, origin)

    @staticmethod
    def with_scale(scale: TickScaleLike) -> Hysteresis:
        return ScaleHysteresis(scale)

    @staticmethod
    def wrap(policy: Hysteresis | HysteresisFunc | None) -> Optional[Hysteresis]:
        """Accept a policy or a plain `(min, max, prev_min, prev_max)` function."""
        if policy is None or isinstance(policy, Hysteresis):
            return policy
        if not callable(policy):
            raise ConfigurationError(f"Invalid hysteresis: {policy!r}")
        return FunctionHysteresis(policy)


class NoHysteresis(Hysteresis):
    def apply(self, min, max, prev_min=None, prev_max=None) -> None:
        return None


class StepHysteresis(Hysteresis):
    """Snap min down and max up to multiples of `size` counted from `origin`."""

    def __init__(self, size: float, origin: float = 0.0) -> None:
        if not is_finite_number(size) or size <= 0:
            raise ConfigurationError(f'Invalid step: {size!r}')
        if not is_finite_number(origin):
            raise ConfigurationError(f'Invalid step origin: {origin!r}')
        self.size = size
        self.origin = origin

    def apply(self, min, max, prev_min=None, prev_max=None) -> Range:
        size, origin = self.size, self.origin
        return Range(
            math.floor((min - origin) / size) * size + origin,
            math.ceil((max - origin) / size) * size + origin,
        )

    def __repr__(self) -> str:
        return f"StepHysteresis(size={self.size}, origin={self.origin})"


class ScaleHysteresis(Hysteresis):
    """Snap the range outward to the ticks of an (expanding) tick scale."""

    def __init__(self, scale: TickScaleLike) -> None:
        self.scale = scale

    def apply(self, min, max, prev_min=None, prev_max=None) -> Range:
        scale = self.scale
        scale.update_tick_scale(
            scale.value_at_location(min),
            scale.value_at_location(max),
            expand=True,
        )
        return scale.span_location_range(min, max)


class FunctionHysteresis(Hysteresis):
    def __init__(self, func: HysteresisFunc) -> None:
        self.func = func

    def apply(self, min, max, prev_min=None, prev_max=None):
        return self.func(min, max, prev_min, prev_max)
