"""
Tick Scales (Linear)
====================
A stateful tick grid: an origin and an interval, in both value space and
location (content) space.

Why is this file needed?
------------------------
`ticks()` answers a one-off question. Hysteresis and axes need to keep a
grid around between updates, snap arbitrary locations onto it and only
change it when the visible interval really calls for a different spacing.

Classes:
    TickScale: Immutable (origin, interval) pair.
    LinearScale: Radix aware tick scale over Decimal values.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR
from typing import Any, Iterable, List, Optional

from chartscale.errors import ComputationError, ConfigurationError
from chartscale.model.geometry import Range
from chartscale.scale.factors import FACTORS_10, find_common_factors, find_factors
from chartscale.utils import to_decimal

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TEN = Decimal(10)

# Upper bound on radix exponent growth while looking for an interval
MAX_EXPONENT_STEPS = 1000


@dataclass(frozen=True)
class TickScale:
    """
    A tick grid.

    Ticks sit at `origin_value + k * interval_value`, i.e. at locations
    `origin_location + k * interval_location`.
    """
    origin_value: Any
    origin_location: float
    interval_value: Any
    interval_location: float

    @property
    def is_empty(self) -> bool:
        return self.interval_location <= 0


EMPTY_LINEAR_SCALE = TickScale(_ZERO, 0.0, _ZERO, 0.0)


def _floor(x: Decimal) -> Decimal:
    return x.to_integral_value(rounding=ROUND_FLOOR)


def _ceil(x: Decimal) -> Decimal:
    return x.to_integral_value(rounding=ROUND_CEILING)


class LinearScale:
    """
    Linear tick scale where values and locations coincide.

    Args:
        min_interval: Smallest allowed tick interval.
        max_count: Largest allowed number of intervals in the value range.
        radix: Integer base used for "nice" steps (10, or 60 for minutes...).
        exclude_factors: Step factors never to use (e.g. [2]).
    """

    def __init__(
        self,
        min_interval=None,
        max_count: Optional[int] = None,
        radix: int = 10,
        exclude_factors: Iterable[int] = (),
    ) -> None:
        self.min_interval = min_interval
        self.max_count = max_count
        self.radix = radix
        self.exclude_factors = tuple(exclude_factors)
        self.tick_scale: TickScale = TickScale(_ZERO, 0.0, _ONE, 1.0)

    # ==========================================
    # GRID SELECTION
    # ==========================================
    def get_tick_scale(
        self,
        start,
        end,
        min_interval=None,
        max_count: Optional[int] = None,
        expand: bool = False,
        radix: Optional[int] = None,
        exclude_factors: Optional[Iterable[int]] = None,
    ) -> TickScale:
        """
        Calculates an optimal tick scale for the value interval [start, end].

        Unset constraints fall back to the ones given at construction.

        Returns:
            The tick scale, or an empty scale when `end <= start` or `max_count` is 0.

        Raises:
            ConfigurationError: Invalid interval or constraints.
        """
        a = to_decimal(start, "start")
        b = to_decimal(end, "end")
        if not a.is_finite() or not b.is_finite():
            raise ConfigurationError('Invalid interval')
        if b <= a:
            return EMPTY_LINEAR_SCALE
        length = b - a

        min_interval = self.min_interval if min_interval is None else min_interval
        max_count = self.max_count if max_count is None else max_count
        radix = self.radix if radix is None else radix
        excluded = set(self.exclude_factors if exclude_factors is None else exclude_factors)

        minimum = _ZERO
        if min_interval is not None:
            minimum = to_decimal(min_interval, "minimum interval")
            if not minimum.is_finite() or minimum < 0:
                raise ConfigurationError('Minimum interval must be finite and with a positive length')
        if max_count is not None:
            if max_count == 0:
                return EMPTY_LINEAR_SCALE
            if max_count < 0:
                raise ConfigurationError('Max count must be greater than or equal to zero')
            minimum = max(minimum, length / to_decimal(max_count))
        if minimum <= 0:
            raise ConfigurationError('Must specify either a minimum interval or a maximum interval count')

        if isinstance(radix, bool) or not isinstance(radix, int) or radix < 2:
            raise ConfigurationError('Radix must be an integer greater than 1')
        dradix = Decimal(radix)
        radix_log10 = _ONE if radix == 10 else dradix.log10()

        exponent = dradix ** _floor(minimum.log10() / radix_log10)
        start_scaled = _floor(a / exponent)
        end_scaled = _ceil(b / exponent)

        if expand:
            factors = find_factors(radix)
        else:
            factors = find_common_factors(radix, int(end_scaled - start_scaled))
        if not factors:
            factors = list(FACTORS_10)
        factors = [f for f in factors if f not in excluded] or list(FACTORS_10)

        for _ in range(MAX_EXPONENT_STEPS):
            for factor in factors:
                f_start = _floor(start_scaled / factor) * factor
                interval = factor * exponent
                if interval < minimum:
                    continue
                origin = f_start * exponent
                return TickScale(
                    origin_value=origin,
                    origin_location=float(origin),
                    interval_value=interval,
                    interval_location=float(interval),
                )
            exponent *= dradix
            start_scaled /= dradix
            end_scaled /= dradix
        raise ComputationError('Failed to find tick interval')

    def update_tick_scale(self, start, end, expand: bool = False, **constraints) -> bool:
        """Recompute the grid for [start, end]. Returns True if it changed."""
        scale = self.get_tick_scale(start, end, expand=expand, **constraints)
        if scale == self.tick_scale:
            return False
        logger.debug(f"Tick scale changed: {self.tick_scale} -> {scale}")
        self.tick_scale = scale
        return True

    # ==========================================
    # VALUES & LOCATIONS
    # ==========================================
    def location_of_value(self, value) -> float:
        return float(to_decimal(value))

    def value_at_location(self, location: float) -> Decimal:
        return to_decimal(location, "location")

    def floor_value(self, value) -> Decimal:
        """The tick at or below `value`."""
        v = to_decimal(value)
        scale = self.tick_scale
        if scale.is_empty:
            return v
        steps = _floor((v - scale.origin_value) / scale.interval_value)
        return scale.origin_value + steps * scale.interval_value

    def ceil_value(self, value) -> Decimal:
        """The tick at or above `value`."""
        v = to_decimal(value)
        scale = self.tick_scale
        if scale.is_empty:
            return v
        steps = _ceil((v - scale.origin_value) / scale.interval_value)
        return scale.origin_value + steps * scale.interval_value

    def span_value_range(self, start, end) -> tuple[Decimal, Decimal]:
        return self.floor_value(start), self.ceil_value(end)

    def span_location_range(self, start: float, end: float) -> Range:
        """The smallest tick-aligned location range covering [start, end]."""
        lo, hi = self.span_value_range(self.value_at_location(start), self.value_at_location(end))
        return Range(self.location_of_value(lo), self.location_of_value(hi))

    def ticks_in_value_range(self, start, end) -> List[Decimal]:
        """All ticks in [start, end] (both inclusive)."""
        a = to_decimal(start)
        b = to_decimal(end)
        if b < a or self.tick_scale.is_empty:
            return []
        result: List[Decimal] = []
        tick = self.ceil_value(a)
        while tick <= b:
            result.append(tick)
            tick += self.tick_scale.interval_value
        return result

    def ticks_in_location_range(self, start: float, end: float) -> List[Decimal]:
        return self.ticks_in_value_range(self.value_at_location(start), self.value_at_location(end))
