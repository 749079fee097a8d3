"""
Tick Scales (Dates)
===================
A calendar aware tick scale for time axes.

Why is this file needed?
------------------------
Time axes are linear in location (e.g. days since an origin date) but their
ticks should fall on calendar boundaries: every 15 minutes, every 6 hours,
every month, every decade. `DateScale` picks the tick unit that fits the
requested spacing, lets `LinearScale` choose a radix friendly step in that
unit (60 for minutes, 24 for hours, 12 for months) and floors the grid onto
calendar multiples with `floor_date`.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from typing import List, NamedTuple, Optional

from chartscale.errors import ConfigurationError
from chartscale.model.geometry import Range
from chartscale.scale.calendar.arithmetic import (
    add_units,
    interval_length,
    nominal_length,
    step_linear,
)
from chartscale.scale.calendar.rounding import floor_date, snap_date
from chartscale.scale.calendar.units import RADIX, UNITS_ASC, UNITS_DESC, CalendarUnit
from chartscale.scale.linear_scale import LinearScale, TickScale

logger = logging.getLogger(__name__)

UNIX_EPOCH = dt.datetime(1970, 1, 1)


class DateStep(NamedTuple):
    """A tick interval: `count` multiples of `unit`."""
    count: int
    unit: CalendarUnit


class DateScale:
    """
    Tick scale over datetimes.

    Locations are (fractional) base units since `origin_date`.

    Args:
        base_unit: Unit of one location step. Defaults to days.
        origin_date: Instant at location 0. Defaults to 1970-01-01 in `tzinfo`.
        min_unit_duration: Smallest fraction of a unit the minimum interval may
            span before a smaller unit is used instead.
        min_interval: Default minimum tick interval, in locations.
        max_count: Default maximum number of intervals.
        tzinfo: Zone of the default origin date.
    """

    def __init__(
        self,
        base_unit: CalendarUnit | str = CalendarUnit.DAYS,
        origin_date: Optional[dt.datetime] = None,
        min_unit_duration: float = 0.6,
        min_interval: Optional[float] = None,
        max_count: Optional[int] = None,
        tzinfo: Optional[dt.tzinfo] = None,
    ) -> None:
        self.base_unit = CalendarUnit.parse(base_unit)
        if origin_date is None:
            origin_date = UNIX_EPOCH.replace(tzinfo=tzinfo)
        elif not isinstance(origin_date, dt.datetime):
            raise ConfigurationError('Invalid origin date')
        if not min_unit_duration > 0:
            raise ConfigurationError('Minimum unit duration must be positive')
        self.origin_date = origin_date
        self.min_unit_duration = min_unit_duration
        self.min_interval = min_interval
        self.max_count = max_count
        self.linear_scale = LinearScale()
        self.tick_scale: TickScale = TickScale(
            origin_value=origin_date,
            origin_location=0.0,
            interval_value=DateStep(1, self.base_unit),
            interval_location=1.0,
        )

    def empty_scale(self) -> TickScale:
        return TickScale(self.origin_date, 0.0, DateStep(0, self.base_unit), 0.0)

    # ==========================================
    # GRID SELECTION
    # ==========================================
    def get_tick_scale(
        self,
        start: dt.datetime,
        end: dt.datetime,
        min_interval: Optional[float] = None,
        max_count: Optional[int] = None,
        expand: bool = False,
    ) -> TickScale:
        """
        Calculates an optimal tick scale for the dates [start, end].

        Args:
            start: Inclusive start date.
            end: Inclusive end date.
            min_interval: Smallest tick interval in locations (base units).
            max_count: Largest number of intervals in [start, end].
            expand: Use all radix factors instead of those dividing the range.

        Returns:
            A tick scale whose `interval_value` is a `DateStep`, or an empty
            scale if `end <= start` or `max_count` is 0.

        Raises:
            ConfigurationError: Neither constraint given, or invalid values.
        """
        if end <= start:
            return self.empty_scale()

        min_interval = self.min_interval if min_interval is None else min_interval
        max_count = self.max_count if max_count is None else max_count

        minimum = 0.0
        if min_interval is not None:
            if not math.isfinite(min_interval) or min_interval < 0:
                raise ConfigurationError('Minimum interval must be finite and with a positive length')
            minimum = float(min_interval)
        if max_count is not None:
            if max_count == 0:
                return self.empty_scale()
            if max_count < 0:
                raise ConfigurationError('Max count must be greater than or equal to zero')
            length = self.location_of_value(end) - self.location_of_value(start)
            minimum = max(minimum, length / max_count)
        if minimum <= 0:
            raise ConfigurationError('Must specify either a minimum interval or a maximum interval count')

        durations = {unit: nominal_length(minimum, self.base_unit, unit) for unit in UNITS_ASC}

        # Largest unit the minimum interval spans enough of
        first_unit = CalendarUnit.MILLISECONDS
        for unit in UNITS_DESC:
            if durations[unit] >= self.min_unit_duration:
                first_unit = unit
                break

        for unit in UNITS_ASC[first_unit.rank:]:
            if durations[unit] < self.min_unit_duration and unit is not first_unit:
                continue
            unit_start = self._encode_date(snap_date(start, unit), unit)
            unit_end = self._encode_date(snap_date(end, unit), unit)
            if unit_end <= unit_start:
                continue
            linear = self.linear_scale.get_tick_scale(
                unit_start,
                unit_end,
                min_interval=durations[unit],
                expand=expand,
                radix=RADIX.get(unit, 10),
            )
            if linear.is_empty:
                continue
            # Calendar rounding works with whole multiples only
            step = max(1, math.ceil(linear.interval_location))
            return self._scale_with_step(start, step, unit)

        return self.empty_scale()

    def _scale_with_step(self, start: dt.datetime, step: int, unit: CalendarUnit) -> TickScale:
        origin = floor_date(start, step, unit)
        return TickScale(
            origin_value=origin,
            origin_location=self.location_of_value(origin),
            interval_value=DateStep(step, unit),
            interval_location=nominal_length(step, unit, self.base_unit),
        )

    def update_tick_scale(self, start, end, expand: bool = False, **constraints) -> bool:
        """Recompute the grid for [start, end]. Returns True if it changed."""
        scale = self.get_tick_scale(start, end, expand=expand, **constraints)
        if scale == self.tick_scale:
            return False
        logger.debug(f"Date tick scale changed: {self.tick_scale.interval_value} -> {scale.interval_value}")
        self.tick_scale = scale
        return True

    # ==========================================
    # VALUES & LOCATIONS
    # ==========================================
    def _encode_date(self, date: dt.datetime, unit: CalendarUnit) -> float:
        return interval_length(self.origin_date, date, unit)

    def location_of_value(self, date: dt.datetime) -> float:
        return interval_length(self.origin_date, date, self.base_unit)

    def value_at_location(self, location: float) -> dt.datetime:
        return step_linear(self.origin_date, location, self.base_unit)

    def floor_value(self, date: dt.datetime) -> dt.datetime:
        """The tick at or before `date`."""
        step = self.tick_scale.interval_value
        if step.count <= 0:
            return date
        return floor_date(date, step.count, step.unit, origin_date=self.tick_scale.origin_value)

    def ceil_value(self, date: dt.datetime) -> dt.datetime:
        """The tick at or after `date`."""
        floored = self.floor_value(date)
        if floored == date:
            return date
        step = self.tick_scale.interval_value
        return add_units(floored, step.count, step.unit)

    def span_location_range(self, start: float, end: float) -> Range:
        """The smallest tick-aligned location range covering [start, end]."""
        lo = self.floor_value(self.value_at_location(start))
        hi = self.ceil_value(self.value_at_location(end))
        return Range(self.location_of_value(lo), self.location_of_value(hi))

    def ticks_in_value_range(self, start: dt.datetime, end: dt.datetime) -> List[dt.datetime]:
        """All tick dates in [start, end] (both inclusive)."""
        step = self.tick_scale.interval_value
        if end < start or step.count <= 0:
            return []
        result: List[dt.datetime] = []
        first = self.ceil_value(start)
        k = 0
        tick = first
        while tick <= end:
            result.append(tick)
            k += 1
            # Step from the first tick so month clamping does not accumulate
            tick = add_units(first, k * step.count, step.unit)
        return result

    def ticks_in_location_range(self, start: float, end: float) -> List[dt.datetime]:
        return self.ticks_in_value_range(self.value_at_location(start), self.value_at_location(end))
