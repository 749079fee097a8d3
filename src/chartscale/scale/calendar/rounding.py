"""
Calendar Rounding
=================
Round, floor, ceil and snap instants to multiples of a calendar unit.

Why is this file needed?
------------------------
1. Date axes place ticks on "nice" instants (every 6 hours, every 2 months,
   every decade), which means truncating and rounding dates to multiples of
   a unit counted from a natural origin (start of day, start of year...).
2. Units are not all alike. Milliseconds to days have a fixed length in the
   next smaller unit; months and years do not (February vs January), so
   those are rounded by searching for the containing period instead.
3. Daylight saving transitions make some hours and days shorter or longer.
   All arithmetic goes through `arithmetic`, which keeps days as calendar
   days, and results are re-rounded once more to absorb any leftover drift.
"""
from __future__ import annotations

import datetime as dt
import math
import numbers
from enum import StrEnum
from typing import Callable, Optional, Union

from chartscale.errors import ComputationError, ConfigurationError
from chartscale.scale.calendar.arithmetic import (
    add_units,
    interval_length,
    round_linear,
    rounding_origin_date,
    start_of,
    step_linear,
    whole_units_between,
)
from chartscale.scale.calendar.units import CalendarUnit, SMALLER_UNITS_PER_UNIT
from chartscale.utils import round_half_up


class RoundingMethod(StrEnum):
    ROUND = "round"
    FLOOR = "floor"
    CEIL = "ceil"

    def __call__(self, x: float) -> int:
        if self is RoundingMethod.FLOOR:
            return math.floor(x)
        if self is RoundingMethod.CEIL:
            return math.ceil(x)
        return round_half_up(x)


MethodLike = Union[RoundingMethod, str, Callable[[float], int]]


def _resolve_method(method: MethodLike) -> Callable[[float], int]:
    if isinstance(method, str):
        try:
            return RoundingMethod(method)
        except ValueError:
            raise ConfigurationError(f"Invalid rounding method: {method!r}") from None
    if not callable(method):
        raise ConfigurationError(f"Invalid rounding method: {method!r}")
    return method


def _validated_value(value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise ConfigurationError(f'Rounding value must be a positive integer, got {value!r}')
    return int(value)


def round_date(
    date: dt.datetime,
    value: int,
    unit: CalendarUnit | str,
    origin_unit: Optional[CalendarUnit | str] = None,
    origin_date: Optional[dt.datetime] = None,
    method: MethodLike = RoundingMethod.ROUND,
) -> dt.datetime:
    """
    Round `date` to a multiple of `value` units.

    Multiples are counted from the start of `origin_unit` containing `date`
    (see `rounding_origin_unit` for the defaults), or from `origin_date`.

    Args:
        date: The instant to round. Aware values keep their zone.
        value: Positive integer multiple.
        unit: Calendar unit (enum or name).
        origin_unit: Unit whose start anchors the multiples.
        origin_date: Explicit anchor instant (overrides `origin_unit`).
        method: ROUND (halves up), FLOOR, CEIL or any float -> int callable.

    Returns:
        The rounded instant.

    Raises:
        ConfigurationError: Non-positive or non-integer `value`, unknown unit or method.
        ComputationError: The containing period could not be located.
    """
    value = _validated_value(value)
    unit = CalendarUnit.parse(unit)
    rounder = _resolve_method(method)
    if origin_unit is not None:
        origin_unit = CalendarUnit.parse(origin_unit)
    origin = rounding_origin_date(date, unit, origin_unit=origin_unit, origin_date=origin_date)

    if unit.is_uniform:
        return _round_uniform(date, value, unit, origin, rounder)

    # Year indexes are year numbers, so that multiples of 10 land on decades
    base_index = origin.year if unit is CalendarUnit.YEARS else 0
    return _round_non_uniform(date, value, unit, origin, base_index, rounder)


def _round_uniform(
    date: dt.datetime,
    value: int,
    unit: CalendarUnit,
    origin: dt.datetime,
    rounder: Callable[[float], int],
) -> dt.datetime:
    smaller = unit.smaller()
    if smaller is None:
        steps = interval_length(origin, date, unit)
        return add_units(origin, rounder(steps / value) * value, unit)

    interval = SMALLER_UNITS_PER_UNIT[unit] * value
    steps = interval_length(origin, date, smaller)
    rounded_steps = rounder(steps / interval) * interval
    rounded = step_linear(origin, rounded_steps, smaller)

    # In case of DST, round one more time
    return round_linear(rounded, smaller)


def _round_non_uniform(
    date: dt.datetime,
    value: int,
    unit: CalendarUnit,
    origin: dt.datetime,
    base_index: int,
    rounder: Callable[[float], int],
) -> dt.datetime:
    smaller = unit.smaller()

    # Index of the single unit period containing the date
    offset = whole_units_between(origin, date, unit)
    date_period = base_index + offset

    def boundary(index: int) -> dt.datetime:
        # There is no year 0, periods reaching before year 1 start at year 1
        if unit is CalendarUnit.YEARS and index < dt.MINYEAR:
            index = dt.MINYEAR
        return add_units(origin, index - base_index, unit)

    # Search for the multiple-of-value period containing that unit period
    index_start = date_period // value * value
    period_start = boundary(index_start)
    while period_start > date:
        index_start -= value
        period_start = boundary(index_start)
    period_end = boundary(index_start + value)
    while date >= period_end:
        index_start += value
        period_start = period_end
        period_end = boundary(index_start + value)
    index_end = index_start + value

    # Position inside the unit period, interpolated over the smaller unit
    sub_start = add_units(origin, offset, unit)
    sub_end = add_units(origin, offset + 1, unit)
    fraction = interval_length(sub_start, date, smaller) / interval_length(sub_start, sub_end, smaller)
    date_index = date_period + fraction

    if date_index < index_start or date_index > index_end:
        raise ComputationError(
            f'Date rounding error: index {date_index} outside [{index_start}, {index_end}] '
            f'for {date.isoformat()} ({value} {unit})'
        )

    # Round indexes instead of durations
    rounded_index = rounder((date_index - index_start) / value) * value
    return boundary(index_start + rounded_index)


def floor_date(
    date: dt.datetime,
    value: int,
    unit: CalendarUnit | str,
    origin_unit: Optional[CalendarUnit | str] = None,
    origin_date: Optional[dt.datetime] = None,
) -> dt.datetime:
    """
    Largest multiple of `value` units not after `date`.

    Year multiples that would fall before year 1 are clamped to year 1.
    """
    value = _validated_value(value)
    if value == 1:
        return start_of(date, unit)
    return round_date(
        date, value, unit,
        origin_unit=origin_unit,
        origin_date=origin_date,
        method=RoundingMethod.FLOOR,
    )


def ceil_date(
    date: dt.datetime,
    value: int,
    unit: CalendarUnit | str,
    origin_unit: Optional[CalendarUnit | str] = None,
    origin_date: Optional[dt.datetime] = None,
) -> dt.datetime:
    """
    The multiple of `value` units following `floor_date`.

    This is always `floor_date(...) + value` units, so a date already on a
    boundary ceils to the next boundary.
    Near year 1, where the floor is clamped, years ceil to the next multiple.
    """
    if CalendarUnit.parse(unit) is CalendarUnit.YEARS:
        # Floors before year 1 are clamped, so step from the unclamped index
        return round_date(
            date, value, unit,
            origin_unit=origin_unit,
            origin_date=origin_date,
            method=lambda x: math.floor(x) + 1,
        )
    floored = floor_date(date, value, unit, origin_unit=origin_unit, origin_date=origin_date)
    return add_units(floored, value, unit)


def snap_date(date: dt.datetime, unit: CalendarUnit | str) -> dt.datetime:
    """
    Returns the date rounded to `unit` if rounding to the next smaller unit
    gives the same instant, otherwise the original date.

    Useful for removing floating point drift from computed dates.
    """
    unit = CalendarUnit.parse(unit)
    smaller = unit.smaller()
    if smaller is None:
        return date
    rounded = round_linear(date, unit)
    if rounded == round_linear(date, smaller):
        return rounded
    return date
