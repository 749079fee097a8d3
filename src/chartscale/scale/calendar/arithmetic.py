"""
Calendar Arithmetic
===================
Stepping, measuring and truncating `datetime` instants by calendar units.

Naive datetimes are treated as wall clock time without a zone. Aware
datetimes keep their tzinfo (a fixed offset or a zoneinfo zone), and:

1. Days, months and years step in wall clock time, so "one day later" is the
   same local time on the next date even across a DST change.
2. Hours and smaller step in elapsed (absolute) time, so adding an hour
   across a DST change moves the wall clock by zero or two hours.
3. Month steps clamp to the last day of the target month (Jan 31 + 1 month
   is the last day of February).
"""
from __future__ import annotations

import calendar
import datetime as dt
import math
from typing import Optional

from chartscale.errors import ConfigurationError
from chartscale.scale.calendar.units import CalendarUnit, NOMINAL_SECONDS

_UTC = dt.timezone.utc
_ONE_MICROSECOND = dt.timedelta(microseconds=1)

# Exact lengths of the absolute units
UNIT_MICROSECONDS = {
    CalendarUnit.MILLISECONDS: 1_000,
    CalendarUnit.SECONDS: 1_000_000,
    CalendarUnit.MINUTES: 60_000_000,
    CalendarUnit.HOURS: 3_600_000_000,
}
_DAY_MICROSECONDS = 86_400_000_000


def _check_datetime(date) -> None:
    if not isinstance(date, dt.datetime):
        raise ConfigurationError(f"Expected a datetime, got {date!r}")


def is_aware(date: dt.datetime) -> bool:
    return date.tzinfo is not None and date.utcoffset() is not None


def _normalize(date: dt.datetime) -> dt.datetime:
    """Resolve wall times that fall into a DST gap, shifting them forward like a clock would."""
    if not is_aware(date) or isinstance(date.tzinfo, dt.timezone):
        return date
    try:
        return date.astimezone(_UTC).astimezone(date.tzinfo)
    except (OverflowError, ValueError):
        # Too close to the ends of the supported calendar to convert
        return date


def _add_absolute(date: dt.datetime, delta: dt.timedelta) -> dt.datetime:
    if not is_aware(date):
        return date + delta
    return (date.astimezone(_UTC) + delta).astimezone(date.tzinfo)


def _add_months(date: dt.datetime, months: int) -> dt.datetime:
    total = date.year * 12 + (date.month - 1) + months
    year, month_index = divmod(total, 12)
    if year < dt.MINYEAR or year > dt.MAXYEAR:
        raise ConfigurationError(f"Date out of range: {date.isoformat()} + {months} months")
    month = month_index + 1
    day = min(date.day, calendar.monthrange(year, month)[1])
    return _normalize(date.replace(year=year, month=month, day=day))


def elapsed(start: dt.datetime, end: dt.datetime) -> dt.timedelta:
    """Elapsed time from `start` to `end` (absolute for aware values)."""
    if is_aware(start) and is_aware(end):
        # Same-tzinfo subtraction would ignore the offsets
        return end.astimezone(_UTC) - start.astimezone(_UTC)
    return end.replace(tzinfo=None) - start.replace(tzinfo=None)


def add_units(date: dt.datetime, amount: float, unit: CalendarUnit | str) -> dt.datetime:
    """
    Step `date` by `amount` units.

    Calendar units (days and larger) require a whole `amount`; smaller units
    accept fractions (resolved to the microsecond).
    """
    _check_datetime(date)
    unit = CalendarUnit.parse(unit)
    if unit.is_calendar:
        if amount != int(amount):
            raise ConfigurationError(f"Cannot step {amount} {unit}: calendar steps must be whole")
        amount = int(amount)
        if unit is CalendarUnit.YEARS:
            return _add_months(date, amount * 12)
        if unit is CalendarUnit.MONTHS:
            return _add_months(date, amount)
        return _normalize(date + dt.timedelta(days=amount))
    micros = round(amount * UNIT_MICROSECONDS[unit])
    return _add_absolute(date, dt.timedelta(microseconds=micros))


def start_of(date: dt.datetime, unit: CalendarUnit | str) -> dt.datetime:
    """Truncate `date` to the start of its containing unit."""
    _check_datetime(date)
    unit = CalendarUnit.parse(unit)
    if unit is CalendarUnit.MILLISECONDS:
        return date.replace(microsecond=date.microsecond // 1000 * 1000)
    if unit is CalendarUnit.SECONDS:
        return date.replace(microsecond=0)
    if unit is CalendarUnit.MINUTES:
        return date.replace(second=0, microsecond=0)
    if unit is CalendarUnit.HOURS:
        return date.replace(minute=0, second=0, microsecond=0)

    truncated = date.replace(hour=0, minute=0, second=0, microsecond=0)
    if unit is CalendarUnit.MONTHS:
        truncated = truncated.replace(day=1)
    elif unit is CalendarUnit.YEARS:
        truncated = truncated.replace(month=1, day=1)
    return _normalize(truncated)


def whole_units_between(origin: dt.datetime, date: dt.datetime, unit: CalendarUnit | str) -> int:
    """
    The number of whole units `n` such that origin + n <= date < origin + (n + 1).

    Negative when `date` precedes `origin`.
    """
    _check_datetime(origin)
    _check_datetime(date)
    unit = CalendarUnit.parse(unit)
    if not unit.is_calendar:
        return elapsed(origin, date) // dt.timedelta(microseconds=UNIT_MICROSECONDS[unit])

    if is_aware(origin) and is_aware(date) and date.tzinfo is not origin.tzinfo:
        date = date.astimezone(origin.tzinfo)
    if unit is CalendarUnit.DAYS:
        n = (date.date() - origin.date()).days
    elif unit is CalendarUnit.MONTHS:
        n = (date.year - origin.year) * 12 + (date.month - origin.month)
    else:
        n = date.year - origin.year

    # The estimate ignores the time of day (and day of month), fix it up
    while add_units(origin, n, unit) > date:
        n -= 1
    while add_units(origin, n + 1, unit) <= date:
        n += 1
    return n


def interval_length(origin: dt.datetime, date: dt.datetime, unit: CalendarUnit | str) -> float:
    """
    Continuous number of units from `origin` to `date`.

    Units smaller than a day count whole calendar days first (as 24 hours
    each) and measure the rest in elapsed time, so a DST day still counts as
    exactly one day. Larger units add the elapsed fraction of the partial
    unit at the end, using that unit's actual length.
    """
    unit = CalendarUnit.parse(unit)
    if not unit.is_calendar:
        unit_micros = UNIT_MICROSECONDS[unit]
        days = whole_units_between(origin, date, CalendarUnit.DAYS)
        day_start = add_units(origin, days, CalendarUnit.DAYS)
        remainder = elapsed(day_start, date) // _ONE_MICROSECOND
        return (days * _DAY_MICROSECONDS + remainder) / unit_micros

    n = whole_units_between(origin, date, unit)
    start = add_units(origin, n, unit)
    if start == date:
        return float(n)
    end = add_units(origin, n + 1, unit)
    partial = elapsed(start, date) / elapsed(start, end)
    return n + partial


def interpolated_date(date1: dt.datetime, date2: dt.datetime, position: float) -> dt.datetime:
    """
    Linear interpolation between two instants.

    A `position` of 0 returns `date1`, 1 returns `date2`. The result keeps the
    zone of `date1` but gets the UTC offset valid at the interpolated instant.
    """
    if position == 0:
        return date1
    delta = elapsed(date1, date2) * position
    return _add_absolute(date1, delta)


def step_linear(date: dt.datetime, steps: float, unit: CalendarUnit | str) -> dt.datetime:
    """
    Step `date` by a fractional number of units.

    The inverse of `interval_length`: whole days (for small units) or whole
    units step on the calendar, the remaining fraction steps linearly.
    """
    _check_datetime(date)
    unit = CalendarUnit.parse(unit)
    if not unit.is_calendar:
        per_day = _DAY_MICROSECONDS / UNIT_MICROSECONDS[unit]
        days = int(steps / per_day)
        if days:
            date = add_units(date, days, CalendarUnit.DAYS)
            steps -= days * per_day
        return add_units(date, steps, unit)

    whole = math.floor(steps)
    fraction = steps - whole
    start = add_units(date, whole, unit)
    if fraction == 0:
        return start
    end = add_units(date, whole + 1, unit)
    return interpolated_date(start, end, fraction)


def round_linear(date: dt.datetime, unit: CalendarUnit | str) -> dt.datetime:
    """The start of the unit nearest to `date` (halves round up)."""
    return start_of(step_linear(date, 0.5, unit), unit)


def nominal_length(amount: float, unit: CalendarUnit | str, in_unit: CalendarUnit | str) -> float:
    """Approximate conversion between units (30.4 day months, 365.24 day years)."""
    return amount * NOMINAL_SECONDS[CalendarUnit.parse(unit)] / NOMINAL_SECONDS[CalendarUnit.parse(in_unit)]


def rounding_origin_unit(unit: CalendarUnit | str) -> Optional[CalendarUnit]:
    """
    The unit whose start anchors rounding by `unit`.

    Sub-second units count from the start of the second, sub-day units from
    the start of the day and days or months from the start of the year.
    Years have no larger unit and count from the start of year 1.
    """
    unit = CalendarUnit.parse(unit)
    if unit < CalendarUnit.SECONDS:
        return CalendarUnit.SECONDS
    if unit < CalendarUnit.DAYS:
        return CalendarUnit.DAYS
    if unit < CalendarUnit.YEARS:
        return CalendarUnit.YEARS
    return None


def calendar_epoch(date: dt.datetime) -> dt.datetime:
    """Midnight, January 1st of year 1, in the zone of `date`."""
    return date.replace(year=1, month=1, day=1, hour=0, minute=0, second=0, microsecond=0)


def rounding_origin_date(
    date: dt.datetime,
    unit: CalendarUnit | str,
    origin_unit: Optional[CalendarUnit | str] = None,
    origin_date: Optional[dt.datetime] = None,
) -> dt.datetime:
    """The instant rounding by `unit` counts from (see `rounding_origin_unit`)."""
    if origin_date is not None:
        _check_datetime(origin_date)
        return origin_date
    if origin_unit is None:
        origin_unit = rounding_origin_unit(unit)
    if origin_unit is None:
        return calendar_epoch(date)
    return start_of(date, origin_unit)
