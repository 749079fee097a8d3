"""
Calendar Units
==============
The totally ordered set of calendar units used for date rounding and date
tick scales, plus the conversion tables between neighbouring units.
"""
from __future__ import annotations

from enum import StrEnum
from typing import Dict, Optional

from chartscale.errors import ConfigurationError


class CalendarUnit(StrEnum):
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"

    @classmethod
    def parse(cls, value: str | CalendarUnit) -> CalendarUnit:
        """Accepts the enum, or its name in singular or plural form ('day', 'days', 'ms')."""
        if isinstance(value, CalendarUnit):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(f"Invalid calendar unit: {value!r}")
        key = value.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ConfigurationError(f"Invalid calendar unit: {value!r}")

    @property
    def rank(self) -> int:
        return UNITS_ASC.index(self)

    @property
    def is_uniform(self) -> bool:
        """
        True if the unit has a fixed length in the next smaller unit.

        Days count as uniform here: a calendar day is always 24 wall clock
        hours, even when a DST change makes it 23 or 25 elapsed hours.
        """
        return self not in (CalendarUnit.MONTHS, CalendarUnit.YEARS)

    @property
    def is_calendar(self) -> bool:
        """True for units stepped in wall clock time (days and larger)."""
        return self.rank >= CalendarUnit.DAYS.rank

    def smaller(self) -> Optional[CalendarUnit]:
        i = self.rank
        return UNITS_ASC[i - 1] if i > 0 else None

    def larger(self) -> Optional[CalendarUnit]:
        i = self.rank
        return UNITS_ASC[i + 1] if i + 1 < len(UNITS_ASC) else None

    def compare(self, other: CalendarUnit) -> int:
        """Positive if self is larger than `other`, zero if equal, negative if smaller."""
        return self.rank - CalendarUnit.parse(other).rank

    def __lt__(self, other):
        if isinstance(other, CalendarUnit):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, CalendarUnit):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, CalendarUnit):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, CalendarUnit):
            return self.rank >= other.rank
        return NotImplemented


UNITS_ASC = [
    CalendarUnit.MILLISECONDS,
    CalendarUnit.SECONDS,
    CalendarUnit.MINUTES,
    CalendarUnit.HOURS,
    CalendarUnit.DAYS,
    CalendarUnit.MONTHS,
    CalendarUnit.YEARS,
]
UNITS_DESC = UNITS_ASC[::-1]

_ALIASES: Dict[str, CalendarUnit] = {}
for _unit in UNITS_ASC:
    _ALIASES[_unit.value] = _unit
    _ALIASES[_unit.value[:-1]] = _unit
_ALIASES.update({"ms": CalendarUnit.MILLISECONDS, "s": CalendarUnit.SECONDS, "min": CalendarUnit.MINUTES,
                 "h": CalendarUnit.HOURS, "d": CalendarUnit.DAYS, "y": CalendarUnit.YEARS})

# How many of a unit fit in the next larger unit
RADIX: Dict[CalendarUnit, int] = {
    CalendarUnit.SECONDS: 60,
    CalendarUnit.MINUTES: 60,
    CalendarUnit.HOURS: 24,
    CalendarUnit.MONTHS: 12,
}

# How many of the next smaller unit make up one unit (uniform units only)
SMALLER_UNITS_PER_UNIT: Dict[CalendarUnit, int] = {
    CalendarUnit.SECONDS: 1000,
    CalendarUnit.MINUTES: 60,
    CalendarUnit.HOURS: 60,
    CalendarUnit.DAYS: 24,
}

# Nominal lengths, used only where an approximate conversion is good enough
NOMINAL_SECONDS: Dict[CalendarUnit, float] = {
    CalendarUnit.MILLISECONDS: 0.001,
    CalendarUnit.SECONDS: 1.0,
    CalendarUnit.MINUTES: 60.0,
    CalendarUnit.HOURS: 3600.0,
    CalendarUnit.DAYS: 86400.0,
    CalendarUnit.MONTHS: 86400.0 * 30.436875,
    CalendarUnit.YEARS: 86400.0 * 365.2425,
}
