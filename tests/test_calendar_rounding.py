"""Tests for round_date, floor_date, ceil_date and snap_date."""

import datetime as dt
import math
from zoneinfo import ZoneInfo

import pytest

from chartscale.errors import ConfigurationError
from chartscale.scale.calendar.arithmetic import add_units
from chartscale.scale.calendar.rounding import (
    RoundingMethod,
    ceil_date,
    floor_date,
    round_date,
    snap_date,
)

NZ = ZoneInfo("Pacific/Auckland")
PLUS_TWO = dt.timezone(dt.timedelta(hours=2))


# ---------------------------------------------------------------------------
# Uniform units
# ---------------------------------------------------------------------------


class TestRoundUniform:
    def test_day_rounds_down_before_noon(self) -> None:
        assert round_date(dt.datetime(2020, 1, 1, 11, 59), 1, "days") == dt.datetime(2020, 1, 1)

    def test_day_rounds_half_up(self) -> None:
        assert round_date(dt.datetime(2020, 1, 1, 12), 1, "days") == dt.datetime(2020, 1, 2)

    def test_two_hours(self) -> None:
        assert round_date(dt.datetime(2020, 1, 1, 10, 29), 2, "hours") == dt.datetime(2020, 1, 1, 10)
        assert round_date(dt.datetime(2020, 1, 1, 11), 2, "hours") == dt.datetime(2020, 1, 1, 12)

    def test_fifteen_minutes(self) -> None:
        date = dt.datetime(2020, 1, 1, 10, 52, 30)
        assert round_date(date, 15, "minutes") == dt.datetime(2020, 1, 1, 11)

    def test_milliseconds(self) -> None:
        date = dt.datetime(2020, 1, 1, 0, 0, 0, 123600)
        assert round_date(date, 1, "ms") == dt.datetime(2020, 1, 1, 0, 0, 0, 124000)

    def test_explicit_origin_date(self) -> None:
        origin = dt.datetime(2020, 1, 1, 1)
        result = round_date(dt.datetime(2020, 1, 1, 7, 30), 6, "hours", origin_date=origin, method="floor")
        assert result == dt.datetime(2020, 1, 1, 7)

    def test_explicit_origin_unit(self) -> None:
        # Counted from the start of the year, 2020-01-01 + 10k days
        result = round_date(dt.datetime(2020, 1, 14), 10, "days", origin_unit="years", method="floor")
        assert result == dt.datetime(2020, 1, 11)


class TestRoundAcrossDst:
    def test_long_day_rounds_down_in_the_morning(self) -> None:
        result = round_date(dt.datetime(2020, 4, 5, 10, tzinfo=NZ), 1, "days")
        assert result == dt.datetime(2020, 4, 5, tzinfo=NZ)
        assert result.utcoffset() == dt.timedelta(hours=13)

    def test_long_day_rounds_up_after_its_middle(self) -> None:
        result = round_date(dt.datetime(2020, 4, 5, 13, tzinfo=NZ), 1, "days")
        assert result == dt.datetime(2020, 4, 6, tzinfo=NZ)
        assert result.utcoffset() == dt.timedelta(hours=12)

    def test_floor_keeps_day_start_offset(self) -> None:
        result = floor_date(dt.datetime(2020, 4, 5, 15, tzinfo=NZ), 1, "days")
        assert result.replace(tzinfo=None) == dt.datetime(2020, 4, 5)
        assert result.utcoffset() == dt.timedelta(hours=13)


# ---------------------------------------------------------------------------
# Months and years
# ---------------------------------------------------------------------------


class TestRoundNonUniform:
    # Mirrors the 2020-01-15 23:59 +02:00 case: the first half of January rounds down
    def test_month_first_half(self) -> None:
        result = round_date(dt.datetime(2020, 1, 15, 23, 59, tzinfo=PLUS_TWO), 1, "months")
        assert result == dt.datetime(2020, 1, 1, tzinfo=PLUS_TWO)
        assert result.utcoffset() == dt.timedelta(hours=2)

    def test_month_second_half(self) -> None:
        result = round_date(dt.datetime(2020, 1, 16, 23, 59, tzinfo=PLUS_TWO), 1, "months")
        assert result == dt.datetime(2020, 2, 1, tzinfo=PLUS_TWO)

    def test_quarters(self) -> None:
        assert floor_date(dt.datetime(2020, 8, 20), 3, "months") == dt.datetime(2020, 7, 1)
        assert round_date(dt.datetime(2020, 8, 20), 3, "months") == dt.datetime(2020, 10, 1)

    def test_years(self) -> None:
        assert round_date(dt.datetime(1900, 6, 1), 1, "years") == dt.datetime(1900, 1, 1)
        assert round_date(dt.datetime(1900, 7, 1), 1, "years") == dt.datetime(1901, 1, 1)

    def test_decades_align_with_year_numbers(self) -> None:
        assert round_date(dt.datetime(1904, 1, 1), 10, "years") == dt.datetime(1900, 1, 1)
        assert round_date(dt.datetime(1905, 1, 1), 10, "years") == dt.datetime(1910, 1, 1)
        assert floor_date(dt.datetime(1919, 12, 31), 10, "years") == dt.datetime(1910, 1, 1)

    @pytest.mark.parametrize("year, value, ceiled", [(5, 10, 10), (2, 3, 3), (1, 2, 2)])
    def test_multi_year_floor_clamps_to_year_one(self, year, value, ceiled) -> None:
        date = dt.datetime(year, 6, 1)
        assert floor_date(date, value, "years") == dt.datetime(1, 1, 1)
        assert ceil_date(date, value, "years") == dt.datetime(ceiled, 1, 1)

    def test_ceil_years_steps_from_floor(self) -> None:
        assert ceil_date(dt.datetime(1910, 1, 1), 10, "years") == dt.datetime(1920, 1, 1)
        assert ceil_date(dt.datetime(1919, 12, 31), 10, "years") == dt.datetime(1920, 1, 1)
        assert ceil_date(dt.datetime(2020, 3, 1), 1, "years") == dt.datetime(2021, 1, 1)


# ---------------------------------------------------------------------------
# Methods and validation
# ---------------------------------------------------------------------------


class TestMethods:
    def test_enum_methods(self) -> None:
        assert RoundingMethod.FLOOR(2.7) == 2
        assert RoundingMethod.CEIL(2.1) == 3
        assert RoundingMethod.ROUND(2.5) == 3
        assert RoundingMethod.ROUND(-2.5) == -2

    def test_callable_method(self) -> None:
        result = round_date(dt.datetime(2020, 1, 1, 10, 29), 2, "hours", method=math.ceil)
        assert result == dt.datetime(2020, 1, 1, 12)

    def test_unknown_method(self) -> None:
        with pytest.raises(ConfigurationError):
            round_date(dt.datetime(2020, 1, 1), 1, "days", method="up")

    @pytest.mark.parametrize("value", [0, -1, 1.5, True])
    def test_invalid_value(self, value) -> None:
        with pytest.raises(ConfigurationError):
            round_date(dt.datetime(2020, 1, 1), value, "days")

    def test_invalid_unit(self) -> None:
        with pytest.raises(ConfigurationError):
            floor_date(dt.datetime(2020, 1, 1), 1, "weeks")


# ---------------------------------------------------------------------------
# Floor / ceil relationship
# ---------------------------------------------------------------------------


DATES = [
    dt.datetime(2020, 1, 1),
    dt.datetime(2020, 2, 29, 13, 7, 11, 250000),
    dt.datetime(1999, 12, 31, 23, 59, 59),
    dt.datetime(2020, 4, 5, 2, 30, tzinfo=NZ),
    dt.datetime(2021, 7, 17, 8, 45, tzinfo=PLUS_TWO),
]
STEPS = [(250, "ms"), (15, "seconds"), (5, "minutes"), (6, "hours"), (1, "days"), (2, "months"), (10, "years")]


class TestFloorCeil:
    @pytest.mark.parametrize("date", DATES)
    @pytest.mark.parametrize("value,unit", STEPS)
    def test_brackets_date(self, date, value, unit) -> None:
        floored = floor_date(date, value, unit)
        ceiled = ceil_date(date, value, unit)
        assert floored <= date < ceiled
        assert ceiled == add_units(floored, value, unit)

    def test_boundary_ceils_to_next(self) -> None:
        assert ceil_date(dt.datetime(2020, 1, 1), 1, "days") == dt.datetime(2020, 1, 2)

    def test_floor_is_idempotent(self) -> None:
        floored = floor_date(dt.datetime(2020, 8, 20, 17), 6, "hours")
        assert floor_date(floored, 6, "hours") == floored


class TestSnapDate:
    def test_snaps_drift(self) -> None:
        drifted = dt.datetime(2020, 1, 1, 23, 59, 59, 999000)
        assert snap_date(drifted, "days") == dt.datetime(2020, 1, 2)

    def test_keeps_off_boundary_dates(self) -> None:
        date = dt.datetime(2020, 1, 1, 10)
        assert snap_date(date, "days") == date

    def test_smallest_unit_is_unchanged(self) -> None:
        date = dt.datetime(2020, 1, 1, 0, 0, 0, 1500)
        assert snap_date(date, "ms") == date
