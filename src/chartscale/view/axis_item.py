"""
Tick Axis Items
===============
pyqtgraph axes whose gridlines come from the chartscale tick algorithms.

Classes:
    TickAxisItem: Decimal "nice number" ticks with a minimum pixel spacing.
    DateTickAxisItem: Calendar ticks for axes holding unix timestamps.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import List, Optional, Sequence, Tuple

import pyqtgraph as pg

from chartscale import config
from chartscale.errors import ComputationError, ConfigurationError
from chartscale.scale.calendar.units import CalendarUnit
from chartscale.scale.date_scale import DateScale
from chartscale.scale.ticks import ticks

logger = logging.getLogger(__name__)

TickLevels = List[Tuple[float, List[float]]]


def min_distance_in_data_units(min_val: float, max_val: float, size: float, min_pixels: float) -> float:
    """Convert a pixel distance into data units for an axis of `size` pixels."""
    return min_pixels * (max_val - min_val) / size


class TickAxisItem(pg.AxisItem):
    """
    AxisItem with a single level of ticks at least `min_pixel_distance` apart.

    Args:
        orientation: 'left', 'right', 'top' or 'bottom'.
        min_pixel_distance: Minimum spacing between gridlines, in pixels.
    """

    def __init__(self, orientation: str, min_pixel_distance: float = config.DEFAULT_TICK_MIN_PIXEL_DISTANCE, **kwargs):
        super().__init__(orientation=orientation, **kwargs)
        self.min_pixel_distance = min_pixel_distance

    def tickValues(self, minVal: float, maxVal: float, size: float) -> TickLevels:
        if self.logMode or size <= 0 or not maxVal > minVal:
            return super().tickValues(minVal, maxVal, size)
        min_distance = min_distance_in_data_units(minVal, maxVal, size, self.min_pixel_distance)
        try:
            values = ticks(minVal, maxVal, min_distance)
        except (ConfigurationError, ComputationError) as e:
            logger.debug(f"Falling back to default ticks for [{minVal}, {maxVal}]: {e}")
            return super().tickValues(minVal, maxVal, size)
        spacing = float(values[1] - values[0]) if len(values) > 1 else float(maxVal - minVal)
        return [(spacing, [float(v) for v in values])]


# strftime formats by tick unit
_DATE_FORMATS = {
    CalendarUnit.YEARS: "%Y",
    CalendarUnit.MONTHS: "%Y-%m",
    CalendarUnit.DAYS: "%Y-%m-%d",
    CalendarUnit.HOURS: "%d %H:%M",
    CalendarUnit.MINUTES: "%H:%M",
    CalendarUnit.SECONDS: "%H:%M:%S",
    CalendarUnit.MILLISECONDS: "%H:%M:%S.%f",
}


class DateTickAxisItem(TickAxisItem):
    """
    Axis for unix timestamps (seconds) with ticks on calendar boundaries.

    Args:
        orientation: 'left', 'right', 'top' or 'bottom'.
        tz: Zone used for calendar boundaries and labels. Defaults to UTC.
    """

    def __init__(self, orientation: str, tz: Optional[dt.tzinfo] = None, **kwargs):
        super().__init__(orientation=orientation, **kwargs)
        self.enableAutoSIPrefix(False)
        self.tz = tz if tz is not None else dt.timezone.utc
        epoch = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc).astimezone(self.tz)
        self.date_scale = DateScale(base_unit=CalendarUnit.SECONDS, origin_date=epoch)

    def tickValues(self, minVal: float, maxVal: float, size: float) -> TickLevels:
        if size <= 0 or not maxVal > minVal:
            return []
        scale = self.date_scale
        min_interval = min_distance_in_data_units(minVal, maxVal, size, self.min_pixel_distance)
        try:
            start = scale.value_at_location(minVal)
            end = scale.value_at_location(maxVal)
            scale.update_tick_scale(start, end, min_interval=min_interval)
            dates = scale.ticks_in_value_range(start, end)
        except (ConfigurationError, ComputationError, OverflowError, ValueError) as e:
            logger.debug(f"No date ticks for [{minVal}, {maxVal}]: {e}")
            return []
        return [(scale.tick_scale.interval_location, [scale.location_of_value(d) for d in dates])]

    def tickStrings(self, values: Sequence[float], scale: float, spacing: float) -> List[str]:
        unit = self.date_scale.tick_scale.interval_value.unit
        fmt = _DATE_FORMATS[unit]
        labels = []
        for value in values:
            date = self.date_scale.value_at_location(value)
            label = date.strftime(fmt)
            if unit is CalendarUnit.MILLISECONDS:
                label = label[:-3]
            labels.append(label)
        return labels
