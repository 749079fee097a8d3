"""
chartscale
==========
Tick generation, calendar rounding and autoscaling controllers for charts.
"""
from chartscale.errors import ChartScaleError, ComputationError, ConfigurationError, NotConfiguredError
from chartscale.model.geometry import Axis, Insets, Point, Range
from chartscale.model.padding import Padding
from chartscale.scale.factors import find_common_factors, find_factors
from chartscale.scale.ticks import ticks
from chartscale.scale.calendar.units import CalendarUnit
from chartscale.scale.calendar.rounding import RoundingMethod, ceil_date, floor_date, round_date, snap_date

__version__ = "0.1.0"
