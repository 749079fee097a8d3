"""
Geometric Value Types
=====================
Points, insets and ranges exchanged between the controllers and their host.

All of these are immutable: every computation creates fresh instances.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Iterator, Tuple

from chartscale.errors import ConfigurationError


class Axis(StrEnum):
    """The axis a controller drives."""
    X = "x"
    Y = "y"

    @property
    def is_horizontal(self) -> bool:
        return self is Axis.X

    @property
    def cross(self) -> Axis:
        return Axis.Y if self is Axis.X else Axis.X


@dataclass(frozen=True)
class Point:
    """A location (or a size) in content or view space."""
    x: float = 0.0
    y: float = 0.0

    def on_axis(self, axis: Axis) -> float:
        return self.x if axis is Axis.X else self.y

    def with_axis(self, axis: Axis, value: float) -> Point:
        """Returns a copy with the coordinate on `axis` replaced."""
        return replace(self, **{axis.value: value})


@dataclass(frozen=True)
class Insets:
    """Space reserved around the plot area (e.g. for axis labels), in view units."""
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def along(self, axis: Axis) -> float:
        """Total inset along an axis."""
        if axis is Axis.X:
            return self.left + self.right
        return self.top + self.bottom


@dataclass(frozen=True)
class Range:
    """
    An ordered (min, max) pair.

    Zero width is allowed, an inverted pair is not.
    """
    min: float
    max: float

    def __post_init__(self) -> None:
        if math.isnan(self.min) or math.isnan(self.max):
            raise ConfigurationError(f"Range bounds must be numbers, got [{self.min}, {self.max}]")
        if self.max < self.min:
            raise ConfigurationError(f"Invalid range: max ({self.max}) < min ({self.min})")

    def __iter__(self) -> Iterator[float]:
        yield self.min
        yield self.max

    @property
    def length(self) -> float:
        return self.max - self.min

    @property
    def is_empty(self) -> bool:
        return self.max == self.min

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.min) and math.isfinite(self.max)

    def union(self, other: Range) -> Range:
        return Range(min(self.min, other.min), max(self.max, other.max))

    def as_tuple(self) -> Tuple[float, float]:
        return self.min, self.max


# A rectangle as a pair of corners: (bottom-left, top-right)
Rect = Tuple[Point, Point]
