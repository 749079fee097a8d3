"""
Host Interface
==============
What a scale controller needs from the widget that displays the content.

Why is this file needed?
------------------------
Controllers own no pixels. A host (a plot, a ViewBox adapter, a test fake)
reports its geometry and visible range, and executes scroll/zoom requests.
Keeping this an explicit interface lets the controllers run headless.

Classes:
    Cancelable: Anything with an idempotent `cancel()`.
    ContentLimitOptions: Geometry snapshot handed to `get_content_limits`.
    ScaleHost: The host interface.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol

from chartscale.model.geometry import Axis, Insets, Point, Range, Rect

if TYPE_CHECKING:
    from chartscale.model.data_source import DataSource
    from chartscale.model.options import AnimationOptions


class Cancelable(Protocol):
    def cancel(self) -> None:
        ...


@dataclass(frozen=True)
class ContentLimitOptions:
    """Container geometry captured at the start of an update."""
    container_size: Point
    insets: Insets = field(default_factory=Insets)


class ScaleHost(ABC):
    """
    The rendering/layout side of a scale controller.

    A controller keeps only a weak reference to its host.
    """

    @property
    @abstractmethod
    def axis(self) -> Axis:
        """The axis driven by the attached controller."""

    @property
    def data_sources(self) -> List[DataSource]:
        """Data sources shown by the host (adopted by autoscale controllers)."""
        return []

    @abstractmethod
    def get_visible_location_range(
        self,
        container_size: Optional[Point] = None,
        insets: Optional[Insets] = None,
    ) -> Rect:
        """Visible content rectangle as (min corner, max corner)."""

    @abstractmethod
    def get_axis_insets(self) -> Insets:
        ...

    @abstractmethod
    def get_container_size(self, insets: Optional[Insets] = None) -> Point:
        ...

    @abstractmethod
    def scroll_to(
        self,
        range: Optional[Range] = None,
        offset: Optional[float] = None,
        insets: Optional[Insets] = None,
        animation: Optional[AnimationOptions] = None,
    ) -> None:
        """
        Show `range` (scroll and scale) or move to `offset` (scroll only) along `axis`.

        `offset` is a content offset, i.e. the negated location to bring to
        the start of the view. Hosts must eventually call `animation.on_end`
        (if given) with whether the change completed.
        """

    @property
    @abstractmethod
    def is_interacting(self) -> bool:
        """True while the user is dragging, zooming or otherwise touching the view."""

    @abstractmethod
    def run_after_interactions(self, callback: Callable[[], None]) -> Cancelable:
        """Run `callback` once the current interaction has ended."""


def project_rect(rect: Rect, axis: Axis) -> Optional[Range]:
    """The extent of a rectangle along `axis`, or None if it is not finite."""
    a = rect[0].on_axis(axis)
    b = rect[1].on_axis(axis)
    if not (math.isfinite(a) and math.isfinite(b)):
        return None
    return Range(min(a, b), max(a, b))

