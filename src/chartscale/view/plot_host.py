"""
pyqtgraph Host Adapter
======================
Lets a scale controller drive one axis of a `pyqtgraph.ViewBox`.

Why is this file needed?
------------------------
1. Geometry: The ViewBox knows its pixel size and visible data rectangle;
   the adapter translates these into the `ScaleHost` vocabulary.
2. Interaction: pyqtgraph reports manual panning/zooming through
   `sigRangeChangedManually`. The adapter treats the user as "interacting"
   until no such change happened for a short quiet period, and only then
   runs the continuations queued by the controllers.
3. Notifications: Resizes and changes of the other axis' range invalidate
   the controller's range; `connect_layout_changes` wires these up.

Note: pyqtgraph applies ranges immediately, so `scroll_to` completes every
animation synchronously.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

import pyqtgraph as pg

from chartscale.controller.host import Cancelable, ScaleHost
from chartscale.controller.scheduling import Debouncer, QtScheduler, Scheduler
from chartscale.model.data_source import DataSource
from chartscale.model.geometry import Axis, Insets, Point, Range, Rect
from chartscale.model.options import AnimationOptions

logger = logging.getLogger(__name__)

# Quiet period after the last manual pan/zoom before the interaction counts as ended
INTERACTION_TIMEOUT_MS = 250


class _QueuedCallback:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback: Optional[Callable[[], None]] = callback

    def cancel(self) -> None:
        self.callback = None

    def run(self) -> None:
        callback, self.callback = self.callback, None
        if callback is not None:
            callback()


class ViewBoxHost(ScaleHost):
    """
    Args:
        view_box: The ViewBox to drive.
        axis: Axis controlled through this host.
        data_sources: Data shown in the view box (adopted by autoscale controllers).
        scheduler: Timer service for interaction tracking. Defaults to a QtScheduler.
    """

    def __init__(
        self,
        view_box: pg.ViewBox,
        axis: Axis = Axis.Y,
        data_sources: Sequence[DataSource] = (),
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.view_box = view_box
        self._axis = Axis(axis)
        self._data_sources = list(data_sources)
        self.scheduler = scheduler if scheduler is not None else QtScheduler()

        self._interacting = False
        self._queued: List[_QueuedCallback] = []
        self._interaction_end = Debouncer(self.scheduler, INTERACTION_TIMEOUT_MS, self._end_interaction)

        # The controller owns this axis' range from now on
        view_box.disableAutoRange(axis=self._view_box_axis)
        view_box.sigRangeChangedManually.connect(self._on_manual_range_change)

    @property
    def _view_box_axis(self) -> int:
        return pg.ViewBox.XAxis if self._axis is Axis.X else pg.ViewBox.YAxis

    @property
    def axis(self) -> Axis:
        return self._axis

    @property
    def data_sources(self) -> List[DataSource]:
        return list(self._data_sources)

    def connect_layout_changes(self, callback: Callable[[], None]) -> None:
        """Call `callback` on resizes and whenever the other axis' range changes."""
        self.view_box.sigResized.connect(lambda *_: callback())
        if self._axis is Axis.Y:
            self.view_box.sigXRangeChanged.connect(lambda *_: callback())
        else:
            self.view_box.sigYRangeChanged.connect(lambda *_: callback())

    # ==========================================
    # GEOMETRY
    # ==========================================
    def get_visible_location_range(
        self,
        container_size: Optional[Point] = None,
        insets: Optional[Insets] = None,
    ) -> Rect:
        (x0, x1), (y0, y1) = self.view_box.viewRange()
        return Point(float(x0), float(y0)), Point(float(x1), float(y1))

    def get_axis_insets(self) -> Insets:
        # Axis items live outside the ViewBox
        return Insets()

    def get_container_size(self, insets: Optional[Insets] = None) -> Point:
        return Point(float(self.view_box.width()), float(self.view_box.height()))

    def scroll_to(
        self,
        range: Optional[Range] = None,
        offset: Optional[float] = None,
        insets: Optional[Insets] = None,
        animation: Optional[AnimationOptions] = None,
    ) -> None:
        if range is not None:
            lo, hi = range.min, range.max
        elif offset is not None:
            current = self.view_box.viewRange()[0 if self._axis is Axis.X else 1]
            width = current[1] - current[0]
            lo = -offset
            hi = lo + width
        else:
            return

        if self._axis is Axis.X:
            self.view_box.setXRange(lo, hi, padding=0)
        else:
            self.view_box.setYRange(lo, hi, padding=0)

        if animation is not None and animation.on_end is not None:
            animation.on_end(True)

    # ==========================================
    # INTERACTION
    # ==========================================
    @property
    def is_interacting(self) -> bool:
        return self._interacting

    def run_after_interactions(self, callback: Callable[[], None]) -> Cancelable:
        queued = _QueuedCallback(callback)
        if self._interacting:
            self._queued.append(queued)
        else:
            self.scheduler.call_later(0, queued.run)
        return queued

    def _on_manual_range_change(self, *args) -> None:
        if not self._interacting:
            logger.debug("View box interaction started")
        self._interacting = True
        self._interaction_end.trigger()

    def _end_interaction(self) -> None:
        logger.debug("View box interaction ended")
        self._interacting = False
        queued, self._queued = self._queued, []
        for item in queued:
            item.run()
