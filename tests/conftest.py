"""Shared pytest fixtures and test helpers for chartscale tests."""

from __future__ import annotations

import os

# Qt must not try to open a display in CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Callable, List, Optional

import pytest

from chartscale.controller.host import ScaleHost
from chartscale.controller.scheduling import Scheduler
from chartscale.model.geometry import Axis, Insets, Point, Range, Rect
from chartscale.model.options import AnimationOptions


class ManualHandle:
    def __init__(self, due: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when a test calls `advance`."""

    def __init__(self) -> None:
        self.now = 0
        self.handles: List[ManualHandle] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay_ms, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [h for h in self.pending if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.now = handle.due
            handle.fired = True
            handle.callback()
        self.now = target


class ScrollCall:
    def __init__(self, range, offset, insets, animation) -> None:
        self.range: Optional[Range] = range
        self.offset: Optional[float] = offset
        self.insets: Optional[Insets] = insets
        self.animation: Optional[AnimationOptions] = animation


class FakeHost(ScaleHost):
    """In-memory host recording every scroll request."""

    def __init__(
        self,
        axis: Axis = Axis.Y,
        container_size: Point = Point(400.0, 300.0),
        visible: Rect = (Point(0.0, 0.0), Point(10.0, 10.0)),
        data_sources=(),
    ) -> None:
        self._axis = axis
        self.container_size = container_size
        self.insets = Insets()
        self.visible = visible
        self._data_sources = list(data_sources)
        self.interacting = False
        self.complete_animations = True
        self.scrolls: List[ScrollCall] = []
        self.waiting: List[ManualHandle] = []

    @property
    def axis(self) -> Axis:
        return self._axis

    @property
    def data_sources(self):
        return list(self._data_sources)

    def get_visible_location_range(self, container_size=None, insets=None) -> Rect:
        return self.visible

    def get_axis_insets(self) -> Insets:
        return self.insets

    def get_container_size(self, insets=None) -> Point:
        return self.container_size

    def scroll_to(self, range=None, offset=None, insets=None, animation=None) -> None:
        self.scrolls.append(ScrollCall(range, offset, insets, animation))
        if self.complete_animations and animation is not None and animation.on_end is not None:
            animation.on_end(True)

    @property
    def is_interacting(self) -> bool:
        return self.interacting

    def run_after_interactions(self, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(0, callback)
        self.waiting.append(handle)
        return handle

    def end_interactions(self) -> None:
        self.interacting = False
        waiting, self.waiting = self.waiting, []
        for handle in waiting:
            if not handle.cancelled:
                handle.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def qapp():
    """A QApplication for tests creating widgets."""
    pg = pytest.importorskip("pyqtgraph")
    return pg.mkQApp("chartscale-tests")


@pytest.fixture
def make_host() -> Callable[..., FakeHost]:
    """Factory for hosts with custom geometry or data."""
    return FakeHost
