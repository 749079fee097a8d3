"""
Auto Scale Controller
=====================
Fits the content range to the data of one or more data sources.

Why is this file needed?
------------------------
1. Measurement: Only data inside the host's visible window (unbounded along
   the controller's own axis) counts, so e.g. a y axis fits the points of the
   currently visible x interval.
2. Observation: The controller listens to the `changed` signal of each data
   source and schedules an update whenever data arrives.
3. Fallbacks: Without data, configured default bounds are shown instead.

Classes:
    AutoScaleController
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from chartscale.controller.base import ScaleController
from chartscale.controller.host import ContentLimitOptions, project_rect
from chartscale.controller.scheduling import Scheduler
from chartscale.errors import ConfigurationError
from chartscale.model.data_source import DataSource
from chartscale.model.geometry import Range
from chartscale.model.options import AutoScaleOptions

logger = logging.getLogger(__name__)


class AutoScaleController(ScaleController):
    """
    Args:
        options: An `AutoScaleOptions`. Defaults to 20% relative content padding.
        scheduler: Timer service (see `ScaleController`).
    """
    options: AutoScaleOptions

    def __init__(self, options: Optional[AutoScaleOptions] = None, scheduler: Optional[Scheduler] = None) -> None:
        if options is not None and not isinstance(options, AutoScaleOptions):
            raise ConfigurationError(f"AutoScaleController needs AutoScaleOptions, got {options!r}")
        super().__init__(options, scheduler=scheduler)
        self._data_sources: Optional[List[DataSource]] = None
        self._subscribed: List[DataSource] = []
        # Sources set by the user are kept across configure/unconfigure
        self._explicit_sources = False
        if self.options.data_sources is not None:
            self.data_sources = self.options.data_sources

    def default_options(self) -> AutoScaleOptions:
        return AutoScaleOptions()

    # ==========================================
    # DATA SOURCES
    # ==========================================
    @property
    def data_sources(self) -> List[DataSource]:
        return list(self._data_sources) if self._data_sources is not None else []

    @data_sources.setter
    def data_sources(self, data_sources: Sequence[DataSource]) -> None:
        self._set_data_sources(data_sources, explicit=True)

    def _set_data_sources(self, data_sources: Sequence[DataSource], explicit: bool, notify: bool = True) -> None:
        for ds in data_sources:
            if not isinstance(ds, DataSource):
                raise ConfigurationError(f"Invalid data source: {ds!r}")
        self._unsubscribe_all()
        self._data_sources = list(data_sources)
        self._explicit_sources = explicit
        logger.debug(f"{type(self).__name__} tracking {len(self._data_sources)} data source(s)")
        for ds in self._data_sources:
            self._subscribe(ds)
        if notify and self.is_configured:
            self.set_needs_update()

    def _subscribe(self, data_source: DataSource) -> None:
        data_source.changed.connect(self._on_data_changed)
        self._subscribed.append(data_source)

    def _unsubscribe_all(self) -> None:
        for ds in self._subscribed:
            ds.changed.disconnect(self._on_data_changed)
        self._subscribed = []

    def _on_data_changed(self) -> None:
        self.set_needs_update()

    def configure_controller(self) -> None:
        if self._data_sources is None:
            self._set_data_sources(self.host.data_sources, explicit=False, notify=False)
        elif not self._subscribed:
            for ds in self._data_sources:
                self._subscribe(ds)

    def unconfigure_controller(self) -> None:
        self._unsubscribe_all()
        if not self._explicit_sources:
            self._data_sources = None

    # ==========================================
    # LIMITS
    # ==========================================
    def get_content_limits(self, options: ContentLimitOptions) -> Optional[Range]:
        """
        Union of the data ranges of all sources, or the default range.

        With an anchor, the union of data always includes the anchor.
        """
        host = self.host
        axis = host.axis
        lower, upper = host.get_visible_location_range(options.container_size, options.insets)
        # Unbounded along our own axis
        visible = (lower.with_axis(axis, -math.inf), upper.with_axis(axis, math.inf))

        content: Optional[Range] = None
        for ds in self._data_sources or []:
            rect = ds.get_data_bounding_rect_in_range(visible)
            if rect is None:
                continue
            data_range = project_rect(rect, axis)
            if data_range is None:
                continue
            content = data_range if content is None else content.union(data_range)

        if content is None:
            return self.options.default_range

        anchor = self.options.anchor
        if anchor is not None:
            content = content.union(Range(anchor, anchor))
        return content
