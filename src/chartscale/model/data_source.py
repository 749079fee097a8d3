"""
Data Sources
============
Observable point collections that autoscale controllers measure.

Why is this file needed?
------------------------
1. Range queries: An autoscale controller only needs the bounding rectangle of
   the data visible in a window, not the data itself.
2. Change notification: Sources emit a Qt signal when their content changes,
   so the controllers observing them can schedule a new update.

Classes:
    DataSource: Base class defining the bounding rectangle query.
    PointDataSource: numpy backed (x, y) point cloud.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal

from chartscale.errors import ConfigurationError
from chartscale.model.geometry import Point, Rect

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class DataSource(QObject):
    """
    Base class for data observed by autoscale controllers.

    Subclasses implement `get_data_bounding_rect_in_range` (QObject cannot also
    be an ABC, so the base raises NotImplementedError). The controller
    treats a source as read-only for the duration of one update pass.
    """
    # Emitted whenever the source's data changes
    changed = Signal()

    def __init__(self, name: str = "") -> None:
        super().__init__()
        self.name = name

    def get_data_bounding_rect_in_range(self, visible_range: Rect) -> Optional[Rect]:
        """
        Bounding rectangle of the data inside `visible_range` (inclusive).

        Args:
            visible_range: (lower-left, upper-right) corners; bounds may be infinite.

        Returns:
            (min corner, max corner) of the matching data, or None when nothing matches.

        Subclasses must override this.
        """
        raise NotImplementedError

    def notify_changed(self) -> None:
        self.changed.emit()


class PointDataSource(DataSource):
    """A cloud of (x, y) points stored as an (N, 2) float array."""

    def __init__(self, points: Optional[Iterable] = None, name: str = "") -> None:
        super().__init__(name=name)
        self._points: npt.NDArray[np.float64] = np.empty((0, 2), dtype=float)
        if points is not None:
            self._points = self._validated_points(points)

    @property
    def points(self) -> npt.NDArray[np.float64]:
        """A read-only view of the stored points."""
        view = self._points.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return len(self._points)

    def set_points(self, points: Iterable) -> None:
        """Replace all points and notify observers."""
        self._points = self._validated_points(points)
        logger.debug(f"Data source '{self.name}' now holds {len(self._points)} points")
        self.notify_changed()

    def append_points(self, points: Iterable) -> None:
        """Append points and notify observers."""
        new_points = self._validated_points(points)
        if len(new_points) == 0:
            return
        self._points = np.concatenate([self._points, new_points])
        self.notify_changed()

    def get_data_bounding_rect_in_range(self, visible_range: Rect) -> Optional[Rect]:
        if len(self._points) == 0:
            return None
        lower, upper = visible_range
        xs = self._points[:, 0]
        ys = self._points[:, 1]
        mask = (
            np.isfinite(xs) & np.isfinite(ys)
            & (xs >= lower.x) & (xs <= upper.x)
            & (ys >= lower.y) & (ys <= upper.y)
        )
        if not mask.any():
            return None
        visible = self._points[mask]
        mins = visible.min(axis=0)
        maxs = visible.max(axis=0)
        return Point(float(mins[0]), float(mins[1])), Point(float(maxs[0]), float(maxs[1]))

    @staticmethod
    def _validated_points(points: Iterable) -> npt.NDArray[np.float64]:
        try:
            array = np.asarray(list(points) if not isinstance(points, np.ndarray) else points, dtype=float)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Points must be numeric (x, y) pairs: {e}") from e
        if array.size == 0:
            return np.empty((0, 2), dtype=float)
        if array.ndim != 2 or array.shape[1] != 2:
            raise ConfigurationError(f"Points must have shape (N, 2), got {array.shape}")
        return array.copy()
