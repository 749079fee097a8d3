"""
Fixed Scale Controller
======================
Shows a constant content range (still padded and smoothed by the base pipeline).
"""
from __future__ import annotations

from typing import Optional

from chartscale.controller.base import ScaleController
from chartscale.controller.host import ContentLimitOptions
from chartscale.controller.scheduling import Scheduler
from chartscale.errors import ConfigurationError
from chartscale.model.geometry import Range
from chartscale.model.options import FixedScaleOptions


class FixedScaleController(ScaleController):
    """
    Args:
        options: A `FixedScaleOptions` with `min` and `max`.
        scheduler: Timer service (see `ScaleController`).
    """
    options: FixedScaleOptions

    def __init__(self, options: FixedScaleOptions, scheduler: Optional[Scheduler] = None) -> None:
        if not isinstance(options, FixedScaleOptions):
            raise ConfigurationError(f"FixedScaleController needs FixedScaleOptions, got {options!r}")
        super().__init__(options, scheduler=scheduler)

    @property
    def min(self) -> float:
        return self.options.min

    @property
    def max(self) -> float:
        return self.options.max

    def get_content_limits(self, options: ContentLimitOptions) -> Optional[Range]:
        return self.options.range
