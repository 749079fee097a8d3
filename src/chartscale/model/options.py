"""
Controller Options
==================
Validated option sets for the scale controllers.

Why is this file needed?
------------------------
1. Eager validation: padding shapes, inverted bounds and bad hysteresis
   policies fail when the options are built, not in the middle of an update.
2. Soft checks: an anchor outside the configured bounds is suspicious but
   legal, so it is only logged.

Classes:
    AnimationOptions: How scroll/zoom requests are animated.
    ScaleControllerOptions: Padding, bounds, anchor, hysteresis, animation.
    AutoScaleOptions: Adds data sources and default bounds.
    FixedScaleOptions: A constant range.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Sequence

from chartscale import config
from chartscale.controller.hysteresis import Hysteresis, HysteresisFunc
from chartscale.errors import ConfigurationError
from chartscale.model.data_source import DataSource
from chartscale.model.geometry import Range
from chartscale.model.padding import Padding, PaddingInput
from chartscale.utils import is_finite_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnimationOptions:
    animated: bool = True
    duration_ms: int = config.ANIMATION_DURATION_MS
    # Called with True if the animation completed, False if it was interrupted
    on_end: Optional[Callable[[bool], None]] = None

    def merged(self, other: Optional[AnimationOptions]) -> AnimationOptions:
        """
        Overlay `other` on these options.

        `other` wins, except that it keeps this `on_end` when it has none.
        """
        if other is None:
            return self
        return replace(other, on_end=other.on_end if other.on_end is not None else self.on_end)


def _optional_bound(value, name: str) -> Optional[float]:
    if value is None:
        return None
    if not is_finite_number(value):
        raise ConfigurationError(f"Invalid {name}: {value!r}")
    return float(value)


def _check_bounds(lower: Optional[float], upper: Optional[float], what: str) -> None:
    if lower is not None and upper is not None and upper < lower:
        raise ConfigurationError(f"Invalid {what} range: max ({upper}) < min ({lower})")


def _warn_anchor(anchor: Optional[float], lower: Optional[float], upper: Optional[float], what: str) -> None:
    if anchor is None:
        return
    if lower is not None and anchor < lower:
        logger.warning(f"Anchor ({anchor}) is below {what} min value ({lower})")
    if upper is not None and anchor > upper:
        logger.warning(f"Anchor ({anchor}) is above {what} max value ({upper})")


@dataclass
class ScaleControllerOptions:
    """
    Options shared by all scale controllers.

    Paddings accept a number (both sides), a pair `(before, after)` or a
    `Padding`, and are normalized on construction.

    Attributes:
        view_padding_abs: Padding in view units (e.g. pixels).
        view_padding_rel: Padding as a fraction of the content length.
        content_padding_abs: Padding in content units.
        content_padding_rel: Padding as a fraction of the content length.
        min: Content is never shown below this value.
        max: Content is never shown above this value.
        anchor: Value that padding never crosses (e.g. 0 for bar charts).
        hysteresis: A `Hysteresis` or a plain `(min, max, prev_min, prev_max)` function.
        animation: Default animation of scroll/zoom requests.
    """
    view_padding_abs: PaddingInput = config.DEFAULT_VIEW_PADDING_ABS
    view_padding_rel: PaddingInput = config.DEFAULT_VIEW_PADDING_REL
    content_padding_abs: PaddingInput = config.DEFAULT_CONTENT_PADDING_ABS
    content_padding_rel: PaddingInput = config.DEFAULT_CONTENT_PADDING_REL
    min: Optional[float] = None
    max: Optional[float] = None
    anchor: Optional[float] = None
    hysteresis: Hysteresis | HysteresisFunc | None = None
    animation: AnimationOptions = field(default_factory=AnimationOptions)

    def __post_init__(self) -> None:
        self.view_padding_abs = Padding.normalize(self.view_padding_abs)
        self.view_padding_rel = Padding.normalize(self.view_padding_rel)
        self.content_padding_abs = Padding.normalize(self.content_padding_abs)
        self.content_padding_rel = Padding.normalize(self.content_padding_rel)

        self.min = _optional_bound(self.min, "min")
        self.max = _optional_bound(self.max, "max")
        self.anchor = _optional_bound(self.anchor, "anchor")
        _check_bounds(self.min, self.max, "scale")
        _warn_anchor(self.anchor, self.min, self.max, "scale")

        self.hysteresis = Hysteresis.wrap(self.hysteresis)
        if self.animation is None:
            self.animation = AnimationOptions()
        elif not isinstance(self.animation, AnimationOptions):
            raise ConfigurationError(f"Invalid animation options: {self.animation!r}")


@dataclass
class AutoScaleOptions(ScaleControllerOptions):
    """
    Options of `AutoScaleController`.

    Attributes:
        data_sources: Sources to fit. None adopts the host's data sources.
        default_min: Lower bound used when no source has data.
        default_max: Upper bound used when no source has data.
    """
    content_padding_rel: PaddingInput = config.DEFAULT_AUTOSCALE_CONTENT_PADDING_REL
    data_sources: Optional[Sequence[DataSource]] = None
    default_min: Optional[float] = None
    default_max: Optional[float] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.data_sources is not None:
            self.data_sources = list(self.data_sources)
        self.default_min = _optional_bound(self.default_min, "default min")
        self.default_max = _optional_bound(self.default_max, "default max")
        _check_bounds(self.default_min, self.default_max, "default")
        _warn_anchor(self.anchor, self.default_min, self.default_max, "default")

    @property
    def default_range(self) -> Optional[Range]:
        """The fallback range, collapsed to a point when only one default is set."""
        lower, upper = self.default_min, self.default_max
        if lower is None and upper is None:
            return None
        if lower is None:
            lower = upper
        if upper is None:
            upper = lower
        return Range(lower, upper)


@dataclass
class FixedScaleOptions(ScaleControllerOptions):
    """Options of `FixedScaleController`: `min` and `max` are required and define the range."""

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.min is None or self.max is None:
            raise ConfigurationError("A fixed scale needs both min and max")

    @property
    def range(self) -> Range:
        return Range(self.min, self.max)

