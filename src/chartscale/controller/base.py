"""
Scale Controller
================
The per-axis state machine deciding which content range a host shows.

Why is this file needed?
------------------------
1. Pipeline: Whatever the source of the raw range (constant or measured
   data), it is clamped to static bounds, padded in content space, padded in
   view space and smoothed by a hysteresis policy, always in that order.
2. Scheduling: Updates are debounced and postponed while the user interacts
   with the view. Until the host has been laid out they run immediately.
3. Ownership: The host owns the controller. The controller only keeps a weak
   reference back, so it never extends the host's lifetime.

Classes:
    ScaleController: Abstract base. Subclasses implement `get_content_limits`.
"""
from __future__ import annotations

import logging
import weakref
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from chartscale import config
from chartscale.controller.host import Cancelable, ContentLimitOptions, ScaleHost
from chartscale.controller.scheduling import Debouncer, QtScheduler, Scheduler, UpdateState
from chartscale.errors import ConfigurationError, NotConfiguredError
from chartscale.model.geometry import Axis, Point, Range
from chartscale.model.options import AnimationOptions, ScaleControllerOptions
from chartscale.utils import is_finite_number

logger = logging.getLogger(__name__)


class ScaleController(ABC):
    """
    Drives the content range of one host axis.

    Args:
        options: Controller options. Defaults to `ScaleControllerOptions()`.
        scheduler: Timer service for debouncing. Defaults to a `QtScheduler`.
    """
    # Quiet period (ms) before a scheduled update runs
    update_debounce_interval: int = config.UPDATE_DEBOUNCE_INTERVAL_MS
    # Minimum container size change (view units) that forces a new scroll_to
    container_change_threshold: float = config.CONTAINER_READY_MIN_SIZE

    def __init__(
        self,
        options: Optional[ScaleControllerOptions] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        if options is None:
            options = self.default_options()
        if not isinstance(options, ScaleControllerOptions):
            raise ConfigurationError(f"Invalid options: {options!r}")
        self.options = options
        self.scheduler = scheduler if scheduler is not None else QtScheduler()

        self._host_ref: Optional[weakref.ref[ScaleHost]] = None
        self._applied_range: Optional[Range] = None
        self._container_size: Optional[Point] = None
        self._interaction: Optional[Cancelable] = None
        self._debouncer = Debouncer(self.scheduler, self.update_debounce_interval, self._on_debounce_timeout)

    def default_options(self) -> ScaleControllerOptions:
        return ScaleControllerOptions()

    # ==========================================
    # HOST
    # ==========================================
    @property
    def host(self) -> ScaleHost:
        """The configured host. Raises NotConfiguredError if there is none."""
        host = self._maybe_host
        if host is None:
            raise NotConfiguredError(f"{type(self).__name__} is not configured with a host")
        return host

    @property
    def _maybe_host(self) -> Optional[ScaleHost]:
        if self._host_ref is None:
            return None
        return self._host_ref()

    @property
    def is_configured(self) -> bool:
        return self._maybe_host is not None

    @property
    def applied_range(self) -> Optional[Range]:
        """The range last sent to the host (None before the first scroll or after a reset)."""
        return self._applied_range

    @property
    def state(self) -> UpdateState:
        if self._interaction is not None:
            return UpdateState.WAITING_ON_INTERACTION
        if self._debouncer.pending:
            return UpdateState.SCHEDULED
        return UpdateState.IDLE

    def configure(self, host: ScaleHost) -> None:
        """Attach to `host` and schedule the first update."""
        if not isinstance(host, ScaleHost):
            raise ConfigurationError(f"Invalid scale host: {host!r}")
        self.cancel_update()
        self._host_ref = weakref.ref(host)
        self._applied_range = None
        self._container_size = None
        logger.debug(f"{type(self).__name__} configured on axis {host.axis}")
        self.configure_controller()
        self.set_needs_update()

    def configure_controller(self) -> None:
        """Hook for subclasses, called by `configure` once the host is set."""

    def unconfigure(self) -> None:
        """Detach from the host and cancel any pending update."""
        self.cancel_update()
        self.unconfigure_controller()
        self._host_ref = None
        self._applied_range = None
        self._container_size = None

    def unconfigure_controller(self) -> None:
        """Hook for subclasses, called by `unconfigure` before the host is dropped."""

    # ==========================================
    # SCHEDULING
    # ==========================================
    def set_needs_update(self) -> None:
        """Request an update: immediately while the host is not laid out, debounced otherwise."""
        if not self._was_container_ready():
            self.update(AnimationOptions(animated=False))
        else:
            self.schedule_update()

    def schedule_update(self) -> None:
        self._debouncer.interval_ms = self.update_debounce_interval
        self._debouncer.trigger()

    def cancel_update(self) -> None:
        """Cancel the debounce timer and any wait for an interaction to end."""
        if self._interaction is not None:
            self._interaction.cancel()
            self._interaction = None
        self._debouncer.cancel()

    def _on_debounce_timeout(self) -> None:
        host = self._maybe_host
        if host is None:
            return
        if host.is_interacting:
            logger.debug("Host is interacting, postponing scale update")
            self._interaction = host.run_after_interactions(self._on_interactions_done)
        else:
            self.update()

    def _on_interactions_done(self) -> None:
        self._interaction = None
        self.schedule_update()

    # ==========================================
    # UPDATE
    # ==========================================
    @abstractmethod
    def get_content_limits(self, options: ContentLimitOptions) -> Optional[Range]:
        """The raw content range to show, or None to leave the host alone."""

    def update(self, animation: Optional[AnimationOptions] = None) -> None:
        """Compute the content range now and, if it changed, scroll the host to it."""
        self.cancel_update()

        host = self._maybe_host
        if host is None:
            return
        axis = host.axis
        insets = host.get_axis_insets()
        container_size = host.get_container_size(insets)
        if not self._is_container_ready(container_size, axis):
            return

        container_changed = self._container_size is None or abs(
            self._container_size.on_axis(axis) - container_size.on_axis(axis)
        ) >= self.container_change_threshold

        limit_options = ContentLimitOptions(container_size=container_size, insets=insets)
        limits = self.get_content_limits(limit_options)
        self._container_size = container_size
        if limits is None:
            return

        new_range = self.process_content_range(limits, limit_options)
        if not container_changed and new_range == self._applied_range:
            return
        logger.debug(f"Scaling {axis} to [{new_range.min}, {new_range.max}] (from {self._applied_range})")
        self._applied_range = new_range

        requested = self.options.animation.merged(animation)
        base_animation = AnimationOptions(
            animated=requested.animated,
            duration_ms=requested.duration_ms,
            on_end=lambda finished: self._on_animation_end(finished, requested),
        )

        if new_range.max > new_range.min:
            host.scroll_to(range=new_range, insets=insets, animation=base_animation)
        else:
            host.scroll_to(offset=-new_range.min, animation=base_animation)

    def _on_animation_end(self, finished: bool, requested: AnimationOptions) -> None:
        if not finished:
            # Interrupted, so the host may not show the range we think it does
            logger.debug("Scale animation interrupted, rescheduling update")
            self._applied_range = None
            self.set_needs_update()
        if requested.on_end is not None:
            requested.on_end(finished)

    # ==========================================
    # PIPELINE
    # ==========================================
    def process_content_range(self, limits: Range, options: ContentLimitOptions) -> Range:
        """Clamp, pad and smooth a raw content range."""
        content = self.limit_content(limits)
        content = self.add_content_padding(content)
        content = self.add_view_padding(content, options)
        return self.apply_hysteresis(content)

    def limit_content(self, content: Range) -> Range:
        """
        Clamp the range to the static `min` and `max`.

        A range lying entirely beyond a bound collapses onto that bound.
        """
        lower, upper = self.options.min, self.options.max
        lo, hi = content
        if lower is not None and lo < lower:
            lo = lower
        if upper is not None and hi > upper:
            hi = upper
        if hi < lo:
            lo = hi = upper if upper is not None and lo > upper else lower
        return Range(lo, hi)

    def add_content_padding(self, content: Range) -> Range:
        """Apply relative then absolute content padding, never padding over the anchor."""
        rel = self.options.content_padding_rel
        abs_ = self.options.content_padding_abs
        anchor = self.options.anchor
        lo, hi = content
        length = content.length
        if rel and length > 0:
            lo -= rel.before * length
            hi += rel.after * length
        lo -= abs_.before
        hi += abs_.after

        if anchor is not None:
            if content.min >= anchor and lo < anchor:
                lo = anchor
            if content.max <= anchor and hi > anchor:
                hi = anchor
        return Range(lo, hi)

    def add_view_padding(self, content: Range, options: ContentLimitOptions) -> Range:
        """Apply relative view padding, then absolute view padding converted to content units."""
        rel = self.options.view_padding_rel
        abs_ = self.options.view_padding_abs
        axis = self._maybe_host.axis if self._maybe_host is not None else Axis.X
        lo, hi = content
        if rel:
            length = hi - lo
            if length > 0:
                lo -= rel.before * length
                hi += rel.after * length

        if abs_:
            length = hi - lo
            if length > 0:
                view_length = options.container_size.on_axis(axis) - options.insets.along(axis)
                view_length -= abs_.before + abs_.after
                if view_length > 0:
                    scale = view_length / length
                    lo -= abs_.before / scale
                    hi += abs_.after / scale
        return Range(lo, hi)

    def apply_hysteresis(self, content: Range) -> Range:
        """
        Smooth the range with the configured hysteresis policy.

        Invalid output and exceptions are logged; the input range is kept.
        """
        policy = self.options.hysteresis
        if policy is None:
            return content
        try:
            result = policy.apply(content.min, content.max, self.options.min, self.options.max)
        except Exception as e:
            logger.error(f"Uncaught error in hysteresis function: {e}", exc_info=True)
            return content
        if result is None:
            return content

        smoothed = _validated_pair(result)
        if smoothed is None:
            logger.warning(f"Ignoring invalid hysteresis output: {result!r}")
            return content
        return smoothed

    # ==========================================
    # CONTAINER
    # ==========================================
    def _was_container_ready(self) -> bool:
        if self._container_size is None:
            return False
        host = self._maybe_host
        axis = host.axis if host is not None else Axis.X
        return self._is_container_ready(self._container_size, axis)

    @staticmethod
    def _is_container_ready(size: Optional[Point], axis: Axis) -> bool:
        return size is not None and size.on_axis(axis) >= config.CONTAINER_READY_MIN_SIZE


def _validated_pair(value) -> Optional[Range]:
    """A Range from a two-element sequence of finite numbers, else None."""
    if isinstance(value, Range):
        items: Sequence = value.as_tuple()
    else:
        try:
            items = list(value)
        except TypeError:
            return None
    if len(items) != 2 or not all(is_finite_number(v) for v in items):
        return None
    lo, hi = float(items[0]), float(items[1])
    if hi < lo:
        return None
    return Range(lo, hi)
