"""
Configuration & Global Constants
================================
This module serves as the central registry for tunable constants of the
scale engine.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (debounce intervals, animation
   durations, default paddings) scattered throughout the controllers.
2. Deployment: A couple of timing values can be overridden through the
   environment, which is handy when embedding the engine in slow hosts or
   when running headless demos.

Exports:
    UPDATE_DEBOUNCE_INTERVAL_MS (int): Quiet period before a scheduled update runs.
    ANIMATION_DURATION_MS (int): Default scroll/zoom animation duration.
    CONTAINER_READY_MIN_SIZE (float): Minimum container size (per axis) for layout.
    LOG_LEVEL (str): Default level name for `setup_logging`.
    LOG_FILE (str | None): Default log file for `setup_logging`.
"""
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def get_int_setting(name: str, default: int) -> int:
    """
    Read an integer setting from the environment.

    Falls back to `default` (with a warning) when the variable holds garbage.
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
        return default
    if value < 0:
        logger.warning(f"Ignoring negative value for {name}: {value}")
        return default
    return value


# Global Constants
UPDATE_DEBOUNCE_INTERVAL_MS: int = get_int_setting("CHARTSCALE_DEBOUNCE_MS", 500)
ANIMATION_DURATION_MS: int = get_int_setting("CHARTSCALE_ANIMATION_MS", 500)

# A container smaller than this (on the relevant axis) has not been laid out yet
CONTAINER_READY_MIN_SIZE: float = 1.0

# Default paddings (fractions for relative, content/view units for absolute)
DEFAULT_VIEW_PADDING_ABS: float = 0.0
DEFAULT_VIEW_PADDING_REL: float = 0.0
DEFAULT_CONTENT_PADDING_ABS: float = 0.0
DEFAULT_CONTENT_PADDING_REL: float = 0.0
DEFAULT_AUTOSCALE_CONTENT_PADDING_REL: float = 0.2

# Minimum distance between gridlines drawn by the tick axis item (pixels)
DEFAULT_TICK_MIN_PIXEL_DISTANCE: float = 60.0

# Logging defaults picked up by `setup_logging`
LOG_LEVEL: str = os.environ.get("CHARTSCALE_LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.environ.get("CHARTSCALE_LOG_FILE") or None
