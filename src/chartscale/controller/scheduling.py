"""
Update Scheduling
=================
Timers and the debounce state machine behind `ScaleController.set_needs_update`.

Why is this file needed?
------------------------
1. Throttling: Data may change hundreds of times per second, but rescaling
   (and animating) the view should only happen after things settle.
2. Testability: Controllers never touch QTimer directly. They ask a
   `Scheduler` for a cancellable callback, so tests can drive time by hand.

Classes:
    UpdateState: Idle / Scheduled / WaitingOnInteraction.
    Scheduler: Abstract "call me later" service.
    QtScheduler: Scheduler backed by single-shot QTimers.
    Debouncer: Restartable quiet-period timer.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Callable, Optional

from PySide6.QtCore import QTimer

from chartscale.controller.host import Cancelable


class UpdateState(StrEnum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    WAITING_ON_INTERACTION = "waiting_on_interaction"


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Cancelable:
        """Run `callback` once after `delay_ms` milliseconds, unless cancelled."""


class QtTimerHandle:
    """Keeps a single-shot QTimer alive until it fires or is cancelled."""

    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler(Scheduler):
    """
    Schedules callbacks on the Qt event loop.

    Callbacks only run while a Q(Core)Application event loop is running.
    """

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer()
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)

        def fire() -> None:
            handle.cancel()
            callback()

        timer.timeout.connect(fire)
        timer.start(max(0, int(delay_ms)))
        return handle


class Debouncer:
    """
    Runs `callback` once `interval_ms` have passed without another `trigger()`.

    Args:
        scheduler: Timer service.
        interval_ms: Quiet period.
        callback: Called with no arguments when the quiet period ends.
    """

    def __init__(self, scheduler: Scheduler, interval_ms: int, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self.callback = callback
        self._handle: Optional[Cancelable] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """(Re)start the quiet period."""
        self.cancel()
        self._handle = self.scheduler.call_later(self.interval_ms, self._fire)

    def cancel(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
