"""Tests for the ScaleController state machine and range pipeline."""

import gc
import logging

import pytest

from chartscale.controller.base import ScaleController
from chartscale.controller.fixed import FixedScaleController
from chartscale.controller.host import ContentLimitOptions
from chartscale.controller.hysteresis import Hysteresis
from chartscale.controller.scheduling import UpdateState
from chartscale.errors import ConfigurationError, NotConfiguredError
from chartscale.model.geometry import Axis, Insets, Point, Range
from chartscale.model.options import AnimationOptions, FixedScaleOptions, ScaleControllerOptions

from conftest import FakeHost, ManualScheduler


class StaticController(ScaleController):
    """Reports whatever range the test assigns to `limits`."""

    def __init__(self, limits=None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.limits = limits

    def get_content_limits(self, options: ContentLimitOptions):
        return self.limits


@pytest.fixture
def controller(scheduler: ManualScheduler) -> FixedScaleController:
    return FixedScaleController(FixedScaleOptions(min=0, max=10), scheduler=scheduler)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfigure:
    def test_first_update_is_immediate(self, controller, host: FakeHost) -> None:
        controller.configure(host)
        assert len(host.scrolls) == 1
        call = host.scrolls[0]
        assert call.range == Range(0, 10)
        assert call.offset is None
        assert call.insets == Insets()
        assert call.animation.animated is False
        assert controller.applied_range == Range(0, 10)
        assert controller.state is UpdateState.IDLE

    def test_rejects_non_hosts(self, controller) -> None:
        with pytest.raises(ConfigurationError):
            controller.configure(object())

    def test_host_required(self, controller) -> None:
        assert not controller.is_configured
        with pytest.raises(NotConfiguredError):
            controller.host

    def test_weak_host_reference(self, controller, make_host) -> None:
        host = make_host()
        controller.configure(host)
        assert controller.host is host
        del host
        gc.collect()
        assert not controller.is_configured
        controller.update()

    def test_unconfigure(self, controller, host: FakeHost, scheduler: ManualScheduler) -> None:
        controller.configure(host)
        controller.set_needs_update()
        controller.unconfigure()
        assert controller.state is UpdateState.IDLE
        assert not controller.is_configured
        assert controller.applied_range is None
        scheduler.advance(1000)
        assert len(host.scrolls) == 1

    def test_reconfigure_scrolls_again(self, controller, host: FakeHost) -> None:
        controller.configure(host)
        controller.configure(host)
        assert len(host.scrolls) == 2

    def test_invalid_options(self) -> None:
        with pytest.raises(ConfigurationError):
            StaticController(options={"min": 0})

    def test_default_options(self, scheduler: ManualScheduler) -> None:
        assert StaticController(scheduler=scheduler).options == ScaleControllerOptions()


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


class TestScheduling:
    def test_debounced_after_layout(self, controller, host: FakeHost, scheduler: ManualScheduler) -> None:
        controller.configure(host)
        controller.set_needs_update()
        assert controller.state is UpdateState.SCHEDULED
        scheduler.advance(controller.update_debounce_interval - 1)
        assert controller.state is UpdateState.SCHEDULED
        scheduler.advance(1)
        assert controller.state is UpdateState.IDLE
        # Same range, same container: nothing to do
        assert len(host.scrolls) == 1

    def test_repeated_requests_coalesce(self, scheduler: ManualScheduler, host: FakeHost) -> None:
        controller = StaticController(limits=Range(0, 1), scheduler=scheduler)
        controller.configure(host)
        for i in range(5):
            controller.limits = Range(0, 2 + i)
            controller.set_needs_update()
            scheduler.advance(100)
        scheduler.advance(controller.update_debounce_interval)
        assert [c.range for c in host.scrolls] == [Range(0, 1), Range(0, 6)]

    def test_container_change_forces_scroll(self, controller, host: FakeHost, scheduler: ManualScheduler) -> None:
        controller.configure(host)
        host.container_size = Point(400, 350)
        controller.set_needs_update()
        scheduler.advance(controller.update_debounce_interval)
        assert len(host.scrolls) == 2
        assert host.scrolls[1].range == Range(0, 10)
        assert host.scrolls[1].animation.animated is True

    def test_small_container_change_is_ignored(self, controller, host: FakeHost, scheduler: ManualScheduler) -> None:
        controller.configure(host)
        host.container_size = Point(400, 300.5)
        controller.set_needs_update()
        scheduler.advance(controller.update_debounce_interval)
        assert len(host.scrolls) == 1

    def test_waits_for_interaction(self, controller, host: FakeHost, scheduler: ManualScheduler) -> None:
        controller.configure(host)
        host.interacting = True
        host.container_size = Point(400, 200)
        controller.set_needs_update()
        scheduler.advance(controller.update_debounce_interval)
        assert controller.state is UpdateState.WAITING_ON_INTERACTION
        assert len(host.scrolls) == 1

        host.end_interactions()
        assert controller.state is UpdateState.SCHEDULED
        scheduler.advance(controller.update_debounce_interval)
        assert controller.state is UpdateState.IDLE
        assert len(host.scrolls) == 2

    def test_cancel_update(self, controller, host: FakeHost, scheduler: ManualScheduler) -> None:
        controller.configure(host)
        host.interacting = True
        controller.set_needs_update()
        scheduler.advance(controller.update_debounce_interval)
        controller.cancel_update()
        assert controller.state is UpdateState.IDLE
        assert host.waiting[0].cancelled

    def test_not_ready_container_updates_immediately(self, controller, make_host) -> None:
        host = make_host(container_size=Point(400, 0))
        controller.configure(host)
        assert host.scrolls == []
        assert controller.state is UpdateState.IDLE

        host.container_size = Point(400, 300)
        controller.set_needs_update()
        assert len(host.scrolls) == 1
        assert host.scrolls[0].animation.animated is False

    def test_readiness_uses_own_axis(self, controller, make_host) -> None:
        host = make_host(axis=Axis.X, container_size=Point(300, 0))
        controller.configure(host)
        assert len(host.scrolls) == 1


# ---------------------------------------------------------------------------
# Scrolling
# ---------------------------------------------------------------------------


class TestScrolling:
    def test_zero_width_range_scrolls(self, scheduler: ManualScheduler, host: FakeHost) -> None:
        controller = FixedScaleController(FixedScaleOptions(min=5, max=5), scheduler=scheduler)
        controller.configure(host)
        call = host.scrolls[0]
        assert call.range is None
        assert call.offset == -5.0

    def test_interrupted_animation_reschedules(self, scheduler: ManualScheduler, host: FakeHost) -> None:
        finished = []
        options = FixedScaleOptions(min=0, max=10, animation=AnimationOptions(on_end=finished.append))
        controller = FixedScaleController(options, scheduler=scheduler)
        host.complete_animations = False
        controller.configure(host)

        host.scrolls[0].animation.on_end(False)
        assert finished == [False]
        assert controller.applied_range is None
        assert controller.state is UpdateState.SCHEDULED

        scheduler.advance(controller.update_debounce_interval)
        assert len(host.scrolls) == 2

    def test_completed_animation_calls_back(self, scheduler: ManualScheduler, host: FakeHost) -> None:
        finished = []
        options = FixedScaleOptions(min=0, max=10, animation=AnimationOptions(on_end=finished.append))
        FixedScaleController(options, scheduler=scheduler).configure(host)
        assert finished == [True]

    def test_explicit_animation(self, controller, host: FakeHost) -> None:
        controller.configure(host)
        host.container_size = Point(400, 100)
        controller.update(AnimationOptions(animated=True, duration_ms=50))
        assert host.scrolls[1].animation.duration_ms == 50

    def test_passes_insets(self, controller, host: FakeHost) -> None:
        host.insets = Insets(top=10, bottom=20)
        controller.configure(host)
        assert host.scrolls[0].insets == Insets(top=10, bottom=20)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def _static(**options) -> StaticController:
    return StaticController(options=ScaleControllerOptions(**options), scheduler=ManualScheduler())


class TestLimitContent:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (Range(-5, 20), Range(0, 10)),
            (Range(12, 15), Range(10, 10)),
            (Range(-8, -3), Range(0, 0)),
            (Range(2, 15), Range(2, 10)),
            (Range(3, 4), Range(3, 4)),
        ],
    )
    def test_clamps(self, raw, expected) -> None:
        assert _static(min=0, max=10).limit_content(raw) == expected

    def test_unbounded(self) -> None:
        assert _static().limit_content(Range(-1e9, 1e9)) == Range(-1e9, 1e9)


class TestContentPadding:
    def test_relative_then_absolute(self) -> None:
        controller = _static(content_padding_rel=0.1, content_padding_abs=1)
        assert controller.add_content_padding(Range(0, 10)) == Range(-2, 12)

    def test_asymmetric(self) -> None:
        controller = _static(content_padding_rel=(0, 0.5))
        assert controller.add_content_padding(Range(0, 10)) == Range(0, 15)

    def test_relative_ignores_empty_ranges(self) -> None:
        controller = _static(content_padding_rel=0.5, content_padding_abs=1)
        assert controller.add_content_padding(Range(5, 5)) == Range(4, 6)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (Range(0, 10), Range(0, 12)),
            (Range(-10, 0), Range(-12, 0)),
            (Range(-5, 5), Range(-7, 7)),
            (Range(2, 10), Range(0.4, 11.6)),
        ],
    )
    def test_anchor(self, raw, expected) -> None:
        controller = _static(content_padding_rel=0.2, anchor=0)
        result = controller.add_content_padding(raw)
        assert result.min == pytest.approx(expected.min)
        assert result.max == pytest.approx(expected.max)


class TestViewPadding:
    def test_relative(self) -> None:
        controller = _static(view_padding_rel=0.5)
        options = ContentLimitOptions(container_size=Point(400, 300))
        assert controller.add_view_padding(Range(0, 10), options) == Range(-5, 15)

    def test_absolute_in_view_units(self, host: FakeHost) -> None:
        controller = _static(view_padding_abs=50)
        controller.configure(host)
        options = ContentLimitOptions(container_size=Point(400, 300))
        assert controller.add_view_padding(Range(0, 10), options) == Range(-2.5, 12.5)

    def test_absolute_respects_insets(self, host: FakeHost) -> None:
        controller = _static(view_padding_abs=50)
        controller.configure(host)
        options = ContentLimitOptions(container_size=Point(400, 300), insets=Insets(top=50, bottom=50))
        assert controller.add_view_padding(Range(0, 10), options) == Range(-5, 15)

    def test_padding_larger_than_view_is_ignored(self, host: FakeHost) -> None:
        controller = _static(view_padding_abs=200)
        controller.configure(host)
        options = ContentLimitOptions(container_size=Point(400, 300))
        assert controller.add_view_padding(Range(0, 10), options) == Range(0, 10)


class TestHysteresisStage:
    def test_pipeline_order(self) -> None:
        controller = _static(min=0, max=100, content_padding_abs=5, hysteresis=Hysteresis.step(10))
        options = ContentLimitOptions(container_size=Point(400, 300))
        assert controller.process_content_range(Range(-3, 42), options) == Range(-10, 50)

    def test_receives_static_bounds(self) -> None:
        seen = []

        def policy(lo, hi, prev_min, prev_max):
            seen.append((prev_min, prev_max))
            return None

        controller = _static(min=-1, max=99, hysteresis=policy)
        assert controller.apply_hysteresis(Range(0, 1)) == Range(0, 1)
        assert seen == [(-1.0, 99.0)]

    def test_accepts_pairs(self) -> None:
        controller = _static(hysteresis=lambda lo, hi, pmin, pmax: [lo - 1, hi + 1])
        assert controller.apply_hysteresis(Range(0, 1)) == Range(-1, 2)

    @pytest.mark.parametrize("output", ["nope", (1,), (5, 1), (float("nan"), 1), (0, float("inf"))])
    def test_invalid_output_is_ignored(self, output, caplog: pytest.LogCaptureFixture) -> None:
        controller = _static(hysteresis=lambda lo, hi, pmin, pmax: output)
        with caplog.at_level(logging.WARNING, logger="chartscale"):
            assert controller.apply_hysteresis(Range(0, 1)) == Range(0, 1)
        assert "Ignoring invalid hysteresis output" in caplog.text

    def test_errors_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(lo, hi, pmin, pmax):
            raise ZeroDivisionError("boom")

        controller = _static(hysteresis=broken)
        with caplog.at_level(logging.ERROR, logger="chartscale"):
            assert controller.apply_hysteresis(Range(0, 1)) == Range(0, 1)
        assert "Uncaught error in hysteresis function: boom" in caplog.text
