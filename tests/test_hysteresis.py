"""Tests for the hysteresis policies."""

import pytest

from chartscale.controller.hysteresis import (
    FunctionHysteresis,
    Hysteresis,
    NoHysteresis,
    ScaleHysteresis,
    StepHysteresis,
)
from chartscale.errors import ConfigurationError
from chartscale.model.geometry import Range
from chartscale.scale.linear_scale import LinearScale


class TestStepHysteresis:
    def test_snaps_outward(self) -> None:
        assert Hysteresis.step(10).apply(3, 17) == Range(0, 20)

    def test_origin(self) -> None:
        assert Hysteresis.step(10, origin=5).apply(7, 22) == Range(5, 25)

    def test_boundaries_are_kept(self) -> None:
        assert Hysteresis.step(10).apply(10, 20) == Range(10, 20)

    def test_negative_values(self) -> None:
        assert Hysteresis.step(2.5).apply(-3.1, -0.2) == Range(-5.0, 0.0)

    @pytest.mark.parametrize("size", [0, -1, float("nan"), float("inf"), "10"])
    def test_invalid_size(self, size) -> None:
        with pytest.raises(ConfigurationError):
            StepHysteresis(size)

    def test_invalid_origin(self) -> None:
        with pytest.raises(ConfigurationError):
            StepHysteresis(1, origin=float("inf"))

    def test_repr(self) -> None:
        assert repr(StepHysteresis(10, 5)) == "StepHysteresis(size=10, origin=5)"


class TestScaleHysteresis:
    def test_snaps_to_ticks(self) -> None:
        policy = Hysteresis.with_scale(LinearScale(min_interval=1))
        assert policy.apply(0.3, 7.2) == Range(0.0, 8.0)

    def test_updates_the_scale(self) -> None:
        scale = LinearScale(min_interval=10)
        ScaleHysteresis(scale).apply(3, 87)
        assert scale.tick_scale.interval_value == 10

    def test_small_changes_keep_the_range(self) -> None:
        policy = Hysteresis.with_scale(LinearScale(min_interval=1))
        first = policy.apply(0.3, 7.2)
        assert policy.apply(0.5, 7.9) == first


class TestWrap:
    def test_none(self) -> None:
        assert Hysteresis.wrap(None) is None

    def test_policy_passes_through(self) -> None:
        policy = NoHysteresis()
        assert Hysteresis.wrap(policy) is policy

    def test_function(self) -> None:
        calls = []

        def widen(lo, hi, prev_min, prev_max):
            calls.append((lo, hi, prev_min, prev_max))
            return lo - 1, hi + 1

        policy = Hysteresis.wrap(widen)
        assert isinstance(policy, FunctionHysteresis)
        assert policy(0, 1, None, 5) == (-1, 2)
        assert calls == [(0, 1, None, 5)]

    def test_not_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            Hysteresis.wrap(42)

    def test_none_policy_keeps_input(self) -> None:
        assert Hysteresis.none().apply(1, 2) is None
