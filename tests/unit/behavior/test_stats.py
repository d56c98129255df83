"""
Unit tests for numeric helpers
"""

import math

import pytest

from learner_analytics.behavior.stats import (
    angle_between,
    clamp01,
    distance,
    ewma,
    lerp,
    normalize,
    population_variance,
    safe_mean,
    safe_ratio,
)


class TestScalarHelpers:
    """Tests for clamping, interpolation and smoothing"""

    def test_clamp01(self):
        assert clamp01(-0.5) == 0.0
        assert clamp01(0.25) == 0.25
        assert clamp01(3.0) == 1.0

    def test_lerp_clamps_t(self):
        """t outside [0, 1] is clamped"""
        assert lerp(0.0, 1.0, 0.25) == pytest.approx(0.25)
        assert lerp(0.0, 1.0, 2.0) == pytest.approx(1.0)
        assert lerp(0.4, 1.0, -1.0) == pytest.approx(0.4)

    def test_ewma(self):
        """value*(1-a) + sample*a"""
        assert ewma(0.5, 1.0, 0.2) == pytest.approx(0.6)

    def test_safe_mean_and_ratio_defaults(self):
        """Empty input and zero denominators yield the default"""
        assert safe_mean([], default=0.5) == 0.5
        assert safe_mean(iter([1.0, 3.0])) == pytest.approx(2.0)
        assert safe_ratio(1.0, 0.0, default=0.7) == 0.7
        assert safe_ratio(1.0, 4.0) == pytest.approx(0.25)

    def test_population_variance(self):
        assert population_variance([]) == 0.0
        assert population_variance([2.0, 4.0]) == pytest.approx(1.0)


class TestVectorHelpers:
    """Tests for numpy-backed vector math"""

    def test_distance(self):
        assert distance((0, 0, 0), (3, 4, 0)) == pytest.approx(5.0)

    def test_normalize_degenerate(self):
        """Zero vectors normalize to zero"""
        assert normalize((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)
        x, y, z = normalize((0.0, 3.0, 4.0))
        assert math.sqrt(x * x + y * y + z * z) == pytest.approx(1.0)

    def test_angle_between(self):
        assert angle_between((1, 0, 0), (0, 0, 1)) == pytest.approx(90.0)
        assert angle_between((1, 0, 0), (1, 0, 0)) == pytest.approx(0.0, abs=1e-6)
        assert angle_between((0, 0, 0), (1, 0, 0)) == 0.0
