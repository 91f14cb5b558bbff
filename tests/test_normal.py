"""
Tests for standard normal distribution primitives.
"""

import math

import numpy as np
import pytest

from bs_pricer.analytics.normal import normal_cdf, normal_pdf


class TestNormalCdf:
    """Test the standard normal CDF."""

    def test_cdf_at_zero(self):
        assert normal_cdf(0.0) == 0.5

    @pytest.mark.parametrize(
        "x,expected",
        [
            (1.0, 0.8413447460685429),
            (-1.0, 0.15865525393145707),
            (1.96, 0.9750021048517795),
            (-2.5, 0.006209665325776132),
            (3.0, 0.9986501019683699),
        ],
    )
    def test_known_values(self, x, expected):
        assert abs(normal_cdf(x) - expected) < 1e-12

    @pytest.mark.parametrize("x", np.linspace(-10.0, 10.0, 41))
    def test_symmetry(self, x):
        """N(x) + N(-x) = 1."""
        assert abs(normal_cdf(x) + normal_cdf(-x) - 1.0) < 1e-14

    def test_monotone(self):
        xs = np.linspace(-8.0, 8.0, 401)
        values = [normal_cdf(float(x)) for x in xs]
        assert np.all(np.diff(values) >= 0.0)

    @pytest.mark.parametrize("x", [-1e308, -40.0, -10.0, 10.0, 40.0, 1e308, -math.inf, math.inf])
    def test_bounded_at_extremes(self, x):
        value = normal_cdf(x)
        assert 0.0 <= value <= 1.0

    def test_saturation(self):
        assert normal_cdf(40.0) == 1.0
        assert normal_cdf(-40.0) < 1e-300

    def test_lower_tail_relative_precision(self):
        """Lower tail keeps relative precision (erfc, not 1 - erf)."""
        # N(-10) = 7.619853024160527e-24
        assert abs(normal_cdf(-10.0) / 7.619853024160527e-24 - 1.0) < 1e-10


class TestNormalPdf:
    """Test the standard normal PDF."""

    def test_pdf_at_zero(self):
        assert abs(normal_pdf(0.0) - 1.0 / math.sqrt(2.0 * math.pi)) < 1e-16

    @pytest.mark.parametrize("x", [0.3, 1.0, 2.5, 7.0])
    def test_symmetry(self, x):
        assert normal_pdf(x) == normal_pdf(-x)

    def test_formula(self):
        for x in np.linspace(-5.0, 5.0, 21):
            expected = math.exp(-0.5 * x**2) / math.sqrt(2.0 * math.pi)
            assert normal_pdf(float(x)) == pytest.approx(expected, rel=1e-14)

    def test_underflow_is_zero(self):
        assert normal_pdf(40.0) == 0.0
        assert normal_pdf(1e200) == 0.0

    def test_pdf_is_cdf_derivative(self):
        h = 1e-5
        for x in [-2.0, -0.5, 0.0, 0.7, 1.8]:
            numerical = (normal_cdf(x + h) - normal_cdf(x - h)) / (2 * h)
            assert abs(numerical - normal_pdf(x)) < 1e-8
