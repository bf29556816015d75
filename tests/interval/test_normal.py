"""
Tests for normal mean and variance confidence intervals.

Reference values for mean 2.5, variance 5/3, n = 4, alpha = 0.05
(the sample 1, 2, 3, 4) are from R:
    2.5 + c(-1, 1) * qt(.975, 3) * sqrt(5/3 / 4)
    3 * 5/3 / qchisq(c(.975, .025), 3)
"""

import math

import numpy as np
import pytest

from pymoments.core.exceptions import ValidationError
from pymoments.descriptive import Mean, Variance
from pymoments.interval import Interval, NormalConfidenceInterval

N = NormalConfidenceInterval


# ═══════════════════════════════════════════════════════════════════════
# Reference values
# ═══════════════════════════════════════════════════════════════════════


class TestNormalIntervals:

    def test_mean(self):
        interval = N.MEAN.from_error_rate(2.5, 1.6666666666666667, 4, 0.05)
        np.testing.assert_allclose(
            tuple(interval), (0.44573974323947924, 4.5542602567605206), rtol=1e-9
        )

    def test_variance(self):
        interval = N.VARIANCE.from_error_rate(2.5, 1.6666666666666667, 4, 0.05)
        np.testing.assert_allclose(
            tuple(interval), (0.53485067734936409, 23.170107980137484), rtol=1e-9
        )

    def test_mean_symmetric(self):
        lower, upper = N.MEAN.from_error_rate(10.0, 4.0, 25, 0.1)
        assert (lower + upper) / 2 == pytest.approx(10.0, rel=1e-15)

    def test_variance_contains_estimate(self):
        assert N.VARIANCE.from_error_rate(0.0, 3.0, 30, 0.05).contains(3.0)

    def test_variance_ignores_mean(self):
        a = N.VARIANCE.from_error_rate(0.0, 2.0, 12, 0.05)
        b = N.VARIANCE.from_error_rate(100.0, 2.0, 12, 0.05)
        assert a == b

    def test_mean_approaches_z_interval(self):
        lower, upper = N.MEAN.from_error_rate(0.0, 1.0, 1_000_000, 0.05)
        assert upper == pytest.approx(1.959963984540054 / 1000, rel=1e-5)

    def test_from_accumulators(self, normal_data):
        mean = Mean.of(normal_data).get_as_double()
        var = Variance.of(normal_data).get_as_double()
        interval = N.MEAN.from_error_rate(mean, var, len(normal_data), 0.01)
        assert interval.contains(mean)
        # t quantile for 999 degrees of freedom is close to the normal 2.5758
        assert interval.width == pytest.approx(2 * 2.5758 * math.sqrt(var / 1000), rel=5e-3)

    def test_zero_variance(self):
        assert N.MEAN.from_error_rate(5.0, 0.0, 10, 0.05) == Interval(5.0, 5.0)


# ═══════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════


class TestNormalValidation:

    @pytest.mark.parametrize("n", [1, 0, -3])
    def test_sample_size_not_above_one(self, n):
        with pytest.raises(ValidationError, match="Sample size is not above one"):
            N.MEAN.from_error_rate(0.0, 1.0, n, 0.05)

    @pytest.mark.parametrize("alpha", [0.0, 1.0, math.nan])
    def test_invalid_error_rate(self, alpha):
        with pytest.raises(ValidationError, match="Error rate is not in"):
            N.VARIANCE.from_error_rate(0.0, 1.0, 10, alpha)

    def test_non_integer_n(self):
        with pytest.raises(ValidationError):
            N.MEAN.from_error_rate(0.0, 1.0, 10.5, 0.05)


# ═══════════════════════════════════════════════════════════════════════
# Interval
# ═══════════════════════════════════════════════════════════════════════


class TestInterval:

    def test_fields_and_unpacking(self):
        interval = Interval(1.0, 3.0)
        lower, upper = interval
        assert (lower, upper) == (1.0, 3.0)
        assert interval.width == 2.0

    def test_contains_is_closed(self):
        interval = Interval(1.0, 3.0)
        assert interval.contains(1.0)
        assert interval.contains(3.0)
        assert not interval.contains(3.5)
        assert not interval.contains(math.nan)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Interval(0.0, 1.0).lower_bound = 0.5
