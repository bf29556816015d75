"""
Tests for binomial proportion confidence intervals.

Reference values for (n=10, x=3, alpha=0.05) are from R:
    binom::binom.confint(3, 10, methods=c("asymptotic", "wilson",
        "bayes", "exact", "agresti-coull"))
with the Jeffreys interval from qbeta(c(.025, .975), 3.5, 7.5).
"""

import math

import numpy as np
import pytest

from pymoments.core.exceptions import ValidationError
from pymoments.interval import BinomialConfidenceInterval, Interval

B = BinomialConfidenceInterval
RTOL = 1e-8


# ═══════════════════════════════════════════════════════════════════════
# Reference values
# ═══════════════════════════════════════════════════════════════════════


class TestReferenceValues:

    @pytest.mark.parametrize("method,expected", [
        (B.NORMAL_APPROXIMATION, (0.015974234910674567, 0.5840257650893255)),
        (B.WILSON_SCORE, (0.10779126740630104, 0.6032218525388546)),
        (B.JEFFREYS, (0.09269459393815319, 0.6058183181486713)),
        (B.CLOPPER_PEARSON, (0.06673951117773447, 0.6524528500599972)),
        (B.AGRESTI_COULL, (0.10333841792242526, 0.6076747020227304)),
    ])
    def test_three_of_ten(self, method, expected):
        interval = method.from_error_rate(10, 3, 0.05)
        np.testing.assert_allclose(
            (interval.lower_bound, interval.upper_bound), expected, rtol=RTOL
        )

    def test_wilson_symmetric_at_half(self):
        lower, upper = B.WILSON_SCORE.from_error_rate(10, 5, 0.05)
        np.testing.assert_allclose([lower, upper], [0.23659309, 0.76340691], rtol=1e-7)
        assert lower + upper == pytest.approx(1.0, abs=1e-15)


# ═══════════════════════════════════════════════════════════════════════
# Boundary counts
# ═══════════════════════════════════════════════════════════════════════


class TestBoundaryCounts:

    def test_normal_approximation_degenerate(self):
        interval = B.NORMAL_APPROXIMATION.from_error_rate(10, 0, 0.05)
        assert interval == Interval(0.0, 0.0)

    def test_clipped_methods_stay_in_unit_interval(self):
        for method in (B.NORMAL_APPROXIMATION, B.AGRESTI_COULL):
            for x in (0, 1, 9, 10):
                lower, upper = method.from_error_rate(10, x, 0.05)
                assert 0.0 <= lower <= upper <= 1.0

    def test_clopper_pearson_no_successes(self):
        lower, upper = B.CLOPPER_PEARSON.from_error_rate(10, 0, 0.05)
        assert lower == 0.0
        assert upper == pytest.approx(1 - 0.025 ** 0.1, rel=1e-15)

    def test_clopper_pearson_all_successes(self):
        lower, upper = B.CLOPPER_PEARSON.from_error_rate(10, 10, 0.05)
        assert lower == pytest.approx(0.025 ** 0.1, rel=1e-15)
        assert upper == 1.0

    def test_jeffreys_extremes(self):
        assert B.JEFFREYS.from_error_rate(10, 0, 0.05).lower_bound == 0.0
        assert B.JEFFREYS.from_error_rate(10, 10, 0.05).upper_bound == 1.0

    @pytest.mark.parametrize("method", list(B))
    def test_single_trial(self, method):
        lower, upper = method.from_error_rate(1, 1, 0.1)
        assert 0.0 <= lower <= upper <= 1.0 + 1e-15

    @pytest.mark.parametrize("method", list(B))
    def test_contains_point_estimate(self, method):
        for x in range(1, 20):
            interval = method.from_error_rate(20, x, 0.05)
            assert interval.contains(x / 20)

    @pytest.mark.parametrize("method", [B.WILSON_SCORE, B.JEFFREYS, B.CLOPPER_PEARSON])
    def test_narrower_with_larger_alpha(self, method):
        wide = method.from_error_rate(50, 12, 0.01)
        narrow = method.from_error_rate(50, 12, 0.2)
        assert narrow.width < wide.width

    def test_numpy_integers_accepted(self):
        interval = B.WILSON_SCORE.from_error_rate(np.int64(10), np.int32(3), 0.05)
        np.testing.assert_allclose(interval.lower_bound, 0.10779126740630104, rtol=RTOL)


# ═══════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:

    @pytest.mark.parametrize("method", list(B))
    def test_zero_trials(self, method):
        with pytest.raises(ValidationError, match="Number of trials is not strictly positive: 0"):
            method.from_error_rate(0, 0, 0.05)

    def test_negative_successes(self):
        with pytest.raises(ValidationError, match="Number of successes is not positive"):
            B.WILSON_SCORE.from_error_rate(10, -1, 0.05)

    def test_more_successes_than_trials(self):
        with pytest.raises(ValidationError, match="less than or equal to"):
            B.JEFFREYS.from_error_rate(10, 11, 0.05)

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1, 1.5, math.nan])
    def test_invalid_error_rate(self, alpha):
        with pytest.raises(ValidationError, match="Error rate is not in"):
            B.CLOPPER_PEARSON.from_error_rate(10, 3, alpha)

    @pytest.mark.parametrize("trials", [10.0, True, "10"])
    def test_non_integer_trials(self, trials):
        with pytest.raises(ValidationError):
            B.AGRESTI_COULL.from_error_rate(trials, 3, 0.05)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            B.NORMAL_APPROXIMATION.from_error_rate(-5, 0, 0.05)
