"""
Confidence intervals for the parameters of a normal distribution, from the
sample mean, sample variance and sample size.

    interval = NormalConfidenceInterval.MEAN.from_error_rate(mean, var, n, 0.05)

The variance must be the unbiased sample variance (divisor n - 1).
"""

from __future__ import annotations

import math
from enum import Enum

from scipy import stats

from pymoments.core.exceptions import ValidationError
from pymoments.core.validation import check_error_rate
from pymoments.interval._common import Interval, check_count


def _mean(mean: float, variance: float, n: int, alpha: float) -> Interval:
    # Student's t with n - 1 degrees of freedom
    c = stats.t.isf(alpha * 0.5, n - 1)
    distance = c * math.sqrt(variance / n)
    return Interval(mean - distance, mean + distance)


def _variance(mean: float, variance: float, n: int, alpha: float) -> Interval:
    # (n - 1) s^2 / sigma^2 follows chi-squared with n - 1 degrees of freedom
    df = n - 1
    f = variance * (n - 1.0)
    lower = f / stats.chi2.isf(alpha * 0.5, df)
    upper = f / stats.chi2.ppf(alpha * 0.5, df)
    return Interval(float(lower), float(upper))


class NormalConfidenceInterval(Enum):
    """
    Methods for normal distribution parameter intervals.

    MEAN: interval for the mean using the Student t distribution.
    VARIANCE: interval for the variance using the chi-squared distribution.
    """
    MEAN = 'mean'
    VARIANCE = 'variance'

    def from_error_rate(
        self,
        mean: float,
        variance: float,
        n: int,
        alpha: float,
    ) -> Interval:
        """
        Create a confidence interval for the mean or variance.

        Args:
            mean: Sample mean
            variance: Unbiased sample variance
            n: Sample size (n > 1)
            alpha: Desired error rate; the coverage is 1 - alpha

        Raises:
            ValidationError: If n <= 1 or alpha is not in (0, 1)
        """
        n = check_count(n, 'n')
        if n <= 1:
            raise ValidationError(f"Sample size is not above one: {n}")
        check_error_rate(alpha)
        return _METHODS[self](float(mean), float(variance), n, float(alpha))


_METHODS = {
    NormalConfidenceInterval.MEAN: _mean,
    NormalConfidenceInterval.VARIANCE: _variance,
}
