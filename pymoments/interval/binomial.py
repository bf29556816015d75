"""
Confidence intervals for the probability of success of a binomial
distribution, from the number of trials and the number of successes.

    interval = BinomialConfidenceInterval.WILSON_SCORE.from_error_rate(10, 5, 0.05)

All methods use the two-sided error rate ``alpha``; the interval has
nominal coverage ``1 - alpha``.

References:
    Brown, Cai, DasGupta (2001). Interval estimation for a binomial
        proportion. Statistical Science 16(2), 101-133.
    https://en.wikipedia.org/wiki/Binomial_proportion_confidence_interval
"""

from __future__ import annotations

import math
from enum import Enum

from scipy import stats

from pymoments.core.exceptions import ValidationError
from pymoments.core.validation import check_error_rate, check_positive_int
from pymoments.interval._common import Interval, check_count, clip


def _normal_approximation(n: int, x: int, alpha: float) -> Interval:
    z = stats.norm.isf(alpha * 0.5)
    p = x / n
    distance = z * math.sqrt(p * (1 - p) / n)
    # Wald interval; may exceed [0, 1]
    return Interval(clip(p - distance), clip(p + distance))


def _wilson_score(n: int, x: int, alpha: float) -> Interval:
    z = stats.norm.isf(alpha * 0.5)
    z2 = z * z
    p = x / n
    denom = 1 + z2 / n
    centre = (p + 0.5 * z2 / n) / denom
    distance = z * math.sqrt(p * (1 - p) / n + z2 / (4.0 * n * n)) / denom
    return Interval(centre - distance, centre + distance)


def _jeffreys(n: int, x: int, alpha: float) -> Interval:
    d = stats.beta(x + 0.5, n - x + 0.5)
    lower = 0.0 if x == 0 else float(d.ppf(alpha * 0.5))
    upper = 1.0 if x == n else float(d.isf(alpha * 0.5))
    return Interval(lower, upper)


def _clopper_pearson(n: int, x: int, alpha: float) -> Interval:
    lower = 0.0
    upper = 1.0
    if x == 0:
        upper = 1 - math.pow(alpha * 0.5, 1.0 / n)
    elif x == n:
        lower = math.pow(alpha * 0.5, 1.0 / n)
    else:
        lower = float(stats.beta.ppf(alpha * 0.5, x, n - x + 1))
        upper = float(stats.beta.isf(alpha * 0.5, x + 1, n - x))
    return Interval(lower, upper)


def _agresti_coull(n: int, x: int, alpha: float) -> Interval:
    z = stats.norm.isf(alpha * 0.5)
    z2 = z * z
    nc = n + z2
    p = (x + 0.5 * z2) / nc
    distance = z * math.sqrt(p * (1 - p) / nc)
    return Interval(clip(p - distance), clip(p + distance))


class BinomialConfidenceInterval(Enum):
    """
    Methods for a binomial proportion interval.

    NORMAL_APPROXIMATION: Wald interval p +/- z sqrt(p (1 - p) / n), clipped
        to [0, 1]. Poor coverage for small n or p near 0 or 1.
    WILSON_SCORE: inverted score test.
    JEFFREYS: equal-tailed Bayesian interval with the Beta(1/2, 1/2) prior.
    CLOPPER_PEARSON: exact interval from the binomial cumulative
        distribution; conservative.
    AGRESTI_COULL: Wald interval after adding z^2 / 2 successes and
        failures, clipped to [0, 1].
    """
    NORMAL_APPROXIMATION = 'normal_approximation'
    WILSON_SCORE = 'wilson_score'
    JEFFREYS = 'jeffreys'
    CLOPPER_PEARSON = 'clopper_pearson'
    AGRESTI_COULL = 'agresti_coull'

    def from_error_rate(
        self,
        number_of_trials: int,
        number_of_successes: int,
        alpha: float,
    ) -> Interval:
        """
        Create a confidence interval for the probability of success.

        Args:
            number_of_trials: Number of trials (n > 0)
            number_of_successes: Number of successes (0 <= x <= n)
            alpha: Desired error rate; the coverage is 1 - alpha

        Returns:
            The confidence interval

        Raises:
            ValidationError: If n <= 0, x < 0, x > n, or alpha is not
                in the open interval (0, 1)
        """
        n = check_count(number_of_trials, 'number_of_trials')
        x = check_count(number_of_successes, 'number_of_successes')
        check_positive_int(n, 'Number of trials')
        if x < 0:
            raise ValidationError(f"Number of successes is not positive: {x}")
        if x > n:
            raise ValidationError(
                f"Number of successes ({x}) must be less than or equal to "
                f"number of trials ({n})"
            )
        check_error_rate(alpha)
        return _METHODS[self](n, x, float(alpha))


_METHODS = {
    BinomialConfidenceInterval.NORMAL_APPROXIMATION: _normal_approximation,
    BinomialConfidenceInterval.WILSON_SCORE: _wilson_score,
    BinomialConfidenceInterval.JEFFREYS: _jeffreys,
    BinomialConfidenceInterval.CLOPPER_PEARSON: _clopper_pearson,
    BinomialConfidenceInterval.AGRESTI_COULL: _agresti_coull,
}
