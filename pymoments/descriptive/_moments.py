"""
Streaming central-moment accumulators.

A chain of accumulators, each extending the one below it:

    FirstMoment             n, mean
    SumOfSquaredDeviations  + sum (x - mean)^2
    SumOfCubedDeviations    + sum (x - mean)^3
    SumOfFourthDeviations   + sum (x - mean)^4

Values are added with the single-pass updating formulas (Welford for the
second moment; Terriberry for the third and fourth) which reuse the
deviation of the new value from the previous mean. Two accumulators built
from disjoint partitions are merged with the pairwise formulas of Chan et
al. (second moment) and Pebay (third and fourth moments).

Bulk construction from an array uses a two-pass algorithm: a corrected mean,
then sums of powers of deviations from it. The result can differ from the
updating result in the last few bits.

References:
    Chan, Golub, LeVeque (1983). Algorithms for computing the sample variance.
    Pebay (2008). Formulas for robust, one-pass parallel computation of
        covariances and arbitrary-order statistical moments. SAND2008-6212.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def _half_difference(a: float, b: float) -> float:
    # Scale down before the subtraction so finite extremes do not overflow
    return a * 0.5 - b * 0.5


def zero_variance(m1: float, m2: float) -> bool:
    """
    True if the biased variance ``m2`` is negligible relative to the mean.

    Compares the mean squared deviation with the squared precision of the
    mean to 15 decimal digits. An absolute threshold would not account for
    the magnitude of the sample.
    """
    t = 1e-15 * m1
    return m2 <= t * t


class FirstMoment:
    """Count and running mean."""

    def __init__(self):
        self.n = 0
        self.m1 = 0.0
        # Deviation of the last value from the previous mean, and the same
        # divided by the new count. Reused by the higher moments.
        self.dev = 0.0
        self.n_dev = 0.0
        # Plain running sum; the mean when m1 is not finite
        self.non_finite_value = 0.0

    @classmethod
    def of_range(cls, values: NDArray[np.float64], from_index: int, to_index: int):
        """Two-pass build from ``values[from_index:to_index]``. No range checks."""
        inst = cls()
        x = values[from_index:to_index]
        if x.shape[0] != 0:
            with np.errstate(over='ignore', invalid='ignore'):
                inst._load(x)
        return inst

    def _load(self, x: NDArray[np.float64]) -> NDArray[np.float64] | None:
        n = x.shape[0]
        s = float(np.sum(x))
        m = s / n
        if not math.isfinite(m):
            # The sum overflowed; the mean of finite values is still finite
            m = float(np.sum(x / n))
        if math.isfinite(m):
            # Correct the mean for the rounding in the first pass
            m += float(np.sum(x - m)) / n
        self.n = n
        self.m1 = m
        self.non_finite_value = s
        return None

    def accept(self, value: float) -> None:
        self.n += 1
        self.non_finite_value += value
        self.dev = _half_difference(value, self.m1) * 2
        self.n_dev = self.dev / self.n
        self.m1 += self.n_dev

    def combine(self, other: FirstMoment) -> FirstMoment:
        if self.n == 0:
            self.n = other.n
            self.m1 = other.m1
            self.dev = other.dev
            self.n_dev = other.n_dev
            self.non_finite_value = other.non_finite_value
        elif other.n != 0:
            n2 = other.n
            self.n += n2
            self.dev = _half_difference(other.m1, self.m1) * 2
            self.n_dev = self.dev * (n2 / self.n)
            self.m1 += self.n_dev
            self.non_finite_value += other.non_finite_value
        return self

    def get_first_moment(self) -> float:
        """
        The mean; NaN when empty.

        When infinities of one sign were added this is that infinity;
        NaN for infinities of both signs or any NaN input.
        """
        if math.isfinite(self.m1):
            return math.nan if self.n == 0 else self.m1
        return self.non_finite_value


class SumOfSquaredDeviations(FirstMoment):
    """Adds the sum of squared deviations from the mean."""

    def __init__(self):
        super().__init__()
        self.ss = 0.0

    def _load(self, x):
        super()._load(x)
        if not math.isfinite(self.m1):
            self.ss = math.nan
            return None
        dx = x - self.m1
        self.ss = float(np.dot(dx, dx))
        return dx

    def accept(self, value: float) -> None:
        n0 = self.n
        super().accept(value)
        self.ss += n0 * self.dev * self.n_dev

    def combine(self, other: SumOfSquaredDeviations) -> SumOfSquaredDeviations:
        n1 = self.n
        n2 = other.n
        if n1 == 0:
            self.ss = other.ss
        elif n2 != 0:
            d = _half_difference(other.m1, self.m1) * 2
            self.ss += other.ss + d * d * ((float(n1) * n2) / (float(n1) + n2))
        super().combine(other)
        return self

    def get_sum_of_squared_deviations(self) -> float:
        return self.ss if math.isfinite(self.get_first_moment()) else math.nan


class SumOfCubedDeviations(SumOfSquaredDeviations):
    """Adds the sum of cubed deviations from the mean."""

    # n <= 2: the sum of cubed deviations is exactly zero
    LENGTH_TWO = 2

    def __init__(self):
        super().__init__()
        self.sc = 0.0

    def _load(self, x):
        dx = super()._load(x)
        if dx is None:
            self.sc = math.nan
        elif not math.isfinite(self.ss):
            # Cubed deviations overflow too; only tiny samples are known to be zero
            self.sc = 0.0 if self.n <= self.LENGTH_TWO else math.nan
        elif self.n > self.LENGTH_TWO:
            self.sc = float(np.sum(dx * dx * dx))
        else:
            self.sc = 0.0
        return dx

    def accept(self, value: float) -> None:
        ss = self.ss
        np_ = float(self.n)
        super().accept(value)
        n_dev = self.n_dev
        self.sc = self.sc - ss * n_dev * 3 + (np_ - 1.0) * np_ * n_dev * n_dev * self.dev

    def combine(self, other: SumOfCubedDeviations) -> SumOfCubedDeviations:
        if self.n == 0:
            self.sc = other.sc
        elif other.n != 0:
            d = _half_difference(other.m1, self.m1) * 2
            self.sc += other.sc
            if d != 0:
                n1 = float(self.n)
                n2 = float(other.n)
                n1n2 = n1 + n2
                dm = d / n1n2
                self.sc += ((n1 * other.ss - n2 * self.ss) * dm * 3 +
                            (n1 - n2) * (n1 * n2) * dm * dm * dm * n1n2)
        super().combine(other)
        return self

    def get_sum_of_cubed_deviations(self) -> float:
        return self.sc if math.isfinite(self.get_first_moment()) else math.nan


class SumOfFourthDeviations(SumOfCubedDeviations):
    """Adds the sum of fourth-power deviations from the mean."""

    def __init__(self):
        super().__init__()
        self.sq = 0.0

    def _load(self, x):
        dx = super()._load(x)
        if dx is None or not math.isfinite(self.ss) or not math.isfinite(self.sc):
            self.sq = math.nan
        else:
            dx2 = dx * dx
            self.sq = float(np.dot(dx2, dx2))
        return dx

    def accept(self, value: float) -> None:
        ss = self.ss
        sc = self.sc
        np_ = float(self.n)
        super().accept(value)
        n_dev = self.n_dev
        # (np + 1)^2 - 3 (np + 1) + 3 == np^2 - np + 1
        self.sq = (self.sq -
                   sc * n_dev * 4 +
                   ss * n_dev * n_dev * 6 +
                   np_ * (np_ * np_ - np_ + 1) * n_dev * n_dev * n_dev * self.dev)

    def combine(self, other: SumOfFourthDeviations) -> SumOfFourthDeviations:
        if self.n == 0:
            self.sq = other.sq
        elif other.n != 0:
            d = _half_difference(other.m1, self.m1) * 2
            self.sq += other.sq
            if d != 0:
                n1 = float(self.n)
                n2 = float(other.n)
                n1n2 = n1 + n2
                dm = d / n1n2
                dm2 = dm * dm
                self.sq += ((n1 * other.sc - n2 * self.sc) * dm * 4 +
                            (n1 * n1 * other.ss + n2 * n2 * self.ss) * dm2 * 6 +
                            (n1 * n2) * (n1 * n1 - n1 * n2 + n2 * n2) * dm2 * dm2 * n1n2)
        super().combine(other)
        return self

    def get_sum_of_fourth_deviations(self) -> float:
        return self.sq if math.isfinite(self.get_first_moment()) else math.nan


# Moment accumulator type by the highest order it tracks
MOMENT_TYPES = {
    1: FirstMoment,
    2: SumOfSquaredDeviations,
    3: SumOfCubedDeviations,
    4: SumOfFourthDeviations,
}


def compute_variance(m: SumOfSquaredDeviations, biased: bool) -> float:
    """
    Variance from the sum of squared deviations.

    n = 0 gives NaN; n = 1 gives NaN (unbiased) or 0 (biased).
    """
    n = m.n
    if n == 0:
        return math.nan
    ss = m.get_sum_of_squared_deviations()
    if n == 1:
        if biased and math.isfinite(ss):
            return 0.0
        return math.nan
    return ss / (n if biased else n - 1)


def compute_skewness(m: SumOfCubedDeviations, biased: bool) -> float:
    """
    Skewness from the sums of squared and cubed deviations.

    NaN below 3 values (unbiased) or 2 values (biased), for a non-finite
    central sum, or when the variance is numerically zero.
    """
    n = m.n
    if n < (2 if biased else 3):
        return math.nan
    x2 = m.get_sum_of_squared_deviations()
    if not math.isfinite(x2):
        return math.nan
    x3 = m.get_sum_of_cubed_deviations()
    if not math.isfinite(x3):
        return math.nan
    m2 = x2 / n
    if zero_variance(m.get_first_moment(), m2):
        return math.nan
    # m2^1.5
    denom = math.sqrt(m2) * m2
    g1 = (x3 / n) / denom
    if not biased:
        nn = float(n)
        g1 *= math.sqrt(nn * (nn - 1)) / (nn - 2)
    return g1


def compute_kurtosis(m: SumOfFourthDeviations, biased: bool) -> float:
    """
    Excess kurtosis from the sums of squared and fourth-power deviations.

    NaN below 4 values (unbiased) or 2 values (biased), for a non-finite
    central sum, or when the variance is numerically zero.
    """
    n = m.n
    if n < (2 if biased else 4):
        return math.nan
    x2 = m.get_sum_of_squared_deviations()
    if not math.isfinite(x2):
        return math.nan
    x4 = m.get_sum_of_fourth_deviations()
    if not math.isfinite(x4):
        return math.nan
    m2 = x2 / n
    if zero_variance(m.get_first_moment(), m2):
        return math.nan
    m4 = x4 / n
    if biased:
        return m4 / (m2 * m2) - 3
    nn = float(n)
    return ((nn * nn - 1) * m4 / (m2 * m2) - 3 * (nn - 1) * (nn - 1)) / ((nn - 2) * (nn - 3))
