"""
Streaming statistics over floating-point values.

Every statistic follows the same life cycle:

    stat = Variance.create()          # empty
    stat = Variance.of(values)        # bulk build (two-pass)
    stat.accept(x)                    # add one value
    stat.combine(other)               # merge a statistic of the same type
    stat.get_as_double()              # read

Instances are mutable and unsynchronized. Partition the data, build one
instance per partition, then fold them with ``combine``.

Undefined results (empty input, too few values, a numerically constant
sample for skewness/kurtosis) are reported as NaN, never as an exception.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymoments.core.validation import check_array, check_1d, check_from_to_index
from pymoments.descriptive._sums import CompensatedSum
from pymoments.descriptive._moments import (
    FirstMoment,
    SumOfSquaredDeviations,
    SumOfCubedDeviations,
    SumOfFourthDeviations,
    compute_variance,
    compute_skewness,
    compute_kurtosis,
)


def as_values(values: ArrayLike, name: str = 'values') -> NDArray[np.floating[Any]]:
    """Validate a 1D input array and return it as float64."""
    x = check_array(values, name).astype(np.float64, copy=False)
    check_1d(x, name)
    return x


class _DoubleStatistic:
    """
    Shared construction for the floating-point statistics.

    Subclasses implement ``_build(x)`` which loads a 1D float array
    (possibly empty) into a new instance.
    """

    @classmethod
    def create(cls):
        """Create an empty instance."""
        return cls._build(np.zeros(0))

    @classmethod
    def of(cls, values: ArrayLike):
        """
        Create an instance from all of ``values``.

        Raises:
            ValidationError: If values are not numeric
            DimensionError: If values are not 1D
        """
        return cls._build(as_values(values))

    @classmethod
    def of_range(cls, values: ArrayLike, from_index: int, to_index: int):
        """
        Create an instance from ``values[from_index:to_index]``.

        Raises:
            IndexBoundsError: If the range is not within the array
        """
        x = as_values(values)
        check_from_to_index(from_index, to_index, x.shape[0])
        return cls._build(x[from_index:to_index])

    @classmethod
    def _build(cls, x: NDArray[np.floating[Any]]):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_as_double()!r})"


class Mean(_DoubleStatistic):
    """
    Arithmetic mean.

    NaN when empty. Infinite input of one sign gives that infinity.
    """

    def __init__(self, moment: FirstMoment):
        self._m = moment

    @classmethod
    def _build(cls, x):
        return cls(FirstMoment.of_range(x, 0, x.shape[0]))

    def accept(self, value: float) -> None:
        self._m.accept(float(value))

    def combine(self, other: Mean) -> Mean:
        self._m.combine(other._m)
        return self

    def get_as_double(self) -> float:
        return self._m.get_first_moment()


class Variance(_DoubleStatistic):
    """
    Variance: sum of squared deviations over (n - 1), or over n when biased.

    Returns NaN when empty. A single value gives NaN (unbiased) or 0
    (biased).
    """

    def __init__(self, moment: SumOfSquaredDeviations):
        self._m = moment
        self._biased = False

    @classmethod
    def _build(cls, x):
        return cls(SumOfSquaredDeviations.of_range(x, 0, x.shape[0]))

    def accept(self, value: float) -> None:
        self._m.accept(float(value))

    def combine(self, other: Variance) -> Variance:
        # The bias flag is configuration, not mergeable state
        self._m.combine(other._m)
        return self

    def set_biased(self, v: bool) -> Variance:
        """Set the bias correction and return this instance."""
        self._biased = bool(v)
        return self

    @property
    def biased(self) -> bool:
        return self._biased

    def get_as_double(self) -> float:
        return compute_variance(self._m, self._biased)


class StandardDeviation(Variance):
    """Square root of the variance, with the same bias option."""

    def get_as_double(self) -> float:
        return math.sqrt(super().get_as_double())


class Skewness(_DoubleStatistic):
    """
    Sample skewness.

    Biased: g1 = m3 / m2^1.5 (needs 2 values). Unbiased (default):
    g1 * sqrt(n (n - 1)) / (n - 2) (needs 3 values). NaN when the
    variance is numerically zero.
    """

    def __init__(self, moment: SumOfCubedDeviations):
        self._m = moment
        self._biased = False

    @classmethod
    def _build(cls, x):
        return cls(SumOfCubedDeviations.of_range(x, 0, x.shape[0]))

    def accept(self, value: float) -> None:
        self._m.accept(float(value))

    def combine(self, other: Skewness) -> Skewness:
        self._m.combine(other._m)
        return self

    def set_biased(self, v: bool) -> Skewness:
        self._biased = bool(v)
        return self

    @property
    def biased(self) -> bool:
        return self._biased

    def get_as_double(self) -> float:
        return compute_skewness(self._m, self._biased)


class Kurtosis(_DoubleStatistic):
    """
    Sample excess kurtosis.

    Biased: m4 / m2^2 - 3 (needs 2 values). Unbiased (default):
    ((n^2 - 1) m4 / m2^2 - 3 (n - 1)^2) / ((n - 2)(n - 3)) (needs 4
    values). NaN when the variance is numerically zero.
    """

    def __init__(self, moment: SumOfFourthDeviations):
        self._m = moment
        self._biased = False

    @classmethod
    def _build(cls, x):
        return cls(SumOfFourthDeviations.of_range(x, 0, x.shape[0]))

    def accept(self, value: float) -> None:
        self._m.accept(float(value))

    def combine(self, other: Kurtosis) -> Kurtosis:
        self._m.combine(other._m)
        return self

    def set_biased(self, v: bool) -> Kurtosis:
        self._biased = bool(v)
        return self

    @property
    def biased(self) -> bool:
        return self._biased

    def get_as_double(self) -> float:
        return compute_kurtosis(self._m, self._biased)


class Sum(_DoubleStatistic):
    """Sum of the values, with rounding-error compensation. 0 when empty."""

    def __init__(self, s: CompensatedSum):
        self._s = s

    @classmethod
    def _build(cls, x):
        return cls(CompensatedSum.of_array(x))

    def accept(self, value: float) -> None:
        self._s.add(float(value))

    def combine(self, other: Sum) -> Sum:
        self._s.add_sum(other._s)
        return self

    def get_as_double(self) -> float:
        return self._s.get()


class SumOfSquares(_DoubleStatistic):
    """Sum of the squared values. 0 when empty."""

    def __init__(self, ss: float):
        self._ss = ss

    @classmethod
    def _build(cls, x):
        if x.shape[0] == 0:
            return cls(0.0)
        with np.errstate(over='ignore'):
            return cls(float(np.dot(x, x)))

    def accept(self, value: float) -> None:
        value = float(value)
        self._ss += value * value

    def combine(self, other: SumOfSquares) -> SumOfSquares:
        self._ss += other._ss
        return self

    def get_as_double(self) -> float:
        return self._ss


class Min(_DoubleStatistic):
    """Minimum value. +inf when empty; NaN if any value is NaN."""

    def __init__(self, v: float):
        self._v = v

    @classmethod
    def _build(cls, x):
        return cls(float(np.min(x)) if x.shape[0] else math.inf)

    def accept(self, value: float) -> None:
        value = float(value)
        # Propagate NaN from either side
        if value < self._v or math.isnan(value):
            self._v = value

    def combine(self, other: Min) -> Min:
        self.accept(other._v)
        return self

    def get_as_double(self) -> float:
        return self._v


class Max(_DoubleStatistic):
    """Maximum value. -inf when empty; NaN if any value is NaN."""

    def __init__(self, v: float):
        self._v = v

    @classmethod
    def _build(cls, x):
        return cls(float(np.max(x)) if x.shape[0] else -math.inf)

    def accept(self, value: float) -> None:
        value = float(value)
        if value > self._v or math.isnan(value):
            self._v = value

    def combine(self, other: Max) -> Max:
        self.accept(other._v)
        return self

    def get_as_double(self) -> float:
        return self._v


class Product(_DoubleStatistic):
    """Product of the values. 1 when empty."""

    def __init__(self, p: float):
        self._p = p

    @classmethod
    def _build(cls, x):
        with np.errstate(over='ignore', under='ignore', invalid='ignore'):
            return cls(float(np.prod(x)))

    def accept(self, value: float) -> None:
        self._p *= float(value)

    def combine(self, other: Product) -> Product:
        self._p *= other._p
        return self

    def get_as_double(self) -> float:
        return self._p


def _logs(x: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    # log(0) = -inf and log(x < 0) = NaN, without numpy warnings
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.log(x)


class SumOfLogs(_DoubleStatistic):
    """
    Sum of the natural logarithms of the values. 0 when empty.

    A zero value gives -inf; a negative value gives NaN.
    """

    def __init__(self, s: CompensatedSum):
        self._s = s

    @classmethod
    def _build(cls, x):
        return cls(CompensatedSum.of_array(_logs(x)))

    def accept(self, value: float) -> None:
        self._s.add(float(_logs(np.float64(value))))

    def combine(self, other: SumOfLogs) -> SumOfLogs:
        self._s.add_sum(other._s)
        return self

    def get_as_double(self) -> float:
        return self._s.get()


def compute_geometric_mean(sum_of_logs: float, n: int) -> float:
    """exp(sum_of_logs / n); NaN when n = 0."""
    if n == 0:
        return math.nan
    return math.exp(sum_of_logs / n)


class GeometricMean(_DoubleStatistic):
    """
    Geometric mean: exp(sum(log x) / n).

    NaN when empty or when any value is negative; 0 if a value is zero.
    """

    def __init__(self, sum_of_logs: SumOfLogs, n: int):
        self._logs = sum_of_logs
        self._n = n

    @classmethod
    def _build(cls, x):
        return cls(SumOfLogs._build(x), x.shape[0])

    def accept(self, value: float) -> None:
        self._logs.accept(value)
        self._n += 1

    def combine(self, other: GeometricMean) -> GeometricMean:
        self._logs.combine(other._logs)
        self._n += other._n
        return self

    def get_as_double(self) -> float:
        return compute_geometric_mean(self._logs.get_as_double(), self._n)
